# secretstream

This package provides authenticated encryption for a sequence of messages
with XChaCha20-Poly1305. The wire layout is the same as libsodium's
`crypto_secretstream_xchacha20poly1305`.

A sender creates an encryptor from a 32-byte key and receives a 24-byte
header. The receiver creates a decryptor from the same key and that header.
Each message is pushed with a one-byte tag. The ciphertext is 17 bytes
longer than the plaintext: one byte holds the encrypted tag and 16 bytes hold
the Poly1305 MAC.

Ciphertexts must be pulled in the order in which they were pushed. After each
message, the stream's nonce moves forward: its counter is incremented and the
MAC is mixed into it. So if a ciphertext is altered, dropped, reordered, or
read with the wrong key or header, `pull` fails.

## Installation

```
pip install secretstream
```

## Usage

```python
from secretstream.stream import (
    TAG_MESSAGE,
    TAG_PUSH,
    CryptoFailureError,
    new_decryptor,
    new_encryptor,
    new_stream_key,
)

key = new_stream_key()

encryptor, header = new_encryptor(key)
first = encryptor.push(b"Hello world", TAG_MESSAGE)
second = encryptor.push(b"This is good-bye!", TAG_PUSH)

decryptor = new_decryptor(key, header)
assert decryptor.pull(first) == (b"Hello world", TAG_MESSAGE)
assert decryptor.pull(second) == (b"This is good-bye!", TAG_PUSH)
```

Everything lives in `secretstream.stream`:

- `new_stream_key()` returns 32 random bytes from `os.urandom`.
- `new_encryptor(key)` returns a tuple `(Encryptor, header)`. The header is
  24 random bytes.
- `new_decryptor(key, header)` returns a `Decryptor`.
- `Encryptor.push(message, tag=TAG_MESSAGE)` returns the ciphertext as
  `bytes`.
- `Decryptor.pull(data)` returns a tuple `(message, tag)`.
- `hchacha20(key, nonce)` derives a 32-byte subkey from a 32-byte key and a
  16-byte nonce. The stream uses it to set up its per-stream key.

The module also defines these constants:

- Tags: `TAG_MESSAGE` (0), `TAG_PUSH` (1), `TAG_REKEY` (2) and `TAG_FINAL` (3).
- Sizes: `STREAM_KEY_BYTES` (32), `STREAM_HEADER_BYTES` (24) and
  `STREAM_ABYTES` (17).

### Errors

Every error derives from `StreamError`:

- `InvalidKeyError`: the key is not 32 bytes long.
- `InvalidInputError`: one of these conditions holds:
  - the header is not 24 bytes long;
  - the nonce given to `hchacha20` is not 16 bytes long;
  - a tag is outside 0–255;
  - a ciphertext is shorter than 17 bytes.
- `CryptoFailureError`: the MAC did not verify.

## What it does not do

- Tags are carried and authenticated, but they have no effect on the stream.
  `TAG_REKEY` and `TAG_FINAL` do not rekey the stream and do not close it.
  Nothing rekeys the stream when the message counter wraps around.
- Additional authenticated data is not supported.
- The package only transforms bytes in memory. It has no command-line tool
  and reads or writes no files or sockets.

## Running the tests

```
pip install -e ".[test]"
pytest
```