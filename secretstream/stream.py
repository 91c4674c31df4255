"""XChaCha20-Poly1305 secret stream: a sequence of authenticated, tagged messages."""

from __future__ import annotations

import hmac
import os
import struct

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms
from cryptography.hazmat.primitives.poly1305 import Poly1305

TAG_MESSAGE = 0x00
TAG_PUSH = 0x01
TAG_REKEY = 0x02
TAG_FINAL = TAG_PUSH | TAG_REKEY

STREAM_KEY_BYTES = 32
STREAM_HEADER_BYTES = 24
STREAM_ABYTES = 16 + 1

_HCHACHA20_INPUT_BYTES = 16
_COUNTER_BYTES = 4
_INONCE_BYTES = 8
_BLOCK_BYTES = 64
_PAD0 = bytes(16)
_SIGMA = (0x61707865, 0x3320646E, 0x79622D32, 0x6B206574)
_MASK32 = 0xFFFFFFFF


class StreamError(Exception):
    """Base class for secret stream errors."""


class InvalidKeyError(StreamError):
    """The key does not have the required length."""


class InvalidInputError(StreamError):
    """The header, tag or ciphertext is malformed."""


class CryptoFailureError(StreamError):
    """Authentication of a message failed."""


def _rotl(value: int, count: int) -> int:
    return ((value << count) & _MASK32) | (value >> (32 - count))


def _quarter_round(x: list[int], a: int, b: int, c: int, d: int) -> None:
    x[a] = (x[a] + x[b]) & _MASK32
    x[d] = _rotl(x[d] ^ x[a], 16)
    x[c] = (x[c] + x[d]) & _MASK32
    x[b] = _rotl(x[b] ^ x[c], 12)
    x[a] = (x[a] + x[b]) & _MASK32
    x[d] = _rotl(x[d] ^ x[a], 8)
    x[c] = (x[c] + x[d]) & _MASK32
    x[b] = _rotl(x[b] ^ x[c], 7)


def hchacha20(key: bytes, nonce: bytes) -> bytes:
    """Derive a 32-byte subkey from a 32-byte key and a 16-byte nonce."""
    if len(key) != STREAM_KEY_BYTES:
        raise InvalidKeyError("invalid key")
    if len(nonce) != _HCHACHA20_INPUT_BYTES:
        raise InvalidInputError("invalid input")
    x = [*_SIGMA, *struct.unpack("<8I", bytes(key)), *struct.unpack("<4I", bytes(nonce))]
    for _ in range(10):
        _quarter_round(x, 0, 4, 8, 12)
        _quarter_round(x, 1, 5, 9, 13)
        _quarter_round(x, 2, 6, 10, 14)
        _quarter_round(x, 3, 7, 11, 15)
        _quarter_round(x, 0, 5, 10, 15)
        _quarter_round(x, 1, 6, 11, 12)
        _quarter_round(x, 2, 7, 8, 13)
        _quarter_round(x, 3, 4, 9, 14)
    return struct.pack("<8I", *x[0:4], *x[12:16])


def new_stream_key() -> bytes:
    """Return a fresh random stream key."""
    return os.urandom(STREAM_KEY_BYTES)


class _StreamState:
    """Subkey and nonce shared by both directions of a stream."""

    def __init__(self, key: bytes, header: bytes) -> None:
        if len(key) != STREAM_KEY_BYTES:
            raise InvalidKeyError("invalid key")
        if len(header) != STREAM_HEADER_BYTES:
            raise InvalidInputError("invalid input")
        header = bytes(header)
        self._key = hchacha20(bytes(key), header[:_HCHACHA20_INPUT_BYTES])
        self._nonce = (1).to_bytes(_COUNTER_BYTES, "little") + header[_HCHACHA20_INPUT_BYTES:]

    def _cipher(self):
        # The 16-byte nonce carries the 32-bit block counter first, starting at zero.
        full_nonce = bytes(4) + self._nonce
        return Cipher(algorithms.ChaCha20(self._key, full_nonce), mode=None).encryptor()

    @staticmethod
    def _authenticator(poly_key: bytes, block: bytes, ciphertext: bytes) -> bytes:
        mlen = len(ciphertext)
        poly = Poly1305(poly_key)
        poly.update(block)
        poly.update(ciphertext)
        poly.update(_PAD0[: (0x10 - _BLOCK_BYTES + mlen) & 0xF])
        poly.update(struct.pack("<QQ", 0, _BLOCK_BYTES + mlen))
        return poly.finalize()

    def _advance(self, mac: bytes) -> None:
        inonce = bytes(
            a ^ b for a, b in zip(self._nonce[_COUNTER_BYTES:], mac[:_INONCE_BYTES])
        )
        counter = (int.from_bytes(self._nonce[:_COUNTER_BYTES], "little") + 1) & _MASK32
        self._nonce = counter.to_bytes(_COUNTER_BYTES, "little") + inonce


class Encryptor(_StreamState):
    """Sending side of a secret stream."""

    def push(self, message: bytes, tag: int = TAG_MESSAGE) -> bytes:
        """Encrypt and authenticate one message with the given tag."""
        if not 0 <= tag <= 0xFF:
            raise InvalidInputError("invalid input")
        message = bytes(message)
        cipher = self._cipher()
        poly_key = cipher.update(bytes(_BLOCK_BYTES))[:32]
        block = cipher.update(bytes([tag]) + bytes(_BLOCK_BYTES - 1))
        ciphertext = cipher.update(message)
        mac = self._authenticator(poly_key, block, ciphertext)
        self._advance(mac)
        return block[:1] + ciphertext + mac


class Decryptor(_StreamState):
    """Receiving side of a secret stream."""

    def pull(self, data: bytes) -> tuple[bytes, int]:
        """Verify and decrypt one message; return the plaintext and its tag."""
        data = bytes(data)
        if len(data) < STREAM_ABYTES:
            raise InvalidInputError("invalid input")
        mlen = len(data) - STREAM_ABYTES
        ciphertext = data[1 : 1 + mlen]
        stored_mac = data[1 + mlen :]

        cipher = self._cipher()
        poly_key = cipher.update(bytes(_BLOCK_BYTES))[:32]
        block = cipher.update(data[:1] + bytes(_BLOCK_BYTES - 1))
        tag = block[0]
        block = data[:1] + block[1:]
        mac = self._authenticator(poly_key, block, ciphertext)
        if not hmac.compare_digest(mac, stored_mac):
            raise CryptoFailureError("crypto failed")
        message = cipher.update(ciphertext)
        self._advance(mac)
        return message, tag


def new_encryptor(key: bytes) -> tuple[Encryptor, bytes]:
    """Start a stream with a random header; return the encryptor and the header."""
    if len(key) != STREAM_KEY_BYTES:
        raise InvalidKeyError("invalid key")
    header = os.urandom(STREAM_HEADER_BYTES)
    return Encryptor(key, header), header


def new_decryptor(key: bytes, header: bytes) -> Decryptor:
    """Open the receiving side of the stream described by ``header``."""
    return Decryptor(key, header)