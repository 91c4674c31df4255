"""Authenticated XChaCha20-Poly1305 secret streams in the libsodium secretstream format."""

__version__ = "0.1.0"
__all__ = ["stream"]