"""Bitfield decoding: packed integers back to per-flag values."""

from flagfield.decode.decoder import decode

__all__ = [
    "decode",
]
