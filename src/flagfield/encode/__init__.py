"""Bitfield encoding: raw flag columns to packed integers."""

from flagfield.encode.encoder import EncodedField, encode

__all__ = [
    "EncodedField",
    "encode",
]
