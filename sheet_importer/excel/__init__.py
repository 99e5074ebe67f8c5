"""Binary payload decoding (xlsx / xls / delimited text)."""

from .decoder import DecodeError, decode, detect_format

__all__ = ["DecodeError", "decode", "detect_format"]
