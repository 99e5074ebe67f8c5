"""Spreadsheet / CSV importer: decode, normalize and project tabular files."""

__version__ = "0.1.0"
