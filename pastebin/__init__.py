"""Pastebin: self-hosted file and text paste service."""

__version__ = "1.0.0"
