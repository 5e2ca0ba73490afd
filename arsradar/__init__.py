"""Decoding, encoding, receiving and configuring ARS548 radar UDP messages."""

__version__ = "0.9.0"