"""Boggle-style word game: wire protocol, terminal client and server argument parsing."""

__version__ = "0.1.0"