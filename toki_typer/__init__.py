"""Typing practice for toki pona vocabulary in the terminal."""

__version__ = "0.1.0"
