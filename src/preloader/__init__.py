"""Preload a gem mirror by probing every package in a repository index."""

__version__ = "0.1.0"
