"""Poemario: public and admin REST API for a poem catalogue."""

__version__ = "0.1.0"
