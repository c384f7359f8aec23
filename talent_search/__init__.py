"""Talent search and ranking engine for esports recruiting."""

__version__ = "1.0.0"
