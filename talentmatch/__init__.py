"""Keyword matching and ranking between job seekers and employers."""

__version__ = "0.1.0"
