"""Distill: AI-generated commit messages for staged git changes."""

__version__ = "0.1.0"
