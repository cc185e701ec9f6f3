"""Command-line interface for the IEXTP decoder."""

from .main import app, main

__all__ = ['app', 'main']
