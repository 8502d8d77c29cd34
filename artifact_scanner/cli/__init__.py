"""Command-line interface for artifact-scanner."""

from .main import main

__all__ = ['main']
