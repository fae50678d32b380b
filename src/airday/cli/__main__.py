#!/usr/bin/env python3
"""
CLI entry point for airday.cli module.

This allows running: python -m airday.cli
"""

from .main import app

if __name__ == "__main__":
    app()
