"""
Entry point for running pagerender as a module.

Usage:
    python -m pagerender --help
    python -m pagerender render out.pdf --text "Hello"
    python -m pagerender bbox 40 20 30 90
"""
from .cli import app


if __name__ == "__main__":
    app()
