"""
Entry point for `python -m pdfverify`.

Usage:
    python -m pdfverify check signed.pdf
"""

from .ui.cli import main

main()
