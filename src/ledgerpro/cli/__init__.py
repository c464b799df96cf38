"""LedgerPro Command Line Interface.

- main: accounts, journal posting, statements, dashboard and PDF import
"""

from .main import main

__all__ = ["main"]
