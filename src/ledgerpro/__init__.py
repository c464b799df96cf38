"""LedgerPro - double-entry bookkeeping engine.

Chart of accounts, journal posting and derived financial statements, plus
a PDF import pipeline that proposes journal entries from document text.
"""

__version__ = "1.0.0"
