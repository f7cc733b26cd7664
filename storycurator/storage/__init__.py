"""
Storage Module
==============

Persistence of what has already been shared.
"""

from .posting_ledger import PostingLedger, PostingRecord, SQLitePostingLedger

__all__ = ['PostingLedger', 'PostingRecord', 'SQLitePostingLedger']
