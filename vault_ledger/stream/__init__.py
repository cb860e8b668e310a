# vault_ledger/stream/__init__.py

from .reader import EventStreamReader

__all__ = ['EventStreamReader']
