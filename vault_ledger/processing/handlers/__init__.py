# vault_ledger/processing/handlers/__init__.py

from .base import BaseHandler, EventHandler
from .vault import VaultHandler
from .shares import ShareTransferHandler
from .pricing import PricingHandler, value_in_fx
from .signals import SignalHandler, compute_curated_swap_enabled
from .registration import RegistrationHandler

__all__ = [
    'BaseHandler',
    'EventHandler',
    'VaultHandler',
    'ShareTransferHandler',
    'PricingHandler',
    'SignalHandler',
    'RegistrationHandler',
    'value_in_fx',
    'compute_curated_swap_enabled',
]
