# vault_ledger/cli/__init__.py
