# vault_ledger/cli/commands/__init__.py
