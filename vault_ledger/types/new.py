# vault_ledger/types/new.py

from typing import NewType


EvmAddress = NewType('EvmAddress', str)
EvmHash = NewType('EvmHash', str)
PoolId = NewType('PoolId', str)
EntityId = NewType('EntityId', str)
ErrorId = NewType('ErrorId', str)
