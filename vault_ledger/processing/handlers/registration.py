# vault_ledger/processing/handlers/registration.py

from typing import Optional

from ...clients.interfaces import ContractMetadataProvider
from ...database.repository_manager import RepositoryManager
from ...database.tables import DBPool
from ...types.constants import ZERO_ADDRESS
from ...types.model.errors import StructuralInconsistencyError
from ...types.model.events import PoolRegistered, TokensRegistered
from ...types.new import EvmAddress
from ...types.pools import PoolType
from ..context import EventContext
from .base import BaseHandler


class RegistrationHandler(BaseHandler):
    """Pool creation and token registration; fixes a pool's token order"""

    def __init__(self, repos: RepositoryManager, metadata: ContractMetadataProvider):
        super().__init__(repos)
        self.metadata = metadata

        self.register(PoolRegistered, self.handle_pool_registered)
        self.register(TokensRegistered, self.handle_tokens_registered)

    def handle_pool_registered(self, event: PoolRegistered, ctx: EventContext) -> bool:
        store = ctx.store
        if self.repos.pools.get(store, event.pool_id) is not None:
            return self.skip("Pool already registered", event, pool_id=event.pool_id)

        pool_type = PoolType.from_name(event.pool_type)
        if pool_type is PoolType.UNKNOWN:
            self.log_warning("Unrecognized pool type, registering as Unknown",
                             pool_id=event.pool_id,
                             pool_type=event.pool_type,
                             **event.context())

        pool = self.repos.pools.create_pool(
            store, event.pool_id, event.pool_address, pool_type,
            pool_type_version=event.pool_type_version,
            create_time=event.timestamp)

        vault = self.repos.vault.get_or_create(store)
        vault.pool_count = vault.pool_count + 1

        self.log_info("Pool registered",
                      pool_id=pool.id,
                      pool_type=pool_type.value,
                      **event.context())
        return True

    def handle_tokens_registered(self, event: TokensRegistered, ctx: EventContext) -> bool:
        store = ctx.store
        pool = self.repos.pools.get(store, event.pool_id)
        if pool is None:
            return self.skip("Pool not found for token registration", event, pool_id=event.pool_id)

        if pool.tokens_list:
            return self.skip("Pool tokens already registered", event, pool_id=pool.id)

        tokens = [EvmAddress(token.lower()) for token in event.tokens]
        if len(set(tokens)) != len(tokens):
            raise StructuralInconsistencyError(
                "Duplicate token in registration", pool_id=pool.id, tx_hash=event.tx_hash)
        if event.asset_managers and len(event.asset_managers) != len(tokens):
            raise StructuralInconsistencyError(
                f"{len(event.asset_managers)} asset managers for {len(tokens)} tokens",
                pool_id=pool.id, tx_hash=event.tx_hash)

        for index, address in enumerate(tokens):
            token = self.repos.tokens.get_or_create(store, address)
            asset_manager = event.asset_managers[index] if event.asset_managers else None
            if asset_manager is not None and asset_manager.lower() == ZERO_ADDRESS:
                asset_manager = None

            self.repos.pool_tokens.create_pool_token(
                store, pool, address, index,
                symbol=token.symbol,
                name=token.name,
                decimals=token.decimals,
                asset_manager=asset_manager,
                is_exempt_from_yield_protocol_fee=self._yield_fee_exemption(pool, address, index),
            )

        pool.tokens_list = tokens
        self.log_info("Pool tokens registered",
                      pool_id=pool.id,
                      token_count=len(tokens),
                      **event.context())
        return True

    def _yield_fee_exemption(self, pool: DBPool, token: EvmAddress, index: int) -> Optional[bool]:
        """Unknown (None) whenever the pool cannot say"""
        pool_address = EvmAddress(pool.address)

        if pool.capabilities.is_composable_stable:
            result = self.metadata.is_token_exempt_from_yield_protocol_fee(pool_address, token)
            return None if result.failed else result.value

        if pool.pool_type == PoolType.WEIGHTED and pool.pool_type_version == 4:
            result = self.metadata.get_rate_providers(pool_address)
            # A provider list shorter than the token list is treated as unknown
            if result.failed or result.value is None or len(result.value) <= index:
                return None
            return result.value[index].lower() == ZERO_ADDRESS

        return None
