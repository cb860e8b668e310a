# vault_ledger/cli/context.py

"""
CLI context

Owns the objects every command needs: configuration, the database
manager, the metadata provider and the event processor. Each is built on
first use so commands that only read the database never touch the RPC.
"""

import logging
from typing import Optional

from ..clients.interfaces import ContractMetadataProvider, PoolParameterProvider
from ..clients.static_provider import StaticMetadataProvider
from ..clients.web3_provider import Web3MetadataProvider
from ..core.logging import LedgerLogger, log_with_context
from ..database.connection import DatabaseManager
from ..processing.processor import EventProcessor
from ..types.configs.config import LedgerConfig


class CLIContext:
    def __init__(self, config: LedgerConfig, offline: bool = False):
        self.config = config
        self.offline = offline
        self.logger = LedgerLogger.get_logger('cli.context')

        self._db_manager: Optional[DatabaseManager] = None
        self._provider = None
        self._processor: Optional[EventProcessor] = None

        log_with_context(self.logger, logging.DEBUG, "CLIContext initialized",
                         offline=offline,
                         has_rpc=config.rpc is not None)

    @property
    def db_manager(self) -> DatabaseManager:
        if self._db_manager is None:
            self._db_manager = DatabaseManager(self.config.database)
            self._db_manager.initialize()
        return self._db_manager

    @property
    def provider(self):
        """Chain-backed when an RPC endpoint is configured, otherwise the static tables"""
        if self._provider is None:
            if self.offline or self.config.rpc is None:
                log_with_context(self.logger, logging.INFO, "Using static metadata provider",
                                 token_count=len(self.config.tokens),
                                 pool_count=len(self.config.pools))
                self._provider = StaticMetadataProvider.from_config(self.config)
            else:
                self._provider = Web3MetadataProvider(self.config.rpc)
        return self._provider

    @property
    def processor(self) -> EventProcessor:
        if self._processor is None:
            provider = self.provider
            metadata: ContractMetadataProvider = provider
            parameters: PoolParameterProvider = provider
            self._processor = EventProcessor.from_config(self.db_manager, self.config, metadata, parameters)
        return self._processor

    def shutdown(self) -> None:
        if self._db_manager is not None:
            self._db_manager.shutdown()
            self._db_manager = None
        self._processor = None
