# vault_ledger/__init__.py

import logging
from pathlib import Path
from typing import Optional

from .core.logging import LedgerLogger, log_with_context
from .clients.static_provider import StaticMetadataProvider
from .clients.web3_provider import Web3MetadataProvider
from .database.connection import DatabaseManager
from .processing.processor import EventProcessor
from .types import LedgerConfig


def create_ledger(config: LedgerConfig, offline: bool = False,
                  create_tables: bool = True) -> EventProcessor:
    """
    Wire a ready-to-use EventProcessor from configuration.

    Metadata comes from the RPC endpoint when one is configured and
    `offline` is not set, otherwise from the static tables in the config.
    """
    _configure_logging_early(config)

    logger = LedgerLogger.get_logger('core.init')
    db_manager = DatabaseManager(config.database)
    db_manager.initialize()
    if create_tables:
        db_manager.create_tables()

    if offline or config.rpc is None:
        provider = StaticMetadataProvider.from_config(config)
    else:
        provider = Web3MetadataProvider(config.rpc)

    processor = EventProcessor.from_config(db_manager, config, provider, provider)

    log_with_context(logger, logging.INFO, "Ledger created",
                     provider=type(provider).__name__,
                     fx_aggregator_count=len(config.fx_aggregators))
    return processor


def _configure_logging_early(config: LedgerConfig, log_dir: Optional[Path] = None):
    logging_config = config.logging
    if log_dir is None and logging_config.log_dir:
        log_dir = Path(logging_config.log_dir)

    LedgerLogger.configure(
        log_dir=log_dir,
        log_level=logging_config.level,
        console_enabled=logging_config.console_enabled,
        file_enabled=logging_config.file_enabled,
        structured_format=logging_config.structured_format,
    )
