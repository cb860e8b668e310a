# vault_ledger/cli/__main__.py

"""
Vault ledger CLI

Usage: python -m vault_ledger.cli [command] [options]
"""

from pathlib import Path

import click

from ..core.config import load_config
from ..core.logging import LedgerLogger
from ..types.model.errors import ConfigurationError
from .context import CLIContext
from .commands.database import init_db
from .commands.replay import replay
from .commands.pool import pool


@click.group()
@click.option('--config', 'config_path', type=click.Path(dir_okay=False), help='YAML or JSON config file')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def cli(ctx, config_path, verbose):
    """Vault ledger - pool accounting from vault events

    Replays a stream of vault events into a queryable ledger of pool
    balances, share supply, invariants and FX prices.
    """
    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        raise click.ClickException(str(e))

    logging_config = config.logging
    LedgerLogger.configure(
        log_dir=Path(logging_config.log_dir) if logging_config.log_dir else None,
        log_level="DEBUG" if verbose else logging_config.level,
        console_enabled=logging_config.console_enabled,
        file_enabled=logging_config.file_enabled,
        structured_format=logging_config.structured_format,
        force=True,
    )

    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    ctx.obj['config'] = config
    ctx.obj['cli_context'] = CLIContext(config)
    ctx.call_on_close(ctx.obj['cli_context'].shutdown)


cli.add_command(init_db)
cli.add_command(replay)
cli.add_command(pool)


if __name__ == '__main__':
    cli()
