# vault_ledger/cli/commands/replay.py

import click

from ...stream.reader import EventStreamReader
from ...types.model.errors import EventDecodeError


@click.command('replay')
@click.argument('events_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--fail-fast', is_flag=True, help='Stop at the first rejected event')
@click.option('--offline', is_flag=True, help='Use configured static metadata instead of RPC reads')
@click.pass_context
def replay(ctx, events_file, fail_fast, offline):
    """Apply a JSON-lines event file to the ledger

    Events are applied in file order, one transaction per event. A rejected
    event leaves the ledger untouched and is reported at the end.

    Examples:
        vault-ledger --config ledger.yaml replay events.jsonl
        vault-ledger replay events.jsonl --offline --fail-fast
    """
    cli_context = ctx.obj['cli_context']
    if offline:
        cli_context.offline = True

    reader = EventStreamReader(events_file)

    try:
        cli_context.db_manager.create_tables()
        summary = cli_context.processor.process_stream(reader, fail_fast=fail_fast)
    except EventDecodeError as e:
        raise click.ClickException(f"Invalid event file: {e}")
    except Exception as e:
        raise click.ClickException(f"Replay stopped: {e}")

    click.echo("📊 Replay complete")
    click.echo(f"   Applied: {summary.processed}")
    click.echo(f"   Skipped: {summary.skipped}")
    click.echo(f"   Rejected: {summary.failed}")

    for error in summary.errors:
        context = error.context or {}
        click.echo(f"   ❌ [{error.error_type}] {context.get('event_type', '?')} "
                   f"tx={context.get('tx_hash', '?')}: {error.message}")

    if summary.failed:
        ctx.exit(1)
