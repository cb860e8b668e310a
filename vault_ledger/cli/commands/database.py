# vault_ledger/cli/commands/database.py

import click


@click.command('init-db')
@click.option('--drop', is_flag=True, help='Drop existing ledger tables first')
@click.pass_context
def init_db(ctx, drop):
    """Create the ledger tables

    Examples:
        vault-ledger --config ledger.yaml init-db
        vault-ledger init-db --drop
    """
    cli_context = ctx.obj['cli_context']

    try:
        db_manager = cli_context.db_manager
        if drop:
            db_manager.drop_tables()
            click.echo("🗑️  Dropped ledger tables")
        db_manager.create_tables()
    except Exception as e:
        raise click.ClickException(f"Failed to initialize database: {e}")

    click.echo("✅ Ledger tables ready")
