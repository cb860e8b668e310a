# vault_ledger/cli/commands/pool.py

import click

from ...database.repositories import PoolRepository, PoolTokenRepository, SnapshotRepository


@click.group()
def pool():
    """Inspect pool state"""
    pass


@pool.command('show')
@click.argument('pool_id')
@click.pass_context
def show(ctx, pool_id):
    """Show a pool with its token balances

    Examples:
        pool show 0x32296969ef14eb0c6d29669c550d4a0449130230000200000000000000000080
    """
    cli_context = ctx.obj['cli_context']

    try:
        with cli_context.db_manager.get_session() as session:
            pool_row = PoolRepository().get_by_id(session, pool_id.lower())
            if pool_row is None:
                raise click.ClickException(f"Pool '{pool_id}' not found")

            click.echo(f"🏊 Pool {pool_row.id}")
            click.echo(f"   Address: {pool_row.address}")
            click.echo(f"   Type: {pool_row.pool_type.value} v{pool_row.pool_type_version}")
            click.echo(f"   Total shares: {pool_row.total_shares}")
            click.echo(f"   Swaps: {pool_row.swaps_count}")
            click.echo(f"   Holders: {pool_row.holders_count}")
            click.echo(f"   Swap enabled: {pool_row.swap_enabled}")
            if pool_row.amp is not None:
                click.echo(f"   Amp: {pool_row.amp}")
            if pool_row.last_post_join_exit_invariant is not None:
                click.echo(f"   Last join/exit invariant: {pool_row.last_post_join_exit_invariant}")

            pool_tokens = PoolTokenRepository().get_for_pool(session, pool_row.id)
            if pool_tokens:
                click.echo("   Tokens:")
            for pool_token in pool_tokens:
                symbol = pool_token.symbol or pool_token.address
                click.echo(f"     [{pool_token.index}] {symbol}: {pool_token.balance}")

    except click.ClickException:
        raise
    except Exception as e:
        raise click.ClickException(f"Failed to load pool: {e}")


@pool.command('snapshots')
@click.argument('pool_id')
@click.option('--limit', default=30, show_default=True, help='Most recent days to show')
@click.pass_context
def snapshots(ctx, pool_id, limit):
    """List daily snapshots of a pool, newest first"""
    cli_context = ctx.obj['cli_context']

    try:
        with cli_context.db_manager.get_session() as session:
            rows = SnapshotRepository().get_for_pool(session, pool_id, limit=limit)
            if not rows:
                click.echo(f"No snapshots for pool {pool_id}")
                return

            for snapshot in rows:
                amounts = ", ".join(str(amount) for amount in snapshot.amounts)
                click.echo(f"📅 {snapshot.timestamp}  shares={snapshot.total_shares}  "
                           f"swaps={snapshot.swaps_count}  holders={snapshot.holders_count}  "
                           f"amounts=[{amounts}]")

    except Exception as e:
        raise click.ClickException(f"Failed to load snapshots: {e}")
