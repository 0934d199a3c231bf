"""Main CLI entry point."""

import click

from famfin.config import get_settings
from famfin.database.factories import create_sqlalchemy_storage, create_storage
from famfin.logging_utils import configure_root_logger

# Import and register all commands at module level
from famfin.cli.commands import (
    add,
    card,
    category,
    import_cmd,
    member,
    serve,
    summary,
    transaction,
)


@click.group()
@click.option(
    "--database-url",
    help="SQLAlchemy database URL (overrides FAMFIN_DATABASE_URL environment variable)",
    envvar="FAMFIN_DATABASE_URL",
)
@click.option(
    "--user",
    "user_id",
    help="Acting user ID (defaults to FAMFIN_DEFAULT_USER_ID)",
    envvar="FAMFIN_DEFAULT_USER_ID",
)
@click.pass_context
def cli(ctx, database_url: str | None, user_id: str | None):
    """famfin - Family finance tracker.

    Record income and expenses, follow paid and pending balances, and import
    Brazilian bank statements.
    """
    ctx.ensure_object(dict)

    # Open storage only when actually running a command (not when showing help)
    if ctx.invoked_subcommand is not None:
        settings = get_settings()
        configure_root_logger(settings.log_level)

        if database_url is not None:
            db = create_sqlalchemy_storage(database_url)
        else:
            db = create_storage(settings)
        db.connect()
        ctx.obj["db"] = db
        ctx.obj["user_id"] = user_id or settings.default_user_id
        ctx.call_on_close(db.disconnect)


# Register all commands
add.register_commands(cli)
transaction.register_commands(cli)
summary.register_commands(cli)
category.register_commands(cli)
card.register_commands(cli)
member.register_commands(cli)
import_cmd.register_commands(cli)
serve.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
