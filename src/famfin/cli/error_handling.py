"""CLI error handling helpers."""

import click

from famfin.domain.errors import DomainError, ValidationError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    if isinstance(error, ValidationError) and error.issues:
        click.echo("Error: Dados inválidos", err=True)
        for issue in error.issues:
            click.echo(f"  {issue.path}: {issue.message}", err=True)
    else:
        click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
