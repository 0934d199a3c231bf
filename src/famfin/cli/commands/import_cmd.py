"""Statement import command."""

from pathlib import Path

import click

from famfin.cli.error_handling import handle_domain_error
from famfin.cli.resolution import resolve_card_or_exit, resolve_member_or_exit
from famfin.domain.card import CardService
from famfin.domain.entities import StatementType
from famfin.domain.errors import DomainError
from famfin.domain.family import FamilyMemberService
from famfin.domain.statement_import import StatementImportService, guess_statement_type
from famfin.utils.amount_parser import format_currency
from famfin.utils.date_parser import format_brazilian_date


@click.command("import")
@click.argument("statement_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--type",
    "statement_type",
    type=click.Choice([t.value for t in StatementType], case_sensitive=False),
    help="Statement layout (detected from the text if omitted)",
)
@click.option("--card", help="Credit card the statement belongs to (name, digits or ID)")
@click.option("--member", help="Family member to assign the transactions to")
@click.option("--commit", is_flag=True, help="Save the transactions instead of only previewing")
@click.pass_context
def import_statement(
    ctx,
    statement_file: str,
    statement_type: str | None,
    card: str | None,
    member: str | None,
    commit: bool,
):
    """Import transactions from a bank statement text file.

    Without --commit the parsed transactions are only shown.

    Examples:
        famfin import fatura.txt --type nubank_credit
        famfin import extrato.txt --commit
    """
    db = ctx.obj["db"]
    user_id = ctx.obj.get("user_id")
    service = StatementImportService(db, user_id=user_id)

    text = Path(statement_file).read_text(encoding="utf-8")
    if statement_type is None:
        statement_type = guess_statement_type(text).value

    card_id = None
    if card:
        card_id = resolve_card_or_exit(ctx, CardService(db, user_id=user_id), card).id
    member_id = None
    if member:
        member_id = resolve_member_or_exit(
            ctx, FamilyMemberService(db, user_id=user_id), member
        ).id

    try:
        preview = service.import_statement(
            {"text": text, "statement_type": statement_type.lower()},
            commit=commit,
            card_id=card_id,
            family_member_id=member_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    result = preview.result
    click.echo(f"\nBank: {result.bank}")
    click.echo(f"Statement type: {result.statement_type}")
    click.echo(
        f"Parsing: {result.parsing_method} (confidence {result.confidence:.2f}), "
        f"{len(preview.drafts)} transaction(s)"
    )

    if not preview.drafts:
        click.echo("No transactions found in statement.")
        return

    click.echo("-" * 80)
    for draft in preview.drafts:
        sign = "+" if draft["type"].value == "income" else "-"
        name = draft["name"]
        if draft["installments_total"]:
            name = f"{name} ({draft['installment_number']}/{draft['installments_total']})"
        click.echo(
            f"{format_brazilian_date(draft['date']):<12} {name[:46]:<46} "
            f"{sign + format_currency(draft['amount']):>18}"
        )
    click.echo("-" * 80)

    if commit:
        click.echo(f"Imported {len(preview.created)} transaction(s)")
    else:
        click.echo("Preview only. Run again with --commit to save.")


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_statement)
