"""Family member management commands."""

import click

from famfin.cli.error_handling import handle_domain_error
from famfin.cli.resolution import resolve_member_or_exit
from famfin.domain.entities import Relationship
from famfin.domain.errors import DomainError
from famfin.domain.family import FamilyMemberService


@click.group()
def member_group():
    """Manage family members."""
    pass


@member_group.command("list")
@click.pass_context
def list_members(ctx):
    """List family members."""
    service = FamilyMemberService(ctx.obj["db"], user_id=ctx.obj.get("user_id"))

    members = service.list_members()
    if not members:
        click.echo("No family members found.")
        return

    click.echo("\nFamily members:")
    for member in members:
        click.echo(f"  {member.name} ({member.relationship.value}) (ID: {member.id})")


@member_group.command("create")
@click.argument("name")
@click.option(
    "--relationship",
    type=click.Choice([r.value for r in Relationship], case_sensitive=False),
    default=Relationship.OTHER.value,
    help="Relationship to the account owner (default: other)",
)
@click.pass_context
def create_member(ctx, name: str, relationship: str):
    """Add a family member."""
    service = FamilyMemberService(ctx.obj["db"], user_id=ctx.obj.get("user_id"))
    try:
        member = service.create_member({"name": name, "relationship": relationship.lower()})
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created family member '{member.name}' (ID: {member.id})")


@member_group.command("delete")
@click.argument("member")
@click.pass_context
def delete_member(ctx, member: str):
    """Remove a family member."""
    service = FamilyMemberService(ctx.obj["db"], user_id=ctx.obj.get("user_id"))
    member_obj = resolve_member_or_exit(ctx, service, member)

    try:
        service.delete_member(member_obj.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted family member '{member_obj.name}'")


def register_commands(cli):
    """Register family member commands with main CLI."""
    cli.add_command(member_group, name="member")
