"""Category management commands."""

import click

from famfin.cli.error_handling import handle_domain_error
from famfin.cli.resolution import resolve_category_or_exit
from famfin.domain.category import CategoryService
from famfin.domain.entities import CategoryType
from famfin.domain.errors import DomainError


def print_category_tree(nodes: list[dict], indent: int = 0) -> None:
    """Recursively print category tree."""
    for node in nodes:
        cat = node["category"]
        prefix = "  " * indent
        click.echo(f"{prefix}{cat.name} [{cat.color}] (ID: {cat.id})")
        if node["children"]:
            print_category_tree(node["children"], indent + 1)


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.option(
    "--type",
    "category_type",
    type=click.Choice(["income", "expense"], case_sensitive=False),
    help="Only income or only expense categories",
)
@click.pass_context
def list_categories(ctx, category_type: str | None):
    """List categories in tree format, grouped by type."""
    service = CategoryService(ctx.obj["db"], user_id=ctx.obj.get("user_id"))

    types = [CategoryType(category_type.lower())] if category_type else list(CategoryType)
    found = False
    for ctype in types:
        tree = service.get_category_tree(ctype)
        if not tree:
            continue
        found = True
        title = "Income" if ctype == CategoryType.INCOME else "Expense"
        click.echo(f"\n{title} categories:")
        print_category_tree(tree)

    if not found:
        click.echo("No categories found.")


@category_group.command("create")
@click.argument("name")
@click.option(
    "--type",
    "category_type",
    type=click.Choice(["income", "expense"], case_sensitive=False),
    default="expense",
    help="Category type (default: expense)",
)
@click.option("--color", default="#64748b", help="Hex color (default: #64748b)")
@click.option("--icon", help="Icon name")
@click.option("--parent", help="Parent category name or ID")
@click.pass_context
def create_category(
    ctx, name: str, category_type: str, color: str, icon: str | None, parent: str | None
):
    """Create a new category."""
    service = CategoryService(ctx.obj["db"], user_id=ctx.obj.get("user_id"))
    ctype = CategoryType(category_type.lower())

    parent_id = None
    if parent:
        parent_id = resolve_category_or_exit(ctx, service, parent, ctype).id

    try:
        category = service.create_category(
            {"name": name, "type": ctype, "color": color, "icon": icon, "parent_id": parent_id}
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    parent_str = f" under '{parent}'" if parent else ""
    click.echo(f"Created category '{category.name}'{parent_str} (ID: {category.id})")


@category_group.command("delete")
@click.argument("category")
@click.pass_context
def delete_category(ctx, category: str):
    """Delete a category that no transaction uses."""
    service = CategoryService(ctx.obj["db"], user_id=ctx.obj.get("user_id"))
    category_obj = resolve_category_or_exit(ctx, service, category)

    try:
        service.delete_category(category_obj.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted category '{category_obj.name}'")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
