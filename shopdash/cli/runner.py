# shopdash/cli/runner.py

"""Headless CLI commands sharing the dashboard's services."""

import json
import logging
import sys
from dataclasses import asdict

from rich.console import Console
from rich.table import Table

from shopdash.api.errors import DashboardError
from shopdash.auth.session import CredentialsProvider
from shopdash.config.settings import Settings
from shopdash.models.cart import Cart
from shopdash.models.product import Product
from shopdash.services.container import Services, build_services
from shopdash.services.cart_view import CartViewController
from shopdash.utils.image_urls import format_price

logger = logging.getLogger("shopdash.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def sign_in(email: str | None, password: str | None) -> Services | None:
    """Build services and sign in, defaulting to the configured account."""
    account = Settings.ACCOUNTS[0] if Settings.ACCOUNTS else {}
    email = email if email is not None else account.get("email", "")
    password = (
        password if password is not None else account.get("password", "")
    )
    identity = CredentialsProvider().authorize(email, password)
    if identity is None:
        _err.print("[red]Invalid email or password.[/red]")
        return None
    services = build_services()
    services.session.sign_in(identity)
    _err.print(f"[dim]Signed in as {identity.email}[/dim]")
    return services


def _products_to_dicts(products: list[Product]) -> list[dict[str, object]]:
    """Serialise a product list to plain dicts for JSON output."""
    return [asdict(p) for p in products]


def _cart_to_dict(cart: Cart) -> dict[str, object]:
    rows = CartViewController.rows(cart)
    return {
        "id": cart.id,
        "user_id": cart.user_id,
        "items": [
            {
                "id": r.item.id,
                "product_id": r.item.product_id,
                "name": r.label,
                "available": r.available,
                "unit_price": r.unit_price,
                "quantity": r.quantity,
                "line_total": r.line_total,
            }
            for r in rows
        ],
        "total": cart.total,
    }


def _print_products_table(products: list[Product]) -> None:
    """Render a Rich table of products to stdout."""
    table = Table(
        title="Products",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("ID", style="dim")
    table.add_column("Name", max_width=40)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Images", justify="center")
    table.add_column("Description", overflow="fold", style="dim")

    for idx, p in enumerate(products, 1):
        table.add_row(
            str(idx),
            p.id,
            p.name,
            format_price(p.price),
            str(len(p.images)),
            p.description.strip() or "—",
        )

    Console().print(table)


def _print_cart_table(cart: Cart) -> None:
    table = Table(title="Cart", show_lines=True, title_style="bold cyan")
    table.add_column("Product", max_width=40)
    table.add_column("Price", justify="right")
    table.add_column("Qty", justify="center")
    table.add_column("Line total", justify="right", style="green")

    for row in CartViewController.rows(cart):
        if row.available:
            table.add_row(
                row.label,
                format_price(row.unit_price),
                str(row.quantity),
                format_price(row.line_total),
            )
        else:
            table.add_row(
                f"[red]{row.label}[/red]", "—", str(row.quantity), "—",
            )

    Console().print(table)
    Console().print(f"[bold]Total: {format_price(cart.total)}[/bold]")


def _emit_json(data: object) -> None:
    json.dump(data, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def run_list_products(services: Services, output_format: str) -> int:
    """List products; return an exit code (0=ok, 1=fail)."""
    try:
        products = services.products.list_products() or []
    except DashboardError as exc:
        logger.error("Failed to load products: %s", exc, exc_info=True)
        _err.print(f"[red]Failed to load products: {exc}[/red]")
        return 1

    if not products:
        _err.print(
            "[yellow]No products found. "
            "Create one from the dashboard.[/yellow]"
        )
        return 0

    _err.print(f"[green]✓ {len(products)} products[/green]")
    if output_format == "table":
        _print_products_table(products)
    else:
        _emit_json(_products_to_dicts(products))
    return 0


def run_show_product(
    services: Services, product_id: str, output_format: str,
) -> int:
    try:
        product = services.products.get_product(product_id)
    except DashboardError as exc:
        logger.error(
            "Failed to load product %s: %s", product_id, exc, exc_info=True,
        )
        _err.print(f"[red]Failed to load product: {exc}[/red]")
        return 1
    if product is None:
        return 1

    if output_format == "table":
        _print_products_table([product])
    else:
        _emit_json(asdict(product))
    return 0


def run_show_cart(services: Services, output_format: str) -> int:
    try:
        cart = services.cart.get_cart()
    except DashboardError as exc:
        logger.error("Failed to load cart: %s", exc, exc_info=True)
        _err.print(f"[red]Failed to load cart: {exc}[/red]")
        return 1
    if cart is None:
        return 1

    if not cart.items:
        _err.print("[yellow]Your cart is empty.[/yellow]")
    if output_format == "table":
        _print_cart_table(cart)
    else:
        _emit_json(_cart_to_dict(cart))
    return 0


async def run_health_check() -> int:
    """Run connectivity health check on the remote API."""
    from shopdash.services.health_checker import HealthChecker

    _err.print(
        f"[bold]Checking {Settings.API_BASE_URL}...[/bold]"
    )
    checker = HealthChecker()
    results = await checker.check_all()

    table = Table(
        title="API Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Endpoint", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    any_down = False
    for r in results:
        if r.status == "ok":
            status = "[green]✅ OK[/green]"
        elif r.status == "slow":
            status = "[yellow]⚠️  SLOW[/yellow]"
        else:
            status = "[red]❌ DOWN[/red]"
            any_down = True

        latency = (
            f"{r.latency_ms:.0f}ms"
            if r.latency_ms > 0
            else "—"
        )
        table.add_row(r.endpoint, status, latency, r.message)

    Console().print(table)
    return 1 if any_down else 0
