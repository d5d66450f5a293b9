"""Product details, raw page and image download."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.text import Text

from ..errors import handle_errors
from ..models import ImageSize, ProductInfo
from ..output import kv_table
from ..picnic.pages import extract_product_info
from ..state import get_state
from ..utils import format_price

logger = logging.getLogger(__name__)

product_app = typer.Typer(help="Product commands", no_args_is_help=True)


def product_pretty(info: ProductInfo) -> Text:
    out = Text(info.name, style="bold")
    for label, value in (
        ("Brand", info.brand),
        ("Price", format_price(info.display_price) if info.display_price is not None else ""),
        ("Unit", info.unit_quantity),
        ("Base price", info.base_price),
        ("Allergens", ", ".join(info.allergens)),
    ):
        if value:
            out.append(f"\n  {label + ':':<15}{value}")
    if info.highlights:
        out.append("\n\n  Highlights:", style="bold")
        for highlight in info.highlights:
            out.append(f"\n    - {highlight}")
    if info.description:
        out.append(f"\n\n  {info.description}")
    return out


def product_table(info: ProductInfo):
    rows = [
        ("Name", info.name),
        ("Brand", info.brand or "-"),
        ("Price", format_price(info.display_price)),
        ("Unit Qty", info.unit_quantity or "-"),
    ]
    if info.allergens:
        rows.append(("Allergens", ", ".join(info.allergens)))
    if info.description:
        rows.append(("Description", info.description))
    return kv_table(rows)


@product_app.command("show")
@handle_errors
def show(
    ctx: typer.Context,
    product_id: str = typer.Argument(..., metavar="ID", help="Product ID"),
) -> None:
    """Show product details."""
    state = get_state(ctx)
    with state.status("Fetching product…"):
        page = state.client().get_product_details_page(product_id)
    state.emit(extract_product_info(page), pretty=product_pretty, table=product_table)


@product_app.command("page")
@handle_errors
def page(
    ctx: typer.Context,
    product_id: str = typer.Argument(..., metavar="ID", help="Product ID"),
) -> None:
    """Get full product details page (JSON only)."""
    state = get_state(ctx)
    with state.status("Fetching product page…"):
        result = state.client().get_product_details_page(product_id)
    state.emit(result)


@product_app.command("image")
@handle_errors
def image(
    ctx: typer.Context,
    image_id: str = typer.Argument(..., help="Image ID (from search or category results)"),
    size: ImageSize = typer.Option(ImageSize.MEDIUM, "--size", help="Image size"),
    directory: Path = typer.Option(Path("."), "--dir", file_okay=False, help="Directory to save into"),
) -> None:
    """Download a product image."""
    state = get_state(ctx)
    with state.status("Downloading image…"):
        data = state.client().get_image(image_id, size.value)
        directory.mkdir(parents=True, exist_ok=True)
        target = directory / f"{image_id}_{size.value}.png"
        target.write_bytes(data)
    logger.info("Saved %d bytes to %s", len(data), target)

    result = {"filename": str(target), "size": size.value, "image_id": image_id}
    state.emit(
        result,
        pretty=lambda d: Text(f"Saved to {d['filename']}", style="green"),
        table=lambda d: Text(f"Saved to {d['filename']}"),
    )


def register(app: typer.Typer) -> None:
    app.add_typer(product_app, name="product")
