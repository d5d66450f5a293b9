"""Pull product and category data out of Picnic's server-driven page payloads.

Product and category pages come back as nested presentation trees (PML)
rather than plain data. These helpers walk those trees and recover the
few fields the commands display. The node ids and section names below
mirror what the storefront currently sends.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from typing import Any

from ..models import Category, CategoryListing, CategoryProduct, ProductInfo

CATEGORY_ITEM_PREFIX = "core-list-item-category-"
CONTENT_ROOT_ID = "root-content"

MAIN_SECTION = "product-details-page-root-main-container"
HIGHLIGHT_SECTION = "highlight-container"
ALLERGY_SECTION = "allergy-container"
ACCORDION_SECTION = "accordion-section"

# "Contains" label heading the allergen list (NL, DE)
ALLERGEN_LABELS = {"Bevat", "Enthält"}
INGREDIENT_PREFIXES = ("Ingrediënt", "Zutaten")

_COLOR_MARKER = re.compile(r"#\([A-Za-z0-9#]+\)")


def strip_picnic_markdown(md: str) -> str:
    """Strip Picnic's colour syntax `#(#hex)text#(#hex)` and bold markers."""
    return _COLOR_MARKER.sub("", md).replace("**", "").strip()


def iter_nodes(node: Any, max_depth: int | None = None, _depth: int = 0) -> Iterator[dict]:
    """Yield every dict in the tree, depth-first in document order.

    Lists are transparent: their items sit one level below the container
    that holds the list.
    """
    if max_depth is not None and _depth > max_depth:
        return
    if isinstance(node, dict):
        yield node
        children = node.values()
    elif isinstance(node, list):
        children = node
    else:
        return

    for child in children:
        if isinstance(child, list):
            for item in child:
                yield from iter_nodes(item, max_depth, _depth + 1)
        elif isinstance(child, dict):
            yield from iter_nodes(child, max_depth, _depth + 1)


def extract_markdown_texts(node: Any) -> list[str]:
    texts = []
    for n in iter_nodes(node):
        markdown = n.get("markdown")
        if isinstance(markdown, str):
            clean = strip_picnic_markdown(markdown)
            if len(clean) > 1:
                texts.append(clean)
    return texts


def find_section(sections: list, id_prefix: str) -> dict | None:
    for section in sections:
        if isinstance(section, dict) and isinstance(section.get("id"), str) and section["id"].startswith(id_prefix):
            return section
    return None


def find_content_sections(node: Any, _depth: int = 0) -> list | None:
    """Return the children of the `root-content` block.

    Only `child` and `children` links are followed.
    """
    if not isinstance(node, dict) or _depth > 8:
        return None
    if node.get("id") == CONTENT_ROOT_ID and isinstance(node.get("children"), list):
        return node["children"]
    if node.get("child"):
        found = find_content_sections(node["child"], _depth + 1)
        if found is not None:
            return found
    if isinstance(node.get("children"), list):
        for child in node["children"]:
            found = find_content_sections(child, _depth + 1)
            if found is not None:
                return found
    return None


def find_image_id(node: Any, max_depth: int = 8) -> str | None:
    """First `IMAGE` component source id in a PML component tree."""
    for n in iter_nodes(node, max_depth=max_depth):
        source = n.get("source")
        if n.get("type") == "IMAGE" and isinstance(source, dict) and source.get("id"):
            return source["id"]
    return None


def _section_texts(sections: list, id_prefix: str) -> list[str]:
    section = find_section(sections, id_prefix)
    return extract_markdown_texts(section) if section else []


def _find_priced_unit(page: Any) -> tuple[str, int | None]:
    product_id = "unknown"
    for n in iter_nodes(page):
        unit = n.get("sellingUnit")
        if not isinstance(unit, dict):
            continue
        if unit.get("display_price") is not None:
            return unit.get("id") or product_id, unit["display_price"]
        if unit.get("id"):
            product_id = unit["id"]
    return product_id, None


def extract_product_info(page: Any) -> ProductInfo:
    """Extract the displayed product fields from a product details page."""
    root = page.get("body", page) if isinstance(page, dict) else page
    sections = find_content_sections(root) or []

    main_texts = _section_texts(sections, MAIN_SECTION)
    highlight_texts = _section_texts(sections, HIGHLIGHT_SECTION)
    allergy_texts = _section_texts(sections, ALLERGY_SECTION)
    accordion_texts = _section_texts(sections, ACCORDION_SECTION)

    product_id, display_price = _find_priced_unit(page)

    def main(i: int, default: str = "") -> str:
        return main_texts[i] if len(main_texts) > i else default

    return ProductInfo(
        id=product_id,
        name=main(0, "Unknown"),
        brand=main(1),
        unit_quantity=main(2),
        base_price=main(3),
        display_price=display_price,
        description=next((t for t in highlight_texts if len(t) >= 80), ""),
        highlights=[t for t in highlight_texts if 3 < len(t) < 80],
        allergens=[t for t in allergy_texts if t not in ALLERGEN_LABELS],
        ingredients=next((t for t in accordion_texts if t.startswith(INGREDIENT_PREFIXES)), ""),
        raw=page,
    )


def _category_nodes(page: Any) -> Iterator[tuple[str, str, dict]]:
    for n in iter_nodes(page, max_depth=15):
        node_id = n.get("id")
        if not (isinstance(node_id, str) and node_id.startswith(CATEGORY_ITEM_PREFIX)):
            continue
        pml = n.get("pml") if isinstance(n.get("pml"), dict) else {}
        component = pml.get("component") if isinstance(pml.get("component"), dict) else {}
        name = component.get("accessibilityLabel") or ""
        if name:
            yield node_id[len(CATEGORY_ITEM_PREFIX):], name, component


def extract_categories(page: Any) -> list[Category]:
    """Top-level categories from the search root page."""
    return [
        Category(id=cat_id, name=name, image_id=find_image_id(component))
        for cat_id, name, component in _category_nodes(page)
    ]


def extract_subcategories(page: Any) -> list[Category]:
    """Subcategories listed on a category page, first occurrence of each id."""
    seen: set[str] = set()
    subs = []
    for cat_id, name, _ in _category_nodes(page):
        if cat_id not in seen:
            seen.add(cat_id)
            subs.append(Category(id=cat_id, name=name))
    return subs


def extract_category_products(page: Any) -> list[CategoryProduct]:
    products = []
    for n in iter_nodes(page, max_depth=15):
        unit = n.get("sellingUnit")
        if isinstance(unit, dict) and unit.get("name"):
            products.append(CategoryProduct(
                id=unit.get("id") or "unknown",
                name=unit["name"],
                price=unit.get("display_price"),
                unit_quantity=unit.get("unit_quantity") or "",
                image_id=unit.get("image_id"),
            ))
    return products


def extract_category_listing(page: Any) -> CategoryListing:
    return CategoryListing(
        subcategories=extract_subcategories(page),
        products=extract_category_products(page),
        raw=page,
    )
