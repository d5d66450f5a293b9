"""Tests for picnic_cli/picnic/pages.py: extraction from server-driven pages."""

from picnic_cli.picnic.pages import (
    extract_categories,
    extract_category_listing,
    extract_category_products,
    extract_markdown_texts,
    extract_product_info,
    extract_subcategories,
    find_content_sections,
    iter_nodes,
    strip_picnic_markdown,
)

LONG_DESCRIPTION = (
    "Deze volle melk komt van koeien die in de wei grazen en wordt dagelijks vers "
    "gebotteld voor een romige smaak."
)


def _md(text):
    return {"type": "RICH_TEXT", "markdown": text}


def _section(section_id, *texts):
    return {"id": section_id, "children": [_md(t) for t in texts]}


def _product_page(sections, selling_unit=None):
    page = {
        "body": {
            "child": {
                "child": {
                    "id": "root",
                    "children": [
                        {"id": "header"},
                        {"id": "root-content", "children": sections},
                    ],
                },
            },
        },
    }
    if selling_unit is not None:
        page["body"]["child"]["analytics"] = {"contexts": [{"data": {"sellingUnit": selling_unit}}]}
    return page


def _category_item(cat_id, label, image_id=None):
    component = {"type": "STACK", "accessibilityLabel": label, "children": []}
    if image_id:
        component["children"].append({"type": "IMAGE", "source": {"id": image_id}})
    return {"id": f"core-list-item-category-{cat_id}", "pml": {"component": component}}


class TestStripPicnicMarkdown:
    def test_removes_color_markers(self):
        assert strip_picnic_markdown("#(#333333)Halfvolle melk#(#333333)") == "Halfvolle melk"

    def test_removes_bold(self):
        assert strip_picnic_markdown("**Bio**") == "Bio"

    def test_trims(self):
        assert strip_picnic_markdown("  1 liter \n") == "1 liter"

    def test_plain_text_untouched(self):
        assert strip_picnic_markdown("Campina") == "Campina"


class TestIterNodes:
    def test_document_order(self):
        tree = {"id": "a", "children": [{"id": "b", "child": {"id": "c"}}, {"id": "d"}]}
        assert [n["id"] for n in iter_nodes(tree)] == ["a", "b", "c", "d"]

    def test_depth_limit(self):
        tree = {"id": 0, "next": {"id": 1, "next": {"id": 2, "next": {"id": 3}}}}
        assert [n["id"] for n in iter_nodes(tree, max_depth=1)] == [0, 1]

    def test_lists_do_not_add_depth(self):
        tree = {"id": 0, "items": [{"id": 1}]}
        assert [n["id"] for n in iter_nodes(tree, max_depth=1)] == [0, 1]

    def test_scalars_yield_nothing(self):
        assert list(iter_nodes("text")) == []
        assert list(iter_nodes(None)) == []


class TestExtractMarkdownTexts:
    def test_collects_nested_markdown(self):
        tree = {"children": [_md("Melk"), {"child": _md("**Campina**")}]}
        assert extract_markdown_texts(tree) == ["Melk", "Campina"]

    def test_skips_single_characters(self):
        assert extract_markdown_texts({"children": [_md("x"), _md("ok")]}) == ["ok"]

    def test_ignores_non_string_markdown(self):
        assert extract_markdown_texts({"markdown": {"nested": True}}) == []


class TestFindContentSections:
    def test_finds_root_content(self):
        sections = [{"id": "s1"}]
        page = _product_page(sections)
        assert find_content_sections(page["body"]) == sections

    def test_missing_returns_none(self):
        assert find_content_sections({"child": {"id": "other"}}) is None

    def test_gives_up_beyond_depth_eight(self):
        node = {"id": "root-content", "children": []}
        for _ in range(10):
            node = {"child": node}
        assert find_content_sections(node) is None


class TestExtractProductInfo:
    def _full_page(self):
        return _product_page(
            [
                _section(
                    "product-details-page-root-main-container-123",
                    "Halfvolle melk", "Campina", "1 liter", "€1,19/l",
                ),
                _section("highlight-container", "Weidemelk", "Vers", LONG_DESCRIPTION),
                _section("allergy-container", "Bevat", "Melk"),
                _section("accordion-section", "Voedingswaarde", "Ingrediënten: melk"),
            ],
            selling_unit={"id": "s100", "display_price": 119},
        )

    def test_main_fields(self):
        info = extract_product_info(self._full_page())
        assert info.name == "Halfvolle melk"
        assert info.brand == "Campina"
        assert info.unit_quantity == "1 liter"
        assert info.base_price == "€1,19/l"

    def test_price_and_id_from_selling_unit(self):
        info = extract_product_info(self._full_page())
        assert info.id == "s100"
        assert info.display_price == 119

    def test_highlights_and_description_split_by_length(self):
        info = extract_product_info(self._full_page())
        assert info.highlights == ["Weidemelk", "Vers"]
        assert info.description == LONG_DESCRIPTION

    def test_allergens_drop_contains_label(self):
        assert extract_product_info(self._full_page()).allergens == ["Melk"]

    def test_ingredients(self):
        assert extract_product_info(self._full_page()).ingredients == "Ingrediënten: melk"

    def test_german_labels(self):
        page = _product_page([
            _section("allergy-container", "Enthält", "Milch"),
            _section("accordion-section", "Zutaten: Milch"),
        ])
        info = extract_product_info(page)
        assert info.allergens == ["Milch"]
        assert info.ingredients == "Zutaten: Milch"

    def test_empty_page_defaults(self):
        info = extract_product_info({})
        assert info.name == "Unknown"
        assert info.id == "unknown"
        assert info.display_price is None
        assert info.highlights == []

    def test_id_falls_back_to_unpriced_unit(self):
        page = _product_page([], selling_unit={"id": "s200"})
        info = extract_product_info(page)
        assert info.id == "s200"
        assert info.display_price is None

    def test_raw_page_kept(self):
        page = self._full_page()
        assert extract_product_info(page).raw is page


class TestExtractCategories:
    def test_extracts_id_name_and_image(self):
        page = {"body": {"children": [_category_item("1000", "Zuivel", "img1"), _category_item("2000", "Brood")]}}
        cats = extract_categories(page)
        assert [(c.id, c.name, c.image_id) for c in cats] == [("1000", "Zuivel", "img1"), ("2000", "Brood", None)]

    def test_skips_items_without_label(self):
        page = {"children": [_category_item("1000", "")]}
        assert extract_categories(page) == []

    def test_ignores_other_ids(self):
        page = {"children": [{"id": "core-list-item-recipe-1", "pml": {"component": {"accessibilityLabel": "X"}}}]}
        assert extract_categories(page) == []


class TestExtractSubcategories:
    def test_deduplicates(self):
        page = {"children": [_category_item("1", "Melk"), _category_item("2", "Kaas"), _category_item("1", "Melk")]}
        subs = extract_subcategories(page)
        assert [s.id for s in subs] == ["1", "2"]
        assert subs[0].image_id is None


class TestExtractCategoryProducts:
    def test_selling_units(self):
        page = {"children": [
            {"sellingUnit": {"id": "s1", "name": "Melk", "display_price": 119, "unit_quantity": "1 l", "image_id": "i1"}},
            {"sellingUnit": {"name": "Kaas"}},
            {"sellingUnit": {"id": "s3"}},
        ]}
        products = extract_category_products(page)
        assert len(products) == 2
        assert products[0].id == "s1"
        assert products[0].price == 119
        assert products[0].image_id == "i1"
        assert products[1].id == "unknown"
        assert products[1].price is None
        assert products[1].unit_quantity == ""

    def test_listing_combines_both(self):
        page = {"children": [_category_item("1", "Melk"), {"sellingUnit": {"id": "s1", "name": "Melk"}}]}
        listing = extract_category_listing(page)
        assert len(listing.subcategories) == 1
        assert len(listing.products) == 1
        assert listing.raw is page
