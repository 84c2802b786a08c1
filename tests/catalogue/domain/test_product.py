"""Product aggregate: creation defaults, updates and keyword matching."""

import pytest
from protean.exceptions import ValidationError
from storefront.catalogue.events import ProductCreated, ProductUpdated
from storefront.catalogue.product import Category, License, Product


def _product(**overrides):
    values = {
        "name": "PC Game Ultimate",
        "description": "Open-world adventure game",
        "price": 59.0,
        "category": Category.PC_GAMES.value,
        "download_url": "https://downloads.example.com/game.zip",
        "created_by": "admin-1",
    }
    values.update(overrides)
    return Product.create(**values)


class TestCreate:
    def test_defaults(self):
        product = _product()
        assert product.version == "1.0.0"
        assert product.license == License.SINGLE.value
        assert product.is_active is True
        assert product.downloads == 0
        assert product.rating.average == 0.0
        assert product.rating.count == 0
        assert product.decoded("tags") == []
        assert product.decoded("system_requirements") == {}

    def test_json_fields_round_trip(self):
        product = _product(
            images=[{"url": "https://cdn.example.com/box.png", "alt": "Box art"}],
            system_requirements={"os": ["Windows 10", "Windows 11"], "memory": "8 GB"},
            tags=["rpg", "open-world"],
        )
        assert product.decoded("images")[0]["alt"] == "Box art"
        assert product.decoded("system_requirements")["os"] == ["Windows 10", "Windows 11"]
        assert product.decoded("tags") == ["rpg", "open-world"]

    def test_text_is_stored_verbatim(self):
        product = _product(
            name="Design & Print <Studio>",
            category=Category.SOFTWARE_AND_APPS.value,
            download_url="https://downloads.example.com/get?id=1&sig=x",
            tags=["r&d"],
        )
        assert product.name == "Design & Print <Studio>"
        assert product.category == "software & apps"
        assert product.download_url == "https://downloads.example.com/get?id=1&sig=x"
        assert product.decoded("tags") == ["r&d"]

    def test_raises_product_created(self):
        product = _product()
        events = [e for e in product._events if isinstance(e, ProductCreated)]
        assert len(events) == 1
        assert events[0].category == "PC games"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"price": -1.0},
            {"category": "Hardware"},
            {"license": "perpetual"},
            {"name": "x" * 101},
            {"description": "x" * 1001},
        ],
    )
    def test_invalid_values_are_rejected(self, overrides):
        with pytest.raises(ValidationError):
            _product(**overrides)

    def test_zero_price_is_allowed(self):
        assert _product(price=0.0).price == 0.0

    def test_tags_must_be_a_list(self):
        with pytest.raises(ValidationError) as exc:
            _product(tags="rpg")
        assert "tags" in exc.value.messages


class TestUpdate:
    def test_changes_fields_and_records_them(self):
        product = _product()
        product._events.clear()

        product.update(price=39.0, tags=["sale"], name=None)

        assert product.price == 39.0
        assert product.decoded("tags") == ["sale"]
        assert product.name == "PC Game Ultimate"
        assert product._events[0].changed_fields == "price,tags"
        assert isinstance(product._events[0], ProductUpdated)

    def test_no_changes_raise_no_event(self):
        product = _product()
        product._events.clear()
        product.update(name=None)
        assert product._events == []

    def test_unknown_field_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _product().update(downloads=1000)
        assert "downloads" in exc.value.messages

    def test_deactivate(self):
        product = _product()
        product.update(is_active=False)
        assert product.is_active is False


class TestMatching:
    def test_matches_name_case_insensitively(self):
        assert _product().matches("ultimate")

    def test_matches_description(self):
        assert _product().matches("OPEN-WORLD")

    def test_matches_tags(self):
        assert _product(tags=["steam-key"]).matches("steam")

    def test_no_match(self):
        assert not _product().matches("antivirus")
