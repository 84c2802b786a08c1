"""Running average of shopper ratings."""

import pytest
from protean.exceptions import ValidationError
from storefront.catalogue.events import ProductRated
from storefront.catalogue.product import Product, Rating


def _product():
    return Product.create(
        name="Antivirus Plus",
        description="Real-time protection",
        price=19.99,
        category="software & apps",
        download_url="https://downloads.example.com/av.exe",
        created_by="admin-1",
    )


def test_first_rating_sets_average():
    product = _product()
    product.rate(4)
    assert product.rating.average == 4.0
    assert product.rating.count == 1


def test_average_follows_running_formula():
    product = _product()
    for value in (5, 3, 4):
        average, count = product.rating.average, product.rating.count
        product.rate(value)
        assert product.rating.average == pytest.approx((average * count + value) / (count + 1))
        assert product.rating.count == count + 1

    assert product.rating.average == pytest.approx(4.0)
    assert product.rating.count == 3


def test_record_returns_new_value_object():
    rating = Rating(average=4.5, count=2)
    updated = rating.record(3)
    assert updated.average == pytest.approx(4.0)
    assert updated.count == 3
    assert rating.count == 2


def test_rating_event():
    product = _product()
    product._events.clear()
    product.rate(5)
    event = product._events[0]
    assert isinstance(event, ProductRated)
    assert event.new_average == 5.0
    assert event.new_count == 1


@pytest.mark.parametrize("value", [0, 6, -1, 5.5, None, True])
def test_out_of_range_ratings_are_rejected(value):
    product = _product()
    with pytest.raises(ValidationError) as exc:
        product.rate(value)
    assert exc.value.messages["rating"] == ["Rating must be between 1 and 5"]
    assert product.rating.count == 0


def test_inactive_product_cannot_be_rated():
    product = _product()
    product.update(is_active=False)
    with pytest.raises(ValidationError):
        product.rate(3)
