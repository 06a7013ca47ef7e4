import pytest
from pydantic import ValidationError

from schemas import OrderIn

CONTACT = {"name": "Jane", "email": "jane@example.com", "phone": "555", "address": "Main St 1"}


@pytest.mark.parametrize(
    "quantity, expected",
    [
        (2, 2),
        ("7", 7),
        (None, 1),
        ("two", 1),
        (True, 1),
        (2.0, 2),
        (2.9, 1),
        (float("inf"), 1),
        (float("nan"), 1),
    ],
)
def test_quantity_coercion(quantity, expected):
    order = OrderIn(**CONTACT, product_id=1, quantity=quantity)
    assert order.quantity == expected


def test_quantity_defaults_to_one():
    assert OrderIn(**CONTACT, product_id=1).quantity == 1


def test_product_id_must_be_numeric():
    with pytest.raises(ValidationError):
        OrderIn(**CONTACT, product_id="watch")
