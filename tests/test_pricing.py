from decimal import Decimal

import pytest

from storefront.models.cart import CartLine
from storefront.models.customization import Customization
from storefront.models.order import ContactInfo, OrderType, ShippingAddress
from storefront.pricing import (
    CUSTOM_FEE_PER_POSITION,
    build_order_payload,
    clamp_quantity,
    format_idr,
    get_custom_fee,
    price_selection,
    resolve_discount_rate,
    round_half_up,
)


def _line(key: str, unit_price: int, quantity: int, customization=None) -> CartLine:
    return CartLine(
        key=key,
        product_id=f"prod-{key}",
        product_name=f"Product {key}",
        unit_price=unit_price,
        size="M",
        color="black",
        quantity=quantity,
        customization=customization,
        custom_fee_per_unit=get_custom_fee(customization),
    )


@pytest.mark.parametrize(
    "quantity, rate",
    [
        (0, 0.0),
        (9, 0.0),
        (10, 0.10),
        (24, 0.10),
        (25, 0.15),
        (49, 0.15),
        (50, 0.20),
        (99, 0.20),
        (100, 0.30),
        (1_000_000, 0.30),
        (-5, 0.0),
    ],
)
def test_discount_rate_tiers(quantity, rate):
    assert resolve_discount_rate(quantity) == rate


def test_discount_rate_never_decreases_with_quantity():
    rates = [resolve_discount_rate(q) for q in range(0, 250)]
    assert rates == sorted(rates)


def test_bulk_scenario_discounts_at_second_tier():
    """Quantities 5/10/15 with a 2,000,000 subtotal"""
    lines = [
        _line("a", 100_000, 5),
        _line("b", 60_000, 10),
        _line("c", 60_000, 15),
    ]

    snapshot = price_selection(lines, ["a", "b", "c"], OrderType.BULK)

    assert snapshot.total_quantity == 30
    assert snapshot.subtotal == 2_000_000
    assert snapshot.discount_rate == 0.15
    assert snapshot.discount_amount == 300_000
    assert snapshot.shipping_fee == 0
    assert snapshot.total == 1_700_000


def test_personal_order_with_one_custom_position():
    customization = Customization(parts={"front": {"image_url": "https://cdn.test/logo.png"}})
    line = _line("a", 85_000, 1, customization)

    snapshot = price_selection([line], ["a"], "personal")

    assert line.custom_fee_per_unit == CUSTOM_FEE_PER_POSITION
    assert snapshot.subtotal == 85_000 + 25_000
    assert snapshot.discount_amount == 0
    assert snapshot.total == 110_000


def test_custom_fee_is_multiplied_by_quantity():
    customization = Customization(parts={
        "front": {"text": "TIM A"},
        "back": {"image_url": "https://cdn.test/back.png"},
    })
    line = _line("a", 80_000, 3, customization)

    snapshot = price_selection([line], ["a"], OrderType.PERSONAL)

    assert snapshot.subtotal == (80_000 + 50_000) * 3


def test_personal_orders_never_get_a_discount():
    lines = [_line("a", 100_000, 500)]

    snapshot = price_selection(lines, ["a"], OrderType.PERSONAL)

    assert snapshot.discount_rate == 0
    assert snapshot.discount_amount == 0
    assert snapshot.total == snapshot.subtotal


def test_empty_selection_prices_to_zero():
    lines = [_line("a", 100_000, 5)]

    snapshot = price_selection(lines, [], OrderType.BULK)

    assert snapshot.subtotal == 0
    assert snapshot.discount_amount == 0
    assert snapshot.total == 0
    assert snapshot.total_quantity == 0


def test_unselected_and_unknown_keys_are_ignored():
    lines = [_line("a", 100_000, 5), _line("b", 10_000, 1)]

    snapshot = price_selection(lines, ["b", "missing"], OrderType.BULK)

    assert snapshot.subtotal == 10_000
    assert snapshot.total_quantity == 1


def test_price_selection_is_repeatable():
    lines = [_line("a", 33_333, 7), _line("b", 12_345, 19)]

    first = price_selection(lines, ["a", "b"], OrderType.BULK)
    second = price_selection(lines, ["a", "b"], OrderType.BULK)

    assert first == second
    assert first.model_dump() == second.model_dump()


@pytest.mark.parametrize("quantity", [1, 9, 10, 26, 51, 120])
def test_discount_bounded_by_subtotal(quantity):
    lines = [_line("a", 1, quantity), _line("b", 99_999, quantity)]

    snapshot = price_selection(lines, ["a", "b"], OrderType.BULK)

    assert 0 <= snapshot.discount_amount <= snapshot.subtotal
    assert snapshot.total >= 0
    assert snapshot.total == snapshot.subtotal - snapshot.discount_amount + snapshot.shipping_fee


def test_discount_rounds_half_up():
    # 65 * 0.10 = 6.5
    lines = [_line("a", 7, 5), _line("b", 6, 5)]

    snapshot = price_selection(lines, ["a", "b"], OrderType.BULK)

    assert snapshot.subtotal == 65
    assert snapshot.discount_amount == 7


def test_shipping_fee_only_charged_for_non_empty_selection():
    lines = [_line("a", 10_000, 1)]

    assert price_selection(lines, ["a"], OrderType.PERSONAL, shipping_fee=15_000).total == 25_000
    assert price_selection(lines, [], OrderType.PERSONAL, shipping_fee=15_000).total == 0


def test_money_helpers():
    assert round_half_up(Decimal("2.5")) == 3
    assert round_half_up(Decimal("2.4")) == 2
    assert round_half_up(0.5) == 1
    assert clamp_quantity(None) == 0
    assert clamp_quantity(-3) == 0
    assert clamp_quantity(4) == 4
    assert format_idr(1_700_000) == "Rp 1.700.000"
    assert format_idr(0) == "Rp 0"


def test_build_order_payload_copies_snapshot_and_trims_buyer_fields():
    customization = Customization(parts={"front": {"text": "EUY"}})
    lines = [_line("a", 100_000, 12, customization)]
    snapshot = price_selection(lines, ["a"], OrderType.BULK)

    payload = build_order_payload(
        snapshot,
        ContactInfo(name="  Budi ", phone=" 0812 ", email="  "),
        ShippingAddress(address_line1=" Jl. Braga 1 ", city=" Bandung ", country="ID"),
        lines,
        order_type="bulk",
        notes="   ",
    )

    assert payload.buyer_name == "Budi"
    assert payload.buyer_phone == "0812"
    assert payload.buyer_email is None
    assert payload.notes is None
    assert payload.shipping_address.city == "Bandung"
    assert payload.order_type == OrderType.BULK
    assert payload.subtotal_cents == snapshot.subtotal
    assert payload.discount_rate == 0.10
    assert payload.discount_cents == snapshot.discount_amount
    assert payload.total_cents == snapshot.total
    assert payload.total_quantity == 12

    item = payload.items[0]
    assert item.unit_price_cents == 100_000
    assert item.custom_fee_cents == 25_000
    assert item.options == {"size": "M", "color": "black"}
    assert item.customization["parts"]["front"]["applied"] is True
