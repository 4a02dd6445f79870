import pytest

from services.packaging import (
    base_units_from_packages, cost_per_base_unit, price_to_cents,
    split_packages, format_quantity, describe_packaged_stock, pluralize_label
)


def test_base_units_from_packages():
    assert base_units_from_packages(1, 5000) == 5000
    assert base_units_from_packages(3, 12) == 36
    assert base_units_from_packages(0, 1000) == 0


def test_cost_per_base_unit_flour():
    # 25.00 for a 5 kg bag
    assert cost_per_base_unit(2500, 5000) == 0.5


def test_cost_per_base_unit_is_fractional():
    assert cost_per_base_unit(600, 500) == pytest.approx(1.2)
    assert cost_per_base_unit(1000, 3) == pytest.approx(333.333, rel=1e-4)


@pytest.mark.parametrize('price, size', [(None, 5000), (0, 5000), (2500, None), (2500, 0)])
def test_cost_per_base_unit_unset_is_zero(price, size):
    assert cost_per_base_unit(price, size) == 0.0


def test_price_to_cents_rounds_to_nearest_cent():
    assert price_to_cents(25) == 2500
    assert price_to_cents(19.99) == 1999
    assert price_to_cents('25,50') == 2550
    assert price_to_cents(' 3.333 ') == 333
    assert price_to_cents(None) is None
    assert price_to_cents('') is None


def test_price_to_cents_rejects_garbage():
    with pytest.raises(ValueError):
        price_to_cents('abc')


@pytest.mark.parametrize('value', ['inf', '-inf', 'nan', 'Infinity', 1e308 * 10])
def test_price_to_cents_rejects_non_finite(value):
    with pytest.raises(ValueError):
        price_to_cents(value)


def test_split_packages():
    assert split_packages(2300, 1000) == (2, 300)
    assert split_packages(999, 1000) == (0, 999)
    assert split_packages(5000, 5000) == (1, 0)


def test_format_quantity_switches_at_one_thousand():
    assert format_quantity(999, 'g') == '999 g'
    assert format_quantity(1000, 'g') == '1.00 kg'
    assert format_quantity(12340, 'g') == '12.34 kg'
    assert format_quantity(1500, 'ml') == '1.50 L'
    assert format_quantity(5000, 'un') == '5000 un'


def test_pluralize_label():
    assert pluralize_label('box') == 'boxes'
    assert pluralize_label('bottle') == 'bottles'
    assert pluralize_label('package') == 'packages'
    assert pluralize_label('pouch') == 'pouches'


def test_describe_packaged_stock():
    assert describe_packaged_stock(2300, 1000, 'g', 'box') == '2 boxes sealed and 300 g opened'
    assert describe_packaged_stock(1300, 1000, 'g', 'bottle') == '1 bottle sealed and 300 g opened'
    assert describe_packaged_stock(300, 1000, 'g', 'box') == '300 g opened'


def test_describe_packaged_stock_large_remainder_uses_display_units():
    assert describe_packaged_stock(12000, 5000, 'g', 'bag') == '2 bags sealed and 2.00 kg opened'


def test_describe_packaged_stock_default_label():
    assert describe_packaged_stock(2000, 1000, 'ml', None) == '2 packages sealed and 0 ml opened'


def test_describe_packaged_stock_count_units_have_no_breakdown():
    assert describe_packaged_stock(24, 12, 'un', 'box') is None
