from decimal import Decimal

import pytest

from txbot.amount import Amount, Denom, format_amounts


def test_amount_from_coin():
    amount = Amount.from_coin(100, "stake")
    assert amount.denom == "stake"
    assert amount.base_denom == "stake"
    assert f"{amount.value:.6f}" == "100.000000"


def test_amount_from_string_invalid():
    with pytest.raises(ValueError):
        Amount.from_string("invalid", "stake")


def test_amount_from_string_valid():
    amount = Amount.from_string("100", "stake")
    assert amount.denom == "stake"
    assert amount.base_denom == "stake"
    assert f"{amount.value:.6f}" == "100.000000"


def test_amount_convert_denom():
    amount = Amount.from_string("100000000", "ustake")
    amount.convert_denom("stake", 6)
    assert amount.denom == "stake"
    assert amount.base_denom == "ustake"
    assert f"{amount.value:.6f}" == "100.000000"


def test_amount_add_usd_price():
    amount = Amount.from_string("1", "stake")
    amount.add_usd_price(1.23)
    assert amount.denom == "stake"
    assert f"{amount.value:.6f}" == "1.000000"
    assert f"{amount.price_usd:.6f}" == "1.230000"


def test_amount_without_price_has_no_usd():
    amount = Amount.from_string("5", "stake")
    assert amount.price_usd is None


def test_amount_to_string():
    assert str(Amount.from_string("123.456", "stake")) == "123stake"


def test_denom_is_ibc_token():
    assert Denom("ibc/xxxxx").is_ibc_token()
    assert not Denom("ustake").is_ibc_token()


def test_amounts_to_string():
    amounts = [
        Amount.from_string("123.456", "stake"),
        Amount.from_string("345.678", "yield"),
    ]
    assert format_amounts(amounts) == "123stake,345yield"


def test_denoms_are_denom_instances():
    amount = Amount(value=Decimal(1), denom="ibc/abc", base_denom="ibc/abc")
    assert amount.denom.is_ibc_token()