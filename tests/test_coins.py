from decimal import Decimal

import pytest

from junoindex.coins import (
    Coin,
    DbCoin,
    DbCoins,
    DbDecCoin,
    DbDecCoins,
    DecCoin,
    format_dec,
    remove_empty,
    to_null_string,
    to_string,
)


def test_to_string_handles_null():
    assert to_string(None) == ""
    assert to_string("moniker") == "moniker"


def test_to_null_string_trims_and_nulls_empty():
    assert to_null_string("  moniker ") == "moniker"
    assert to_null_string("   ") is None
    assert to_null_string("") is None


def test_remove_empty_keeps_order():
    assert remove_empty(["a", "", "b", ""]) == ["a", "b"]
    assert remove_empty([]) == []


@pytest.mark.parametrize(
    "value, expected",
    [
        (Decimal("0.011"), "0.011000000000000000"),
        (Decimal("0.05"), "0.050000000000000000"),
        (Decimal("0.70"), "0.700000000000000000"),
    ],
)
def test_format_dec_fixed_precision(value, expected):
    assert format_dec(value) == expected


def test_format_dec_rejects_invalid():
    with pytest.raises(ValueError):
        format_dec("not-a-number")
    with pytest.raises(ValueError):
        format_dec(Decimal("NaN"))


def test_coin_rejects_negative_amount():
    with pytest.raises(ValueError):
        Coin("uatom", -1)
    with pytest.raises(ValueError):
        DecCoin("uatom", Decimal("-0.5"))


def test_db_coin_parse_bytes():
    assert DbCoin.parse(b"(uatom,100)") == DbCoin("uatom", "100")


def test_db_coin_parse_rejects_missing_amount():
    with pytest.raises(ValueError):
        DbCoin.parse(b"(uatom)")


def test_db_coin_sql_value_round_trip():
    coin = DbCoin("uatom", "100")
    assert coin.sql_value() == "(uatom,100)"
    assert DbCoin.parse(coin.sql_value()) == coin


def test_db_coin_to_coin_round_trip():
    coin = Coin("stake", 12345678901234567890)
    assert DbCoin.from_coin(coin).to_coin() == coin


def test_db_coin_to_coin_rejects_bad_amount():
    with pytest.raises(ValueError):
        DbCoin("uatom", "abc").to_coin()


def test_db_coins_parse_array():
    parsed = DbCoins.parse(b'{"(uatom,100)","(stake,20)"}')
    assert parsed == DbCoins([DbCoin("uatom", "100"), DbCoin("stake", "20")])
    assert len(parsed) == 2
    assert parsed[1] == DbCoin("stake", "20")


def test_db_coins_parse_empty_array():
    assert len(DbCoins.parse(b"{}")) == 0


def test_db_coins_round_trip():
    coins = [Coin("uatom", 100), Coin("stake", 20)]
    assert DbCoins.from_coins(coins).to_coins() == coins


def test_db_coins_equality_depends_on_order():
    first = DbCoins([DbCoin("a", "1"), DbCoin("b", "2")])
    swapped = DbCoins([DbCoin("b", "2"), DbCoin("a", "1")])
    assert first == DbCoins([DbCoin("a", "1"), DbCoin("b", "2")])
    assert not first == swapped
    assert not first == None  # noqa: E711


def test_db_dec_coin_from_dec_coin_uses_dec_format():
    coin = DecCoin("uatom", Decimal("1.5"))
    stored = DbDecCoin.from_dec_coin(coin)
    assert stored.amount == format_dec(Decimal("1.5"))
    assert stored.to_dec_coin() == coin


def test_db_dec_coin_parse_and_sql_value():
    coin = DbDecCoin.parse("(uatom,0.011000000000000000)")
    assert coin == DbDecCoin("uatom", "0.011000000000000000")
    assert DbDecCoin.parse(coin.sql_value()) == coin


def test_db_dec_coin_rejects_too_many_decimals():
    with pytest.raises(ValueError):
        DbDecCoin("uatom", "0.1234567890123456789").to_dec_coin()


def test_db_dec_coins_round_trip():
    coins = [DecCoin("uatom", Decimal("0.011")), DecCoin("stake", Decimal("12"))]
    stored = DbDecCoins.from_dec_coins(coins)
    values = ",".join(f'"{coin.sql_value()}"' for coin in stored)
    parsed = DbDecCoins.parse(("{" + values + "}").encode())
    assert parsed == stored
    assert parsed.to_dec_coins() == coins