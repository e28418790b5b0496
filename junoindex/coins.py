"""Coin values and their representation inside the database."""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, localcontext
from typing import Iterable, Iterator, Optional, Union

DEC_PRECISION = 18

_DEC_QUANTUM = Decimal(1).scaleb(-DEC_PRECISION)
_INT_PATTERN = re.compile(r"[+-]?\d+")
_DEC_PATTERN = re.compile(r"-?\d+(\.\d{1,%d})?" % DEC_PRECISION)

DecimalLike = Union[Decimal, int, str]


def to_string(value: Optional[str]) -> str:
    """Return the value of a nullable string, or "" when it is null."""
    return "" if value is None else value


def to_null_string(value: str) -> Optional[str]:
    """Trim the value and turn an empty result into null."""
    value = value.strip()
    return value or None


def remove_empty(items: Iterable[str]) -> list[str]:
    """Return the given strings without the empty ones."""
    return [item for item in items if item != ""]


def format_dec(value: DecimalLike) -> str:
    """Render a decimal with the fixed precision used for chain decimals."""
    try:
        dec = value if isinstance(value, Decimal) else Decimal(value)
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"invalid decimal value: {value!r}") from exc
    if not dec.is_finite():
        raise ValueError(f"invalid decimal value: {value!r}")
    with localcontext() as ctx:
        ctx.prec = 200
        quantized = dec.quantize(_DEC_QUANTUM)
        if quantized == 0:
            quantized = abs(quantized)
    return f"{quantized:f}"


def _parse_int_amount(amount: str) -> int:
    if not _INT_PATTERN.fullmatch(amount):
        raise ValueError(f"invalid integer amount: {amount!r}")
    return int(amount)


def _parse_dec_amount(amount: str) -> Decimal:
    if not _DEC_PATTERN.fullmatch(amount):
        raise ValueError(f"invalid decimal amount: {amount!r}")
    return Decimal(amount)


def _strip_markup(src: Union[bytes, bytearray, str], *, separate_groups: bool) -> str:
    text = bytes(src).decode() if isinstance(src, (bytes, bytearray)) else str(src)
    for char in '"{}':
        text = text.replace(char, "")
    if separate_groups:
        text = text.replace("),(", ") (")
    return text.replace("(", "").replace(")", "")


def _split_pair(text: str) -> tuple[str, str]:
    parts = text.split(",")
    if len(parts) < 2:
        raise ValueError(f"invalid coin value: {text!r}")
    return parts[0], parts[1]


@dataclass(frozen=True)
class Coin:
    """An integer amount of a single denomination."""

    denom: str
    amount: int

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError(f"negative coin amount: {self.amount}")


@dataclass(frozen=True)
class DecCoin:
    """A decimal amount of a single denomination."""

    denom: str
    amount: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", Decimal(self.amount))
        if not self.amount.is_finite():
            raise ValueError(f"invalid coin amount: {self.amount}")
        if self.amount < 0:
            raise ValueError(f"negative coin amount: {self.amount}")


@dataclass(frozen=True)
class DbCoin:
    """A coin as it is stored inside the database."""

    denom: str
    amount: str

    @classmethod
    def from_coin(cls, coin: Coin) -> "DbCoin":
        return cls(denom=coin.denom, amount=str(coin.amount))

    def sql_value(self) -> str:
        """Return the composite literal used to store the coin."""
        return f"({self.denom},{self.amount})"

    @classmethod
    def parse(cls, src: Union[bytes, str]) -> "DbCoin":
        """Read a coin from its stored composite representation."""
        denom, amount = _split_pair(_strip_markup(src, separate_groups=False))
        return cls(denom=denom, amount=amount)

    def to_coin(self) -> Coin:
        return Coin(denom=self.denom, amount=_parse_int_amount(self.amount))


@dataclass(frozen=True)
class DbCoins:
    """An ordered list of stored coins."""

    coins: tuple[DbCoin, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "coins", tuple(self.coins))

    def __iter__(self) -> Iterator[DbCoin]:
        return iter(self.coins)

    def __len__(self) -> int:
        return len(self.coins)

    def __getitem__(self, index: int) -> DbCoin:
        return self.coins[index]

    @classmethod
    def from_coins(cls, coins: Iterable[Coin]) -> "DbCoins":
        return cls(DbCoin.from_coin(coin) for coin in coins)

    @classmethod
    def parse(cls, src: Union[bytes, str]) -> "DbCoins":
        """Read coins from their stored array representation."""
        text = _strip_markup(src, separate_groups=True)
        coins = []
        for value in remove_empty(text.split(" ")):
            denom, amount = _split_pair(value)
            coins.append(DbCoin(denom=denom, amount=amount))
        return cls(coins)

    def to_coins(self) -> list[Coin]:
        return [coin.to_coin() for coin in self.coins]


@dataclass(frozen=True)
class DbDecCoin:
    """A decimal coin as it is stored inside the database."""

    denom: str
    amount: str

    @classmethod
    def from_dec_coin(cls, coin: DecCoin) -> "DbDecCoin":
        return cls(denom=coin.denom, amount=format_dec(coin.amount))

    def sql_value(self) -> str:
        """Return the composite literal used to store the coin."""
        return f"({self.denom},{self.amount})"

    @classmethod
    def parse(cls, src: Union[bytes, str]) -> "DbDecCoin":
        """Read a decimal coin from its stored composite representation."""
        denom, amount = _split_pair(_strip_markup(src, separate_groups=False))
        return cls(denom=denom, amount=amount)

    def to_dec_coin(self) -> DecCoin:
        return DecCoin(denom=self.denom, amount=_parse_dec_amount(self.amount))


@dataclass(frozen=True)
class DbDecCoins:
    """An ordered list of stored decimal coins."""

    coins: tuple[DbDecCoin, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "coins", tuple(self.coins))

    def __iter__(self) -> Iterator[DbDecCoin]:
        return iter(self.coins)

    def __len__(self) -> int:
        return len(self.coins)

    def __getitem__(self, index: int) -> DbDecCoin:
        return self.coins[index]

    @classmethod
    def from_dec_coins(cls, coins: Iterable[DecCoin]) -> "DbDecCoins":
        return cls(DbDecCoin.from_dec_coin(coin) for coin in coins)

    @classmethod
    def parse(cls, src: Union[bytes, str]) -> "DbDecCoins":
        """Read decimal coins from their stored array representation."""
        text = _strip_markup(src, separate_groups=True)
        coins = []
        for value in remove_empty(text.split(" ")):
            denom, amount = _split_pair(value)
            coins.append(DbDecCoin(denom=denom, amount=amount))
        return cls(coins)

    def to_dec_coins(self) -> list[DecCoin]:
        return [coin.to_dec_coin() for coin in self.coins]