"""Payloads, responses and the context of the actions."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Protocol, Union

from junoindex.coins import Coin, DecCoin, format_dec
from junoindex.sources import Sources

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_UINT64_MAX = 2**64 - 1


def _int_field(raw: Mapping[str, Any], key: str, low: int, high: int) -> int:
    value = raw.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"invalid value for {key}: {value!r}")
    if not low <= value <= high:
        raise ValueError(f"value for {key} out of range: {value}")
    return value


def _parse_args(raw: Any) -> "PayloadArgs":
    if raw is None:
        return PayloadArgs()
    if not isinstance(raw, Mapping):
        raise ValueError("invalid payload input: not an object")
    address = raw.get("address")
    if address is None:
        address = ""
    elif not isinstance(address, str):
        raise ValueError(f"invalid value for address: {address!r}")
    count_total = raw.get("count_total")
    if count_total is None:
        count_total = False
    elif not isinstance(count_total, bool):
        raise ValueError(f"invalid value for count_total: {count_total!r}")
    return PayloadArgs(
        address=address,
        height=_int_field(raw, "height", _INT64_MIN, _INT64_MAX),
        offset=_int_field(raw, "offset", 0, _UINT64_MAX),
        limit=_int_field(raw, "limit", 0, _UINT64_MAX),
        count_total=count_total,
    )


@dataclass(frozen=True)
class PayloadArgs:
    """The input arguments of an action."""

    address: str = ""
    height: int = 0
    offset: int = 0
    limit: int = 0
    count_total: bool = False


@dataclass(frozen=True)
class PageRequest:
    """The pagination asked for by an action."""

    offset: int = 0
    limit: int = 0
    count_total: bool = False


@dataclass
class Payload:
    """The data sent along with an action request."""

    session_variables: dict[str, Any] = field(default_factory=dict)
    input: PayloadArgs = field(default_factory=PayloadArgs)

    @classmethod
    def from_json(cls, data: Union[bytes, str, Mapping[str, Any], None]) -> "Payload":
        """Read a payload from a JSON document, raising ValueError when it is invalid."""
        if isinstance(data, (bytes, bytearray)):
            data = bytes(data).decode("utf-8")
        raw = json.loads(data) if isinstance(data, str) else data
        if raw is None:
            return cls()
        if not isinstance(raw, Mapping):
            raise ValueError("invalid payload: not an object")
        variables = raw.get("session_variables")
        if variables is None:
            variables = {}
        elif not isinstance(variables, Mapping):
            raise ValueError("invalid payload: session variables are not an object")
        return cls(session_variables=dict(variables), input=_parse_args(raw.get("input")))

    @property
    def address(self) -> str:
        """The address the action is about, or "" when there is none."""
        return self.input.address

    def pagination(self) -> PageRequest:
        """Return the pagination asked for by this payload."""
        return PageRequest(
            offset=self.input.offset,
            limit=self.input.limit,
            count_total=self.input.count_total,
        )


@dataclass(frozen=True)
class ResponseCoin:
    """A coin as it is returned by an action."""

    amount: str
    denom: str


def convert_coins(coins: Iterable[Coin]) -> list[ResponseCoin]:
    """Turn integer coins into their response form."""
    return [ResponseCoin(amount=str(coin.amount), denom=coin.denom) for coin in coins]


def convert_dec_coins(coins: Iterable[DecCoin]) -> list[ResponseCoin]:
    """Turn decimal coins into their response form."""
    return [ResponseCoin(amount=format_dec(coin.amount), denom=coin.denom) for coin in coins]


@dataclass(frozen=True)
class Address:
    """An address returned by an action."""

    address: str


@dataclass(frozen=True)
class Balance:
    """A list of coins returned by an action."""

    coins: list[ResponseCoin]


@dataclass(frozen=True)
class DelegationReward:
    """The rewards earned from a single validator."""

    coins: list[ResponseCoin]
    validator_address: str


@dataclass(frozen=True)
class ValidatorCommissionAmount:
    """The commission accumulated by a validator."""

    coins: list[ResponseCoin]


@dataclass(frozen=True)
class GraphQLError:
    """The body returned when an action fails."""

    message: str


class _Node(Protocol):
    def latest_height(self) -> int:
        ...


@dataclass
class ActionContext:
    """The node and data sources available to the action handlers."""

    node: _Node
    sources: Optional[Sources] = None

    def get_height(self, payload: Optional[Payload]) -> int:
        """Return the payload height, or the latest chain height when none is given."""
        if payload is None or payload.input.height == 0:
            try:
                return self.node.latest_height()
            except Exception as exc:
                raise RuntimeError(
                    f"error while getting chain latest block height: {exc}"
                ) from exc
        return payload.input.height