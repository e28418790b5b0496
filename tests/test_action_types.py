import json
from decimal import Decimal

import pytest

from junoindex.action_types import (
    ActionContext,
    PageRequest,
    Payload,
    PayloadArgs,
    ResponseCoin,
    convert_coins,
    convert_dec_coins,
)
from junoindex.coins import Coin, DecCoin


class FakeNode:
    def __init__(self, height=None, error=None):
        self.height = height
        self.error = error
        self.calls = 0

    def latest_height(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.height


def test_from_json_reads_input():
    body = json.dumps(
        {
            "session_variables": {"x-hasura-role": "admin"},
            "input": {
                "address": "cosmos1abc",
                "height": 10,
                "offset": 2,
                "limit": 5,
                "count_total": True,
            },
        }
    )
    payload = Payload.from_json(body)
    assert payload.session_variables == {"x-hasura-role": "admin"}
    assert payload.input == PayloadArgs("cosmos1abc", 10, 2, 5, True)
    assert payload.address == "cosmos1abc"


def test_from_json_accepts_bytes_and_defaults():
    payload = Payload.from_json(b"{}")
    assert payload.input == PayloadArgs()
    assert payload.session_variables == {}


def test_from_json_ignores_unknown_fields():
    payload = Payload.from_json('{"action": {"name": "x"}, "input": {"address": "a"}}')
    assert payload.address == "a"


def test_pagination_round_trip():
    payload = Payload(input=PayloadArgs(address="a", offset=3, limit=7, count_total=True))
    assert payload.pagination() == PageRequest(offset=3, limit=7, count_total=True)


@pytest.mark.parametrize(
    "body",
    [
        "not json",
        "[1, 2]",
        '{"input": {"height": "10"}}',
        '{"input": {"height": 1.0}}',
        '{"input": {"offset": -1}}',
        '{"input": {"address": 12}}',
        '{"input": {"count_total": "yes"}}',
        '{"session_variables": [1]}',
    ],
)
def test_from_json_rejects_invalid(body):
    with pytest.raises(ValueError):
        Payload.from_json(body)


def test_convert_coins():
    assert convert_coins([Coin("stake", 12), Coin("atom", 0)]) == [
        ResponseCoin(amount="12", denom="stake"),
        ResponseCoin(amount="0", denom="atom"),
    ]


def test_convert_dec_coins_uses_fixed_precision():
    assert convert_dec_coins([DecCoin("stake", Decimal("1.5"))]) == [
        ResponseCoin(amount="1.500000000000000000", denom="stake")
    ]


def test_convert_empty_gives_empty_list():
    assert convert_coins([]) == []
    assert convert_dec_coins([]) == []


def test_get_height_uses_payload_height():
    node = FakeNode(height=99)
    context = ActionContext(node=node)
    assert context.get_height(Payload(input=PayloadArgs(height=5))) == 5
    assert node.calls == 0


@pytest.mark.parametrize("payload", [None, Payload()])
def test_get_height_falls_back_to_latest(payload):
    context = ActionContext(node=FakeNode(height=99))
    assert context.get_height(payload) == 99


def test_get_height_wraps_node_errors():
    context = ActionContext(node=FakeNode(error=ConnectionError("offline")))
    with pytest.raises(RuntimeError, match="error while getting chain latest block height"):
        context.get_height(None)