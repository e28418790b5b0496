import json
import threading
import urllib.request

import pytest

from junoindex.action_metrics import ActionMetrics
from junoindex.action_types import ActionContext, Address, Balance, ResponseCoin
from junoindex.action_worker import ActionsWorker


class FakeNode:
    def latest_height(self):
        return 42


@pytest.fixture
def worker():
    return ActionsWorker(ActionContext(node=FakeNode()), ActionMetrics())


def test_successful_action(worker):
    worker.register_handler("/address", lambda ctx, payload: Address(payload.address))
    reply = worker.handle("/address", b'{"input": {"address": "cosmos1abc"}}')
    assert reply.status == 200
    assert reply.content_type == "application/json"
    assert json.loads(reply.body) == {"address": "cosmos1abc"}
    assert worker.metrics.requests[("/address", "200")] == 1
    assert sum(h.count for h in worker.metrics.response_times.values()) == 1


def test_handler_receives_context_height(worker):
    def handler(ctx, payload):
        return Balance([ResponseCoin(amount=str(ctx.get_height(payload)), denom="stake")])

    worker.register_handler("/balance", handler)
    reply = worker.handle("/balance", b'{"input": {}}')
    assert json.loads(reply.body) == {"coins": [{"amount": "42", "denom": "stake"}]}


def test_body_is_compact_json(worker):
    worker.register_handler("/address", lambda ctx, payload: Address("a"))
    assert worker.handle("/address", b"{}").body == b'{"address":"a"}'


def test_html_characters_are_escaped(worker):
    worker.register_handler("/address", lambda ctx, payload: Address("<a&b>"))
    body = worker.handle("/address", b"{}").body
    assert b"<" not in body and b"&" not in body
    assert json.loads(body) == {"address": "<a&b>"}


def test_handler_error_gives_message(worker):
    def failing(ctx, payload):
        raise RuntimeError("error while getting account balance: offline")

    worker.register_handler("/fail", failing)
    reply = worker.handle("/fail", b"{}")
    assert reply.status == 400
    assert json.loads(reply.body) == {"message": "error while getting account balance: offline"}
    assert worker.metrics.errors[("/fail", "500")] == 1
    assert sum(worker.metrics.requests.values()) == 0


def test_unserialisable_result_is_an_error(worker):
    worker.register_handler("/odd", lambda ctx, payload: object())
    reply = worker.handle("/odd", b"{}")
    assert reply.status == 400
    assert "message" in json.loads(reply.body)
    assert worker.metrics.errors[("/odd", "500")] == 1


def test_invalid_payload(worker):
    worker.register_handler("/address", lambda ctx, payload: Address("a"))
    reply = worker.handle("/address", b"{not json")
    assert reply.status == 500
    assert reply.body == b"invalid payload: failed to unmarshal json\n"


def test_unknown_path(worker):
    reply = worker.handle("/missing", b"{}")
    assert reply.status == 404


def test_duplicate_registration_raises(worker):
    worker.register_handler("/address", lambda ctx, payload: None)
    with pytest.raises(ValueError):
        worker.register_handler("/address", lambda ctx, payload: None)


def test_server_answers_over_http(worker):
    worker.register_handler("/address", lambda ctx, payload: Address(payload.address))
    server = worker._make_server(0)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        port = server.server_address[1]
        request = urllib.request.Request(
            f"http://localhost:{port}/address",
            data=b'{"input": {"address": "cosmos1xyz"}}',
            method="POST",
        )
        with urllib.request.urlopen(request, timeout=5) as response:
            assert response.status == 200
            assert json.loads(response.read()) == {"address": "cosmos1xyz"}
    finally:
        server.shutdown()
        server.server_close()


def test_start_rejects_invalid_port(worker):
    with pytest.raises(ValueError):
        worker.start(70000)