"""The actions module, serving chain queries over HTTP."""

from __future__ import annotations

import signal
import threading
from typing import Any, Optional, Protocol

from junoindex.action_handlers import (
    account_balance_handler,
    delegation_reward_handler,
    delegator_withdraw_address_handler,
    validator_commission_amount_handler,
)
from junoindex.action_metrics import ActionMetrics
from junoindex.action_types import ActionContext
from junoindex.action_worker import ActionsWorker
from junoindex.actions_config import ActionsConfig
from junoindex.sources import Sources

MODULE_NAME = "actions"

ENDPOINTS = (
    ("/account_balance", account_balance_handler),
    ("/delegation_reward", delegation_reward_handler),
    ("/delegator_withdraw_address", delegator_withdraw_address_handler),
    ("/validator_commission_amount", validator_commission_amount_handler),
)


class _Node(Protocol):
    def latest_height(self) -> int:
        ...

    def stop(self) -> None:
        ...


class ActionsModule:
    """Runs the actions worker against a node and its data sources."""

    def __init__(
        self,
        config: Optional[ActionsConfig],
        node: _Node,
        sources: Sources,
        metrics: Optional[ActionMetrics] = None,
    ) -> None:
        self.config = config if config is not None else ActionsConfig()
        self.node = node
        self.sources = sources
        self.metrics = metrics

    def name(self) -> str:
        """Return the name of the module."""
        return MODULE_NAME

    def build_worker(self) -> ActionsWorker:
        """Return a worker with every action endpoint registered."""
        context = ActionContext(node=self.node, sources=self.sources)
        worker = ActionsWorker(context, self.metrics)
        for path, handler in ENDPOINTS:
            worker.register_handler(path, handler)
        return worker

    def run(self) -> None:
        """Serve the actions until interrupted, then stop the node."""
        worker = self.build_worker()
        previous: Any = None
        in_main = threading.current_thread() is threading.main_thread()
        if in_main:
            previous = signal.signal(signal.SIGTERM, _raise_interrupt)
        try:
            worker.start(self.config.port)
        except KeyboardInterrupt:
            pass
        finally:
            if in_main:
                signal.signal(signal.SIGTERM, previous)
            self.node.stop()


def _raise_interrupt(signum: int, frame: Any) -> None:
    raise KeyboardInterrupt