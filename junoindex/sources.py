"""Interfaces of the chain data sources queried by the actions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

from junoindex.coins import Coin, DecCoin


@dataclass(frozen=True)
class DelegationDelegatorReward:
    """The rewards a delegator earned from a single validator."""

    validator_address: str
    reward: tuple[DecCoin, ...] = ()

    def __post_init__(self) -> None:
        rewards: Iterable[DecCoin] = self.reward
        object.__setattr__(self, "reward", tuple(rewards))


class BankSource(ABC):
    """Balances and supply read from the chain."""

    @abstractmethod
    def get_balances(self, addresses: Sequence[str], height: int) -> list[Any]:
        """Return the balances of the given addresses at the given height."""

    @abstractmethod
    def get_supply(self, height: int) -> list[Coin]:
        """Return the total supply at the given height."""

    @abstractmethod
    def get_account_balance(self, address: str, height: int) -> list[Coin]:
        """Return the balance of a single address at the given height."""


class DistributionSource(ABC):
    """Rewards, commissions and community pool read from the chain."""

    @abstractmethod
    def validator_commission(self, val_oper_addr: str, height: int) -> list[DecCoin]:
        """Return the commission accumulated by a validator."""

    @abstractmethod
    def delegator_total_rewards(
        self, delegator: str, height: int
    ) -> list[DelegationDelegatorReward]:
        """Return the rewards of a delegator, one entry per validator."""

    @abstractmethod
    def delegator_withdraw_address(self, delegator: str, height: int) -> str:
        """Return the address a delegator withdraws rewards to."""

    @abstractmethod
    def community_pool(self, height: int) -> list[DecCoin]:
        """Return the coins inside the community pool."""

    @abstractmethod
    def params(self, height: int) -> Mapping[str, Any]:
        """Return the distribution parameters."""


@dataclass(frozen=True)
class Sources:
    """The data sources available to the actions."""

    bank_source: BankSource
    distr_source: DistributionSource