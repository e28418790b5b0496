"""Rows of the account, module, supply, distribution, mint and staking tables."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from junoindex.coins import DbCoins, DbDecCoins


@dataclass(frozen=True)
class AccountRow:
    """A single row of the account table."""

    address: str


@dataclass(frozen=True)
class ModuleRow:
    """A single row of the modules table."""

    module: str


def module_rows(names: Iterable[str]) -> list[ModuleRow]:
    """Build one module row for each given module name."""
    return [ModuleRow(module=name) for name in names]


@dataclass(frozen=True)
class SupplyRow:
    """A single row of the supply table."""

    coins: DbCoins
    height: int
    one_row_id: bool = field(default=True, compare=False)


@dataclass(frozen=True)
class CommunityPoolRow:
    """A single row of the community_pool table."""

    coins: DbDecCoins
    height: int
    one_row_id: bool = field(default=True, compare=False)


@dataclass(frozen=True)
class DistributionParamsRow:
    """A single row of the distribution_params table."""

    params: str
    height: int
    one_row_id: bool = True


@dataclass(frozen=True)
class InflationRow:
    """A single row of the inflation table."""

    value: float
    height: int
    one_row_id: bool = field(default=True, compare=False)


@dataclass(frozen=True)
class MintParamsRow:
    """A single row of the mint_params table."""

    params: str
    height: int
    one_row_id: bool = field(default=True, compare=False)


@dataclass(frozen=True)
class StakingPoolRow:
    """A single row of the staking_pool table."""

    bonded_tokens: int
    not_bonded_tokens: int
    height: int
    one_row_id: bool = field(default=True, compare=False)


@dataclass(frozen=True)
class StakingParamsRow:
    """A single row of the staking_params table."""

    params: str
    height: int
    one_row_id: bool = True


@dataclass(frozen=True)
class FeeAllowanceRow:
    """A single row of the fee_grant_allowance table."""

    id: int
    grantee: str
    granter: str
    allowance: str
    height: int