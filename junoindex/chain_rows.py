"""Rows of the consensus, governance, price feed and slashing tables."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from junoindex.coins import DbCoins


@dataclass(frozen=True)
class GenesisRow:
    """A single row of the genesis table."""

    chain_id: str
    time: datetime
    initial_height: int
    one_row_id: bool = field(default=True, compare=False)


@dataclass(frozen=True)
class ConsensusRow:
    """A single row of the consensus table."""

    height: int
    round: int
    step: str
    one_row_id: bool = field(default=True, compare=False)


@dataclass(frozen=True)
class AverageTimeRow:
    """The average block time over a minute, an hour, a day or since genesis."""

    average_time: float
    height: int
    one_row_id: bool = field(default=True, compare=False)


@dataclass(frozen=True)
class BlockRow:
    """A single block as it is stored inside the database."""

    height: int
    hash: str
    tx_num: int
    total_gas: int
    proposer_address: Optional[str]
    pre_commits_num: int
    timestamp: datetime


@dataclass(frozen=True)
class GovParamsRow:
    """A single row of the gov_params table."""

    deposit_params: str
    voting_params: str
    tally_params: str
    height: int
    one_row_id: bool = True


@dataclass(frozen=True)
class ProposalRow:
    """A single row of the proposal table.

    The proposal content is stored but takes no part in comparisons.
    """

    proposal_id: int
    proposal_route: str
    proposal_type: str
    title: str
    description: str
    content: str = field(compare=False)
    submit_time: datetime
    deposit_end_time: datetime
    voting_start_time: datetime
    voting_end_time: datetime
    proposer: str
    status: str


@dataclass(frozen=True)
class TallyResultRow:
    """A single row of the tally_result table."""

    proposal_id: int
    yes: str
    abstain: str
    no: str
    no_with_veto: str
    height: int


@dataclass(frozen=True)
class VoteRow:
    """A single row of the vote table."""

    proposal_id: int
    voter: str
    option: str
    height: int


@dataclass(frozen=True)
class DepositRow:
    """A single row of the deposit table."""

    proposal_id: int
    depositor: str
    amount: DbCoins
    height: int


@dataclass(frozen=True)
class ProposalStakingPoolSnapshotRow:
    """The staking pool as it was when a proposal was handled."""

    proposal_id: int
    bonded_tokens: int
    not_bonded_tokens: int
    height: int


@dataclass(frozen=True)
class ProposalValidatorVotingPowerSnapshotRow:
    """A validator's voting power as it was when a proposal was handled."""

    id: int
    proposal_id: int
    validator_address: str
    voting_power: int
    status: int
    jailed: bool
    height: int


@dataclass(frozen=True)
class TokenUnitRow:
    """A single row of the token_unit table."""

    token_name: str
    denom: str
    exponent: int
    aliases: tuple[str, ...] = ()
    price_id: Optional[str] = None

    def __post_init__(self) -> None:
        aliases: Iterable[str] = self.aliases
        object.__setattr__(self, "aliases", tuple(aliases))


@dataclass(frozen=True)
class TokenRow:
    """A single row of the token table."""

    name: str
    traded_unit: str


@dataclass(frozen=True)
class TokenPriceRow:
    """A single row of the token_price table.

    The row id is assigned by the database and takes no part in comparisons.
    """

    name: str
    price: float
    market_cap: int
    timestamp: datetime
    id: str = field(default="", compare=False)


@dataclass(frozen=True)
class ValidatorSigningInfoRow:
    """A single row of the validator_signing_info table."""

    validator_address: str
    start_height: int
    index_offset: int
    jailed_until: datetime
    tombstoned: bool
    missed_blocks_counter: int
    height: int


@dataclass(frozen=True)
class SlashingParamsRow:
    """A single row of the slashing_params table."""

    params: str
    height: int
    one_row_id: bool = True