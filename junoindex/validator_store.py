"""Storage of validators, their descriptions, commissions, powers and statuses."""

from __future__ import annotations

import os
import sqlite3
from dataclasses import dataclass, fields, replace
from decimal import Decimal
from typing import Iterable, Optional, Sequence, Union

from junoindex.coins import format_dec, to_null_string, to_string
from junoindex.validator_rows import ValidatorData

DO_NOT_MODIFY_DESC = "[do-not-modify]"

MAX_MONIKER_LENGTH = 70
MAX_IDENTITY_LENGTH = 3000
MAX_WEBSITE_LENGTH = 140
MAX_SECURITY_CONTACT_LENGTH = 140
MAX_DETAILS_LENGTH = 280

_LENGTH_LIMITS = {
    "moniker": MAX_MONIKER_LENGTH,
    "identity": MAX_IDENTITY_LENGTH,
    "website": MAX_WEBSITE_LENGTH,
    "security_contact": MAX_SECURITY_CONTACT_LENGTH,
    "details": MAX_DETAILS_LENGTH,
}

_SCHEMA = """
CREATE TABLE IF NOT EXISTS account (
    address TEXT NOT NULL PRIMARY KEY
);
CREATE TABLE IF NOT EXISTS validator (
    consensus_address TEXT NOT NULL PRIMARY KEY,
    consensus_pubkey  TEXT NOT NULL UNIQUE
);
CREATE TABLE IF NOT EXISTS validator_info (
    consensus_address     TEXT NOT NULL UNIQUE PRIMARY KEY,
    operator_address      TEXT NOT NULL UNIQUE,
    self_delegate_address TEXT,
    max_change_rate       TEXT NOT NULL,
    max_rate              TEXT NOT NULL,
    height                INTEGER NOT NULL
);
CREATE TABLE IF NOT EXISTS validator_description (
    validator_address TEXT NOT NULL PRIMARY KEY,
    moniker           TEXT,
    identity          TEXT,
    avatar_url        TEXT,
    website           TEXT,
    security_contact  TEXT,
    details           TEXT,
    height            INTEGER NOT NULL
);
CREATE TABLE IF NOT EXISTS validator_commission (
    validator_address   TEXT NOT NULL PRIMARY KEY,
    commission          TEXT,
    min_self_delegation TEXT,
    height              INTEGER NOT NULL
);
CREATE TABLE IF NOT EXISTS validator_voting_power (
    validator_address TEXT NOT NULL PRIMARY KEY,
    voting_power      INTEGER NOT NULL,
    height            INTEGER NOT NULL
);
CREATE TABLE IF NOT EXISTS validator_status (
    validator_address TEXT NOT NULL PRIMARY KEY,
    status            INTEGER NOT NULL,
    jailed            BOOLEAN NOT NULL,
    tombstoned        BOOLEAN NOT NULL DEFAULT FALSE,
    height            INTEGER NOT NULL
);
CREATE TABLE IF NOT EXISTS double_sign_vote (
    id                INTEGER PRIMARY KEY AUTOINCREMENT,
    type              INTEGER NOT NULL,
    height            INTEGER NOT NULL,
    round             INTEGER NOT NULL,
    block_id          TEXT NOT NULL,
    validator_address TEXT NOT NULL,
    validator_index   INTEGER NOT NULL,
    signature         TEXT NOT NULL,
    UNIQUE (block_id, validator_address)
);
CREATE TABLE IF NOT EXISTS double_sign_evidence (
    height    INTEGER NOT NULL,
    vote_a_id INTEGER NOT NULL,
    vote_b_id INTEGER NOT NULL,
    UNIQUE (vote_a_id, vote_b_id)
);
CREATE TABLE IF NOT EXISTS modules (
    module_name TEXT NOT NULL UNIQUE PRIMARY KEY
);
"""


class StoreError(Exception):
    """Raised when data cannot be stored or found."""


@dataclass(frozen=True)
class Description:
    """The public description of a validator."""

    moniker: str
    identity: str = ""
    website: str = ""
    security_contact: str = ""
    details: str = ""

    def ensure_length(self) -> "Description":
        """Return the description, raising ValueError if a field is too long."""
        for name, limit in _LENGTH_LIMITS.items():
            length = len(getattr(self, name).encode())
            if length > limit:
                raise ValueError(f"invalid {name} length; got: {length}, max: {limit}")
        return self

    def update(self, other: "Description") -> "Description":
        """Return this description with the fields of other that are to be modified."""
        changes = {
            f.name: getattr(other, f.name)
            for f in fields(self)
            if getattr(other, f.name) != DO_NOT_MODIFY_DESC
        }
        return replace(self, **changes).ensure_length()


@dataclass(frozen=True)
class ValidatorDescription:
    """A validator description together with its operator and height."""

    operator_address: str
    description: Description
    avatar_url: str
    height: int


@dataclass(frozen=True)
class ValidatorCommission:
    """A change of a validator's commission and minimum self delegation."""

    val_address: str
    commission: Optional[Decimal]
    min_self_delegation: Optional[int]
    height: int


@dataclass(frozen=True)
class ValidatorVotingPower:
    """The voting power of a validator at a height."""

    consensus_address: str
    voting_power: int
    height: int


@dataclass(frozen=True)
class ValidatorStatus:
    """The status, jail and tombstone state of a validator at a height."""

    consensus_address: str
    consensus_pub_key: str
    status: int
    jailed: bool
    tombstoned: bool
    height: int


@dataclass(frozen=True)
class DoubleSignVote:
    """One of the two votes that make up a double sign evidence."""

    type: int
    height: int
    round: int
    block_id: str
    validator_address: str
    validator_index: int
    signature: str


@dataclass(frozen=True)
class DoubleSignEvidence:
    """Evidence that a validator signed two different blocks."""

    height: int
    vote_a: DoubleSignVote
    vote_b: DoubleSignVote


class ValidatorStore:
    """Validator tables kept inside an SQLite database."""

    def __init__(self, database: Union[sqlite3.Connection, str, os.PathLike] = ":memory:") -> None:
        if isinstance(database, sqlite3.Connection):
            self.connection = database
        else:
            self.connection = sqlite3.connect(database)

    def create_schema(self) -> None:
        """Create the tables used by the store, if they are missing."""
        try:
            self.connection.executescript(_SCHEMA)
        except sqlite3.Error as exc:
            raise StoreError(f"error while creating schema: {exc}") from exc

    # ------------------------------------------------------------------ helpers

    def _fetch(self, stmt: str, params: Sequence = ()) -> list[tuple]:
        try:
            return self.connection.execute(stmt, params).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc

    def _write(self, message: str, stmt: str, rows: Iterable[Sequence]) -> None:
        try:
            with self.connection:
                self.connection.executemany(stmt, list(rows))
        except sqlite3.Error as exc:
            raise StoreError(f"{message}: {exc}") from exc

    # --------------------------------------------------------------- validators

    def save_validator_data(self, validator: ValidatorData) -> None:
        """Store the information about a single validator."""
        self.save_validators_data([validator])

    def save_validators_data(self, validators: Sequence[ValidatorData]) -> None:
        """Store the information about the given validators."""
        if not validators:
            return

        self._write(
            "error while storing accounts",
            "INSERT INTO account (address) VALUES (?) ON CONFLICT DO NOTHING",
            [(v.self_delegate_address,) for v in validators],
        )
        self._write(
            "error while storing validators",
            "INSERT INTO validator (consensus_address, consensus_pubkey) VALUES (?, ?) "
            "ON CONFLICT DO NOTHING",
            [(v.cons_address, v.cons_pub_key) for v in validators],
        )
        self._write(
            "error while storing validator infos",
            """
INSERT INTO validator_info
    (consensus_address, operator_address, self_delegate_address, max_change_rate, max_rate, height)
VALUES (?, ?, ?, ?, ?, ?)
ON CONFLICT (consensus_address) DO UPDATE
    SET consensus_address = excluded.consensus_address,
        operator_address = excluded.operator_address,
        self_delegate_address = excluded.self_delegate_address,
        max_change_rate = excluded.max_change_rate,
        max_rate = excluded.max_rate,
        height = excluded.height
WHERE validator_info.height <= excluded.height""",
            [
                (
                    v.cons_address,
                    v.operator,
                    v.self_delegate_address,
                    format_dec(v.max_change_rate_decimal()),
                    format_dec(v.max_rate_decimal()),
                    v.height,
                )
                for v in validators
            ],
        )

    def get_validator_consensus_address(self, address: str) -> str:
        """Return the consensus address of the validator with the given operator address."""
        rows = self._fetch(
            "SELECT consensus_address FROM validator_info WHERE operator_address = ?", (address,)
        )
        if not rows:
            raise StoreError(
                f"cannot find the consensus address of validator having operator address {address}"
            )
        return rows[0][0]

    def get_validator_operator_address(self, cons_addr: str) -> str:
        """Return the operator address of the validator with the given consensus address."""
        rows = self._fetch(
            "SELECT operator_address FROM validator_info WHERE consensus_address = ?", (cons_addr,)
        )
        if not rows:
            raise StoreError(
                f"cannot find the operator address of validator having consensus address {cons_addr}"
            )
        return rows[0][0]

    def _get_validator_where(self, column: str, value: str) -> Optional[ValidatorData]:
        rows = self._fetch(
            f"""
SELECT validator.consensus_address,
       validator_info.operator_address,
       validator.consensus_pubkey,
       validator_info.self_delegate_address,
       validator_info.max_rate,
       validator_info.max_change_rate
FROM validator INNER JOIN validator_info
    ON validator.consensus_address = validator_info.consensus_address
WHERE validator_info.{column} = ?""",
            (value,),
        )
        if not rows:
            return None
        cons, oper, pubkey, self_delegate, max_rate, max_change_rate = rows[0]
        return ValidatorData(
            cons_address=cons,
            val_address=oper,
            cons_pub_key=pubkey,
            self_delegate_address=to_string(self_delegate),
            max_rate=max_rate,
            max_change_rate=max_change_rate,
            height=0,
        )

    def get_validator(self, val_address: str) -> ValidatorData:
        """Return the validator with the given operator address."""
        validator = self._get_validator_where("operator_address", val_address)
        if validator is None:
            raise StoreError(f"no validator with validator address {val_address} could be found")
        return validator

    def get_validators(self) -> list[ValidatorData]:
        """Return all stored validators ordered by consensus address."""
        rows = self._fetch(
            """
SELECT validator.consensus_address,
       validator_info.operator_address,
       validator.consensus_pubkey,
       validator_info.self_delegate_address,
       validator_info.max_rate,
       validator_info.max_change_rate,
       validator_info.height
FROM validator INNER JOIN validator_info
    ON validator.consensus_address = validator_info.consensus_address
ORDER BY validator.consensus_address"""
        )
        return [
            ValidatorData(
                cons_address=cons,
                val_address=oper,
                cons_pub_key=pubkey,
                self_delegate_address=to_string(self_delegate),
                max_rate=max_rate,
                max_change_rate=max_change_rate,
                height=height,
            )
            for cons, oper, pubkey, self_delegate, max_rate, max_change_rate, height in rows
        ]

    def get_validator_by_self_delegate_address(self, address: str) -> ValidatorData:
        """Return the validator whose self delegate address is the given one."""
        validator = self._get_validator_where("self_delegate_address", address)
        if validator is None:
            raise StoreError(f"no validator with self delegate address {address} could be found")
        return validator

    # -------------------------------------------------------------- description

    def save_validator_description(self, description: ValidatorDescription) -> None:
        """Store a validator description, merging it with the one already stored."""
        cons_addr = self.get_validator_consensus_address(description.operator_address)
        des = description.description.ensure_length()

        avatar_url = description.avatar_url
        existing = self._get_validator_description(cons_addr)
        if existing is not None:
            des = existing.description.update(des)
            if description.avatar_url == DO_NOT_MODIFY_DESC:
                avatar_url = existing.avatar_url

        self._write(
            "error while storing validator description",
            """
INSERT INTO validator_description (
    validator_address, moniker, identity, avatar_url, website, security_contact, details, height
)
VALUES (?, ?, ?, ?, ?, ?, ?, ?)
ON CONFLICT (validator_address) DO UPDATE
    SET moniker = excluded.moniker,
        identity = excluded.identity,
        avatar_url = excluded.avatar_url,
        website = excluded.website,
        security_contact = excluded.security_contact,
        details = excluded.details,
        height = excluded.height
WHERE validator_description.height <= excluded.height""",
            [
                (
                    to_null_string(cons_addr),
                    to_null_string(des.moniker),
                    to_null_string(des.identity),
                    to_null_string(avatar_url),
                    to_null_string(des.website),
                    to_null_string(des.security_contact),
                    to_null_string(des.details),
                    description.height,
                )
            ],
        )

    def _get_validator_description(self, address: str) -> Optional[ValidatorDescription]:
        try:
            rows = self._fetch(
                """
SELECT validator_address, moniker, identity, avatar_url, website, security_contact, details, height
FROM validator_description WHERE validator_address = ?""",
                (address,),
            )
        except StoreError:
            return None
        if not rows:
            return None
        val_address, moniker, identity, avatar, website, contact, details, height = rows[0]
        return ValidatorDescription(
            operator_address=val_address,
            description=Description(
                moniker=to_string(moniker),
                identity=to_string(identity),
                website=to_string(website),
                security_contact=to_string(contact),
                details=to_string(details),
            ),
            avatar_url=to_string(avatar),
            height=height,
        )

    # --------------------------------------------------------------- commission

    def save_validator_commission(self, data: ValidatorCommission) -> None:
        """Store a validator commission, keeping stored values that are not given."""
        if data.min_self_delegation is None and data.commission is None:
            return

        cons_addr = self.get_validator_consensus_address(data.val_address)

        commission = ""
        min_self_delegation = ""
        existing = self._get_validator_commission(cons_addr)
        if existing is not None:
            stored_commission, stored_min = existing
            if stored_commission is not None:
                commission = stored_commission
            if stored_min is not None:
                min_self_delegation = stored_min

        if data.commission is not None:
            commission = format_dec(data.commission)
        if data.min_self_delegation is not None:
            min_self_delegation = str(data.min_self_delegation)

        self._write(
            "error while storing validator commission",
            """
INSERT INTO validator_commission (validator_address, commission, min_self_delegation, height)
VALUES (?, ?, ?, ?)
ON CONFLICT (validator_address) DO UPDATE
    SET commission = excluded.commission,
        min_self_delegation = excluded.min_self_delegation,
        height = excluded.height
WHERE validator_commission.height <= excluded.height""",
            [(cons_addr, commission, min_self_delegation, data.height)],
        )

    def _get_validator_commission(
        self, address: str
    ) -> Optional[tuple[Optional[str], Optional[str]]]:
        try:
            rows = self._fetch(
                "SELECT commission, min_self_delegation FROM validator_commission "
                "WHERE validator_address = ?",
                (address,),
            )
        except StoreError:
            return None
        return rows[0] if rows else None

    # ------------------------------------------------------ powers and statuses

    def save_validators_voting_powers(self, entries: Sequence[ValidatorVotingPower]) -> None:
        """Store the given voting powers, keeping those stored at a higher height."""
        if not entries:
            return
        self._write(
            "error while storing validators voting power",
            """
INSERT INTO validator_voting_power (validator_address, voting_power, height)
VALUES (?, ?, ?)
ON CONFLICT (validator_address) DO UPDATE
    SET voting_power = excluded.voting_power,
        height = excluded.height
WHERE validator_voting_power.height <= excluded.height""",
            [(e.consensus_address, e.voting_power, e.height) for e in entries],
        )

    def save_validators_statuses(self, statuses: Sequence[ValidatorStatus]) -> None:
        """Store the given statuses, keeping those stored at a higher height."""
        if not statuses:
            return
        self._write(
            "error while storing validators",
            "INSERT INTO validator (consensus_address, consensus_pubkey) VALUES (?, ?) "
            "ON CONFLICT DO NOTHING",
            [(s.consensus_address, s.consensus_pub_key) for s in statuses],
        )
        self._write(
            "error while storing validators statuses",
            """
INSERT INTO validator_status (validator_address, status, jailed, tombstoned, height)
VALUES (?, ?, ?, ?, ?)
ON CONFLICT (validator_address) DO UPDATE
    SET status = excluded.status,
        jailed = excluded.jailed,
        tombstoned = excluded.tombstoned,
        height = excluded.height
WHERE validator_status.height <= excluded.height""",
            [
                (s.consensus_address, s.status, s.jailed, s.tombstoned, s.height)
                for s in statuses
            ],
        )

    # ------------------------------------------------------------- double signs

    def _save_double_sign_vote(self, vote: DoubleSignVote) -> int:
        try:
            with self.connection:
                cursor = self.connection.execute(
                    """
INSERT INTO double_sign_vote
    (type, height, round, block_id, validator_address, validator_index, signature)
VALUES (?, ?, ?, ?, ?, ?, ?) ON CONFLICT DO NOTHING""",
                    (
                        vote.type,
                        vote.height,
                        vote.round,
                        vote.block_id,
                        vote.validator_address,
                        vote.validator_index,
                        vote.signature,
                    ),
                )
        except sqlite3.Error as exc:
            raise StoreError(f"error while storing double sign vote: {exc}") from exc
        if cursor.rowcount == 0:
            raise StoreError("error while storing double sign vote: no rows in result set")
        return cursor.lastrowid

    def save_double_sign_evidence(self, evidence: DoubleSignEvidence) -> None:
        """Store both votes of the evidence and the evidence linking them."""
        vote_a = self._save_double_sign_vote(evidence.vote_a)
        vote_b = self._save_double_sign_vote(evidence.vote_b)
        self._write(
            "error while storing double sign evidence",
            "INSERT INTO double_sign_evidence (height, vote_a_id, vote_b_id) VALUES (?, ?, ?) "
            "ON CONFLICT DO NOTHING",
            [(evidence.height, vote_a, vote_b)],
        )

    # ------------------------------------------------------------------ modules

    def insert_enabled_modules(self, modules: Sequence[str]) -> None:
        """Replace the stored list of enabled modules with the given one."""
        if not modules:
            return
        self._write("error while deleting modules", "DELETE FROM modules WHERE TRUE", [()])
        self._write(
            "error while storing modules",
            "INSERT INTO modules (module_name) VALUES (?) ON CONFLICT DO NOTHING",
            [(name,) for name in modules],
        )