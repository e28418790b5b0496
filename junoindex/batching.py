"""Splitting of accounts into batches that fit a single statement."""

from __future__ import annotations

from typing import Sequence, TypeVar

MAX_POSTGRESQL_PARAMS = 65535

T = TypeVar("T")


def split_accounts(accounts: Sequence[T], params_number: int) -> list[list[T]]:
    """Split accounts so each batch needs at most the statement parameter limit.

    ``params_number`` is the number of parameters each account takes.
    """
    if params_number < 1:
        raise ValueError(f"invalid number of parameters per account: {params_number}")
    per_batch = MAX_POSTGRESQL_PARAMS // params_number
    if per_batch < 1:
        raise ValueError(
            f"an account taking {params_number} parameters exceeds the limit of {MAX_POSTGRESQL_PARAMS}"
        )
    items = list(accounts)
    return [items[start:start + per_batch] for start in range(0, len(items), per_batch)]