"""Handlers of the bank and distribution actions."""

from __future__ import annotations

import logging

from junoindex.action_types import (
    ActionContext,
    Address,
    Balance,
    DelegationReward,
    Payload,
    ValidatorCommissionAmount,
    convert_coins,
    convert_dec_coins,
)
from junoindex.sources import Sources

log = logging.getLogger(__name__)


def _sources(ctx: ActionContext) -> Sources:
    if ctx.sources is None:
        raise RuntimeError("no data sources are available to the actions")
    return ctx.sources


def account_balance_handler(ctx: ActionContext, payload: Payload) -> Balance:
    """Return the balance of the payload address at the requested height."""
    log.debug(
        "executing account balance action for %s at height %d",
        payload.address,
        payload.input.height,
    )
    height = ctx.get_height(payload)
    try:
        balance = _sources(ctx).bank_source.get_account_balance(payload.address, height)
    except Exception as exc:
        raise RuntimeError(f"error while getting account balance: {exc}") from exc
    return Balance(coins=convert_coins(balance))


def delegation_reward_handler(ctx: ActionContext, payload: Payload) -> list[DelegationReward]:
    """Return the rewards of the payload delegator, one entry per validator."""
    log.debug(
        "executing delegation rewards action for %s at height %d",
        payload.address,
        payload.input.height,
    )
    height = ctx.get_height(payload)
    try:
        rewards = _sources(ctx).distr_source.delegator_total_rewards(payload.address, height)
    except Exception as exc:
        raise RuntimeError(f"error while getting delegator total rewards: {exc}") from exc
    return [
        DelegationReward(
            coins=convert_dec_coins(reward.reward),
            validator_address=reward.validator_address,
        )
        for reward in rewards
    ]


def delegator_withdraw_address_handler(ctx: ActionContext, payload: Payload) -> Address:
    """Return the withdraw address of the payload delegator at the latest height."""
    log.debug("executing delegator withdraw address action for %s", payload.address)
    height = ctx.get_height(None)
    try:
        withdraw_address = _sources(ctx).distr_source.delegator_withdraw_address(
            payload.address, height
        )
    except Exception as exc:
        raise RuntimeError(f"error while getting delegator withdraw address: {exc}") from exc
    return Address(address=withdraw_address)


def validator_commission_amount_handler(
    ctx: ActionContext, payload: Payload
) -> ValidatorCommissionAmount:
    """Return the commission of the payload validator at the latest height."""
    log.debug(
        "executing validator commission action for %s at height %d",
        payload.address,
        payload.input.height,
    )
    height = ctx.get_height(None)
    try:
        commission = _sources(ctx).distr_source.validator_commission(payload.address, height)
    except Exception as exc:
        raise RuntimeError(f"error while getting validator commission: {exc}") from exc
    return ValidatorCommissionAmount(coins=convert_dec_coins(commission))