# junoindex

Building blocks for indexing a proof-of-stake blockchain into a relational
database, and for answering on-demand queries about account balances,
delegation rewards, withdraw addresses and validator commissions over HTTP.

## Modules

### `junoindex.coins`

Chain coins and their stored text form.

- `Coin(denom, amount)` holds an integer amount and `DecCoin(denom, amount)` a
  `Decimal` amount. Both reject negative amounts with `ValueError`.
- `DbCoin` and `DbDecCoin` are the stored form of a single coin: build them
  with `DbCoin.from_coin` / `DbDecCoin.from_dec_coin`, write them with
  `sql_value()` (for example `(stake,100)`), read them back with `parse()`
  (which accepts `bytes` or `str`) and turn them back into chain coins with
  `to_coin()` / `to_dec_coin()`.
- `DbCoins` and `DbDecCoins` are ordered, iterable lists of stored coins with
  `from_coins` / `from_dec_coins`, `parse` for array values such as
  `{"(stake,1)","(atom,2)"}`, and `to_coins` / `to_dec_coins`.
- `format_dec(value)` renders a decimal with 18 decimal places, e.g.
  `format_dec("0.011")` gives `"0.011000000000000000"`.
- `to_null_string(value)` trims a string and turns an empty result into
  `None`; `to_string(value)` turns `None` back into `""`; `remove_empty(items)`
  drops empty strings.

### `junoindex.rows`, `junoindex.chain_rows`, `junoindex.validator_rows`

Frozen dataclasses, one per table, compared by value:

- `rows`: `AccountRow`, `ModuleRow` (and `module_rows(names)`), `SupplyRow`,
  `CommunityPoolRow`, `DistributionParamsRow`, `InflationRow`,
  `MintParamsRow`, `StakingPoolRow`, `StakingParamsRow`, `FeeAllowanceRow`.
- `chain_rows`: `GenesisRow`, `ConsensusRow`, `AverageTimeRow`, `BlockRow`,
  `GovParamsRow`, `ProposalRow`, `TallyResultRow`, `VoteRow`, `DepositRow`,
  `ProposalStakingPoolSnapshotRow`, `ProposalValidatorVotingPowerSnapshotRow`,
  `TokenUnitRow`, `TokenRow`, `TokenPriceRow`, `ValidatorSigningInfoRow`,
  `SlashingParamsRow`.
- `validator_rows`: `ValidatorData` (with `operator`, `max_rate_decimal()` and
  `max_change_rate_decimal()`, which read the stored rates as whole numbers),
  `ValidatorRow`, `ValidatorInfoRow`, `ValidatorDescriptionRow` and
  `ValidatorCommissionRow` (both with a `create(...)` class method that stores
  blank texts as `None`), `ValidatorVotingPowerRow`, `ValidatorStatusRow`,
  `DoubleSignVoteRow`, `DoubleSignEvidenceRow`.

Some fields take no part in comparisons: the `one_row_id` flag of most
single-row tables, `ProposalRow.content`, `TokenPriceRow.id` and
`ValidatorDescriptionRow.avatar_url`.

### `junoindex.batching`

`split_accounts(accounts, params_number)` splits a sequence into consecutive
batches so that each batch needs at most 65535 statement parameters when every
account takes `params_number` of them. It raises `ValueError` when
`params_number` is below 1 or larger than the limit.

### `junoindex.validator_store`

`ValidatorStore(database=":memory:")` keeps validator tables in SQLite. It
takes an open `sqlite3.Connection` or a path; call `create_schema()` once to
create the tables.

```python
from junoindex.validator_rows import ValidatorData
from junoindex.validator_store import ValidatorStore

store = ValidatorStore()
store.create_schema()
store.save_validator_data(ValidatorData(
    cons_address="cosmosvalcons1...",
    val_address="cosmosvaloper1...",
    cons_pub_key="cosmosvalconspub1...",
    self_delegate_address="cosmos1...",
    max_rate="1",
    max_change_rate="2",
    height=1,
))
validator = store.get_validator("cosmosvaloper1...")
```

Methods:

- `save_validator_data`, `save_validators_data`: store the self-delegate
  account, the validator and its info; the info is replaced only by data at
  the same or a greater height.
- `get_validator_consensus_address`, `get_validator_operator_address`,
  `get_validator`, `get_validators` (ordered by consensus address),
  `get_validator_by_self_delegate_address`.
- `save_validator_description(ValidatorDescription(...))`: checks field
  lengths with `Description.ensure_length()`, merges with the stored
  description using `Description.update()` (fields set to `"[do-not-modify]"`
  keep their stored value, as does such an avatar URL) and stores blank
  fields as null.
- `save_validator_commission(ValidatorCommission(...))`: a `None` commission
  or minimum self delegation keeps the stored value; nothing is done when
  both are `None`.
- `save_validators_voting_powers`, `save_validators_statuses`: keep the
  stored row when it has a greater height.
- `save_double_sign_evidence(DoubleSignEvidence(...))`: stores both
  `DoubleSignVote`s and the evidence linking them.
- `insert_enabled_modules(modules)`: replaces the stored list of enabled
  modules; an empty list leaves it as it is.

Missing data and database failures raise `StoreError`.

### Actions endpoint

- `junoindex.actions_config`: `ActionsConfig(port=3000, node=None)` and
  `parse_config(data)`, which reads the `actions` section of a YAML document
  and returns `None` when there is none. A section without `port` gives port
  `0`, so the server listens on a port chosen by the system.

  ```python
  from junoindex.actions_config import parse_config

  config = parse_config(b"actions:\n  port: 3000\n")
  ```

- `junoindex.sources`: the abstract `BankSource` and `DistributionSource`,
  `DelegationDelegatorReward`, and `Sources(bank_source, distr_source)`.
- `junoindex.action_types`: `Payload.from_json(data)` reads a request body
  (`session_variables` and an `input` with `address`, `height`, `offset`,
  `limit`, `count_total`), `Payload.address`, `Payload.pagination()`;
  response types `ResponseCoin`, `Address`, `Balance`, `DelegationReward`,
  `ValidatorCommissionAmount`, `GraphQLError`; `convert_coins` and
  `convert_dec_coins`; and `ActionContext(node, sources)`, whose
  `get_height(payload)` returns the payload height or, when it is `0` or there
  is no payload, the node's `latest_height()`.
- `junoindex.action_handlers`: `account_balance_handler`,
  `delegation_reward_handler`, `delegator_withdraw_address_handler` and
  `validator_commission_amount_handler`. The last two always use the latest
  height.
- `junoindex.action_worker`: `ActionsWorker(context, metrics=None)`.
  `register_handler(path, handler)` routes a path; `handle(path, body)`
  returns a reply with status, content type and body: 200 with the JSON
  result, 400 with `{"message": ...}` when the handler raises, 500 for a body
  that is not a valid payload, 404 for an unknown path. `start(port)` serves
  these replies over HTTP until interrupted.
- `junoindex.action_metrics`: `ActionMetrics` counts successes
  (`requests`) and failures (`errors`) per path and records response times
  in histograms with buckets 0.5, 1, 2, 3, 4 and 5 seconds.
- `junoindex.actions_module`: `ActionsModule(config, node, sources)` with
  `name()` (`"actions"`), `build_worker()` registering `/account_balance`,
  `/delegation_reward`, `/delegator_withdraw_address` and
  `/validator_commission_amount`, and `run()`, which serves on the configured
  port (3000 when `config` is `None`) until SIGTERM or Ctrl-C and then calls
  the node's `stop()`.

## What it does not do

- It does not connect to a blockchain node. The node given to `ActionContext`
  and `ActionsModule` only needs `latest_height()` (and `stop()`), and the
  chain data comes from your own `BankSource` and `DistributionSource`
  implementations.
- It has no actions for delegations, redelegations or unbonding delegations.
- Storage covers validators and enabled modules only; the other row classes
  describe tables but nothing here reads or writes them.
- There is no command-line program; start the endpoint from Python with
  `ActionsModule.run()` or `ActionsWorker.start()`.

## Running the tests

Install the package with its `test` extra and run `pytest` from the project
root.