import pytest

from junoindex.batching import MAX_POSTGRESQL_PARAMS, split_accounts


def test_empty_input_gives_no_batches():
    assert split_accounts([], 3) == []


def test_small_input_is_one_batch():
    accounts = ["a", "b", "c"]
    assert split_accounts(accounts, 3) == [accounts]


@pytest.mark.parametrize("params_number", [1, 3, 7, 1000])
def test_batches_cover_input_and_respect_limit(params_number):
    accounts = list(range(70000))
    batches = split_accounts(accounts, params_number)
    assert [item for batch in batches for item in batch] == accounts
    assert all(len(batch) * params_number <= MAX_POSTGRESQL_PARAMS for batch in batches)
    assert all(batch for batch in batches)


def test_batch_boundaries():
    per_batch_params = MAX_POSTGRESQL_PARAMS // 4
    batches = split_accounts(list(range(10)), per_batch_params)
    assert batches == [[0, 1, 2, 3], [4, 5, 6, 7], [8, 9]]


def test_invalid_params_number():
    with pytest.raises(ValueError):
        split_accounts([1], 0)
    with pytest.raises(ValueError):
        split_accounts([1], MAX_POSTGRESQL_PARAMS + 1)