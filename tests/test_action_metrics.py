from junoindex.action_metrics import RESPONSE_TIME_BUCKETS, ActionMetrics


def test_success_counts_per_path():
    metrics = ActionMetrics()
    metrics.success("/account_balance")
    metrics.success("/account_balance")
    metrics.success("/delegation")
    assert metrics.requests[("/account_balance", "200")] == 2
    assert metrics.requests[("/delegation", "200")] == 1
    assert sum(metrics.errors.values()) == 0


def test_error_counts_per_path():
    metrics = ActionMetrics()
    metrics.error("/delegation")
    assert metrics.errors[("/delegation", "500")] == 1
    assert sum(metrics.requests.values()) == 0


def test_default_buckets():
    assert ActionMetrics().buckets == (0.5, 1, 2, 3, 4, 5)
    assert RESPONSE_TIME_BUCKETS == (0.5, 1, 2, 3, 4, 5)


def test_observe_response_time_uses_clock():
    metrics = ActionMetrics(clock=lambda: 10.0)
    elapsed = metrics.observe_response_time("/delegation", 8.5)
    assert elapsed == 1.5
    histogram = metrics.response_times[("/delegation", "1.5")]
    assert histogram.count == 1
    assert histogram.bucket_counts == [0, 0, 1, 1, 1, 1]


def test_histogram_buckets_are_cumulative():
    now = [0.0]
    metrics = ActionMetrics(clock=lambda: now[0])
    for value in (0.1, 0.7, 2.5, 9.0):
        now[0] = value
        metrics.observe_response_time("/p", 0.0)
    totals = [0] * len(metrics.buckets)
    count = 0
    for histogram in metrics.response_times.values():
        count += histogram.count
        totals = [a + b for a, b in zip(totals, histogram.bucket_counts)]
        assert histogram.bucket_counts == sorted(histogram.bucket_counts)
    assert count == 4
    assert totals == sorted(totals)
    assert totals[-1] == 3