from genbooks.core.rate_limit import LoginRateLimiter


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def make_limiter(**kwargs):
    clock = FakeClock()
    return LoginRateLimiter(clock=clock, **kwargs), clock


def test_allows_unknown_address():
    limiter, _ = make_limiter()
    assert limiter.is_allowed("10.0.0.1")


def test_locks_out_after_max_failures():
    limiter, _ = make_limiter()
    for _ in range(4):
        limiter.record_attempt("10.0.0.1", success=False)
    assert limiter.is_allowed("10.0.0.1")

    limiter.record_attempt("10.0.0.1", success=False)
    assert not limiter.is_allowed("10.0.0.1")
    # other addresses are unaffected
    assert limiter.is_allowed("10.0.0.2")


def test_lockout_expires_after_window():
    limiter, clock = make_limiter()
    for _ in range(5):
        limiter.record_attempt("10.0.0.1", success=False)
    clock.now += 15 * 60 - 1
    assert not limiter.is_allowed("10.0.0.1")

    clock.now += 2
    assert limiter.is_allowed("10.0.0.1")
    # counter reset but the entry is kept
    assert "10.0.0.1" in limiter
    assert limiter.failures("10.0.0.1") == 0


def test_success_clears_entry():
    limiter, _ = make_limiter()
    for _ in range(3):
        limiter.record_attempt("10.0.0.1", success=False)
    limiter.record_attempt("10.0.0.1", success=True)
    assert "10.0.0.1" not in limiter
    assert limiter.failures("10.0.0.1") == 0


def test_failure_after_expired_window_starts_new_count():
    limiter, clock = make_limiter()
    for _ in range(5):
        limiter.record_attempt("10.0.0.1", success=False)
    clock.now += 16 * 60
    limiter.record_attempt("10.0.0.1", success=False)
    assert limiter.failures("10.0.0.1") == 1
    assert limiter.is_allowed("10.0.0.1")


def test_capacity_evicts_expired_then_oldest():
    limiter, clock = make_limiter(capacity=3)
    limiter.record_attempt("a", success=False)
    clock.now += 20 * 60
    limiter.record_attempt("b", success=False)
    limiter.record_attempt("c", success=False)
    limiter.record_attempt("d", success=False)
    # "a" had expired, so it goes first
    assert "a" not in limiter
    assert len(limiter) == 3

    limiter.record_attempt("e", success=False)
    assert "b" not in limiter
    assert len(limiter) == 3
    assert all(addr in limiter for addr in ("c", "d", "e"))


def test_retry_after_is_lockout_window():
    limiter, _ = make_limiter(lockout_seconds=900)
    assert limiter.retry_after == 900


def test_expired_entries_kept_until_over_capacity():
    limiter, clock = make_limiter(capacity=3)
    limiter.record_attempt("a", success=False)
    clock.now += 20 * 60
    limiter.record_attempt("b", success=False)
    # under capacity nothing is pruned, even expired entries
    assert "a" in limiter
    assert len(limiter) == 2


def test_checking_an_address_does_not_protect_it_from_eviction():
    limiter, clock = make_limiter(capacity=2)
    limiter.record_attempt("a", success=False)
    clock.now += 1
    limiter.record_attempt("b", success=False)
    assert limiter.is_allowed("a")
    limiter.record_attempt("c", success=False)
    # "a" has the oldest failure, so it goes regardless of the lookup
    assert "a" not in limiter
    assert "b" in limiter and "c" in limiter
