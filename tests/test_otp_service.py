"""OTP registry: issuance, single consumption and expiry."""

import threading
from datetime import timedelta

from services.otp_service import InMemoryOTPStore, OTPRegistry, generate_otp


def test_generate_otp_is_six_digit_numeric():
    for _ in range(200):
        code = generate_otp()
        assert len(code) == 6
        assert code.isdigit()
        assert 100000 <= int(code) <= 999999


def test_issue_then_consume_succeeds_exactly_once(registry):
    code = registry.issue("a@x.com")

    assert registry.verify_and_consume("a@x.com", code) is True
    assert registry.verify_and_consume("a@x.com", code) is False


def test_wrong_code_leaves_entry_consumable(registry):
    code = registry.issue("a@x.com")
    wrong = "000000" if code != "000000" else "111111"

    assert registry.verify_and_consume("a@x.com", wrong) is False
    assert registry.store.get("a@x.com") is not None
    assert registry.verify_and_consume("a@x.com", code) is True


def test_code_is_compared_as_string(registry):
    code = registry.issue("a@x.com")

    assert registry.verify_and_consume("a@x.com", f" {code}") is False
    assert registry.verify_and_consume("a@x.com", int(code)) is False
    assert registry.verify_and_consume("a@x.com", code) is True


def test_unknown_identity_fails(registry):
    assert registry.verify_and_consume("nobody@x.com", "123456") is False


def test_code_valid_up_to_expiry(registry, clock):
    code = registry.issue("a@x.com")
    clock.advance(minutes=5)

    assert registry.verify_and_consume("a@x.com", code) is True


def test_expired_code_fails_and_entry_is_left_in_place(registry, clock):
    code = registry.issue("a@x.com")
    clock.advance(minutes=5, seconds=1)

    assert registry.verify_and_consume("a@x.com", code) is False
    assert registry.store.get("a@x.com") is not None


def test_reissue_replaces_previous_code(registry):
    first = registry.issue("a@x.com")
    second = registry.issue("a@x.com")

    assert len(registry.store) == 1
    if first != second:
        assert registry.verify_and_consume("a@x.com", first) is False
    assert registry.verify_and_consume("a@x.com", second) is True


def test_entries_are_per_identity(registry):
    a = registry.issue("a@x.com")
    b = registry.issue("b@x.com")

    assert registry.verify_and_consume("a@x.com", a) is True
    assert registry.verify_and_consume("b@x.com", b) is True


def test_purge_expired_only_drops_expired_entries(registry, clock):
    registry.issue("old@x.com")
    clock.advance(minutes=4)
    fresh = registry.issue("new@x.com")
    clock.advance(minutes=2)

    assert registry.purge_expired() == 1
    assert registry.store.get("old@x.com") is None
    assert registry.verify_and_consume("new@x.com", fresh) is True


def test_expiry_uses_registry_lifetime(clock):
    registry = OTPRegistry(InMemoryOTPStore(), lifetime=timedelta(minutes=1), clock=clock)
    code = registry.issue("a@x.com")

    assert registry.store.get("a@x.com").expires_at == clock.now + timedelta(minutes=1)
    clock.advance(minutes=2)
    assert registry.verify_and_consume("a@x.com", code) is False


def test_concurrent_submissions_consume_code_once(registry):
    code = registry.issue("a@x.com")
    workers = 16
    barrier = threading.Barrier(workers)
    results = []
    results_lock = threading.Lock()

    def submit():
        barrier.wait()
        ok = registry.verify_and_consume("a@x.com", code)
        with results_lock:
            results.append(ok)

    threads = [threading.Thread(target=submit) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)

    assert len(results) == workers
    assert results.count(True) == 1
    assert registry.store.get("a@x.com") is None
