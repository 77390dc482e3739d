from fedsearch.instances.health import HealthTracker
from fedsearch.instances.registry import Instance

A = Instance("https://a.example")
B = Instance("https://b.example")


def test_below_threshold_never_blocks(clock):
    tracker = HealthTracker(failure_threshold=3, cooldown_seconds=60, clock=clock)
    tracker.record_failure(A)
    tracker.record_failure(A)
    assert tracker.failures(A) == 2
    assert tracker.is_eligible(A)


def test_threshold_blocks_until_cooldown_elapses(clock):
    tracker = HealthTracker(failure_threshold=3, cooldown_seconds=60, clock=clock)
    for _ in range(3):
        tracker.record_failure(A)
    assert not tracker.is_eligible(A)
    assert tracker.eligible([A, B]) == [B]

    clock.advance(60)
    assert not tracker.is_eligible(A)

    clock.advance(1)
    assert tracker.is_eligible(A)
    # record dropped once the window has passed
    assert tracker.get(A) is None
    assert tracker.failures(A) == 0


def test_cooldown_is_measured_from_last_failure(clock):
    tracker = HealthTracker(failure_threshold=2, cooldown_seconds=60, clock=clock)
    tracker.record_failure(A)
    clock.advance(50)
    tracker.record_failure(A)
    clock.advance(30)
    assert not tracker.is_eligible(A)
    clock.advance(31)
    assert tracker.is_eligible(A)


def test_record_success_clears_record(clock):
    tracker = HealthTracker(failure_threshold=1, clock=clock)
    tracker.record_failure(A)
    assert not tracker.is_eligible(A)
    tracker.record_success(A)
    assert tracker.is_eligible(A)
    tracker.record_success(B)
    assert tracker.failures(B) == 0
