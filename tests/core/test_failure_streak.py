"""Failure Streak Throttle — one notification per streak."""

from wmstore.core.failure_streak import FailureStreakThrottle


def test_first_failure_notifies_repeats_do_not():
    throttle = FailureStreakThrottle()
    assert throttle.record_failure("STORAGE_FAILURE")
    assert not throttle.record_failure("STORAGE_FAILURE")
    assert not throttle.record_failure("STORAGE_FAILURE")
    assert throttle.streak_length == 3


def test_success_ends_streak():
    throttle = FailureStreakThrottle()
    throttle.record_failure("STORAGE_FAILURE")
    throttle.record_success()
    assert not throttle.in_streak
    assert throttle.record_failure("STORAGE_FAILURE")


def test_new_code_starts_new_streak():
    throttle = FailureStreakThrottle()
    throttle.record_failure("STORAGE_FAILURE")
    assert throttle.record_failure("NO_ACTIVE_PROFILE")
    assert throttle.streak_length == 1


def test_notify_every_time_when_disabled():
    throttle = FailureStreakThrottle(notify_once=False)
    assert throttle.record_failure("STORAGE_FAILURE")
    assert throttle.record_failure("STORAGE_FAILURE")
