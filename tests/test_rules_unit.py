# tests/test_rules_unit.py
import pytest

from pingstat.config import SoundPolicy
from pingstat.reporter.rules import should_notify
from pingstat.reporter.state import SoundState

S, F = True, False


def bells(policy, outcomes, threshold=5):
    state = SoundState(remaining_threshold=threshold)
    return [should_notify(policy, state, ok) for ok in outcomes]


@pytest.mark.parametrize("policy, outcomes, expected", [
    (SoundPolicy.SILENT, [S, F, S], [False, False, False]),
    (SoundPolicy.ALWAYS, [S, F, S], [True, True, True]),
    (SoundPolicy.ALWAYS_ON_SUCCESS, [S, F, S], [True, False, True]),
    (SoundPolicy.ALWAYS_ON_FAILURE, [S, F, S], [False, True, False]),
    (SoundPolicy.UNTIL_FIRST_SUCCESS, [F, F, S, F, S], [True, True, True, False, False]),
    (SoundPolicy.UNTIL_FIRST_FAILURE, [S, S, F, S, F], [True, True, True, False, False]),
])
def test_policies(policy, outcomes, expected):
    assert bells(policy, outcomes) == expected


def test_failure_threshold():
    assert bells(SoundPolicy.AFTER_EVERY_FAILURE_AFTER_THRESHOLD, [F] * 5, threshold=2) == \
        [True, True, False, False, False]


def test_success_threshold_ignores_failures():
    assert bells(SoundPolicy.AFTER_EVERY_SUCCESS_AFTER_THRESHOLD, [F, S, F, S, S], threshold=2) == \
        [False, True, False, True, False]


def test_negative_threshold_is_unlimited():
    state = SoundState(remaining_threshold=-1)
    results = [should_notify(SoundPolicy.AFTER_EVERY_FAILURE_AFTER_THRESHOLD, state, F) for _ in range(50)]
    assert all(results)
    assert state.remaining_threshold == -1


def test_zero_threshold_never_sounds():
    assert bells(SoundPolicy.AFTER_EVERY_SUCCESS_AFTER_THRESHOLD, [S, S], threshold=0) == [False, False]


def test_state_tracks_first_outcomes():
    state = SoundState()
    should_notify(SoundPolicy.SILENT, state, S)
    assert state.has_succeeded_once and not state.has_failed_once
