# pingstat/reporter/rules.py
from pingstat.config import SoundPolicy
from pingstat.reporter.state import SoundState


def should_notify(policy: SoundPolicy, state: SoundState, succeeded: bool) -> bool:
    """
    Decide whether this attempt makes a sound, and advance `state`.

    The once-flags are updated after the decision, so "until first success"
    still sounds for the first success itself and stays quiet afterwards.
    """
    notify = False

    if policy == SoundPolicy.ALWAYS:
        notify = True
    elif policy == SoundPolicy.ALWAYS_ON_SUCCESS:
        notify = succeeded
    elif policy == SoundPolicy.ALWAYS_ON_FAILURE:
        notify = not succeeded
    elif policy == SoundPolicy.UNTIL_FIRST_SUCCESS:
        notify = not state.has_succeeded_once
    elif policy == SoundPolicy.UNTIL_FIRST_FAILURE:
        notify = not state.has_failed_once
    elif policy in (SoundPolicy.AFTER_EVERY_SUCCESS_AFTER_THRESHOLD,
                    SoundPolicy.AFTER_EVERY_FAILURE_AFTER_THRESHOLD):
        wanted = policy == SoundPolicy.AFTER_EVERY_SUCCESS_AFTER_THRESHOLD
        if succeeded == wanted and state.remaining_threshold != 0:
            notify = True
            if state.remaining_threshold > 0:
                state.remaining_threshold -= 1

    if succeeded:
        state.has_succeeded_once = True
    else:
        state.has_failed_once = True

    return notify
