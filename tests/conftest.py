import pytest

from services.pose_replay.recording.TimerQueue import TimerQueue

from helpers import ManualClock


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def timers(clock):
    return TimerQueue(clock=clock)
