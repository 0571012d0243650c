import datetime
import logging

import pytest

# 2024-01-01 is a Monday
MONDAY = datetime.date(2024, 1, 1)


def at(hour: int, minute: int, day: datetime.date = MONDAY) -> datetime.datetime:
    return datetime.datetime.combine(day, datetime.time(hour, minute))


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def logger():
    return logging.getLogger("focus_blocker.tests")
