from __future__ import annotations

import pytest

from requests_mock import Mocker


class TimeController:
    def __init__(self) -> None:
        self.now = 0.0

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def requests_mock():
    with Mocker() as mock:
        yield mock


@pytest.fixture
def clock() -> TimeController:
    return TimeController()


@pytest.fixture(autouse=True)
def _no_testing_mode(monkeypatch):
    monkeypatch.delenv("TESTING_MODE", raising=False)
