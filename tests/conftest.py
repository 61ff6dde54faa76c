import os
import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
os.environ.setdefault("CI", "true")

FIXTURES = pathlib.Path(__file__).parent / "fixtures"


def fixture_text(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


@pytest.fixture()
def single_events_ics() -> str:
    return fixture_text("single_events.ics")


@pytest.fixture()
def weekly_recurrence_ics() -> str:
    return fixture_text("weekly_recurrence.ics")


@pytest.fixture()
def floating_local_ics() -> str:
    return fixture_text("floating_local.ics")
