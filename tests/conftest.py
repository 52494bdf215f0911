"""Pytest configuration and shared fixtures."""

import pytest

from tests.fakes import make_engineer, make_rule
from inquiry_router.domain.value_objects.enums import RuleType


@pytest.fixture
def bolts_rule():
    return make_rule("r1", RuleType.LOAD_BALANCE, priority=10, categories={"bolts"})


@pytest.fixture
def bolts_engineers():
    return [
        make_engineer("e1", {"bolts"}, current=3),
        make_engineer("e2", {"bolts"}, current=1),
    ]
