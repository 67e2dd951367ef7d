import pytest

from hub_attendance.attendance.factory import TokenStrategyFactory
from hub_attendance.attendance.strategies.static_token_strategy import StaticTokenStrategy


def test_static_token_accepts_exact_match_only():
    strategy = StaticTokenStrategy("HUB-ATTENDANCE-2025")

    assert strategy.validate("HUB-ATTENDANCE-2025")
    assert not strategy.validate("HUB-ATTENDANCE-2024")
    assert not strategy.validate("hub-attendance-2025")
    assert not strategy.validate("")
    assert not strategy.validate(None)


def test_static_token_requires_expected_value():
    with pytest.raises(ValueError):
        StaticTokenStrategy("")


def test_factory_builds_static_strategy():
    strategy = TokenStrategyFactory().create(name="Static", expected_token="T-1")

    assert isinstance(strategy, StaticTokenStrategy)
    assert strategy.validate("T-1")


def test_factory_rejects_unknown_strategy():
    with pytest.raises(ValueError):
        TokenStrategyFactory().create(name="rotating", expected_token="T-1")
