from __future__ import annotations

import pytest

from aretransport.backoff import BaseBackoffStrategy


class ConstantOneSecond(BaseBackoffStrategy):
    def calculate(self, attempt: int) -> float:  # noqa: ARG002
        return 1.0


def test_base_backoff_strategy_is_abstract() -> None:
    with pytest.raises(TypeError, match=r"abstract"):
        BaseBackoffStrategy()  # type: ignore[abstract]


def test_base_backoff_strategy_subclass() -> None:
    strategy = ConstantOneSecond()
    assert strategy.calculate(0) == 1.0
    assert strategy.calculate(7) == 1.0
