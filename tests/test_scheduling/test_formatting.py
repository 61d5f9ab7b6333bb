"""Testes de formatação de duração."""

from __future__ import annotations

import pytest

from scheduling.services import format_duration


@pytest.mark.parametrize(
    ("minutes", "expected"),
    [(30, "30 min"), (45, "45 min"), (60, "1h"), (90, "1h 30m"), (120, "2h"), (135, "2h 15m")],
)
def test_format_duration(minutes: int, expected: str) -> None:
    assert format_duration(minutes) == expected
