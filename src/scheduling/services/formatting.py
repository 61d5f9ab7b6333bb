"""Helpers de exibição."""

from __future__ import annotations


def format_duration(minutes: int) -> str:
    """Formata minutos para exibição: ``45 min``, ``1h``, ``1h 30m``."""
    if minutes < 60:
        return f"{minutes} min"
    hours, remainder = divmod(minutes, 60)
    if remainder == 0:
        return f"{hours}h"
    return f"{hours}h {remainder}m"
