"""Contrato para geração de links de reunião (apenas atendimentos online)."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MeetingLinkProviderProtocol(Protocol):
    def generate_link(self, appointment_id: str) -> str:
        """Retorna a URL da sala para o agendamento."""
        ...
