"""Cobertura adicional para guard denial na AppointmentStateMachine."""

from __future__ import annotations

import fsm.manager.machine as machine_module
from fsm.manager.machine import AppointmentStateMachine
from fsm.rules.guards import GuardResult
from fsm.states import AppointmentStatus


def test_transition_returns_failure_when_guard_blocks_valid_transition(
    monkeypatch,
) -> None:
    def _deny_guard(from_state: AppointmentStatus, to_state: AppointmentStatus) -> GuardResult:
        del from_state, to_state
        return GuardResult.deny("blocked_by_guard")

    monkeypatch.setattr(machine_module, "evaluate_guards", _deny_guard)

    machine = AppointmentStateMachine(
        initial_state=AppointmentStatus.SCHEDULED, appointment_id="apt-guard"
    )
    result = machine.transition(target=AppointmentStatus.CONFIRMED, trigger="test")

    assert result.success is False
    assert result.error_reason == "blocked_by_guard"
    assert machine.current_state == AppointmentStatus.SCHEDULED
