"""
Canonical workflow types (``payroll_kernel.domain.workflow``).

Responsibility
--------------
Pure value objects for record lifecycle state machines. Modules declare
their workflows with these types; ``Workflow.transition_for`` resolves an
action against the current state.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects. ZERO I/O.

Invariants enforced
-------------------
* Transitions reference only states in ``Workflow.states``.
* ``initial_state`` is a member of ``states``.
"""

from __future__ import annotations

from dataclasses import dataclass

from payroll_kernel.exceptions import InvalidPayrollTransitionError


@dataclass(frozen=True)
class Guard:
    """A condition that must be satisfied before a transition fires.

    Contract: frozen, descriptive only.
    Non-goals: does not evaluate the condition -- the owning service does.
    """
    name: str
    description: str


@dataclass(frozen=True)
class Transition:
    """A valid state transition in a workflow.

    ``required_roles`` restricts who may fire the transition; an empty tuple
    means any role the service already admits.
    """
    from_state: str
    to_state: str
    action: str
    guard: Guard | None = None
    required_roles: tuple[str, ...] = ()


@dataclass(frozen=True)
class Workflow:
    """A state machine definition for a record lifecycle."""
    name: str
    description: str
    initial_state: str
    states: tuple[str, ...]
    transitions: tuple[Transition, ...]
    terminal_states: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.initial_state not in self.states:
            raise ValueError(
                f"initial_state {self.initial_state!r} is not a state of {self.name}"
            )
        for t in self.transitions:
            if t.from_state not in self.states or t.to_state not in self.states:
                raise ValueError(
                    f"Transition {t.action!r} references unknown state in {self.name}"
                )

    def transition_for(self, current_state: str, action: str) -> Transition:
        """Return the transition for ``action`` from ``current_state``.

        Raises:
            InvalidPayrollTransitionError: if no such transition exists.
        """
        for t in self.transitions:
            if t.from_state == current_state and t.action == action:
                return t
        raise InvalidPayrollTransitionError(current_state, action)

    def allowed_actions(self, current_state: str) -> tuple[str, ...]:
        """Actions that may fire from ``current_state``."""
        return tuple(t.action for t in self.transitions if t.from_state == current_state)
