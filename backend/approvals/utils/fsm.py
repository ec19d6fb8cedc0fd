from __future__ import annotations
"""Simple finite state machine utility for enforcing allowed status transitions.

Usage:
    from approvals.utils.fsm import TransitionValidator
    TX_FSM = TransitionValidator({
        'pending': {'approved'},
        'approved': set(),
    })
    TX_FSM.assert_can_transition(current_status, target_status)

Raises ValidationError (400) if invalid.
"""
from typing import Dict, Set
from approvals.errors import ValidationError

class TransitionValidator:
    def __init__(self, graph: Dict[str, Set[str]], field_name: str = 'status'):
        self.graph = graph
        self.field_name = field_name

    def can_transition(self, current: str, target: str) -> bool:
        return target in self.graph.get(current, set())

    def assert_can_transition(self, current: str, target: str):
        if not self.can_transition(current, target):
            raise ValidationError(f"Invalid {self.field_name} transition {current} -> {target}")
        return True

    def states(self):
        """States in declaration order."""
        return list(self.graph.keys())

    def transitions(self):
        """state -> sorted reachable states, for OpenAPI x-transitions."""
        return {state: sorted(targets) for state, targets in self.graph.items()}

__all__ = ['TransitionValidator']
