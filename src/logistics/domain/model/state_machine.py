"""Transition tables for the aggregate state machines.

Each aggregate declares its legal ``(state, action) -> state`` pairs once;
anything not in the table is rejected with InvalidOperationError.
"""

from __future__ import annotations

from enum import Enum
from typing import Generic, TypeVar

from logistics.domain.exceptions import InvalidOperationError

S = TypeVar("S", bound=Enum)


class TransitionTable(Generic[S]):

    def __init__(self, entity: str, transitions: dict[tuple[S, str], S]) -> None:
        self._entity = entity
        self._transitions = dict(transitions)

    def sources(self, action: str) -> list[S]:
        """States from which *action* is legal, in declaration order."""
        return [state for (state, act) in self._transitions if act == action]

    def next_state(self, current: S, action: str) -> S:
        try:
            return self._transitions[(current, action)]
        except KeyError:
            allowed = ", ".join(s.value for s in self.sources(action)) or "nowhere"
            raise InvalidOperationError(
                f"Cannot {action} {self._entity} in {current.value} status "
                f"(allowed from: {allowed})"
            ) from None
