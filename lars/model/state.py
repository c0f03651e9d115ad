"""
Asset lifecycle state machine.

An asset is always in exactly one State. It only ever changes state through a
StateAction, and each State carries a row of the transition table that names
the action to issue when heading towards a given target state. Reaching a
target can take several hops (DRAFT -> PUBLISHED goes through
AWAITING_APPROVAL), and no hop is ever skipped.
"""

from enum import Enum
from typing import List, Optional

# Safety net for plan_transitions; the longest legal walk is three hops.
MAX_TRANSITIONS = 10


class StateAction(str, Enum):
    """Actions that move an asset between lifecycle states."""

    PUBLISH = "publish"
    APPROVE = "approve"
    CANCEL = "cancel"
    NEED_MORE_INFO = "need_more_info"
    UNPUBLISH = "unpublish"

    def resulting_state(self, current: "State") -> Optional["State"]:
        """
        The state an asset in ``current`` ends up in after this action.

        This is the effect the repository backend applies. Returns None when the
        action is not legal from ``current``.
        """
        if not current.is_state_action_allowed(self):
            return None
        return _ACTION_RESULTS[self]


class State(str, Enum):
    """Lifecycle states of an asset."""

    DRAFT = "draft"
    AWAITING_APPROVAL = "awaiting_approval"
    NEED_MORE_INFO = "need_more_info"
    PUBLISHED = "published"

    @property
    def actions(self) -> List[Optional[StateAction]]:
        """This state's row of the transition table, indexed by target state."""
        return _TRANSITIONS[self]

    def is_state_action_allowed(self, action: Optional[StateAction]) -> bool:
        """True if ``action`` appears anywhere in this state's row."""
        if action is None:
            return False
        return action in self.actions

    def get_next_action(self, target: "State") -> Optional[StateAction]:
        """The action to issue next when moving from this state to ``target``."""
        return self.actions[_ORDER.index(target)]


_ORDER = [
    State.DRAFT,
    State.AWAITING_APPROVAL,
    State.NEED_MORE_INFO,
    State.PUBLISHED,
]

# Rows: current state. Columns: target state, in _ORDER.
_TRANSITIONS = {
    State.DRAFT: [
        None,
        StateAction.PUBLISH,
        StateAction.PUBLISH,
        StateAction.PUBLISH,
    ],
    State.AWAITING_APPROVAL: [
        StateAction.CANCEL,
        None,
        StateAction.NEED_MORE_INFO,
        StateAction.APPROVE,
    ],
    State.NEED_MORE_INFO: [
        StateAction.PUBLISH,
        StateAction.PUBLISH,
        None,
        StateAction.PUBLISH,
    ],
    State.PUBLISHED: [
        StateAction.UNPUBLISH,
        StateAction.UNPUBLISH,
        StateAction.UNPUBLISH,
        None,
    ],
}

_ACTION_RESULTS = {
    StateAction.PUBLISH: State.AWAITING_APPROVAL,
    StateAction.APPROVE: State.PUBLISHED,
    StateAction.CANCEL: State.DRAFT,
    StateAction.NEED_MORE_INFO: State.NEED_MORE_INFO,
    StateAction.UNPUBLISH: State.DRAFT,
}


class IllegalTransitionError(ValueError):
    """Raised when the transition table cannot lead from one state to another."""

    def __init__(self, state: State, action: Optional[StateAction], target: State):
        self.state = state
        self.action = action
        self.target = target
        super().__init__(
            f"Cannot move from state {state.value} towards {target.value}"
            + (f" using action {action.value}" if action else "")
        )


def plan_transitions(current: State, target: State) -> List[StateAction]:
    """
    Work out the ordered actions that take an asset from ``current`` to ``target``.

    Args:
        current: The state the asset is in now
        target: The state it should end up in

    Returns:
        The actions to issue, in order. Empty if ``current`` is ``target``.

    Raises:
        IllegalTransitionError: If the table does not lead to ``target``
    """
    plan: List[StateAction] = []
    state = current
    while state != target:
        action = state.get_next_action(target)
        next_state = action.resulting_state(state) if action else None
        if next_state is None or len(plan) >= MAX_TRANSITIONS:
            raise IllegalTransitionError(state, action, target)
        plan.append(action)
        state = next_state
    return plan
