"""Submission state machine for FluentForms.

Each form instance owns one state machine that tracks where its submission
is in the lifecycle:

    invalid --evaluate--> valid --delivery--> sent | rejected

Transitions are grouped by trigger:
- ``evaluate``: the only trigger that moves between invalid and valid
- ``delivery``: the mail transport's outcome, legal only from valid
- ``signal``: external re-entry (e.g. a page reload after a redirect),
  legal from any state and idempotent

Sent and rejected are terminal: evaluation leaves them untouched.

Usage:
    >>> sm = FormStateMachine()
    >>> sm.state
    <FormStatus.INVALID: 'invalid'>
    >>> sm.evaluate(has_errors=False)
    <FormStatus.VALID: 'valid'>
    >>> sm.delivery_succeeded()
    >>> sm.is_terminal()
    True
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Set, Tuple

from fluentforms.errors import FormError
from fluentforms.types import FormStatus

logger = logging.getLogger(__name__)


class Trigger(str, Enum):
    """What caused a transition."""
    EVALUATE = "evaluate"
    DELIVERY = "delivery"
    SIGNAL = "signal"


class InvalidStateTransitionError(FormError):
    """Raised when attempting an invalid state transition.

    Attributes:
        current_state: The current state before the attempted transition
        target_state: The target state that was attempted
        trigger: What attempted the transition
    """

    def __init__(self, current_state: FormStatus, target_state: FormStatus, trigger: Trigger, message: str):
        self.current_state = current_state
        self.target_state = target_state
        self.trigger = trigger
        super().__init__(message)


TERMINAL_STATES: Set[FormStatus] = {FormStatus.SENT, FormStatus.REJECTED}


# Maps each trigger to the states it may leave and where it may go from each
VALID_TRANSITIONS: Dict[Trigger, Dict[FormStatus, Set[FormStatus]]] = {
    Trigger.EVALUATE: {
        FormStatus.INVALID: {FormStatus.VALID, FormStatus.INVALID},
        FormStatus.VALID: {FormStatus.VALID, FormStatus.INVALID},
    },
    Trigger.DELIVERY: {
        FormStatus.VALID: {FormStatus.SENT, FormStatus.REJECTED},
    },
    Trigger.SIGNAL: {
        state: {FormStatus.SENT, FormStatus.REJECTED} for state in FormStatus
    },
}


@dataclass
class FormStateMachine:
    """Lifecycle state of one form submission.

    Attributes:
        state: Current state, invalid until evaluated

    Examples:
        >>> sm = FormStateMachine()
        >>> sm.can_transition_to(FormStatus.SENT, Trigger.DELIVERY)
        False
        >>> sm.signal(FormStatus.REJECTED)
        >>> sm.evaluate(has_errors=False)
        <FormStatus.REJECTED: 'rejected'>
    """

    state: FormStatus = FormStatus.INVALID
    _history: List[Tuple[FormStatus, FormStatus, Trigger]] = field(default_factory=list, init=False, repr=False)

    def can_transition_to(self, target_state: FormStatus, trigger: Trigger) -> bool:
        """Check if a trigger may move the machine to target_state."""
        valid_targets = VALID_TRANSITIONS[trigger].get(self.state, set())
        return target_state in valid_targets

    def transition_to(self, target_state: FormStatus, trigger: Trigger) -> None:
        """Move to target_state.

        Raises:
            InvalidStateTransitionError: If the trigger may not cause this transition
        """
        if not self.can_transition_to(target_state, trigger):
            allowed = VALID_TRANSITIONS[trigger].get(self.state, set())
            raise InvalidStateTransitionError(
                current_state=self.state,
                target_state=target_state,
                trigger=trigger,
                message=(
                    f"Invalid state transition: '{trigger.value}' cannot move from "
                    f"'{self.state.value}' to '{target_state.value}'. "
                    f"Valid targets are: {', '.join(sorted(s.value for s in allowed))}"
                    if allowed
                    else f"Invalid state transition: '{trigger.value}' is not allowed "
                    f"from '{self.state.value}'."
                ),
            )

        old_state = self.state
        self.state = target_state
        self._history.append((old_state, target_state, trigger))
        if old_state != target_state:
            logger.debug("Form state %s -> %s (%s)", old_state.value, target_state.value, trigger.value)

    def evaluate(self, has_errors: bool) -> FormStatus:
        """Decide between valid and invalid.

        This is the single authority for those two states. Terminal states
        are left as they are.

        Args:
            has_errors: Whether the form currently carries any error

        Returns:
            The state after evaluation
        """
        if self.is_terminal():
            return self.state
        target = FormStatus.INVALID if has_errors else FormStatus.VALID
        self.transition_to(target, Trigger.EVALUATE)
        return self.state

    def delivery_succeeded(self) -> None:
        self.transition_to(FormStatus.SENT, Trigger.DELIVERY)

    def delivery_failed(self) -> None:
        self.transition_to(FormStatus.REJECTED, Trigger.DELIVERY)

    def signal(self, target_state: FormStatus) -> None:
        """Apply an external success/rejected signal."""
        self.transition_to(target_state, Trigger.SIGNAL)

    def is_valid(self) -> bool:
        return self.state == FormStatus.VALID

    def is_terminal(self) -> bool:
        """Check if the current state is sent or rejected."""
        return self.state in TERMINAL_STATES

    def get_history(self) -> List[Tuple[FormStatus, FormStatus, Trigger]]:
        """Transitions applied so far, oldest first, as (from, to, trigger)."""
        return list(self._history)


__all__ = [
    "FormStateMachine",
    "InvalidStateTransitionError",
    "Trigger",
    "TERMINAL_STATES",
    "VALID_TRANSITIONS",
]
