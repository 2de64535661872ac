"""Honeypot spam guard for FluentForms.

Every form carries two hidden fields unless it opts out:

- a decoy (``my_name``) that humans never see and therefore leave empty
- a timestamp (``request``) holding the server time at render

A submission is accepted when both keys arrive, the decoy is empty, and more
than ``min_delay`` has elapsed since render. This defeats scrapers that fill
every field and scripts that post instantly, without CAPTCHA or any external
service. The timestamp travels inside the rendered form, so no server-side
session is needed between render and submit.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional

from dateutil import parser as date_parser

from fluentforms.clock import SystemClock
from fluentforms.types import SpamReason

logger = logging.getLogger(__name__)

HONEYPOT_NAME = "my_name"
HONEYPOT_TIMESTAMP = "request"
HONEYPOT_KEYS = (HONEYPOT_NAME, HONEYPOT_TIMESTAMP)

DEFAULT_MIN_DELAY = timedelta(seconds=3)

SPAM_MESSAGE = "Something went wrong."


@dataclass(frozen=True)
class HoneypotResult:
    """Outcome of a honeypot check.

    Attributes:
        is_valid: Whether the submission looks human
        reason: Why it was refused, None when valid
    """
    is_valid: bool
    reason: Optional[SpamReason] = None

    def to_dict(self):
        """Convert to dict for serialization."""
        result = {"isValid": self.is_valid}
        if self.reason is not None:
            result["reason"] = self.reason.value
        return result


def format_timestamp(moment: datetime) -> str:
    """Render a moment as the epoch-seconds string embedded in the form."""
    return str(int(moment.timestamp()))


def parse_timestamp(raw: Any) -> Optional[datetime]:
    """Parse the embedded render timestamp.

    Accepts epoch seconds (the format this package renders) or an ISO 8601
    string. Naive ISO values are taken as UTC. Returns None when the value
    cannot be parsed.

    Examples:
        >>> parse_timestamp("0").year
        1970
        >>> parse_timestamp("2024-05-01T10:00:00Z").hour
        10
        >>> parse_timestamp("yesterday") is None
        True
    """
    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None
    try:
        return datetime.fromtimestamp(float(text), tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        pass
    try:
        parsed = date_parser.isoparse(text)
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class HoneypotGuard:
    """Time- and presence-based spam heuristic.

    Attributes:
        clock: Source of the current time
        min_delay: Minimum time between render and submit

    Examples:
        >>> from fluentforms.clock import FixedClock
        >>> clock = FixedClock(datetime(2024, 1, 1, 12, 0, 10, tzinfo=timezone.utc))
        >>> guard = HoneypotGuard(clock=clock)
        >>> rendered = format_timestamp(datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc))
        >>> guard.check({"my_name": "", "request": rendered}).is_valid
        True
        >>> guard.check({"my_name": "bot", "request": rendered}).reason
        <SpamReason.HONEYPOT_TRIGGERED: 'honeypot_triggered'>
    """

    def __init__(self, clock=None, min_delay: timedelta = DEFAULT_MIN_DELAY):
        self.clock = clock or SystemClock()
        self.min_delay = min_delay

    def check(self, payload: Optional[Mapping[str, Any]]) -> HoneypotResult:
        """Check a submitted payload.

        Rules are evaluated in a fixed order and the first failure wins:
        missing payload, missing honeypot keys, filled decoy, too fast.

        A decoy that arrives as None counts as filled. A timestamp that is
        None or unreadable counts as tampering.
        """
        if payload is None:
            return self._refuse(SpamReason.MISSING_PAYLOAD)

        if any(key not in payload for key in HONEYPOT_KEYS):
            return self._refuse(SpamReason.TAMPERED_PAYLOAD)

        decoy = payload[HONEYPOT_NAME]
        if decoy is None or str(decoy) != "":
            return self._refuse(SpamReason.HONEYPOT_TRIGGERED)

        rendered_at = parse_timestamp(payload[HONEYPOT_TIMESTAMP])
        if rendered_at is None:
            return self._refuse(SpamReason.TAMPERED_PAYLOAD)

        if self.clock.now() - rendered_at <= self.min_delay:
            return self._refuse(SpamReason.SUBMITTED_TOO_FAST)

        return HoneypotResult(is_valid=True)

    def _refuse(self, reason: SpamReason) -> HoneypotResult:
        logger.info("Honeypot refused submission: %s", reason.value)
        return HoneypotResult(is_valid=False, reason=reason)


__all__ = [
    "HoneypotGuard",
    "HoneypotResult",
    "HONEYPOT_NAME",
    "HONEYPOT_TIMESTAMP",
    "HONEYPOT_KEYS",
    "DEFAULT_MIN_DELAY",
    "SPAM_MESSAGE",
    "format_timestamp",
    "parse_timestamp",
]
