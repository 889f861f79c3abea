# src/todo_reminder/tasks/deadline.py

"""
Deadline parsing.

Turns a user-typed `dd/mm/yyyy[ HH:MM]` string into epoch seconds, resolved in
the process-local time zone. Later DST shifts are not tracked for far-future
deadlines; that drift is accepted.

Every failure is a DeadlineError subclass. This module never exits the
process: the caller decides whether to re-prompt, log or abort.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime

logger = logging.getLogger(__name__)

DEADLINE_FORMAT = "%d/%m/%Y %H:%M"
DEFAULT_TIME = "00:00"

# 100 years of 365 days.
MAX_DEADLINE_AHEAD_SECONDS = 3_153_600_000


class DeadlineError(ValueError):
    """Base class for rejected deadlines."""


class DeadlineFormatError(DeadlineError):
    pass


class DeadlineInPastError(DeadlineError):
    pass


class DeadlineTooFarError(DeadlineError):
    pass


class AmbiguousLocalTimeError(DeadlineError):
    """Local wall time falls into a DST fold (twice) or gap (never)."""


def _parse_naive(text: str) -> datetime:
    try:
        return datetime.strptime(text, DEADLINE_FORMAT)
    except ValueError:
        logger.warning("No time provided or format was wrong; defaulting to %s.", DEFAULT_TIME)

    try:
        return datetime.strptime(f"{text} {DEFAULT_TIME}", DEADLINE_FORMAT)
    except ValueError as e:
        raise DeadlineFormatError(
            f"Failed to parse date {text!r}. Expected format: dd/mm/yyyy or dd/mm/yyyy HH:MM ({e})"
        ) from e


def _to_local_timestamp(naive: datetime) -> int:
    # fold=0 and fold=1 only disagree when the wall time is ambiguous or missing.
    early = naive.replace(fold=0).astimezone()
    late = naive.replace(fold=1).astimezone()
    if early.utcoffset() != late.utcoffset():
        raise AmbiguousLocalTimeError(
            f"{naive:%d/%m/%Y %H:%M} is ambiguous or does not exist in the local time zone"
        )
    return int(early.timestamp())


def parse_deadline(text: str, *, now: float | None = None) -> int:
    """
    Parse `text` into an epoch-seconds deadline strictly in the future.

    Raises:
        DeadlineFormatError: neither `dd/mm/yyyy HH:MM` nor `dd/mm/yyyy` matched.
        AmbiguousLocalTimeError: the local wall time is ambiguous or non-existent.
        DeadlineInPastError: the deadline is not later than `now`.
        DeadlineTooFarError: the deadline is more than 100 years ahead.
    """
    if now is None:
        now = time.time()

    naive = _parse_naive((text or "").strip())
    ts = _to_local_timestamp(naive)

    if ts <= now:
        raise DeadlineInPastError(f"Date must be in the future (got {naive:%d/%m/%Y %H:%M}).")
    if ts > now + MAX_DEADLINE_AHEAD_SECONDS:
        raise DeadlineTooFarError(
            "Are you sure you're going to be around that long? "
            "Please enter a date within 100 years from now."
        )

    logger.debug("Parsed deadline %r -> %s", text, ts)
    return ts
