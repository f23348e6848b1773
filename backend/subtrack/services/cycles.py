"""Billing cycle definitions and calendar arithmetic shared by the renewal engine."""

import calendar as cal
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from subtrack.core.config import settings
from subtrack.models.subscription import CycleKind

logger = logging.getLogger(__name__)

AVERAGE_DAYS_PER_MONTH = Decimal("30.44")
DAYS_PER_YEAR = Decimal("365")


class InvalidCycleError(ValueError):
    """Raised when a cycle kind is unknown or its duration is not a positive integer."""


@dataclass(frozen=True)
class CycleDefinition:
    kind: CycleKind
    duration: int = 1

    def __post_init__(self) -> None:
        if not isinstance(self.kind, CycleKind):
            raise InvalidCycleError(f"Unknown cycle kind: {self.kind!r}")
        if (
            isinstance(self.duration, bool)
            or not isinstance(self.duration, int)
            or self.duration < 1
        ):
            raise InvalidCycleError(f"Cycle duration must be a positive integer, got {self.duration!r}")


def normalize_cycle(kind: CycleKind | str, duration: int) -> CycleDefinition:
    """Validate a cycle kind/duration pair and build a CycleDefinition.

    Args:
        kind: A CycleKind or its tag ("MONTHLY", "QUARTERLY", "YEARLY"), case-insensitive.
        duration: Number of kind units making up one cycle.

    Returns:
        The validated cycle definition.

    Raises:
        InvalidCycleError: If the kind is unrecognized or the duration is below 1.
    """
    if not isinstance(kind, CycleKind):
        if not isinstance(kind, str):
            raise InvalidCycleError(f"Unknown cycle kind: {kind!r}")
        try:
            kind = CycleKind(kind.strip().upper())
        except ValueError:
            raise InvalidCycleError(f"Unknown cycle kind: {kind!r}") from None
    return CycleDefinition(kind=kind, duration=duration)


def parse_cycle_or_default(kind: object, duration: object) -> CycleDefinition:
    """Read a cycle from persisted data, falling back to the configured default.

    Corrupted rows must not break listings or statistics, so an invalid pair is
    logged and replaced by FALLBACK_CYCLE_KIND x FALLBACK_CYCLE_DURATION.
    """
    try:
        return normalize_cycle(kind, duration)  # type: ignore[arg-type]
    except InvalidCycleError as exc:
        fallback = normalize_cycle(settings.FALLBACK_CYCLE_KIND, settings.FALLBACK_CYCLE_DURATION)
        logger.warning(
            "Invalid persisted cycle (%r, %r): %s; using %s x %d",
            kind,
            duration,
            exc,
            fallback.kind.value,
            fallback.duration,
        )
        return fallback


def months_per_cycle(cycle: CycleDefinition) -> int:
    """Return the length of one cycle in whole calendar months."""
    if cycle.kind == CycleKind.MONTHLY:
        return cycle.duration
    elif cycle.kind == CycleKind.QUARTERLY:
        return cycle.duration * 3
    elif cycle.kind == CycleKind.YEARLY:
        return cycle.duration * 12
    raise InvalidCycleError(f"Unknown cycle kind: {cycle.kind!r}")


def cycle_length_days(cycle: CycleDefinition) -> Decimal:
    """Approximate length of one cycle in days, for rate derivation only."""
    if cycle.kind == CycleKind.YEARLY:
        return DAYS_PER_YEAR * cycle.duration
    return AVERAGE_DAYS_PER_MONTH * months_per_cycle(cycle)


def add_months(d: date, months: int) -> date:
    """Add months to a date, clamping to last day of month."""
    month = d.month - 1 + months
    year = d.year + month // 12
    month = month % 12 + 1
    max_day = cal.monthrange(year, month)[1]
    day = min(d.day, max_day)
    return d.replace(year=year, month=month, day=day)


def add_cycles(d: date, cycle: CycleDefinition, count: int = 1) -> date:
    """Add count whole cycles to a date in a single calendar step."""
    return add_months(d, months_per_cycle(cycle) * count)
