"""Fluent builder for flow-analytics graph query payloads.

Accumulates query fields under the backend's wire keys. Nothing here is
checked against the backend schema; ``build()`` returns whatever was set.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from flowsankey.common.exceptions import InvalidQueryError
from flowsankey.query.enums import Dimension, LimitType, Units

DEFAULT_LOOKBACK = timedelta(hours=1)

# Fields the sankey endpoint ignores
LINE_ONLY_FIELDS = ("points", "previous-period")


def to_iso(moment: datetime) -> str:
    """Format a datetime as UTC ISO-8601 with millisecond precision."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def to_datetime(value: datetime | int | float | str) -> datetime:
    """Coerce a datetime, epoch milliseconds, or ISO string to a datetime.

    Raises:
        InvalidQueryError: If the value cannot be interpreted as a time.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError as e:
            raise InvalidQueryError(
                f"Invalid time value: {value!r}",
                details={"value": value},
                cause=e,
            ) from e
    raise InvalidQueryError(
        f"Unsupported time type: {type(value).__name__}",
        details={"type": type(value).__name__},
    )


class QueryBuilder:
    """Accumulates a graph query.

    Example:
        query = (
            QueryBuilder.last_minutes(60)
            .dimensions(Dimension.SRC_AS, Dimension.EXPORTER_ADDRESS)
            .filter("InIfBoundary = external")
            .units(Units.L3_BPS)
            .limit(12, LimitType.AVG)
            .build_sankey()
        )
    """

    def __init__(self, start: str | None = None, end: str | None = None) -> None:
        """Initialize with an explicit window, defaulting to the last hour.

        Args:
            start: ISO start time.
            end: ISO end time.
        """
        now = datetime.now(timezone.utc)
        self._query: dict[str, Any] = {
            "start": start if start is not None else to_iso(now - DEFAULT_LOOKBACK),
            "end": end if end is not None else to_iso(now),
        }

    @classmethod
    def last(cls, window: timedelta | int, now: datetime | None = None) -> "QueryBuilder":
        """Query the window ending now.

        Args:
            window: Window length, as a timedelta or in milliseconds.
            now: Reference end time. Defaults to the current time.
        """
        if not isinstance(window, timedelta):
            window = timedelta(milliseconds=window)
        end = now or datetime.now(timezone.utc)
        return cls(to_iso(end - window), to_iso(end))

    @classmethod
    def last_minutes(cls, n: float, now: datetime | None = None) -> "QueryBuilder":
        return cls.last(timedelta(minutes=n), now=now)

    @classmethod
    def last_hours(cls, n: float, now: datetime | None = None) -> "QueryBuilder":
        return cls.last(timedelta(hours=n), now=now)

    @classmethod
    def range(
        cls,
        start: datetime | int | float | str,
        end: datetime | int | float | str,
    ) -> "QueryBuilder":
        """Query an explicit window."""
        return cls(to_iso(to_datetime(start)), to_iso(to_datetime(end)))

    def dimensions(self, *dims: Dimension | str) -> "QueryBuilder":
        self._query["dimensions"] = [
            d.value if isinstance(d, Dimension) else d for d in dims
        ]
        return self

    def filter(self, expr: str) -> "QueryBuilder":
        self._query["filter"] = expr
        return self

    def units(self, units: Units | str) -> "QueryBuilder":
        self._query["units"] = units.value if isinstance(units, Units) else units
        return self

    def points(self, n: int) -> "QueryBuilder":
        """Set the number of time points (line graphs only)."""
        self._query["points"] = n
        return self

    def previous_period(self, flag: bool = True) -> "QueryBuilder":
        """Include the previous period for comparison (line graphs only)."""
        self._query["previous-period"] = flag
        return self

    def limit(self, n: int, limit_type: LimitType | str = LimitType.AVG) -> "QueryBuilder":
        self._query["limit"] = n
        self._query["limitType"] = (
            limit_type.value if isinstance(limit_type, LimitType) else limit_type
        )
        return self

    def truncate(self, v4: int | None = None, v6: int | None = None) -> "QueryBuilder":
        """Truncate addresses to the given prefix lengths. Falsy values are ignored."""
        if v4:
            self._query["truncate-v4"] = v4
        if v6:
            self._query["truncate-v6"] = v6
        return self

    def bidirectional(self, flag: bool = True) -> "QueryBuilder":
        self._query["bidirectional"] = flag
        return self

    def build(self) -> dict[str, Any]:
        """Get a copy of the accumulated query."""
        query = dict(self._query)
        if "dimensions" in query:
            query["dimensions"] = list(query["dimensions"])
        return query

    def build_sankey(self) -> dict[str, Any]:
        """Get a copy of the query without line-only fields."""
        query = self.build()
        for key in LINE_ONLY_FIELDS:
            query.pop(key, None)
        return query
