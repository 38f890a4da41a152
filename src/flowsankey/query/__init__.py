"""Flow-analytics query construction."""

from flowsankey.query.builder import QueryBuilder, to_datetime, to_iso
from flowsankey.query.enums import Dimension, LimitType, Units

__all__ = [
    "Dimension",
    "LimitType",
    "QueryBuilder",
    "Units",
    "to_datetime",
    "to_iso",
]
