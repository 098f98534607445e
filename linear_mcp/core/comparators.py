"""Filter comparators shared by the list tools.

Each comparator mirrors the operator set of the matching Linear GraphQL
comparator input. Unknown operators are rejected, unset ones are dropped when
the comparator is turned into a filter value with :func:`comparator_value`.
"""
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Number = Union[int, float]


class _Comparator(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class IdComparator(_Comparator):
    eq: Optional[str] = Field(None, description="Equals constraint.")
    neq: Optional[str] = Field(None, description="Not-equals constraint.")
    in_: Optional[List[str]] = Field(None, alias="in", description="In-array constraint.")
    nin: Optional[List[str]] = Field(None, description="Not-in-array constraint.")


class StringComparator(_Comparator):
    eq: Optional[str] = Field(None, description="Equals constraint.")
    neq: Optional[str] = Field(None, description="Not-equals constraint.")
    in_: Optional[List[str]] = Field(None, alias="in", description="In-array constraint.")
    nin: Optional[List[str]] = Field(None, description="Not-in-array constraint.")
    eqIgnoreCase: Optional[str] = Field(None, description="Equals constraint, case-insensitive.")
    neqIgnoreCase: Optional[str] = Field(None, description="Not-equals constraint, case-insensitive.")
    contains: Optional[str] = Field(None, description="Contains constraint.")
    notContains: Optional[str] = Field(None, description="Does-not-contain constraint.")
    containsIgnoreCase: Optional[str] = Field(None, description="Contains constraint, case-insensitive.")
    notContainsIgnoreCase: Optional[str] = Field(None, description="Does-not-contain constraint, case-insensitive.")
    startsWith: Optional[str] = Field(None, description="Starts-with constraint.")
    notStartsWith: Optional[str] = Field(None, description="Does-not-start-with constraint.")
    endsWith: Optional[str] = Field(None, description="Ends-with constraint.")
    notEndsWith: Optional[str] = Field(None, description="Does-not-end-with constraint.")


class NumberComparator(_Comparator):
    """Combine ``gt``/``gte`` with ``lt``/``lte`` to express a range."""

    eq: Optional[Number] = Field(None, description="Equals constraint.")
    neq: Optional[Number] = Field(None, description="Not-equals constraint.")
    lt: Optional[Number] = Field(None, description="Less-than constraint.")
    lte: Optional[Number] = Field(None, description="Less-than-or-equal constraint.")
    gt: Optional[Number] = Field(None, description="Greater-than constraint.")
    gte: Optional[Number] = Field(None, description="Greater-than-or-equal constraint.")
    in_: Optional[List[Number]] = Field(None, alias="in", description="In-array constraint.")
    nin: Optional[List[Number]] = Field(None, description="Not-in-array constraint.")


_DATE_HINT = " ISO 8601 date, or an ISO 8601 duration relative to now (e.g. -P2W)."


class DateComparator(_Comparator):
    """Dates are passed through verbatim; the API resolves relative durations."""

    eq: Optional[str] = Field(None, description="Equals constraint." + _DATE_HINT)
    neq: Optional[str] = Field(None, description="Not-equals constraint." + _DATE_HINT)
    lt: Optional[str] = Field(None, description="Before constraint." + _DATE_HINT)
    lte: Optional[str] = Field(None, description="Before-or-on constraint." + _DATE_HINT)
    gt: Optional[str] = Field(None, description="After constraint." + _DATE_HINT)
    gte: Optional[str] = Field(None, description="After-or-on constraint." + _DATE_HINT)
    in_: Optional[List[str]] = Field(None, alias="in", description="In-array constraint.")
    nin: Optional[List[str]] = Field(None, description="Not-in-array constraint.")


def comparator_value(comparator: _Comparator) -> Dict[str, Any]:
    """Wire form of a comparator: aliased operator names, unset operators omitted."""
    return comparator.model_dump(by_alias=True, exclude_none=True)
