"""
Validation checks for the Distribution API.

This module centralizes guard logic such as:
- Identifier and required field checks
- Strict date parsing
- Code uniqueness before insert

All functions raise appropriate exceptions from `distribution.src.exceptions`
when validation fails, ensuring consistent error handling.
"""

import re
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from sqlalchemy import Column

from distribution.src import exceptions
from distribution.src.constants import DATE_FORMAT, REGEX_DATE
from distribution.src.store import EntityStore


# ---------------------------------------------------------------------------
# Request validation
# ---------------------------------------------------------------------------
def notBlank(value: Optional[str], column: Column) -> None:
    """
    Ensure a required text value is present.

    Raises:
        exceptions.MissingParameter: If the value is None or only whitespace.
    """
    if value is None or value.strip() == "":
        raise exceptions.MissingParameter(column)


def positiveAmount(value: Optional[Decimal], column: Column) -> None:
    """
    Ensure a monetary amount is strictly greater than zero.

    Raises:
        exceptions.InvalidValue: If the amount is missing, zero or negative.
    """
    if value is None or value <= 0:
        raise exceptions.InvalidValue(column)


def strictDate(value: Optional[str], column: Column) -> date:
    """
    Parse a `YYYY-MM-DD` date string.

    Single digit months or days and other ISO-8601 variants are rejected.

    Returns:
        date: The parsed calendar date.

    Raises:
        exceptions.InvalidDateFormat: If the string is not a valid date.
    """
    if value is None or re.match(REGEX_DATE, value) is None:
        raise exceptions.InvalidDateFormat(column, value)
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        raise exceptions.InvalidDateFormat(column, value)


# ---------------------------------------------------------------------------
# Store validation
# ---------------------------------------------------------------------------
def uniqueCode(store: EntityStore, code: str) -> None:
    """
    Reject a freshly generated code that is already taken.

    The check and the following insert are not atomic; a concurrent writer
    may still insert the same code in between.

    Raises:
        exceptions.CodeAlreadyExists: If an entity with this code exists.
    """
    if store.existsByCode(code):
        raise exceptions.CodeAlreadyExists(store.model, code)
