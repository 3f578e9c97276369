"""
Sequential human-readable codes (PROG001, RUT002, HOR003, TAR004, ...).

A code is a fixed prefix followed by a number zero-padded to at least
`CODE_DIGITS` digits. The next code is derived from the last issued one;
a missing or malformed last code restarts the sequence at 1.
"""

import re
from logging import getLogger
from typing import Optional

from distribution.src.constants import CODE_DIGITS, MAX_CODE_NUMBER, REGEX_CODE_NUMBER
from distribution.src.store import EntityStore

logger = getLogger("uvicorn.error")


def parseCodeNumber(code: str, prefix: str) -> int:
    """
    Extract the numeric suffix of a code.

    Args:
        code (str): The code to parse, e.g. "PROG009".
        prefix (str): The expected prefix, e.g. "PROG".

    Returns:
        int: The numeric suffix, or 0 when the code does not carry the prefix,
        the suffix is empty or not purely digits, or the suffix is larger
        than `MAX_CODE_NUMBER`.

    Example:
        >>> parseCodeNumber("PROG009", "PROG")
        9
        >>> parseCodeNumber("BAD", "PROG")
        0
    """
    if not code or not code.startswith(prefix):
        logger.warning(f"Invalid code format: {code!r}, restarting {prefix} sequence")
        return 0

    numericPart = code[len(prefix) :]
    if re.match(REGEX_CODE_NUMBER, numericPart) is None:
        logger.warning(f"Invalid numeric code: {numericPart!r}, using 0")
        return 0

    number = int(numericPart)
    if number > MAX_CODE_NUMBER:
        logger.warning(f"Numeric code out of range: {numericPart}, using 0")
        return 0
    return number


def nextCode(lastCode: Optional[str], prefix: str) -> str:
    """
    Compute the code following `lastCode` in the `prefix` sequence.

    Args:
        lastCode (Optional[str]): The greatest code issued so far, or None
            when no entity exists yet.
        prefix (str): The code prefix of the entity kind.

    Returns:
        str: The next code. The suffix is padded to three digits and simply
        grows longer past 999.

    Example:
        >>> nextCode(None, "TAR")
        'TAR001'
        >>> nextCode("TAR099", "TAR")
        'TAR100'
        >>> nextCode("TAR999", "TAR")
        'TAR1000'
    """
    number = 0 if lastCode is None else parseCodeNumber(lastCode, prefix)
    return f"{prefix}{number + 1:0{CODE_DIGITS}d}"


def generateCode(store: EntityStore, prefix: str) -> str:
    """Derive the next code from the last entity held by the store."""
    lastEntity = store.findTopByCodeDesc()
    lastCode = None if lastEntity is None else store.codeOf(lastEntity)
    return nextCode(lastCode, prefix)
