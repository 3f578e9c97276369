"""
Unit tests for the sequential code generator.

`nextCode` is a pure function and needs no database; `generateCode` is
exercised against a real store on SQLite.
"""

import pytest

from distribution.src.codes import generateCode, nextCode, parseCodeNumber
from distribution.src.constants import (
    FARE_PREFIX,
    MAX_CODE_NUMBER,
    PROGRAM_PREFIX,
    ROUTE_PREFIX,
    SCHEDULE_PREFIX,
)
from distribution.src.db import Program
from distribution.src.store import EntityStore


# ---------------------------------------------------------------------------
# nextCode
# ---------------------------------------------------------------------------

class TestNextCode:
    @pytest.mark.parametrize(
        "prefix", [PROGRAM_PREFIX, ROUTE_PREFIX, SCHEDULE_PREFIX, FARE_PREFIX]
    )
    def test_no_prior_code_starts_at_001(self, prefix):
        assert nextCode(None, prefix) == f"{prefix}001"

    @pytest.mark.parametrize(
        "lastCode, expected",
        [
            ("PROG001", "PROG002"),
            ("PROG009", "PROG010"),
            ("PROG099", "PROG100"),
            ("PROG998", "PROG999"),
        ],
    )
    def test_increments_valid_code(self, lastCode, expected):
        assert nextCode(lastCode, PROGRAM_PREFIX) == expected

    def test_grows_past_three_digits(self):
        assert nextCode("TAR999", FARE_PREFIX) == "TAR1000"
        assert nextCode("TAR1000", FARE_PREFIX) == "TAR1001"

    def test_longer_padding_is_accepted(self):
        assert nextCode("RUT0007", ROUTE_PREFIX) == "RUT008"

    @pytest.mark.parametrize(
        "lastCode",
        ["BAD", "PROG", "PROGX1", "PROG-1", "PROG+5", "PROG 12", "PROG１２", "", "RUT005"],
    )
    def test_malformed_code_restarts_sequence(self, lastCode):
        assert nextCode(lastCode, PROGRAM_PREFIX) == "PROG001"

    def test_overflowing_suffix_restarts_sequence(self):
        tooLarge = f"HOR{MAX_CODE_NUMBER + 1}"
        assert nextCode(tooLarge, SCHEDULE_PREFIX) == "HOR001"
        assert nextCode("HOR" + "9" * 40, SCHEDULE_PREFIX) == "HOR001"

    def test_largest_representable_suffix_is_incremented(self):
        assert nextCode(f"HOR{MAX_CODE_NUMBER}", SCHEDULE_PREFIX) == (
            f"HOR{MAX_CODE_NUMBER + 1}"
        )

    def test_same_input_same_output(self):
        results = {nextCode("TAR041", FARE_PREFIX) for _ in range(5)}
        assert results == {"TAR042"}


class TestParseCodeNumber:
    def test_returns_suffix(self):
        assert parseCodeNumber("RUT042", ROUTE_PREFIX) == 42

    def test_none_is_zero(self):
        assert parseCodeNumber(None, ROUTE_PREFIX) == 0


# ---------------------------------------------------------------------------
# generateCode
# ---------------------------------------------------------------------------

class TestGenerateCode:
    def test_empty_store(self, db_session):
        store = EntityStore(db_session, Program, Program.program_code)
        assert generateCode(store, PROGRAM_PREFIX) == "PROG001"

    def test_follows_greatest_code(self, db_session):
        store = EntityStore(db_session, Program, Program.program_code)
        for code in ["PROG003", "PROG009", "PROG001"]:
            store.save(Program(program_code=code))
        assert generateCode(store, PROGRAM_PREFIX) == "PROG010"

    def test_does_not_write(self, db_session):
        store = EntityStore(db_session, Program, Program.program_code)
        store.save(Program(program_code="PROG001"))
        generateCode(store, PROGRAM_PREFIX)
        assert db_session.query(Program).count() == 1
