"""Tests for database helpers."""

import sqlite3

import pytest
from sqlalchemy.exc import IntegrityError

from cableindex.core.database import is_unique_violation


class PostgresUniqueViolation(Exception):
    sqlstate = "23505"


class PostgresForeignKeyViolation(Exception):
    sqlstate = "23503"


def integrity_error(orig: Exception) -> IntegrityError:
    return IntegrityError("INSERT INTO labels ...", {}, orig)


class TestIsUniqueViolation:
    """Telling unique constraint failures apart from other integrity errors."""

    @pytest.mark.parametrize(
        "orig",
        [
            sqlite3.IntegrityError("UNIQUE constraint failed: labels.site_id, labels.ref_number"),
            PostgresUniqueViolation("duplicate key value violates unique constraint"),
        ],
    )
    def test_unique_violations(self, orig):
        assert is_unique_violation(integrity_error(orig))

    @pytest.mark.parametrize(
        "orig",
        [
            sqlite3.IntegrityError("FOREIGN KEY constraint failed"),
            sqlite3.IntegrityError("NOT NULL constraint failed: labels.source_location_id"),
            PostgresForeignKeyViolation("insert or update violates foreign key constraint"),
        ],
    )
    def test_other_integrity_errors(self, orig):
        assert not is_unique_violation(integrity_error(orig))
