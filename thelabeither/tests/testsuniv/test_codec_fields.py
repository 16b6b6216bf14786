from datetime import UTC, datetime
from typing import Any
from unittest.mock import Mock
import json

from django.core.exceptions import ValidationError
from django.db import connection
from django.test import TestCase

from thelabeither import ABSENT, Left, Present, Right

from .models import (
    Draft,
    Failure,
    Job,
    NullableJob,
    Profile,
    ProfilePatch,
    Reason,
)


def _raw_rows(table: str, column: str) -> list[Any]:
    with connection.cursor() as cur:
        cur.execute("SELECT %s FROM %s" % (column, table))
        return [r[0] for r in cur.fetchall()]


def _set_raw(table: str, column: str, value: str) -> None:
    with connection.cursor() as cur:
        cur.execute("UPDATE %s SET %s = %%s" % (table, column), [value])


class EitherFieldTest(TestCase):
    def setUp(self) -> None:
        self.failure = Failure(
            reason=Reason.CRASHED,
            at=datetime(2025, 2, 10, 12, 0, 0, tzinfo=UTC),
        )

    def test_insert_left(self) -> None:
        """A Left is stored as an object with only the left key"""
        Job._default_manager.create(outcome=Left(42))
        rows = _raw_rows(Job._meta.db_table, "outcome")
        self.assertEqual(len(rows), 1)
        self.assertJSONEqual(rows[0], {"left": 42})

    def test_insert_right(self) -> None:
        """A Right is stored as an object with only the right key"""
        Job._default_manager.create(outcome=Right(self.failure))
        rows = _raw_rows(Job._meta.db_table, "outcome")
        self.assertJSONEqual(
            rows[0],
            {"right": {"reason": "crashed", "at": "2025-02-10T12:00:00Z"}},
        )

    def test_insert_and_select(self) -> None:
        """Data round-trips through insert and select."""
        Job._default_manager.create(outcome=Left(42))
        Job._default_manager.create(outcome=Right(self.failure))
        outcomes = [j.outcome for j in Job._default_manager.order_by("id")]
        self.assertEqual(outcomes, [Left(42), Right(self.failure)])
        self.assertIsInstance(outcomes[1].right, Failure)

    def test_update_and_select(self) -> None:
        """Data round-trips through update and select."""
        Job._default_manager.create(outcome=Left(42))
        Job._default_manager.update(outcome=Right(self.failure))
        found = Job._default_manager.get()
        self.assertEqual(found.outcome, Right(self.failure))

    def test_nullable(self) -> None:
        NullableJob._default_manager.create(outcome=None)
        self.assertIsNone(NullableJob._default_manager.get().outcome)

    def test_clean_valid(self) -> None:
        job = Job(outcome=Left(1))
        job.full_clean()
        job = Job(outcome=Right(self.failure))
        job.full_clean()

    def test_clean_invalid_payload(self) -> None:
        """Ensure Model.clean() errs when a side holds the wrong type"""
        job = Job(outcome=Right("not a failure"))
        with self.assertRaises(ValidationError):
            job.full_clean()

    def test_clean_invalid_type(self) -> None:
        """Ensure Model.clean() errs when the value isn't an Either at all"""
        job = Job()
        job.outcome = 42  # type:ignore[assignment]
        with self.assertRaises(ValidationError):
            job.full_clean()

    def test_select_conflicting(self) -> None:
        """Stored data holding both sides fails to load"""
        Job._default_manager.create(outcome=Left(1))
        _set_raw(Job._meta.db_table, "outcome", json.dumps({"left": 1, "right": 2}))
        with self.assertRaises(ValidationError) as cm:
            Job._default_manager.get()
        self.assertIn("both left and right", str(cm.exception))

    def test_select_missing(self) -> None:
        """Stored data holding neither side fails to load"""
        Job._default_manager.create(outcome=Left(1))
        _set_raw(Job._meta.db_table, "outcome", "{}")
        with self.assertRaises(ValidationError):
            Job._default_manager.get()

    def test_select_invalid_coerced(self) -> None:
        """Allow massaging invalid data upon load (e.g. for data migrations)"""
        coerce_fn = Mock()
        coerce_fn.return_value = {"left": 7}

        outcome_field = Job._meta.get_field("outcome")
        outcome_field.coerce_invalid_data = coerce_fn  # type:ignore[union-attr]

        Job._default_manager.create(outcome=Left(1))
        _set_raw(Job._meta.db_table, "outcome", json.dumps({"ok": 7}))
        try:
            with self.assertLogs("thelabeither.fields.codec", level="INFO"):
                job = Job._default_manager.get()
            coerce_fn.assert_called_once_with({"ok": 7})
            self.assertEqual(job.outcome, Left(7))
        finally:
            outcome_field.coerce_invalid_data = None  # type:ignore[union-attr]

    def test_select_invalid_coercion_fails(self) -> None:
        outcome_field = Job._meta.get_field("outcome")
        outcome_field.coerce_invalid_data = lambda v: v  # type:ignore[union-attr]

        Job._default_manager.create(outcome=Left(1))
        _set_raw(Job._meta.db_table, "outcome", json.dumps({"ok": 7}))
        try:
            with self.assertRaises(ValidationError):
                Job._default_manager.get()
        finally:
            outcome_field.coerce_invalid_data = None  # type:ignore[union-attr]

    def test_deconstruct(self) -> None:
        field = Job._meta.get_field("outcome")
        name, path, args, kwargs = field.deconstruct()
        self.assertEqual(path, "thelabeither.fields.codec.EitherField")
        self.assertIs(kwargs["left_type"], int)
        self.assertIs(kwargs["right_type"], Failure)


class EitherOptionFieldTest(TestCase):
    def test_clean_unencodable_value(self) -> None:
        """Ensure Model.clean() errs when a side can't be written at all"""
        draft = Draft(outcome=Left(ABSENT))
        with self.assertRaises(ValidationError) as cm:
            draft.full_clean()
        self.assertIn("outcome", cm.exception.message_dict)

    def test_present_null_round_trip(self) -> None:
        draft = Draft(outcome=Left(Present(None)))
        draft.full_clean()
        draft.save()
        rows = _raw_rows(Draft._meta.db_table, "outcome")
        self.assertJSONEqual(rows[0], {"left": None})
        self.assertEqual(Draft._default_manager.get().outcome, Left(Present(None)))


class PresenceModelFieldTest(TestCase):
    def test_absent_fields_not_stored(self) -> None:
        Profile._default_manager.create(patch=ProfilePatch(nickname=Present(None)))
        rows = _raw_rows(Profile._meta.db_table, "patch")
        self.assertJSONEqual(rows[0], {"nickname": None, "tags": []})

    def test_insert_and_select(self) -> None:
        patch = ProfilePatch(nickname=Present(None), tags=["x"])
        Profile._default_manager.create(patch=patch)
        found = Profile._default_manager.get()
        self.assertEqual(found.patch, patch)
        self.assertEqual(found.patch.nickname, Present(None))
        self.assertIs(found.patch.age, ABSENT)

    def test_clean_invalid_type(self) -> None:
        profile = Profile()
        profile.patch = {"nickname": "bob"}  # type:ignore[assignment]
        with self.assertRaises(ValidationError):
            profile.full_clean()
