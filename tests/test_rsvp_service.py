"""
Upsert and wipe rules, exercised against both storage backends.
"""
from __future__ import annotations

import pytest

from potluck.repositories.base import DuplicateNameError
from potluck.services.rsvp_service import NameRequiredError, RsvpService, UnauthorizedError


def test_new_name_creates_one_record(storage):
    svc = RsvpService(storage)
    result = svc.upsert("Ana", True, "Salad")

    assert result.created is True
    assert result.updated is False
    records = svc.list_all()
    assert len(records) == 1
    assert records[0].name == "Ana"
    assert records[0].attending is True
    assert records[0].dish == "Salad"


def test_resubmitting_any_casing_updates_in_place(storage):
    svc = RsvpService(storage)
    svc.upsert("Ana", True, "Salad")
    original = svc.list_all()[0]

    for variant, attending, dish in ((" ana ", False, "Bread"), ("ANA", True, None)):
        result = svc.upsert(variant, attending, dish)
        assert result.updated is True

    records = svc.list_all()
    assert len(records) == 1
    assert records[0].id == original.id
    assert records[0].created_at == original.created_at
    assert records[0].name == "Ana"
    assert records[0].attending is True
    assert records[0].dish is None


def test_name_is_trimmed_before_storage(storage):
    svc = RsvpService(storage)
    svc.upsert("  Bo  ", True)
    assert svc.list_all()[0].name == "Bo"


@pytest.mark.parametrize("blank", ["", "   ", None, "\t\n"])
def test_blank_name_is_rejected_without_mutation(storage, blank):
    svc = RsvpService(storage)
    svc.upsert("Ana", True, "Salad")
    before = svc.list_all()

    with pytest.raises(NameRequiredError):
        svc.upsert(blank, True, "Cake")

    assert svc.list_all() == before


@pytest.mark.parametrize("dish", [None, "", "   "])
def test_missing_dish_is_stored_as_null(storage, dish):
    svc = RsvpService(storage)
    svc.upsert("Cy", True, dish)
    assert svc.list_all()[0].dish is None


def test_list_is_newest_first_regardless_of_updates(storage):
    svc = RsvpService(storage)
    svc.upsert("First", True)
    svc.upsert("Second", True)
    svc.upsert("Third", False)
    svc.upsert("first", False, "Pie")

    assert [r.name for r in svc.list_all()] == ["Third", "Second", "First"]


def test_wipe_with_correct_secret_is_idempotent(storage):
    svc = RsvpService(storage)
    svc.upsert("Ana", True)
    svc.upsert("Bo", False)

    assert svc.wipe_all("s3cret", "s3cret") == 2
    assert svc.list_all() == []
    assert svc.wipe_all("s3cret", "s3cret") == 0
    assert svc.list_all() == []


@pytest.mark.parametrize("supplied", ["wrong", "", None, "S3CRET"])
def test_wipe_with_wrong_secret_leaves_records_untouched(storage, supplied):
    svc = RsvpService(storage)
    svc.upsert("Ana", True, "Salad")
    svc.upsert("Bo", False)
    before = svc.list_all()

    with pytest.raises(UnauthorizedError):
        svc.wipe_all(supplied, "s3cret")

    after = svc.list_all()
    assert len(after) == 2
    assert after == before


def test_ids_are_not_reused_after_wipe(storage):
    svc = RsvpService(storage)
    first = svc.upsert("Ana", True).record
    svc.wipe_all("s3cret", "s3cret")
    second = svc.upsert("Ana", True).record
    assert second.id > first.id


def test_summary_counts_attendance_and_dishes(storage):
    svc = RsvpService(storage)
    svc.upsert("Ana", True, "Salad")
    svc.upsert("Bo", True)
    svc.upsert("Cy", False, "Cake")

    summary = svc.summary()
    assert summary.total == 3
    assert summary.attending == 2
    assert summary.not_attending == 1
    assert summary.dishes == 1


def test_insert_race_falls_back_to_update(storage, monkeypatch):
    svc = RsvpService(storage)
    svc.upsert("Ana", True, "Salad")
    existing = storage.find_by_name_case_insensitive("ana")

    # simulate losing the race: the first lookup misses, the insert collides
    calls = {"n": 0}
    real_find = storage.find_by_name_case_insensitive

    def flaky_find(name):
        calls["n"] += 1
        if calls["n"] == 1:
            return None
        return real_find(name)

    monkeypatch.setattr(storage, "find_by_name_case_insensitive", flaky_find)
    result = svc.upsert("ANA", False, "Soup")

    assert result.updated is True
    records = svc.list_all()
    assert len(records) == 1
    assert records[0].id == existing.id
    assert records[0].dish == "Soup"


def test_storage_rejects_duplicate_insert(storage):
    storage.insert("Ana", True, None)
    with pytest.raises(DuplicateNameError):
        storage.insert("ANA", False, None)
