"""Tests for the in-memory onboarding store."""

import threading

import pytest

from onboarding_api.schemas.onboarding import OnboardingRecord, OnboardingStatus
from onboarding_api.services.store import InMemoryOnboardingStore, InvalidStatusTransition


def make_record(token, email, slug):
    return OnboardingRecord(token=token, slug=slug, payload={"owner_email": email, "name": slug})


def test_set_then_get_round_trip(store):
    record = make_record("t1", "a@example.com", "alpha")
    store.set("t1", record)
    assert store.get("t1") == record


def test_delete_removes_record_and_indexes(store):
    store.set("t1", make_record("t1", "a@example.com", "alpha"))
    store.delete("t1")
    assert store.get("t1") is None
    assert store.find_by_email_or_slug("a@example.com", "alpha") is None


def test_delete_unknown_is_noop(store):
    store.delete("missing")
    assert store.get_all() == []


def test_find_by_slug_only(store):
    first = make_record("t1", "a@example.com", "alpha")
    second = make_record("t2", "b@example.com", "beta")
    store.set("t1", first)
    store.set("t2", second)
    assert store.find_by_email_or_slug("nobody@example.com", "beta") == second


def test_email_match_takes_priority_over_slug(store):
    first = make_record("t1", "a@example.com", "alpha")
    second = make_record("t2", "b@example.com", "beta")
    store.set("t1", first)
    store.set("t2", second)
    assert store.find_by_email_or_slug("a@example.com", "beta") == first


def test_email_lookup_is_case_insensitive(store):
    store.set("t1", make_record("t1", "Maria@Example.com", "alpha"))
    assert store.find_by_email_or_slug("maria@example.com", "other").token == "t1"


def test_update_merges_and_stamps(store):
    store.set("t1", make_record("t1", "a@example.com", "alpha"))
    updated = store.update(
        "t1",
        facebook_access_token="fb-token",
        facebook_user_data={"id": "42"},
        status=OnboardingStatus.CONNECTED,
    )
    assert updated.status == OnboardingStatus.CONNECTED
    assert updated.facebook_user_data == {"id": "42"}
    assert updated.updated_at is not None
    assert store.get("t1").facebook_access_token == "fb-token"
    assert store.get("t1").token == "t1"


def test_update_unknown_token_is_silent(store):
    assert store.update("missing", status=OnboardingStatus.CONNECTED) is None
    assert store.get_all() == []


def test_update_rejects_backwards_status(store):
    store.set("t1", make_record("t1", "a@example.com", "alpha"))
    store.update("t1", status="completed")
    with pytest.raises(InvalidStatusTransition):
        store.update("t1", status=OnboardingStatus.PENDING)
    assert store.get("t1").status == OnboardingStatus.COMPLETED


def test_insert_if_absent_detects_duplicates(store):
    first, created = store.insert_if_absent(make_record("t1", "a@example.com", "alpha"))
    assert created is True

    existing, created = store.insert_if_absent(make_record("t2", "a@example.com", "other"))
    assert created is False
    assert existing.token == "t1"

    existing, created = store.insert_if_absent(make_record("t3", "c@example.com", "alpha"))
    assert created is False
    assert existing.token == "t1"
    assert len(store.get_all()) == 1


def test_insert_if_absent_is_atomic_under_threads():
    store = InMemoryOnboardingStore()
    results = []

    def submit(i):
        _, created = store.insert_if_absent(make_record(f"t{i}", "same@example.com", f"slug-{i}"))
        results.append(created)

    threads = [threading.Thread(target=submit, args=(i,)) for i in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count(True) == 1
    assert len(store.get_all()) == 1


def test_set_overwrite_moves_indexes(store):
    store.set("t1", make_record("t1", "a@example.com", "alpha"))
    store.set("t1", make_record("t1", "b@example.com", "beta"))
    assert store.find_by_email_or_slug("a@example.com", "alpha") is None
    assert store.find_by_email_or_slug("b@example.com", None).slug == "beta"


def test_clear_returns_count(store):
    store.set("t1", make_record("t1", "a@example.com", "alpha"))
    store.set("t2", make_record("t2", "b@example.com", "beta"))
    assert store.clear() == 2
    assert store.get_all() == []
    assert store.find_by_email_or_slug("a@example.com", "beta") is None


def test_status_only_moves_forward():
    assert OnboardingStatus.PENDING.can_transition_to(OnboardingStatus.CONNECTED)
    assert OnboardingStatus.CONNECTED.can_transition_to(OnboardingStatus.CONNECTED)
    assert not OnboardingStatus.COMPLETED.can_transition_to(OnboardingStatus.CONNECTED)
