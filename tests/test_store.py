from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from freelancy_api.core.errors import StoreError
from freelancy_api.services.records import is_valid_identifier
from freelancy_api.services.store import SqlResourceStore


NOW = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def test_insert_and_get_job(store):
    result = store.insert_job("a@x.com", NOW, {"title": "T"})

    assert is_valid_identifier(result.inserted_id)
    job = store.get_job(result.inserted_id)
    assert job.email == "a@x.com"
    assert job.fields == {"title": "T"}
    assert job.to_document()["postedAt"] == "2026-01-02T03:04:05+00:00"


def test_get_missing_job_is_none(store):
    assert store.get_job("0" * 32) is None


def test_list_jobs_newest_first_with_filter(store):
    a1 = store.insert_job("a@x.com", NOW, {}).inserted_id
    store.insert_job("b@x.com", NOW, {})
    a2 = store.insert_job("a@x.com", NOW, {}).inserted_id

    assert [j.id for j in store.list_jobs(email="a@x.com")] == [a2, a1]
    assert len(store.list_jobs()) == 3


def test_update_job_merges_fields(store):
    job_id = store.insert_job("a@x.com", NOW, {"title": "T", "budget": 1}).inserted_id

    result = store.update_job(job_id, {"budget": 2, "skills": ["svg"]})

    assert (result.matched_count, result.modified_count) == (1, 1)
    assert store.get_job(job_id).fields == {"title": "T", "budget": 2, "skills": ["svg"]}


def test_update_missing_job_matches_nothing(store):
    result = store.update_job("0" * 32, {"title": "x"})
    assert (result.matched_count, result.modified_count) == (0, 0)


def test_delete_job_counts(store):
    job_id = store.insert_job("a@x.com", NOW, {}).inserted_id

    assert store.delete_job(job_id).deleted_count == 1
    assert store.delete_job(job_id).deleted_count == 0


def test_accepted_task_filters(store):
    t1 = store.insert_accepted_task("a@x.com", NOW, "job-1", {}).inserted_id
    t2 = store.insert_accepted_task("a@x.com", NOW, "job-2", {}).inserted_id
    t3 = store.insert_accepted_task("b@x.com", NOW, "job-1", {"note": "n"}).inserted_id

    assert [t.id for t in store.list_accepted_tasks()] == [t1, t2, t3]
    assert [t.id for t in store.list_accepted_tasks(accepted_by_email="a@x.com")] == [t1, t2]
    assert [t.id for t in store.list_accepted_tasks(job_id="job-1")] == [t1, t3]
    assert [t.id for t in store.list_accepted_tasks("a@x.com", "job-1")] == [t1]
    assert store.get_accepted_task(t3).fields == {"note": "n"}


def test_delete_accepted_task(store):
    task_id = store.insert_accepted_task("a@x.com", NOW, None, {}).inserted_id

    assert store.delete_accepted_task(task_id).deleted_count == 1
    assert store.get_accepted_task(task_id) is None


def test_driver_errors_become_store_errors():
    session = MagicMock()
    session.query.side_effect = OperationalError("SELECT 1", {}, Exception("db down"))
    broken = SqlResourceStore(lambda: session)

    with pytest.raises(StoreError):
        broken.list_jobs()

    session.rollback.assert_called_once()
    session.close.assert_called_once()


@pytest.mark.parametrize(
    "value,expected",
    [
        ("a" * 32, True),
        ("0123456789abcdef0123456789abcdef", True),
        ("A" * 32, False),
        ("a" * 31, False),
        ("g" * 32, False),
        ("", False),
        (None, False),
    ],
)
def test_is_valid_identifier(value, expected):
    assert is_valid_identifier(value) is expected
