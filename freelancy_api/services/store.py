# freelancy_api/services/store.py
"""
Resource store adapter.

``ResourceStore`` is the only contract request handlers depend on: single
round-trip reads and writes of Jobs and AcceptedTasks by identifier or filter.
``SqlResourceStore`` implements it on SQLAlchemy; each call uses its own
session and commits (or rolls back) before returning. Driver failures surface
as ``StoreError``.
"""
from __future__ import annotations

import abc
import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from sqlalchemy import asc, desc
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from freelancy_api.core.base import Base
from freelancy_api.core.errors import StoreError
from freelancy_api.models.accepted_task import AcceptedTaskRow
from freelancy_api.models.job import JobRow
from freelancy_api.services.records import (
    AcceptedTask,
    DeleteResult,
    InsertResult,
    Job,
    UpdateResult,
)

logger = logging.getLogger(__name__)


def new_identifier() -> str:
    return uuid.uuid4().hex


class ResourceStore(abc.ABC):
    # -------------------------
    # Jobs
    # -------------------------
    @abc.abstractmethod
    def list_jobs(self, email: str | None = None) -> list[Job]:
        """All jobs (optionally only those owned by ``email``), newest first."""

    @abc.abstractmethod
    def get_job(self, job_id: str) -> Job | None: ...

    @abc.abstractmethod
    def insert_job(self, email: str, posted_at: datetime, fields: dict[str, Any]) -> InsertResult: ...

    @abc.abstractmethod
    def update_job(self, job_id: str, fields: dict[str, Any]) -> UpdateResult:
        """Merge ``fields`` into the job's descriptive fields."""

    @abc.abstractmethod
    def delete_job(self, job_id: str) -> DeleteResult: ...

    # -------------------------
    # Accepted tasks
    # -------------------------
    @abc.abstractmethod
    def list_accepted_tasks(
        self,
        accepted_by_email: str | None = None,
        job_id: str | None = None,
    ) -> list[AcceptedTask]:
        """Tasks matching every given filter, in insertion order."""

    @abc.abstractmethod
    def get_accepted_task(self, task_id: str) -> AcceptedTask | None: ...

    @abc.abstractmethod
    def insert_accepted_task(
        self,
        accepted_by_email: str,
        accepted_at: datetime,
        job_id: str | None,
        fields: dict[str, Any],
    ) -> InsertResult: ...

    @abc.abstractmethod
    def delete_accepted_task(self, task_id: str) -> DeleteResult: ...


def _job_from_row(row: JobRow) -> Job:
    return Job(id=row.id, email=row.email, posted_at=row.posted_at, fields=dict(row.fields or {}))


def _task_from_row(row: AcceptedTaskRow) -> AcceptedTask:
    return AcceptedTask(
        id=row.id,
        accepted_by_email=row.accepted_by_email,
        accepted_at=row.accepted_at,
        job_id=row.job_id,
        fields=dict(row.fields or {}),
    )


class SqlResourceStore(ResourceStore):
    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def create_schema(self, engine: Engine) -> None:
        """Create missing tables (dev/test only; prod uses alembic)."""
        try:
            Base.metadata.create_all(bind=engine)
        except SQLAlchemyError as e:
            logger.exception("Schema creation failed")
            raise StoreError("schema creation failed") from e

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Store operation failed")
            raise StoreError("store operation failed") from e
        finally:
            db.close()

    # -------------------------
    # Jobs
    # -------------------------
    def list_jobs(self, email: str | None = None) -> list[Job]:
        with self._session() as db:
            qry = db.query(JobRow)
            if email:
                qry = qry.filter(JobRow.email == email)
            return [_job_from_row(r) for r in qry.order_by(desc(JobRow.seq)).all()]

    def get_job(self, job_id: str) -> Job | None:
        with self._session() as db:
            row = db.query(JobRow).filter(JobRow.id == job_id).first()
            return _job_from_row(row) if row else None

    def insert_job(self, email: str, posted_at: datetime, fields: dict[str, Any]) -> InsertResult:
        with self._session() as db:
            row = JobRow(id=new_identifier(), email=email, posted_at=posted_at, fields=dict(fields))
            db.add(row)
            db.commit()
            return InsertResult(inserted_id=row.id)

    def update_job(self, job_id: str, fields: dict[str, Any]) -> UpdateResult:
        with self._session() as db:
            row = db.query(JobRow).filter(JobRow.id == job_id).first()
            if not row:
                return UpdateResult(matched_count=0, modified_count=0)

            current = dict(row.fields or {})
            merged = {**current, **fields}
            if merged == current:
                return UpdateResult(matched_count=1, modified_count=0)

            # Reassign: in-place mutation of a JSON column is not tracked.
            row.fields = merged
            db.commit()
            return UpdateResult(matched_count=1, modified_count=1)

    def delete_job(self, job_id: str) -> DeleteResult:
        with self._session() as db:
            deleted = db.query(JobRow).filter(JobRow.id == job_id).delete(synchronize_session=False)
            db.commit()
            return DeleteResult(deleted_count=int(deleted or 0))

    # -------------------------
    # Accepted tasks
    # -------------------------
    def list_accepted_tasks(
        self,
        accepted_by_email: str | None = None,
        job_id: str | None = None,
    ) -> list[AcceptedTask]:
        with self._session() as db:
            qry = db.query(AcceptedTaskRow)
            if accepted_by_email:
                qry = qry.filter(AcceptedTaskRow.accepted_by_email == accepted_by_email)
            if job_id:
                qry = qry.filter(AcceptedTaskRow.job_id == job_id)
            return [_task_from_row(r) for r in qry.order_by(asc(AcceptedTaskRow.seq)).all()]

    def get_accepted_task(self, task_id: str) -> AcceptedTask | None:
        with self._session() as db:
            row = db.query(AcceptedTaskRow).filter(AcceptedTaskRow.id == task_id).first()
            return _task_from_row(row) if row else None

    def insert_accepted_task(
        self,
        accepted_by_email: str,
        accepted_at: datetime,
        job_id: str | None,
        fields: dict[str, Any],
    ) -> InsertResult:
        with self._session() as db:
            row = AcceptedTaskRow(
                id=new_identifier(),
                accepted_by_email=accepted_by_email,
                accepted_at=accepted_at,
                job_id=job_id,
                fields=dict(fields),
            )
            db.add(row)
            db.commit()
            return InsertResult(inserted_id=row.id)

    def delete_accepted_task(self, task_id: str) -> DeleteResult:
        with self._session() as db:
            deleted = (
                db.query(AcceptedTaskRow)
                .filter(AcceptedTaskRow.id == task_id)
                .delete(synchronize_session=False)
            )
            db.commit()
            return DeleteResult(deleted_count=int(deleted or 0))
