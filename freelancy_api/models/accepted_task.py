from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.types import JSON

from freelancy_api.core.base import Base
from freelancy_api.services.records import MAX_EMAIL_LENGTH, MAX_JOB_REF_LENGTH


class AcceptedTaskRow(Base):
    __tablename__ = "accepted_tasks"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(32), nullable=False, unique=True, index=True)

    # ✅ ownership (always the verified caller at creation)
    accepted_by_email = Column(String(MAX_EMAIL_LENGTH), nullable=False, index=True)
    accepted_at = Column(DateTime(timezone=True), nullable=False)

    # Not a foreign key: jobs are not checked for existence.
    job_id = Column(String(MAX_JOB_REF_LENGTH), nullable=True, index=True)

    fields = Column(JSON, nullable=False, default=dict)
