from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.types import JSON

from freelancy_api.core.base import Base
from freelancy_api.services.records import MAX_EMAIL_LENGTH


class JobRow(Base):
    __tablename__ = "jobs"

    # Insertion order; "newest first" sorts on this.
    seq = Column(Integer, primary_key=True, autoincrement=True)

    # Opaque public identifier handed to clients.
    id = Column(String(32), nullable=False, unique=True, index=True)

    # ✅ ownership
    email = Column(String(MAX_EMAIL_LENGTH), nullable=False, index=True)

    posted_at = Column(DateTime(timezone=True), nullable=False)

    # Caller-supplied descriptive fields (title, description, budget, ...).
    fields = Column(JSON, nullable=False, default=dict)
