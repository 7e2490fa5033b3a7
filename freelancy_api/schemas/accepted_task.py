from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AcceptedTaskCreate(BaseModel):
    # acceptedByEmail/acceptedAt may be present in the body; they are ignored.
    model_config = ConfigDict(extra="allow")

    jobId: Optional[str] = None


class AcceptedTaskOut(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(alias="_id")
    jobId: Optional[str] = None
    acceptedByEmail: str
    acceptedAt: datetime
