from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class JobCreate(BaseModel):
    # Descriptive fields (title, description, budget, ...) are open-ended.
    model_config = ConfigDict(extra="allow")

    email: str


class JobUpdate(BaseModel):
    model_config = ConfigDict(extra="allow")


class JobOut(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(alias="_id")
    email: str
    postedAt: datetime
