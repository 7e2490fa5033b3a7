from pydantic import BaseModel


class InsertResultOut(BaseModel):
    acknowledged: bool
    insertedId: str


class UpdateResultOut(BaseModel):
    acknowledged: bool
    matchedCount: int
    modifiedCount: int


class DeleteResultOut(BaseModel):
    acknowledged: bool
    deletedCount: int
