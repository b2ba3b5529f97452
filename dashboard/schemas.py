from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from models.enums import TaskStatus


class StatusUpdate(BaseModel):
    status: TaskStatus


class AssigneeUpdate(BaseModel):
    assignee_id: Optional[str] = None


class DelegateRequest(BaseModel):
    assignee_id: str = Field(..., min_length=1)
    delegated_by: Optional[str] = None
    note: Optional[str] = Field(None, max_length=1000)


class CommentRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=2000)

    @field_validator('text')
    @classmethod
    def validate_text(cls, v):
        if not v.strip():
            raise ValueError('Comment cannot be blank')
        return v.strip()


class BulkRequest(BaseModel):
    ids: List[str] = Field(..., min_length=1)

    @field_validator('ids')
    @classmethod
    def unique_ids(cls, v):
        return list(dict.fromkeys(v))


class BulkStatusRequest(BulkRequest):
    status: TaskStatus


class BulkAssignRequest(BulkRequest):
    assignee_id: Optional[str] = None
