from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID
from datetime import datetime


class NoteCreate(BaseModel):
    customer_id: UUID
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)


class NoteUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = Field(None, min_length=1)


class NoteOut(BaseModel):
    id: UUID
    customer_id: UUID
    title: str
    content: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
