"""Shared base for persisted domain entities"""

import uuid
from sqlmodel import SQLModel


def generate_uuid() -> str:
    """Generate a new opaque identifier (UUID4 string)"""
    return str(uuid.uuid4())


class BaseModel(SQLModel):
    """Base class for SQLModel entities"""
    pass
