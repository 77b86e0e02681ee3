"""Base classes shared by persisted records"""

import uuid
from sqlmodel import SQLModel


def generate_uuid() -> str:
    """Opaque identifier for invoices, items and notifications"""
    return uuid.uuid4().hex


class BaseModel(SQLModel):
    """Base for all SQLModel records of the service"""
