"""
Record Store

Contract and SQLAlchemy implementation for reading and writing portal rows.
"""

from .base import Entity, Filters, RecordKey, RecordStore
from .sqlalchemy_store import ENTITY_MAP, SQLAlchemyRecordStore

__all__ = [
    "Entity",
    "Filters",
    "RecordKey",
    "RecordStore",
    "ENTITY_MAP",
    "SQLAlchemyRecordStore",
]
