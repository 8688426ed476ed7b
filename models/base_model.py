#!/usr/bin/env python3
"""
Declarative base and the common columns of users and chirps.

Every BaseModel row has a UUID string id and UTC created_at / updated_at.
The timestamps are filled on the Python side so they are set as soon as the
object is built; the server defaults cover rows written outside the ORM.
"""

from __future__ import annotations

from datetime import datetime, timezone
import uuid

# models.storage is resolved at call time; models/__init__.py creates it
import models

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel:
    """id / created_at / updated_at, and save() through models.storage."""

    id = Column(String(36), primary_key=True, default=new_id, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(),
                        onupdate=utcnow, nullable=False)

    def __init__(self, **kwargs):
        now = utcnow()
        kwargs.setdefault("id", new_id())
        kwargs.setdefault("created_at", now)
        kwargs.setdefault("updated_at", now)
        for key, value in kwargs.items():
            setattr(self, key, value)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self.id}>"

    def save(self):
        """Bump updated_at and commit."""
        self.updated_at = utcnow()
        models.storage.new(self)
        models.storage.save()
