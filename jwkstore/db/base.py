"""Declarative base for jwkstore SQLAlchemy models."""

from sqlalchemy.orm import DeclarativeBase


class BaseEntity(DeclarativeBase):
    """Base class for all jwkstore database entities."""
