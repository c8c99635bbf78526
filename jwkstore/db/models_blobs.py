"""SQLAlchemy model for stored key record blobs."""

from datetime import datetime

from sqlalchemy import DateTime, LargeBinary, String, func
from sqlalchemy.orm import Mapped, mapped_column

from jwkstore.db.base import BaseEntity

BLOB_KEY_MAX_LENGTH = 255


class BlobEntity(BaseEntity):
    """One key-value entry, addressed as ``{purpose}:key:{id}``."""

    __tablename__ = "jwk_blobs"

    key: Mapped[str] = mapped_column(String(BLOB_KEY_MAX_LENGTH), primary_key=True)
    blob: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, onupdate=func.now()
    )
