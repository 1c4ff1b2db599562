"""Tag Ownership ORM — one row per identity holding the owned tag id.

Invariants:
    - identity is the primary key (case-folded): at most one tag per identity
    - No row means "no tag"; tag_id is never null and never -1
    - tag_id is NOT a foreign key: catalog lives in config and ids may go stale
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from tagshop.core.domain_types import MAX_IDENTITY_LENGTH
from tagshop.db.base import Base


class TagOwnership(Base):
    __tablename__ = "tag_ownership"

    identity: Mapped[str] = mapped_column(String(MAX_IDENTITY_LENGTH), primary_key=True)
    tag_id: Mapped[int] = mapped_column(Integer, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
