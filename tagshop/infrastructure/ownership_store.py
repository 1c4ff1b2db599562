"""SQL Ownership Store — OwnershipStore protocol over async SQLAlchemy sessions.

Invariants:
    - One short-lived session per call; every call commits or rolls back
    - set_tag is insert-or-update inside a single session (one DB transaction)
    - Failures surface as DatabaseError via DatabaseSessionManager.session()
"""

from sqlalchemy import delete, select

from tagshop.core.domain_types import Identity, TagId
from tagshop.infrastructure.database import DatabaseSessionManager
from tagshop.models.tag_ownership import TagOwnership


class SqlOwnershipStore:
    """Persists identity → tag id rows in the tag_ownership table."""

    def __init__(self, manager: DatabaseSessionManager):
        self._manager = manager

    async def get_tag(self, identity: Identity) -> TagId | None:
        async with self._manager.session("get_tag") as db:
            result = await db.execute(
                select(TagOwnership.tag_id)
                .where(TagOwnership.identity == identity)
            )
            tag_id = result.scalar_one_or_none()
        return TagId(tag_id) if tag_id is not None else None

    async def set_tag(self, identity: Identity, tag_id: TagId) -> None:
        async with self._manager.session("set_tag") as db:
            row = await db.get(TagOwnership, identity)
            if row is None:
                db.add(TagOwnership(identity=identity, tag_id=tag_id))
            else:
                row.tag_id = tag_id
            await db.commit()

    async def clear_tag(self, identity: Identity) -> None:
        async with self._manager.session("clear_tag") as db:
            await db.execute(
                delete(TagOwnership).where(TagOwnership.identity == identity)
            )
            await db.commit()

    async def get_all(self) -> dict[str, int]:
        async with self._manager.session("get_all") as db:
            result = await db.execute(
                select(TagOwnership.identity, TagOwnership.tag_id)
                .order_by(TagOwnership.identity)
            )
            return {identity: tag_id for identity, tag_id in result.all()}
