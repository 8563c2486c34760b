from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
import structlog

from crisis_updates.models.crisis_update import CrisisUpdateRow, StoreMeta
from crisis_updates.schemas.crisis_update import CrisisUpdate, StoreSnapshot
from crisis_updates.services.crisis_store import CrisisUpdateStore

logger = structlog.get_logger()


class SnapshotService:
    """
    Saves and restores the in-memory store through SQLAlchemy.

    A save replaces the previous snapshot wholesale inside one transaction,
    so the tables always hold one consistent copy of the store.
    """

    @classmethod
    async def save_snapshot(cls, session: AsyncSession, snapshot: StoreSnapshot) -> None:
        async with session.begin():
            await session.execute(delete(CrisisUpdateRow))
            await session.execute(delete(StoreMeta))
            session.add(StoreMeta(key=StoreMeta.NEXT_ID, value=snapshot.next_id))
            session.add_all(
                CrisisUpdateRow(
                    id=record.id,
                    title=record.title,
                    description=record.description,
                    location=record.location,
                    timestamp=record.timestamp,
                )
                for record in snapshot.records
            )

    @classmethod
    async def load_snapshot(cls, session: AsyncSession) -> StoreSnapshot:
        rows = (
            await session.execute(select(CrisisUpdateRow).order_by(CrisisUpdateRow.id))
        ).scalars().all()
        next_id = (
            await session.execute(
                select(StoreMeta.value).where(StoreMeta.key == StoreMeta.NEXT_ID)
            )
        ).scalar_one_or_none()

        records = [
            CrisisUpdate(
                id=row.id,
                title=row.title,
                description=row.description,
                location=row.location,
                timestamp=row.timestamp,
            )
            for row in rows
        ]
        if next_id is None:
            # No counter saved yet, fall back to just past the highest id
            next_id = records[-1].id + 1 if records else CrisisUpdateStore.FIRST_ID
        return StoreSnapshot(next_id=next_id, records=records)

    @classmethod
    async def restore_store(cls, session_factory: async_sessionmaker, store: CrisisUpdateStore) -> None:
        async with session_factory() as session:
            snapshot = await cls.load_snapshot(session)
        store.restore(snapshot)
        logger.info("snapshot_loaded", records=len(snapshot.records), next_id=snapshot.next_id)

    @classmethod
    async def persist_store(cls, session_factory: async_sessionmaker, store: CrisisUpdateStore) -> None:
        snapshot = store.snapshot()
        async with session_factory() as session:
            await cls.save_snapshot(session, snapshot)
        logger.info("snapshot_saved", records=len(snapshot.records), next_id=snapshot.next_id)
