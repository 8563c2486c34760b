"""
Crisis Update Models - snapshot tables for the in-memory store.

The store stays the authority while the process runs. These tables only
hold what it looked like at the last save:
- crisis_update: one row per live record, id assigned by the store
- store_meta: the id counter, so deleted ids are not reissued after restart
"""

from sqlalchemy import BigInteger, Column, String, Text

from crisis_updates.db.base import Base


class CrisisUpdateRow(Base):
    __tablename__ = "crisis_update"

    # Assigned by the store, never by the database
    id = Column(BigInteger, primary_key=True, autoincrement=False)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    location = Column(Text, nullable=False, index=True)
    timestamp = Column(BigInteger, nullable=False)  # ns since epoch


class StoreMeta(Base):
    __tablename__ = "store_meta"

    key = Column(String(64), primary_key=True)
    value = Column(BigInteger, nullable=False)

    NEXT_ID = "next_id"
