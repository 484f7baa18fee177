# storage.py
import os
from datetime import datetime, timezone
from typing import Optional

from dotenv import load_dotenv
from loguru import logger
from sqlalchemy import DateTime, LargeBinary, String, create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column

load_dotenv()

# Local file by default; nothing here talks to a remote database.
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///mindful_moments.db")

ENTRIES_KEY = "mm_entries"
SETTINGS_KEY = "mm_settings"


class Base(DeclarativeBase):
    pass


class KeyValue(Base):
    __tablename__ = "kv_store"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(timezone.utc), nullable=False
    )

    def __repr__(self):
        return f"<KeyValue key={self.key}>"


class PersistentStore:
    """Durable key -> bytes store. Failures never escape: reads give None, writes give False."""

    def __init__(self, url: Optional[str] = None):
        self.url = url or DATABASE_URL
        self.engine = create_engine(self.url)
        Base.metadata.create_all(self.engine)

    def read(self, key: str) -> Optional[bytes]:
        try:
            with Session(self.engine) as session:
                row = session.scalar(select(KeyValue).where(KeyValue.key == key))
                return bytes(row.value) if row is not None else None
        except SQLAlchemyError as e:
            logger.warning(f"store read failed for {key!r}: {e}")
            return None

    def write(self, key: str, value: bytes) -> bool:
        try:
            with Session(self.engine) as session:
                row = session.get(KeyValue, key)
                if row is None:
                    session.add(KeyValue(key=key, value=value))
                else:
                    row.value = value
                    row.updated_at = datetime.now(timezone.utc)
                session.commit()
            return True
        except SQLAlchemyError as e:
            logger.error(f"store write failed for {key!r}: {e}")
            return False

    def close(self) -> None:
        self.engine.dispose()
