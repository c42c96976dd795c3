import logging
import threading
from datetime import timezone
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from app.database import create_session_factory
from app.models import StringAnalysis
from app.schemas import StringProperties, StringRecord
from app.utils import compute_sha256

logger = logging.getLogger(__name__)


def _to_record(row: StringAnalysis) -> StringRecord:
    created_at = row.created_at
    # SQLite hands datetimes back without their zone
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)

    return StringRecord(
        id=row.id,
        value=row.value,
        properties=StringProperties(
            length=row.length,
            is_palindrome=row.is_palindrome,
            unique_characters=row.unique_characters,
            word_count=row.word_count,
            sha256_hash=row.sha256_hash,
            character_frequency_map=row.character_frequency_map,
        ),
        created_at=created_at,
    )


class StringStore:
    """
    Analyzed strings keyed by their SHA-256 id.

    Every operation holds one lock, so a read never sees a half-applied write
    and two inserts of the same value cannot both succeed.
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self._session_factory = session_factory or create_session_factory()
        self._lock = threading.Lock()

    def _session(self) -> Session:
        return self._session_factory()

    def insert_if_absent(self, record: StringRecord) -> bool:
        """Store a record. Returns False, changing nothing, if its id is taken."""
        with self._lock, self._session() as db:
            if db.query(StringAnalysis.seq).filter(StringAnalysis.id == record.id).first():
                logger.debug(f"Record {record.id} already stored")
                return False

            props = record.properties
            db.add(StringAnalysis(
                id=record.id,
                value=record.value,
                length=props.length,
                is_palindrome=props.is_palindrome,
                unique_characters=props.unique_characters,
                word_count=props.word_count,
                sha256_hash=props.sha256_hash,
                character_frequency_map=dict(props.character_frequency_map),
                created_at=record.created_at,
            ))
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                logger.warning(f"Duplicate insert rejected by database for {record.id}")
                return False

        logger.info(f"Stored string {record.id}")
        return True

    def get(self, string_id: str) -> Optional[StringRecord]:
        """Get string analysis by ID (hash)"""
        with self._lock, self._session() as db:
            row = db.query(StringAnalysis).filter(StringAnalysis.id == string_id).first()
            return _to_record(row) if row else None

    def get_by_value(self, value: str) -> Optional[StringRecord]:
        """Get string analysis by its original value"""
        return self.get(compute_sha256(value))

    def delete(self, string_id: str) -> bool:
        """Delete string analysis by ID. Returns False if it was not stored."""
        with self._lock, self._session() as db:
            deleted = db.query(StringAnalysis).filter(StringAnalysis.id == string_id).delete()
            db.commit()

        if deleted:
            logger.info(f"Deleted string {string_id}")
        return bool(deleted)

    def delete_by_value(self, value: str) -> bool:
        return self.delete(compute_sha256(value))

    def list_all(self) -> List[StringRecord]:
        """All records, oldest first"""
        with self._lock, self._session() as db:
            rows = db.query(StringAnalysis).order_by(StringAnalysis.seq).all()
            return [_to_record(row) for row in rows]

    def __len__(self) -> int:
        with self._lock, self._session() as db:
            return db.query(StringAnalysis).count()
