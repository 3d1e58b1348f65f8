"""SQL-backed podcast record store.

Wraps a single ``podcasts`` table through SQLAlchemy Core. Slug uniqueness
is enforced by the table's UNIQUE constraint at insert time; callers may
pre-check with ``exists_by_slug`` but that check is advisory only.

The optional ``script`` and ``audio`` columns were added after the table
first shipped, so databases created by older releases may lack them.
``evolve_schema`` adds them idempotently.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

import sqlalchemy as sa
from sqlalchemy import Column, DateTime, Integer, MetaData, String, Table, Text, create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from podcaster.errors import PersistenceConflict, PersistenceUnavailable, SchemaDrift
from podcaster.podcasts.models import PodcastRecord

logger = logging.getLogger(__name__)

TABLE_NAME = "podcasts"

# (column name, DDL type) for columns that older databases may be missing.
OPTIONAL_COLUMNS: tuple[tuple[str, str], ...] = (
    ("script", "TEXT"),
    ("audio", "TEXT"),
)

_DUPLICATE_COLUMN_MARKERS = ("duplicate column", "already exists")
_MISSING_COLUMN_MARKERS = ("no column named", "unknown column", "of relation")


def _is_duplicate_column(exc: SQLAlchemyError) -> bool:
    message = str(exc).lower()
    return any(marker in message for marker in _DUPLICATE_COLUMN_MARKERS)


def _is_missing_column(exc: SQLAlchemyError) -> bool:
    message = str(exc).lower()
    return any(marker in message for marker in _MISSING_COLUMN_MARKERS)


def _is_unique_violation(exc: IntegrityError) -> bool:
    message = str(exc).lower()
    return "unique" in message or "duplicate key" in message


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on round-trip; values are always written in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class PodcastStore:
    """CRUD adapter for persisted podcast records."""

    def __init__(self, url: str) -> None:
        self._engine = create_engine(url)
        self._metadata = MetaData()
        self._table = Table(
            TABLE_NAME,
            self._metadata,
            Column("id", Integer, primary_key=True, autoincrement=True),
            Column("topic", Text, nullable=False),
            Column("slug", String(255), nullable=False, unique=True),
            Column("url", Text, nullable=False),
            Column("script", Text, nullable=True),
            Column("audio", Text, nullable=True),
            Column("created_at", DateTime(timezone=True), nullable=False),
        )
        try:
            self._metadata.create_all(self._engine)
        except SQLAlchemyError:
            # Every later operation reports the store as unavailable.
            logger.warning("Could not initialize podcast store at %s", url, exc_info=True)

    # ── Schema ───────────────────────────────────────────────────

    def evolve_schema(self) -> list[str]:
        """Ensure the optional columns exist.

        "Already exists" errors are swallowed, so repeating this is a no-op.

        Returns:
            Names of the columns that were added by this call.

        Raises:
            PersistenceUnavailable: For any other database error.
        """
        added: list[str] = []
        for name, ddl_type in OPTIONAL_COLUMNS:
            try:
                with self._engine.begin() as conn:
                    conn.execute(sa.text(f"ALTER TABLE {TABLE_NAME} ADD COLUMN {name} {ddl_type}"))
            except SQLAlchemyError as exc:
                if _is_duplicate_column(exc):
                    logger.debug("Column %s already present", name)
                    continue
                raise PersistenceUnavailable(f"Schema evolution failed for {name}: {exc}") from exc
            logger.info("Added missing column %s to %s", name, TABLE_NAME)
            added.append(name)
        return added

    # ── Write operations ─────────────────────────────────────────

    def insert(self, record: PodcastRecord) -> None:
        """Insert a full record, including script and audio.

        Raises:
            PersistenceConflict: If the slug already exists.
            SchemaDrift: If the table predates the optional columns.
            PersistenceUnavailable: On any other database error.
        """
        self._insert(
            {
                "topic": record.topic,
                "slug": record.slug,
                "url": record.url,
                "script": record.script,
                "audio": record.audio,
                "created_at": record.created_at,
            }
        )

    def insert_minimal(self, record: PodcastRecord) -> None:
        """Insert only the always-present fields (topic, slug, url, created_at).

        Raises:
            PersistenceConflict: If the slug already exists.
            PersistenceUnavailable: On any other database error.
        """
        self._insert(
            {
                "topic": record.topic,
                "slug": record.slug,
                "url": record.url,
                "created_at": record.created_at,
            }
        )

    def _insert(self, values: dict[str, object]) -> None:
        try:
            with self._engine.begin() as conn:
                conn.execute(self._table.insert().values(**values))
        except IntegrityError as exc:
            if _is_unique_violation(exc):
                raise PersistenceConflict(f"Slug already exists: {values['slug']}") from exc
            raise PersistenceUnavailable(f"Insert rejected: {exc}") from exc
        except SQLAlchemyError as exc:
            if _is_missing_column(exc):
                raise SchemaDrift(f"Optional columns missing, run evolve_schema: {exc}") from exc
            raise PersistenceUnavailable(f"Insert failed: {exc}") from exc
        logger.info("Saved podcast slug %s for topic %s", values["slug"], values["topic"])

    # ── Read operations ──────────────────────────────────────────

    def exists_by_slug(self, slug: str) -> bool:
        """Check whether a record with this slug exists.

        Raises:
            PersistenceUnavailable: If the store cannot be queried.
        """
        stmt = sa.select(self._table.c.slug).where(self._table.c.slug == slug).limit(1)
        try:
            with self._engine.connect() as conn:
                return conn.execute(stmt).first() is not None
        except SQLAlchemyError as exc:
            raise PersistenceUnavailable(f"Slug lookup failed: {exc}") from exc

    def list_recent(self, limit: int) -> list[PodcastRecord]:
        """Return up to ``limit`` records, most recently created first.

        Raises:
            PersistenceUnavailable: If the store cannot be queried.
        """
        return self._select(limit)

    def list_all(self) -> list[PodcastRecord]:
        """Return every record, most recently created first.

        Raises:
            PersistenceUnavailable: If the store cannot be queried.
        """
        return self._select(None)

    def _select(self, limit: int | None) -> list[PodcastRecord]:
        t = self._table
        stmt = sa.select(t.c.topic, t.c.slug, t.c.url, t.c.created_at).order_by(
            t.c.created_at.desc(), t.c.id.desc()
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise PersistenceUnavailable(f"Listing podcasts failed: {exc}") from exc
        return [
            PodcastRecord(
                topic=row.topic,
                slug=row.slug,
                url=row.url,
                created_at=_as_utc(row.created_at),
            )
            for row in rows
        ]
