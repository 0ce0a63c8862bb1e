"""
Prompt store: durable, queryable storage of prompts and their metadata.

Every operation checks a connection out of the engine's bounded pool, runs
synchronously and returns it. Store-level failures surface as ``StoreError``
subclasses; nothing is retried here.
"""
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Union

from sqlalchemy import Boolean, Integer, String, Text, func, insert, literal, select
from sqlalchemy import exc as sa_exc
from sqlalchemy.orm import Session

from .. import models
from ..core.config import MAX_CONNECTIONS
from ..core.logger import get_logger
from ..database import create_db_engine, create_session_factory
from ..schemas.mapping import new_prompt_id, now_timestamp
from ..schemas.prompt import PromptInDB, PromptMetadataInDB
from .errors import (
    InvalidRequestError,
    NotFoundError,
    PoolError,
    StoreError,
    UnhandledError,
)

logger = get_logger(__name__)


def _to_record(
    prompt: models.Prompt,
    metadata: Optional[models.PromptMetadata] = None,
) -> PromptInDB:
    """Decode a prompt row and its optional metadata row into a record."""
    return PromptInDB(
        id=prompt.id,
        version=prompt.version,
        content=prompt.content,
        parent=prompt.parent,
        branched=prompt.branched,
        archived=prompt.archived,
        created_at=prompt.created_at,
        metadata=PromptMetadataInDB.model_validate(metadata) if metadata is not None else None,
    )


class PromptStore:
    """Data-access API over the ``prompts`` and ``metadata`` tables."""

    def __init__(
        self,
        db_path: Union[str, Path],
        pool_size: int = MAX_CONNECTIONS,
        pool_timeout: float = 30.0,
        busy_timeout: float = 30.0,
    ):
        self.db_path = str(db_path)
        self.engine = create_db_engine(
            self.db_path,
            pool_size=pool_size,
            pool_timeout=pool_timeout,
            busy_timeout=busy_timeout,
        )
        self.SessionLocal = create_session_factory(self.engine)
        try:
            models.Base.metadata.create_all(bind=self.engine)
        except sa_exc.SQLAlchemyError as e:
            logger.error(f"Failed to initialize database {self.db_path}: {e}")
            self.engine.dispose()
            raise

    def close(self) -> None:
        """Dispose of the engine and every pooled connection."""
        self.engine.dispose()

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        db = self.SessionLocal()
        try:
            yield db
        except StoreError:
            db.rollback()
            raise
        except sa_exc.TimeoutError as e:
            db.rollback()
            logger.error(f"Connection pool exhausted during {operation}: {e}")
            raise PoolError(str(e)) from e
        except sa_exc.SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Database error during {operation}: {e}")
            raise UnhandledError(str(e)) from e
        finally:
            db.close()

    @staticmethod
    def _with_metadata(db: Session):
        return db.query(models.Prompt, models.PromptMetadata).outerjoin(
            models.PromptMetadata, models.PromptMetadata.id == models.Prompt.id
        )

    def insert_prompt(self, prompt: PromptInDB) -> PromptInDB:
        """
        Store a new prompt row and, when attached, its metadata row.

        Both rows are committed together.

        Raises:
            UnhandledError: On constraint violations such as a duplicate id.
            PoolError: When no connection is available.
        """
        logger.info(f"Inserting: {prompt.id}")
        with self._session("insert_prompt") as db:
            db.add(models.Prompt(
                id=prompt.id,
                version=prompt.version,
                content=prompt.content,
                parent=prompt.parent,
                branched=prompt.branched,
                archived=prompt.archived,
                created_at=prompt.created_at,
            ))
            if prompt.metadata is not None:
                logger.info(f"Inserting metadata for prompt: {prompt.id}")
                db.add(models.PromptMetadata(
                    id=prompt.metadata.id,
                    name=prompt.metadata.name,
                    description=prompt.metadata.description,
                    category=prompt.metadata.category,
                    tags=prompt.metadata.tags,
                    updated_at=prompt.metadata.updated_at,
                ))
            db.commit()
        return prompt

    def update_prompt(
        self,
        prompt_id: str,
        content: str,
        branched: Optional[bool] = None,
    ) -> PromptInDB:
        """
        Append a new revision to the lineage whose parent is ``prompt_id``.

        The next version is computed from the lineage's current maximum in
        the same INSERT ... SELECT statement, so two concurrent writers never
        allocate the same version.

        Raises:
            NotFoundError: If the lineage has no rows.
        """
        new_id = new_prompt_id()
        logger.info(f"Adding version {new_id} to lineage: {prompt_id}")
        next_version = (
            select(
                literal(new_id, String),
                func.max(models.Prompt.version) + literal(1, Integer),
                literal(content, Text),
                literal(prompt_id, String),
                literal(branched, Boolean),
                literal(False, Boolean),
                literal(now_timestamp(), Integer),
            )
            .where(models.Prompt.parent == prompt_id)
            # an empty lineage yields no group, hence no inserted row
            .group_by(models.Prompt.parent)
        )
        stmt = insert(models.Prompt.__table__).from_select(
            ["id", "version", "content", "parent", "branched", "archived", "created_at"],
            next_version,
        )
        with self._session("update_prompt") as db:
            result = db.execute(stmt)
            if result.rowcount == 0:
                logger.error(f"No lineage found for id {prompt_id}")
                raise NotFoundError(f"No prompt lineage with parent {prompt_id}")
            created = db.get(models.Prompt, new_id)
            db.commit()
            return _to_record(created)

    def get_prompt(self, prompt_id: str, include_metadata: bool = False) -> Optional[PromptInDB]:
        """
        Fetch a single prompt, optionally joined with its metadata.

        Returns ``None`` when no prompt has this id.
        """
        logger.debug(f"Getting prompt with id: {prompt_id} and metadata: {include_metadata}")
        with self._session("get_prompt") as db:
            if include_metadata:
                row = self._with_metadata(db).filter(models.Prompt.id == prompt_id).first()
                if row is None:
                    return None
                return _to_record(*row)

            prompt = db.query(models.Prompt).filter(models.Prompt.id == prompt_id).first()
            if prompt is None:
                return None
            return _to_record(prompt)

    def get_prompt_content(self, prompt_id: str) -> str:
        """
        Return only the content of a prompt.

        Raises:
            NotFoundError: If no prompt has this id.
        """
        with self._session("get_prompt_content") as db:
            row = db.query(models.Prompt.content).filter(models.Prompt.id == prompt_id).first()
            if row is None:
                logger.error(f"No prompt found with id {prompt_id}")
                raise NotFoundError(f"No prompt with id {prompt_id}")
            return row.content

    def get_prompt_content_latest_version(self, prompt_id: str) -> str:
        """
        Return the content of the highest version in the lineage whose parent
        is ``prompt_id``.

        Raises:
            NotFoundError: If the lineage has no rows.
        """
        with self._session("get_prompt_content_latest_version") as db:
            row = (
                db.query(models.Prompt.content)
                .filter(models.Prompt.parent == prompt_id)
                .order_by(models.Prompt.version.desc())
                .first()
            )
            if row is None:
                logger.error(f"No prompt found with id {prompt_id} for latest version")
                raise NotFoundError(f"No prompt lineage with parent {prompt_id}")
            return row.content

    def get_prompt_versions(self, prompt_id: str) -> List[PromptInDB]:
        """Every revision in the lineage whose parent is ``prompt_id``, oldest first."""
        with self._session("get_prompt_versions") as db:
            rows = (
                self._with_metadata(db)
                .filter(models.Prompt.parent == prompt_id)
                .order_by(models.Prompt.version.asc())
                .all()
            )
            return [_to_record(prompt, metadata) for prompt, metadata in rows]

    def get_prompts(
        self,
        category: Optional[str] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> List[PromptInDB]:
        """
        Return a page of prompts, optionally restricted to one metadata category.

        Rows come back in storage order; no ordering is guaranteed.

        Raises:
            InvalidRequestError: If ``limit`` is not a positive integer or
                ``offset`` is negative.
        """
        logger.debug(f"Getting prompts with params: category={category}, offset={offset}, limit={limit}")
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            logger.error(f"Invalid request: limit={limit}")
            raise InvalidRequestError("Invalid limit value")
        if isinstance(offset, bool) or not isinstance(offset, int) or offset < 0:
            logger.error(f"Invalid request: offset={offset}")
            raise InvalidRequestError("Invalid offset value")

        with self._session("get_prompts") as db:
            query = self._with_metadata(db)
            if category is not None:
                query = query.filter(models.PromptMetadata.category == category)
            rows = query.limit(limit).offset(offset).all()
            return [_to_record(prompt, metadata) for prompt, metadata in rows]

    def get_prompt_categories(self) -> List[str]:
        """Distinct non-null categories across all metadata rows."""
        with self._session("get_prompt_categories") as db:
            rows = (
                db.query(models.PromptMetadata.category)
                .filter(models.PromptMetadata.category.isnot(None))
                .distinct()
                .all()
            )
            return [row.category for row in rows]

    def update_prompt_metadata(self, prompt_id: str, metadata: PromptMetadataInDB) -> str:
        """
        Overwrite every metadata field of an existing metadata row.

        Fields left as ``None`` are cleared. A row is never created here.

        Raises:
            NotFoundError: If the prompt has no metadata row.
        """
        logger.info(f"Updating metadata for prompt: {prompt_id}")
        with self._session("update_prompt_metadata") as db:
            rows_affected = (
                db.query(models.PromptMetadata)
                .filter(models.PromptMetadata.id == prompt_id)
                .update(
                    {
                        models.PromptMetadata.name: metadata.name,
                        models.PromptMetadata.description: metadata.description,
                        models.PromptMetadata.category: metadata.category,
                        models.PromptMetadata.tags: metadata.tags,
                        models.PromptMetadata.updated_at: metadata.updated_at,
                    },
                    synchronize_session=False,
                )
            )
            if rows_affected == 0:
                logger.error(f"No metadata found for prompt {prompt_id}")
                raise NotFoundError(f"No metadata for prompt {prompt_id}")
            db.commit()
        return prompt_id

    def delete_prompt(self, prompt_id: str) -> bool:
        """Archive a prompt. Returns whether a row was affected."""
        logger.info(f"Archiving prompt: {prompt_id}")
        with self._session("delete_prompt") as db:
            rows_affected = (
                db.query(models.Prompt)
                .filter(models.Prompt.id == prompt_id)
                .update({models.Prompt.archived: True}, synchronize_session=False)
            )
            db.commit()
        return rows_affected > 0
