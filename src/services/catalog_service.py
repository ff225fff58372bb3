"""
Catalog access for the public site.

This module provides:
- CatalogStore, the table-style interface used for catalog rows
- SqlCatalogStore, its SQLAlchemy implementation
- CatalogService, which loads active packages, active tickets and published
  news for display, keeps the last good data when a refresh fails, and
  narrows packages to the featured selection on request
"""
from contextlib import AbstractContextManager, contextmanager
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Protocol, Type, Union

from loguru import logger
from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import Settings, get_settings
from error_handling.exceptions import CatalogError
from error_handling.handlers import describe_validation_error, handle_errors
from models.database import TABLES, get_db_session
from models.schemas import NewsItem, Notice, Package, Ticket
from .storage_service import (
    FileStorage,
    LocalFileStorage,
    NEWS_IMAGES_BUCKET,
    PACKAGE_IMAGES_BUCKET,
    PACKAGE_PDFS_BUCKET,
    TICKET_IMAGES_BUCKET,
)


PACKAGES_TABLE = "packages"
TICKETS_TABLE = "tickets"
NEWS_TABLE = "news"

ALL_PACKAGES = "all"
FEATURED_PACKAGES = "featured"

Row = Dict[str, Any]


class CatalogStore(Protocol):
    """Table-oriented access to catalog rows."""

    def fetch(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: str = "created_at",
        descending: bool = True,
    ) -> List[Row]:
        ...

    def insert(self, table: str, values: Row) -> Row:
        ...

    def update(self, table: str, row_id: int, values: Row) -> Row:
        ...

    def delete(self, table: str, row_id: int) -> Row:
        ...


def _column_values(values: Row) -> Row:
    """Unwrap enum members to the plain strings stored in the database."""
    return {key: (value.value if isinstance(value, Enum) else value) for key, value in values.items()}


class SqlCatalogStore:
    """
    CatalogStore over SQLAlchemy sessions.

    Every call runs in its own session scope, committed on success and
    rolled back on error. Any database failure surfaces as CatalogError.
    """

    def __init__(self, session_scope: Callable[[], AbstractContextManager[Session]] = get_db_session):
        """
        Initialize the store.

        Args:
            session_scope: Factory of transactional session context managers
        """
        self.session_scope = session_scope

    @staticmethod
    def _model(table: str):
        try:
            return TABLES[table]
        except KeyError:
            raise CatalogError(f"Unknown catalog table: {table}", table=table)

    @staticmethod
    def _to_row(instance) -> Row:
        return {column.name: getattr(instance, column.name) for column in instance.__table__.columns}

    @contextmanager
    def _session(self, table: str, operation: str, failure: str) -> Iterator[Session]:
        """Session scope that reports database failures as CatalogError."""
        try:
            with self.session_scope() as session:
                yield session
        except SQLAlchemyError as e:
            raise CatalogError(
                f"{failure}: {e}",
                table=table,
                operation=operation,
                original_error=e
            ) from e
        except RuntimeError as e:
            # Raised when the engine was never initialized
            raise CatalogError(
                f"Catalog database unavailable: {e}",
                table=table,
                operation=operation,
                original_error=e
            ) from e

    def fetch(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: str = "created_at",
        descending: bool = True,
    ) -> List[Row]:
        """
        Fetch rows matching all equality filters, ordered by one column.

        Args:
            table: Catalog table name
            filters: Column/value pairs that must all match
            order_by: Column to order by
            descending: Newest first when ordering by created_at

        Returns:
            List of rows as dictionaries

        Raises:
            CatalogError: If the table or a column is unknown or the query fails
        """
        model = self._model(table)
        try:
            columns = {column: getattr(model, column) for column in filters or {}}
            order_column = getattr(model, order_by)
        except AttributeError as e:
            raise CatalogError(
                f"Unknown column for {table}: {e}",
                table=table,
                operation="fetch",
                original_error=e
            ) from e

        with self._session(table, "fetch", f"Failed to fetch {table}") as session:
            query = session.query(model)
            for column, value in _column_values(filters or {}).items():
                query = query.filter(columns[column] == value)

            if descending:
                query = query.order_by(order_column.desc(), model.id.desc())
            else:
                query = query.order_by(order_column.asc(), model.id.asc())

            return [self._to_row(row) for row in query.all()]

    def insert(self, table: str, values: Row) -> Row:
        model = self._model(table)
        with self._session(table, "insert", f"Failed to insert into {table}") as session:
            instance = model(**_column_values(values))
            session.add(instance)
            session.flush()
            return self._to_row(instance)

    def update(self, table: str, row_id: int, values: Row) -> Row:
        model = self._model(table)
        with self._session(table, "update", f"Failed to update {table} row {row_id}") as session:
            instance = session.get(model, row_id)
            if instance is None:
                raise CatalogError(
                    f"{table} row {row_id} not found",
                    table=table,
                    operation="update",
                    row_id=row_id
                )
            for column, value in _column_values(values).items():
                setattr(instance, column, value)
            session.flush()
            return self._to_row(instance)

    def delete(self, table: str, row_id: int) -> Row:
        model = self._model(table)
        with self._session(table, "delete", f"Failed to delete {table} row {row_id}") as session:
            instance = session.get(model, row_id)
            if instance is None:
                raise CatalogError(
                    f"{table} row {row_id} not found",
                    table=table,
                    operation="delete",
                    row_id=row_id
                )
            row = self._to_row(instance)
            session.delete(instance)
            return row


def rows_to_models(model: Type[BaseModel], rows: List[Row], table: str) -> List[Any]:
    """
    Validate catalog rows as display models.

    Raises:
        CatalogError: If a row does not fit the model
    """
    try:
        return [model.model_validate(row) for row in rows]
    except ValidationError as e:
        raise CatalogError(
            f"Invalid {table} row: {describe_validation_error(e)}",
            table=table,
            operation="validate",
            original_error=e
        ) from e


class CatalogService:
    """
    Public catalog as displayed on the home page.

    Each refresh replaces one list on success. On failure the list keeps its
    previous contents and a notice is returned for the user.
    """

    def __init__(self, store: CatalogStore, storage: FileStorage):
        self.store = store
        self.storage = storage
        self.packages: List[Package] = []
        self.tickets: List[Ticket] = []
        self.news: List[NewsItem] = []

    @handle_errors(title="Error", description="Failed to load travel packages")
    def refresh_packages(self) -> Optional[Notice]:
        rows = self.store.fetch(PACKAGES_TABLE, {"status": "active"})
        self.packages = rows_to_models(Package, rows, PACKAGES_TABLE)
        logger.info(f"Loaded {len(self.packages)} active packages")
        return None

    @handle_errors(title="Error", description="Failed to load air tickets")
    def refresh_tickets(self) -> Optional[Notice]:
        rows = self.store.fetch(TICKETS_TABLE, {"status": "active"})
        self.tickets = rows_to_models(Ticket, rows, TICKETS_TABLE)
        logger.info(f"Loaded {len(self.tickets)} active tickets")
        return None

    @handle_errors(title="Error", description="Failed to load news")
    def refresh_news(self) -> Optional[Notice]:
        rows = self.store.fetch(NEWS_TABLE, {"status": "published"})
        self.news = rows_to_models(NewsItem, rows, NEWS_TABLE)
        logger.info(f"Loaded {len(self.news)} published news items")
        return None

    def refresh_all(self) -> List[Notice]:
        """Refresh every section, returning the notices of those that failed."""
        notices = [self.refresh_packages(), self.refresh_tickets(), self.refresh_news()]
        return [notice for notice in notices if notice is not None]

    def filtered_packages(self, category: str = ALL_PACKAGES) -> List[Package]:
        """
        Packages shown for a home page category.

        Args:
            category: "all" for every loaded package; any other category
                shows the featured packages only

        Returns:
            Loaded packages in display order
        """
        if category == ALL_PACKAGES:
            return list(self.packages)
        return self.featured_packages()

    def featured_packages(self) -> List[Package]:
        return [pkg for pkg in self.packages if pkg.featured]

    def get_package(self, package_id: int) -> Optional[Package]:
        return next((pkg for pkg in self.packages if pkg.id == package_id), None)

    def get_ticket(self, ticket_id: int) -> Optional[Ticket]:
        return next((ticket for ticket in self.tickets if ticket.id == ticket_id), None)

    def image_urls(self, entity: Union[Package, Ticket, NewsItem]) -> List[str]:
        """Public URLs of an entity's images."""
        if isinstance(entity, Package):
            bucket = PACKAGE_IMAGES_BUCKET
        elif isinstance(entity, Ticket):
            bucket = TICKET_IMAGES_BUCKET
        else:
            bucket = NEWS_IMAGES_BUCKET
        return [self.storage.public_url(bucket, path) for path in entity.images]

    def pdf_urls(self, package: Package) -> List[str]:
        return [self.storage.public_url(PACKAGE_PDFS_BUCKET, path) for path in package.pdfs]


def open_catalog(settings: Optional[Settings] = None) -> CatalogService:
    """Catalog over the configured database and file storage; call init_db() first."""
    settings = settings or get_settings()
    return CatalogService(SqlCatalogStore(), LocalFileStorage.from_settings(settings))
