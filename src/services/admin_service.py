"""
AdminConsole - content management for packages, tickets and news.

The console is opened with an explicit admin session. Every mutation returns
a Notice for the dashboard; recoverable catalog and storage failures are
logged and reported as a destructive notice while the loaded lists keep
their previous contents.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Type

from loguru import logger
from pydantic import BaseModel

from config import Settings, get_settings
from error_handling.exceptions import CatalogError, StorageError
from error_handling.handlers import handle_errors, log_error
from models.schemas import (
    NewsCreate,
    NewsItem,
    NewsStatus,
    NewsUpdate,
    Notice,
    Package,
    PackageCreate,
    PackageUpdate,
    Ticket,
    TicketCreate,
    TicketUpdate,
)
from .auth_service import AuthService, UserSession, require_admin
from .catalog_service import (
    CatalogStore,
    SqlCatalogStore,
    NEWS_TABLE,
    PACKAGES_TABLE,
    TICKETS_TABLE,
    rows_to_models,
)
from .storage_service import (
    FileStorage,
    LocalFileStorage,
    NEWS_IMAGES_BUCKET,
    PACKAGE_IMAGES_BUCKET,
    PACKAGE_PDFS_BUCKET,
    TICKET_IMAGES_BUCKET,
    UploadedFile,
)


@dataclass(frozen=True)
class EntityKind:
    """How one kind of catalog entity is stored and listed."""
    table: str
    model: Type[BaseModel]
    collection: str
    image_bucket: str
    pdf_bucket: Optional[str] = None


PACKAGES = EntityKind(PACKAGES_TABLE, Package, "packages", PACKAGE_IMAGES_BUCKET, PACKAGE_PDFS_BUCKET)
TICKETS = EntityKind(TICKETS_TABLE, Ticket, "tickets", TICKET_IMAGES_BUCKET)
NEWS = EntityKind(NEWS_TABLE, NewsItem, "news", NEWS_IMAGES_BUCKET)


class AdminConsole:
    """
    Create, edit and delete catalog content.

    Example:
        session = auth.session_for(user_id, "owner@agency.com")
        console = AdminConsole(session, SqlCatalogStore(), storage)
        console.load()
        notice = console.create_package(package_data, files=[brochure_pdf, cover_jpg])
    """

    def __init__(self, session: Optional[UserSession], store: CatalogStore, storage: FileStorage):
        """
        Open the console for a session.

        Raises:
            AuthorizationError: If the session is missing or not an admin
        """
        self.session = require_admin(session)
        self.store = store
        self.storage = storage
        self.packages: List[Package] = []
        self.tickets: List[Ticket] = []
        self.news: List[NewsItem] = []

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @handle_errors(title="Error", description="Failed to load dashboard data")
    def load(self) -> Optional[Notice]:
        """Load every package, ticket and news item regardless of status."""
        packages = rows_to_models(Package, self.store.fetch(PACKAGES_TABLE), PACKAGES_TABLE)
        tickets = rows_to_models(Ticket, self.store.fetch(TICKETS_TABLE), TICKETS_TABLE)
        news = rows_to_models(NewsItem, self.store.fetch(NEWS_TABLE), NEWS_TABLE)

        self.packages, self.tickets, self.news = packages, tickets, news
        logger.info(
            f"Admin dashboard loaded | user={self.session.email} | "
            f"packages={len(packages)} | tickets={len(tickets)} | news={len(news)}"
        )
        return None

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def _sort_files(self, kind: EntityKind, files: Sequence[UploadedFile]) -> Dict[str, List[UploadedFile]]:
        """Split uploads into images and PDFs, rejecting anything else."""
        sorted_files: Dict[str, List[UploadedFile]] = {"images": []}
        if kind.pdf_bucket:
            sorted_files["pdfs"] = []

        for upload in files:
            if upload.is_image:
                sorted_files["images"].append(upload)
            elif upload.is_pdf and kind.pdf_bucket:
                sorted_files["pdfs"].append(upload)
            else:
                raise StorageError(
                    f"Unsupported file type {upload.content_type} for {upload.filename}",
                    filename=upload.filename
                )
        return sorted_files

    def _bucket(self, kind: EntityKind, field: str) -> str:
        return kind.pdf_bucket if field == "pdfs" else kind.image_bucket

    def _store_files(self, kind: EntityKind, files: Sequence[UploadedFile]) -> Dict[str, List[str]]:
        sorted_files = self._sort_files(kind, files)
        stored: Dict[str, List[str]] = {field: [] for field in sorted_files}

        try:
            for field, uploads in sorted_files.items():
                bucket = self._bucket(kind, field)
                for upload in uploads:
                    stored[field].append(
                        self.storage.upload(bucket, upload.filename, upload.data, upload.content_type)
                    )
        except StorageError:
            self._remove_files(kind, stored)
            raise
        return stored

    def _remove_files(self, kind: EntityKind, stored: Dict[str, List[str]]) -> None:
        for field, paths in stored.items():
            if paths:
                self.storage.remove(self._bucket(kind, field), paths)

    # ------------------------------------------------------------------
    # Generic mutations
    # ------------------------------------------------------------------

    def _replace_in_collection(self, kind: EntityKind, item: Any) -> None:
        collection = getattr(self, kind.collection)
        for index, existing in enumerate(collection):
            if existing.id == item.id:
                collection[index] = item
                return
        collection.insert(0, item)

    def _fetch_one(self, kind: EntityKind, row_id: int):
        rows = self.store.fetch(kind.table, {"id": row_id})
        if not rows:
            raise CatalogError(f"{kind.table} row {row_id} not found", table=kind.table, operation="fetch")
        return kind.model.model_validate(rows[0])

    def _create(self, kind: EntityKind, values: Dict[str, Any], files: Sequence[UploadedFile]):
        stored = self._store_files(kind, files)
        try:
            row = self.store.insert(kind.table, {**values, **stored})
        except CatalogError:
            self._remove_files(kind, stored)
            raise

        item = kind.model.model_validate(row)
        getattr(self, kind.collection).insert(0, item)
        logger.info(f"Created {kind.table} row {item.id} | user={self.session.email}")
        return item

    def _update(self, kind: EntityKind, row_id: int, values: Dict[str, Any], files: Sequence[UploadedFile]):
        stored = self._store_files(kind, files)
        try:
            if any(stored.values()):
                current = self._fetch_one(kind, row_id)
                for field, paths in stored.items():
                    values[field] = list(getattr(current, field)) + paths
            row = self.store.update(kind.table, row_id, values)
        except CatalogError:
            self._remove_files(kind, stored)
            raise

        item = kind.model.model_validate(row)
        self._replace_in_collection(kind, item)
        logger.info(f"Updated {kind.table} row {row_id} | fields={sorted(values)} | user={self.session.email}")
        return item

    def _delete(self, kind: EntityKind, row_id: int):
        row = self.store.delete(kind.table, row_id)
        item = kind.model.model_validate(row)

        setattr(
            self,
            kind.collection,
            [existing for existing in getattr(self, kind.collection) if existing.id != row_id],
        )

        files = {"images": list(item.images)}
        if kind.pdf_bucket:
            files["pdfs"] = list(item.pdfs)
        # The row is already gone; leftover files do not fail the delete
        try:
            self._remove_files(kind, files)
        except StorageError as e:
            log_error(e, operation="remove_files", table=kind.table, row_id=row_id)

        logger.info(f"Deleted {kind.table} row {row_id} | user={self.session.email}")
        return item

    # ------------------------------------------------------------------
    # Packages
    # ------------------------------------------------------------------

    @handle_errors(title="Error", description="Failed to create package")
    def create_package(self, data: PackageCreate, files: Sequence[UploadedFile] = ()) -> Notice:
        self._create(PACKAGES, data.model_dump(), files)
        return Notice(title="Package created", description="Travel package has been successfully created")

    @handle_errors(title="Error", description="Failed to update package")
    def update_package(
        self,
        package_id: int,
        data: PackageUpdate,
        files: Sequence[UploadedFile] = ()
    ) -> Notice:
        self._update(PACKAGES, package_id, data.model_dump(exclude_unset=True), files)
        return Notice(title="Package updated", description="Travel package has been successfully updated")

    @handle_errors(title="Error", description="Failed to delete package")
    def delete_package(self, package_id: int) -> Notice:
        self._delete(PACKAGES, package_id)
        return Notice(title="Package deleted", description="Travel package has been removed")

    # ------------------------------------------------------------------
    # Tickets
    # ------------------------------------------------------------------

    @handle_errors(title="Error", description="Failed to create ticket")
    def create_ticket(self, data: TicketCreate, files: Sequence[UploadedFile] = ()) -> Notice:
        self._create(TICKETS, data.model_dump(), files)
        return Notice(title="Ticket created", description="Air ticket has been successfully created")

    @handle_errors(title="Error", description="Failed to update ticket")
    def update_ticket(
        self,
        ticket_id: int,
        data: TicketUpdate,
        files: Sequence[UploadedFile] = ()
    ) -> Notice:
        self._update(TICKETS, ticket_id, data.model_dump(exclude_unset=True), files)
        return Notice(title="Ticket updated", description="Air ticket has been successfully updated")

    @handle_errors(title="Error", description="Failed to delete ticket")
    def delete_ticket(self, ticket_id: int) -> Notice:
        self._delete(TICKETS, ticket_id)
        return Notice(title="Ticket deleted", description="Air ticket has been removed")

    # ------------------------------------------------------------------
    # News
    # ------------------------------------------------------------------

    @handle_errors(title="Error", description="Failed to save news article")
    def create_news(self, data: NewsCreate, files: Sequence[UploadedFile] = ()) -> Notice:
        self._create(NEWS, data.model_dump(), files)
        if data.status is NewsStatus.PUBLISHED:
            return Notice(title="News published", description="News article has been successfully published")
        return Notice(title="News saved", description="News article has been saved as a draft")

    @handle_errors(title="Error", description="Failed to update news article")
    def update_news(self, news_id: int, data: NewsUpdate, files: Sequence[UploadedFile] = ()) -> Notice:
        self._update(NEWS, news_id, data.model_dump(exclude_unset=True), files)
        return Notice(title="News updated", description="News article has been successfully updated")

    @handle_errors(title="Error", description="Failed to delete news article")
    def delete_news(self, news_id: int) -> Notice:
        self._delete(NEWS, news_id)
        return Notice(title="News deleted", description="News article has been removed")


def open_admin_console(user_id: str, email: str, settings: Optional[Settings] = None) -> AdminConsole:
    """
    Open the admin console for an authenticated user.

    Raises:
        AuthorizationError: If the user is not a configured admin
    """
    settings = settings or get_settings()
    session = AuthService.from_settings(settings).session_for(user_id, email)
    return AdminConsole(session, SqlCatalogStore(), LocalFileStorage.from_settings(settings))
