"""
File storage for catalog images and PDFs.

Uploaded files are kept in named buckets and referenced from catalog rows by
their storage path; the public site resolves those paths to URLs.
"""
import re
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Protocol

from loguru import logger

from config import Settings
from error_handling.exceptions import StorageError


PACKAGE_IMAGES_BUCKET = "package-images"
PACKAGE_PDFS_BUCKET = "package-pdfs"
TICKET_IMAGES_BUCKET = "ticket-images"
NEWS_IMAGES_BUCKET = "news-images"

PDF_CONTENT_TYPE = "application/pdf"


@dataclass
class UploadedFile:
    """A file selected in the admin console."""
    filename: str
    content_type: str
    data: bytes

    @property
    def is_image(self) -> bool:
        return self.content_type.startswith("image/")

    @property
    def is_pdf(self) -> bool:
        return self.content_type == PDF_CONTENT_TYPE


class FileStorage(Protocol):
    """Object storage used by the admin console and the public catalog."""

    def upload(self, bucket: str, filename: str, data: bytes, content_type: str) -> str:
        """Store a file and return its storage path within the bucket."""
        ...

    def remove(self, bucket: str, paths: Iterable[str]) -> None:
        """Delete stored files; unknown paths are ignored."""
        ...

    def public_url(self, bucket: str, path: str) -> str:
        """Resolve a storage path to a URL the site can display."""
        ...


def safe_filename(filename: str) -> str:
    """
    Reduce a client-supplied filename to a safe basename.

    >>> safe_filename("../My Trip.pdf")
    'My-Trip.pdf'
    """
    name = Path(filename.replace("\\", "/")).name
    name = re.sub(r"[^A-Za-z0-9._-]+", "-", name).strip("-.")
    return name or "file"


class LocalFileStorage:
    """
    FileStorage backed by a local directory, served under a public base URL.

    Files are written to ``<root>/<bucket>/<uuid>-<filename>``.
    """

    def __init__(self, root: str | Path, public_base_url: str):
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")

    @classmethod
    def from_settings(cls, settings: Settings) -> "LocalFileStorage":
        return cls(settings.storage_root, settings.storage_public_url)

    def _bucket_dir(self, bucket: str) -> Path:
        if not re.fullmatch(r"[a-z0-9][a-z0-9-]*", bucket):
            raise StorageError(f"Invalid bucket name: {bucket}", bucket=bucket)
        return self.root / bucket

    def upload(self, bucket: str, filename: str, data: bytes, content_type: str) -> str:
        path = f"{uuid.uuid4().hex}-{safe_filename(filename)}"
        target = self._bucket_dir(bucket) / path

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            raise StorageError(
                f"Failed to store {filename}: {e}",
                bucket=bucket,
                filename=filename,
                original_error=e
            ) from e

        logger.info(
            f"Stored file | bucket={bucket} | path={path} | "
            f"type={content_type} | size={len(data)}"
        )
        return path

    def remove(self, bucket: str, paths: Iterable[str]) -> None:
        bucket_dir = self._bucket_dir(bucket)
        for path in paths:
            target = bucket_dir / safe_filename(path)
            try:
                target.unlink(missing_ok=True)
            except OSError as e:
                raise StorageError(
                    f"Failed to remove {path}: {e}",
                    bucket=bucket,
                    filename=path,
                    original_error=e
                ) from e
            logger.debug(f"Removed file | bucket={bucket} | path={path}")

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.public_base_url}/{bucket}/{path}"
