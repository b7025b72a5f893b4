"""External collaborators: cloud photo upload and the SQL photo catalog."""

import sqlite3
from pathlib import Path
from typing import List, Optional

from botocore.exceptions import ClientError

from .error_handling import with_error_handling
from .exceptions import PreconditionError
from .logging_config import get_logger
from .models import CatalogRow
from .protocols import LoggerProtocol, S3ClientProtocol

NOT_FOUND_CODES = ("404", "NoSuchKey", "NotFound")

CATALOG_QUERY = "SELECT id, filename FROM PhotoTable ORDER BY timestamp DESC, id DESC"


def collection_key(collection: str, name: str) -> str:
    """S3 key of a photo inside a collection."""
    return f"{collection.strip('/')}/{name}"


class S3PhotoUploader:
    """Uploads photos into collections stored as prefixes of one S3 bucket."""

    def __init__(
        self,
        s3_client: S3ClientProtocol,
        bucket: str,
        logger: Optional[LoggerProtocol] = None,
    ):
        self._s3_client = s3_client
        self._bucket = bucket
        self._logger = logger or get_logger("uploader")

    @with_error_handling
    def exists(self, collection: str, name: str) -> bool:
        key = collection_key(collection, name)
        try:
            self._s3_client.head_object(Bucket=self._bucket, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in NOT_FOUND_CODES:
                return False
            raise
        return True

    @with_error_handling
    def upload(self, collection: str, path: Path, owner: str, caption: str) -> None:
        key = collection_key(collection, path.name)
        self._logger.debug(f"Uploading {path} to s3://{self._bucket}/{key}")
        self._s3_client.upload_file(
            Filename=str(path),
            Bucket=self._bucket,
            Key=key,
            ExtraArgs={
                "ContentType": "image/jpeg",
                # S3 user metadata must be ASCII.
                "Metadata": {
                    "owner": owner.encode("ascii", "replace").decode("ascii"),
                    "caption": caption.encode("ascii", "replace").decode("ascii"),
                },
            },
        )


class SqliteCatalogReader:
    """Reads photo rows, newest first, from a Shotwell-style SQLite catalog."""

    def __init__(self, database: Path, query: str = CATALOG_QUERY):
        self._database = database
        self._query = query

    def rows(self) -> List[CatalogRow]:
        if not self._database.is_file():
            raise PreconditionError(f"Catalog database not found: {self._database}")
        try:
            return self._read_rows()
        except sqlite3.Error as e:
            raise PreconditionError(
                f"Catalog database is unreadable: {self._database}: {e}"
            ) from e

    def _read_rows(self) -> List[CatalogRow]:
        uri = f"{self._database.resolve().as_uri()}?mode=ro"
        conn = sqlite3.connect(uri, uri=True)
        try:
            return [
                CatalogRow(row_id=row_id, filename=Path(filename))
                for row_id, filename in conn.execute(self._query)
                if filename
            ]
        finally:
            conn.close()
