"""Testing utilities and fakes for photobatch."""

from .fakes import (
    FakeCatalogReader,
    FakeLogger,
    FakeS3Client,
    S3Object,
    create_catalog_db,
    create_test_image,
    create_watermark,
    setup_test_photo_dir,
)

__all__ = [
    "FakeS3Client",
    "FakeCatalogReader",
    "FakeLogger",
    "S3Object",
    "create_catalog_db",
    "create_test_image",
    "create_watermark",
    "setup_test_photo_dir",
]
