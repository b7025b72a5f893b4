"""Unit tests for service implementations."""

import sqlite3

import pytest

from photobatch.core.exceptions import PreconditionError, StageError
from photobatch.core.services import S3PhotoUploader, SqliteCatalogReader, collection_key
from photobatch.testing.fakes import (
    FakeLogger,
    FakeS3Client,
    create_catalog_db,
    create_test_image,
)


@pytest.fixture
def fake_s3() -> FakeS3Client:
    client = FakeS3Client()
    client.create_bucket("photos")
    return client


@pytest.fixture
def uploader(fake_s3) -> S3PhotoUploader:
    return S3PhotoUploader(fake_s3, "photos", logger=FakeLogger())


class TestCollectionKey:
    """Tests for collection_key."""

    @pytest.mark.parametrize(
        "collection, expected",
        [("trip", "trip/a-web.jpg"), ("/trip/", "trip/a-web.jpg"), ("2024/spring", "2024/spring/a-web.jpg")],
    )
    def test_key_layout(self, collection, expected):
        assert collection_key(collection, "a-web.jpg") == expected


class TestS3PhotoUploader:
    """Tests for S3PhotoUploader."""

    def test_exists_false_when_missing(self, uploader):
        """Test that a 404 from head_object means the photo is not there."""
        assert uploader.exists("trip", "a-web.jpg") is False

    def test_exists_true_after_upload(self, uploader, tmp_path):
        """Test that an uploaded photo is reported as present."""
        photo = tmp_path / "a-web.jpg"
        photo.write_bytes(create_test_image(20, 20))

        uploader.upload("trip", photo, owner="ana", caption="Beach")

        assert uploader.exists("trip", "a-web.jpg") is True
        assert uploader.exists("other", "a-web.jpg") is False

    def test_exists_raises_on_service_error(self, uploader, fake_s3):
        """Test that errors other than not-found are item failures."""
        fake_s3.set_failure_mode(True, "S3 is down")

        with pytest.raises(StageError, match="S3 operation failed"):
            uploader.exists("trip", "a-web.jpg")

    def test_missing_bucket_is_stage_error(self, fake_s3):
        uploader = S3PhotoUploader(fake_s3, "no-such-bucket", logger=FakeLogger())
        with pytest.raises(StageError):
            uploader.exists("trip", "a-web.jpg")

    def test_upload_stores_object_with_metadata(self, uploader, fake_s3, tmp_path):
        """Test key, content type and metadata of an uploaded photo."""
        photo = tmp_path / "a-web.jpg"
        photo.write_bytes(create_test_image(20, 20))

        uploader.upload("trip", photo, owner="ana", caption="Beach")

        stored = fake_s3.get_bucket("photos")["trip/a-web.jpg"]
        assert stored.body == photo.read_bytes()
        assert stored.content_type == "image/jpeg"
        assert stored.metadata == {"owner": "ana", "caption": "Beach"}

    def test_upload_metadata_is_ascii(self, uploader, fake_s3, tmp_path):
        photo = tmp_path / "a-web.jpg"
        photo.write_bytes(create_test_image(20, 20))

        uploader.upload("trip", photo, owner="José", caption="Café")

        metadata = fake_s3.get_bucket("photos")["trip/a-web.jpg"].metadata
        assert metadata == {"owner": "Jos?", "caption": "Caf?"}

    def test_upload_failure_is_stage_error(self, uploader, fake_s3, tmp_path):
        photo = tmp_path / "a-web.jpg"
        photo.write_bytes(create_test_image(20, 20))
        fake_s3.fail_keys.add("trip/a-web.jpg")

        with pytest.raises(StageError) as info:
            uploader.upload("trip", photo, owner="", caption="")

        assert "trip/a-web.jpg" not in fake_s3.get_bucket("photos")
        assert info.value.__cause__ is not None

    def test_upload_of_missing_file_is_stage_error(self, uploader, tmp_path):
        with pytest.raises(StageError):
            uploader.upload("trip", tmp_path / "gone.jpg", owner="", caption="")


class TestSqliteCatalogReader:
    """Tests for SqliteCatalogReader."""

    def test_rows_newest_first(self, tmp_path):
        """Test that rows come back by descending timestamp."""
        database = create_catalog_db(
            tmp_path / "photo.db",
            [(1, "/photos/old.jpg", 100), (2, "/photos/new.jpg", 300), (3, "/photos/mid.jpg", 200)],
        )

        rows = SqliteCatalogReader(database).rows()

        assert [row.row_id for row in rows] == [2, 3, 1]
        assert str(rows[0].filename) == "/photos/new.jpg"

    def test_equal_timestamps_ordered_by_id(self, tmp_path):
        database = create_catalog_db(
            tmp_path / "photo.db", [(1, "/p/a.jpg", 100), (2, "/p/b.jpg", 100)]
        )

        assert [row.row_id for row in SqliteCatalogReader(database).rows()] == [2, 1]

    def test_empty_filenames_are_ignored(self, tmp_path):
        database = create_catalog_db(
            tmp_path / "photo.db", [(1, "", 100), (2, "/p/b.jpg", 50)]
        )

        assert [row.row_id for row in SqliteCatalogReader(database).rows()] == [2]

    def test_duplicate_ids_are_returned_as_stored(self, tmp_path):
        database = create_catalog_db(
            tmp_path / "photo.db", [(1, "/p/a.jpg", 200), (1, "/p/a.jpg", 100)]
        )

        assert len(SqliteCatalogReader(database).rows()) == 2

    def test_missing_database_is_precondition_error(self, tmp_path):
        with pytest.raises(PreconditionError, match="not found"):
            SqliteCatalogReader(tmp_path / "missing.db").rows()

    def test_corrupt_database_is_precondition_error(self, tmp_path):
        database = tmp_path / "photo.db"
        database.write_bytes(b"this is not a sqlite database" * 10)

        with pytest.raises(PreconditionError, match="unreadable"):
            SqliteCatalogReader(database).rows()

    def test_missing_table_is_precondition_error(self, tmp_path):
        database = tmp_path / "photo.db"
        conn = sqlite3.connect(database)
        conn.execute("CREATE TABLE Other (id INTEGER)")
        conn.close()

        with pytest.raises(PreconditionError):
            SqliteCatalogReader(database).rows()

    def test_database_is_not_modified(self, tmp_path):
        database = create_catalog_db(tmp_path / "photo.db", [(1, "/p/a.jpg", 1)])
        before = database.read_bytes()

        SqliteCatalogReader(database).rows()

        assert database.read_bytes() == before
