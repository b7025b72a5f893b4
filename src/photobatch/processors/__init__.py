"""Batch pipelines: the photo uploader and the thumbnail regenerator."""

from .upload import (
    DirectoryEnumerator,
    ExportStage,
    UploadCleanup,
    UploadStage,
    WatermarkStage,
    build_upload_stages,
)
from .thumbnails import CatalogEnumerator, ThumbnailStage, thumbnail_path

__all__ = [
    "DirectoryEnumerator",
    "ExportStage",
    "WatermarkStage",
    "UploadStage",
    "UploadCleanup",
    "build_upload_stages",
    "CatalogEnumerator",
    "ThumbnailStage",
    "thumbnail_path",
]
