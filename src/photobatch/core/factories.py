"""Factory classes for creating configured pipelines."""

from typing import Any, Optional

import boto3

from .models import ThumbnailConfig, UploadConfig
from .orchestrator import RunOrchestrator
from .progress import StatusLine
from .protocols import CatalogReader, LoggerProtocol, PhotoUploader, S3ClientProtocol
from .services import S3PhotoUploader, SqliteCatalogReader
from .stages import StageExecutor
from ..processors.thumbnails import CatalogEnumerator, ThumbnailStage
from ..processors.upload import DirectoryEnumerator, UploadCleanup, build_upload_stages


class S3ClientFactory:
    """Factory for creating S3 client instances."""

    @staticmethod
    def create_s3_client(**kwargs: Any) -> S3ClientProtocol:
        """Create S3 client with optional configuration."""
        session = boto3.Session()
        return session.client("s3", **kwargs)  # type: ignore


class UploadPipelineFactory:
    """Factory for the photo uploader pipeline."""

    @staticmethod
    def create_pipeline(
        config: UploadConfig,
        s3_client: Optional[S3ClientProtocol] = None,
        uploader: Optional[PhotoUploader] = None,
        logger: Optional[LoggerProtocol] = None,
        status: Optional[StatusLine] = None,
    ) -> RunOrchestrator:
        """Create a fully configured upload pipeline."""
        if config.upload and uploader is None:
            if s3_client is None:
                s3_client = S3ClientFactory.create_s3_client()
            uploader = S3PhotoUploader(s3_client, config.bucket)
        if not config.upload:
            uploader = None

        executor = StageExecutor(
            build_upload_stages(uploader), finalizer=UploadCleanup(), logger=logger
        )
        return RunOrchestrator(
            enumerator=DirectoryEnumerator(),
            executor=executor,
            status=status,
            logger=logger,
            operation_name="Photo upload",
        )


class ThumbnailPipelineFactory:
    """Factory for the thumbnail regenerator pipeline."""

    @staticmethod
    def create_pipeline(
        config: ThumbnailConfig,
        catalog: Optional[CatalogReader] = None,
        logger: Optional[LoggerProtocol] = None,
        status: Optional[StatusLine] = None,
    ) -> RunOrchestrator:
        """Create a fully configured thumbnail pipeline."""
        if catalog is None:
            catalog = SqliteCatalogReader(config.database)

        return RunOrchestrator(
            enumerator=CatalogEnumerator(catalog),
            executor=StageExecutor([ThumbnailStage()], logger=logger),
            status=status,
            logger=logger,
            operation_name="Thumbnail regeneration",
        )
