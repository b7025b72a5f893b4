"""Photo uploader pipeline: export, watermark, upload, clean up."""

from pathlib import Path
from typing import List, Optional

from ..core import (
    ItemOutcome,
    PreconditionError,
    StageError,
    UploadConfig,
    WorkItem,
    get_logger,
)
from ..core.error_handling import with_error_handling
from ..core.image_utils import (
    apply_watermark,
    derive_output_path,
    export_photo,
    is_derived,
    is_jpeg,
    read_photo_info,
)
from ..core.protocols import ItemFinalizer, PhotoUploader, Stage, WorkEnumerator

EXPORT = "export"


class DirectoryEnumerator(WorkEnumerator):
    """Lists the JPEG photos of a directory, alphabetically, skipping exports."""

    def enumerate(self, config: UploadConfig) -> List[WorkItem]:
        logger = get_logger("upload")
        source_dir = config.source_dir
        if not source_dir.is_dir():
            raise PreconditionError(f"Source directory not found: {source_dir}")
        asset = config.watermark_asset
        if asset is not None and not asset.is_file():
            raise PreconditionError(f"Watermark overlay not found: {asset}")

        try:
            candidates = sorted(
                (p for p in source_dir.iterdir() if p.is_file() and is_jpeg(p)),
                key=lambda p: p.name,
            )
        except OSError as e:
            raise PreconditionError(f"Cannot read source directory {source_dir}: {e}") from e

        items: List[WorkItem] = []
        seen = set()
        for path in candidates:
            if is_derived(path, config.marker):
                continue
            output = derive_output_path(path, config.marker)
            if output in seen:
                # IMG_1.jpg and IMG_1.jpeg export to the same file.
                logger.warning(f"Skipping {path}: another photo already exports to {output.name}")
                continue
            seen.add(output)
            items.append(
                WorkItem(identifier=str(path), source=path, outputs={EXPORT: output})
            )

        logger.info(f"Found {len(items)} photos in {source_dir}")
        return items


class ExportStage(Stage):
    """Resize and border a photo into its export file."""

    name = "export"

    def __init__(self, uploader: Optional[PhotoUploader] = None):
        self._uploader = uploader

    def skip_if(self, item: WorkItem, config: UploadConfig) -> bool:
        if config.overwrite:
            return False
        output = item.output(EXPORT)
        if output.exists():
            return True
        # Already delivered and cleaned up by an earlier run.
        return bool(
            config.upload
            and self._uploader is not None
            and self._uploader.exists(config.collection, output.name)
        )

    def execute(self, item: WorkItem, config: UploadConfig) -> None:
        output = export_photo(
            item.source,
            item.output(EXPORT),
            resize=config.resize,
            border=config.border,
            border_width=config.border_width,
            border_color=config.border_color,
            quality=config.quality,
        )
        item.created_outputs.append(output)


class WatermarkStage(Stage):
    """Composite the configured overlay onto the export."""

    name = "watermark"

    def applies(self, config: UploadConfig) -> bool:
        return config.watermark_asset is not None

    def skip_if(self, item: WorkItem, config: UploadConfig) -> bool:
        # An export left from an earlier run is already watermarked.
        return ExportStage.name in item.skipped_stages

    def execute(self, item: WorkItem, config: UploadConfig) -> None:
        apply_watermark(config.watermark_asset, item.output(EXPORT), quality=config.quality)


class UploadStage(Stage):
    """Upload the export into the destination collection."""

    name = "upload"

    def __init__(self, uploader: PhotoUploader):
        self._uploader = uploader

    def applies(self, config: UploadConfig) -> bool:
        return config.upload

    def skip_if(self, item: WorkItem, config: UploadConfig) -> bool:
        if config.overwrite:
            return False
        return self._uploader.exists(config.collection, item.output(EXPORT).name)

    def execute(self, item: WorkItem, config: UploadConfig) -> None:
        output = item.output(EXPORT)
        if not output.exists():
            raise StageError(f"export file is missing: {output}")
        info = read_photo_info(item.source)
        self._uploader.upload(config.collection, output, config.owner, info.caption)


@with_error_handling
def remove_file(path: Path) -> None:
    path.unlink(missing_ok=True)


class UploadCleanup(ItemFinalizer):
    """
    Terminal bookkeeping for uploaded photos.

    Failed items lose the files this run wrote for them and keep their
    source. Successful items drop the export once it has been uploaded
    (unless keep_output), and drop the source when delete_source is set.
    Skipped items are left alone.
    """

    def finalize(self, item: WorkItem, config: UploadConfig) -> None:
        logger = get_logger("upload")

        if item.outcome is ItemOutcome.FAILED:
            for path in item.created_outputs:
                logger.debug(f"[{item.identifier}] removing partial output {path}")
                remove_file(path)
            return

        if item.outcome is not ItemOutcome.SUCCESS:
            return

        if UploadStage.name in item.executed_stages and not config.keep_output:
            logger.debug(f"[{item.identifier}] removing uploaded export {item.output(EXPORT)}")
            remove_file(item.output(EXPORT))

        if config.delete_source:
            logger.info(f"[{item.identifier}] deleting source")
            remove_file(item.source)


def build_upload_stages(uploader: Optional[PhotoUploader]) -> List[Stage]:
    stages: List[Stage] = [ExportStage(uploader), WatermarkStage()]
    if uploader is not None:
        stages.append(UploadStage(uploader))
    return stages
