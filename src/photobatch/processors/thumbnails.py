"""Thumbnail regenerator pipeline over a SQL photo catalog."""

from pathlib import Path
from typing import List

from ..core import ThumbnailConfig, WorkItem, get_logger
from ..core.image_utils import generate_thumbnail
from ..core.protocols import CatalogReader, Stage, WorkEnumerator

THUMBNAIL = "thumbnail"


def thumbnail_path(cache_dir: Path, size: int, row_id: int) -> Path:
    """
    Calculate the cache path of a catalog photo's thumbnail.

    Args:
        cache_dir: Thumbnail cache root, e.g. ``~/.cache/shotwell/thumbs``
        size: Thumbnail box size (128 or 360)
        row_id: Catalog row id

    Returns:
        Path like ``<cache_dir>/thumbs360/thumb000000000000002a.jpg``
    """
    return cache_dir / f"thumbs{size}" / f"thumb{row_id:016x}.jpg"


class CatalogEnumerator(WorkEnumerator):
    """One work item per catalog photo and requested size, newest photos first."""

    def __init__(self, catalog: CatalogReader):
        self._catalog = catalog

    def enumerate(self, config: ThumbnailConfig) -> List[WorkItem]:
        logger = get_logger("thumbnails")
        rows = self._catalog.rows()

        items: List[WorkItem] = []
        seen = set()
        for row in rows:
            if row.row_id in seen:
                continue
            seen.add(row.row_id)
            for size in config.sizes:
                items.append(
                    WorkItem(
                        identifier=f"{row.filename}#{row.row_id}@{size}px",
                        source=row.filename,
                        row_id=row.row_id,
                        size=size,
                        outputs={THUMBNAIL: thumbnail_path(config.cache_dir, size, row.row_id)},
                    )
                )

        logger.info(
            f"Catalog lists {len(seen)} photos; {len(items)} thumbnails to check"
        )
        return items


class ThumbnailStage(Stage):
    """Render one thumbnail unless it is already cached."""

    name = "thumbnail"

    def skip_if(self, item: WorkItem, config: ThumbnailConfig) -> bool:
        return not config.overwrite and item.output(THUMBNAIL).exists()

    def execute(self, item: WorkItem, config: ThumbnailConfig) -> None:
        output = generate_thumbnail(
            item.source, item.output(THUMBNAIL), item.size, quality=config.quality
        )
        item.created_outputs.append(output)
