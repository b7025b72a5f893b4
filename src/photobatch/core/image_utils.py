"""Image processing utilities for photobatch."""

from pathlib import Path
from typing import Optional, Union

from PIL import Image, ImageOps

from .error_handling import with_error_handling
from .models import PhotoInfo

IMAGE_DESCRIPTION_TAG = 0x010E
XP_TITLE_TAG = 0x9C9B
WATERMARK_MARGIN = 16
JPEG_EXTENSIONS = (".jpg", ".jpeg")


def _decode_tag(value: Union[str, bytes, None]) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        # XP* tags are UTF-16LE with a trailing NUL.
        try:
            value = value.decode("utf-16-le")
        except UnicodeDecodeError:
            value = value.decode("latin-1")
    return value.replace("\x00", "").strip()


def _save_jpeg(image: "Image.Image", output: Path, quality: int) -> None:
    """Write a JPEG atomically so a failed save never leaves a partial output."""
    output.parent.mkdir(parents=True, exist_ok=True)
    partial = output.with_name(output.name + ".part")
    try:
        if image.mode not in ("RGB", "L"):
            image = image.convert("RGB")
        image.save(partial, format="JPEG", quality=quality)
        partial.replace(output)
    finally:
        if partial.exists():
            partial.unlink()


@with_error_handling
def read_photo_info(path: Path) -> PhotoInfo:
    """
    Read the longest side and a caption from a photo.

    The caption comes from EXIF ImageDescription, then XPTitle, then the
    file name without extension.

    Args:
        path: Photo to inspect

    Returns:
        PhotoInfo with max_dimension and caption
    """
    with Image.open(path) as image:
        exif = image.getexif()
        caption = _decode_tag(exif.get(IMAGE_DESCRIPTION_TAG)) or _decode_tag(
            exif.get(XP_TITLE_TAG)
        )
        return PhotoInfo(max_dimension=max(image.size), caption=caption or path.stem)


@with_error_handling
def export_photo(
    source: Path,
    output: Path,
    resize: Optional[int] = None,
    border: bool = False,
    border_width: int = 10,
    border_color: str = "white",
    quality: int = 90,
) -> Path:
    """
    Export a web-ready JPEG copy of a photo.

    Args:
        source: Original photo
        output: Destination JPEG path
        resize: Longest side of the result in pixels; None keeps the size.
            Photos are never upscaled.
        border: Add a solid frame around the photo
        border_width: Frame width in pixels
        border_color: Any Pillow color name or hex string
        quality: JPEG quality

    Returns:
        The output path
    """
    with Image.open(source) as opened:
        image = ImageOps.exif_transpose(opened)
        if resize:
            image.thumbnail((resize, resize), Image.Resampling.LANCZOS)
        if border:
            image = ImageOps.expand(image, border=border_width, fill=border_color)
        _save_jpeg(image, output, quality)
    return output


@with_error_handling
def apply_watermark(overlay: Path, target: Path, quality: int = 90) -> Path:
    """Composite an overlay onto the bottom-right corner of target, in place."""
    with Image.open(overlay) as mark_file:
        mark = mark_file.convert("RGBA")
    with Image.open(target) as target_file:
        base = target_file.convert("RGBA")

    if mark.width > base.width or mark.height > base.height:
        mark.thumbnail((base.width, base.height), Image.Resampling.LANCZOS)

    position = (
        max(base.width - mark.width - WATERMARK_MARGIN, 0),
        max(base.height - mark.height - WATERMARK_MARGIN, 0),
    )
    layer = Image.new("RGBA", base.size, (0, 0, 0, 0))
    layer.paste(mark, position)
    _save_jpeg(Image.alpha_composite(base, layer), target, quality)
    return target


@with_error_handling
def generate_thumbnail(source: Path, output: Path, size: int, quality: int = 90) -> Path:
    """Fit an orientation-corrected copy of source into a size x size box."""
    with Image.open(source) as opened:
        image = ImageOps.exif_transpose(opened)
        image.thumbnail((size, size), Image.Resampling.LANCZOS)
        _save_jpeg(image, output, quality)
    return output


def is_jpeg(path: Path) -> bool:
    return path.suffix.lower() in JPEG_EXTENSIONS


def derive_output_path(source: Path, marker: str) -> Path:
    """
    Calculate the export path for a source photo.

    Args:
        source: Original photo, e.g. ``trip/IMG_1.JPG``
        marker: Naming marker that tags processed files, e.g. ``-web``

    Returns:
        Sibling path such as ``trip/IMG_1-web.jpg``
    """
    return source.with_name(f"{source.stem}{marker}.jpg")


def is_derived(path: Path, marker: str) -> bool:
    return path.stem.endswith(marker)
