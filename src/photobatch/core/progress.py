"""Single-line terminal status reporting."""

import shutil
import sys
from typing import Optional, TextIO

from tqdm import tqdm
from tqdm.utils import disp_len, disp_trim

ELLIPSIS = "..."


def fit_to_width(text: str, width: int) -> str:
    """Truncate or pad text to exactly ``width - 1`` display columns so it never wraps."""
    columns = max(width - 1, 1)
    if disp_len(text) > columns:
        if columns > len(ELLIPSIS):
            text = disp_trim(text, columns - len(ELLIPSIS)) + ELLIPSIS
        else:
            text = disp_trim(text, columns)
    # Wide characters can leave the trimmed text one column short.
    return text + " " * (columns - disp_len(text))


def format_status(index: int, total: int, message: str, width: int) -> str:
    """
    Format a progress line such as ``[ 3/12] photo.jpg``.

    Args:
        index: 1-based position of the current item
        total: Number of items in the run
        message: Free text describing the current item
        width: Display width in columns

    Returns:
        The status text, exactly ``width - 1`` display columns wide
    """
    counter = f"[{index:>{len(str(total))}}/{total}]"
    return fit_to_width(f"{counter} {message}", width)


class StatusLine:
    """
    Overwritten progress line plus a persistent completion line.

    The line is drawn by a tqdm bar whose only content is the
    format_status text, so tqdm.write() and the logging handler clear
    it before printing and redraw it afterwards.
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        width: Optional[int] = None,
        enabled: bool = True,
    ):
        self._stream = stream if stream is not None else sys.stderr
        self._width = width
        self.enabled = enabled
        self._bar: Optional[tqdm] = None

    @property
    def width(self) -> int:
        if self._width is not None:
            return self._width
        return shutil.get_terminal_size(fallback=(80, 24)).columns

    def update(self, index: int, total: int, message: str) -> None:
        if not self.enabled:
            return
        width = self.width
        if self._bar is None or self._bar.total != total:
            self._close_bar()
            self._bar = tqdm(
                total=total,
                file=self._stream,
                ncols=width,
                bar_format="{desc}",
                leave=False,
                position=0,
                dynamic_ncols=False,
            )
        self._bar.n = index
        self._bar.set_description_str(format_status(index, total, message, width))

    def finish(self, message: str) -> None:
        if not self.enabled:
            return
        self._close_bar()
        tqdm.write(fit_to_width(message, self.width), file=self._stream)

    def _close_bar(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None
