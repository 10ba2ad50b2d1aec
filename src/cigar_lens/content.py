"""Page content handed to inference providers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Literal, get_args

from PIL import Image

from cigar_lens.exceptions import ImageError

ImageInput = str | Path | Image.Image | bytes
Strategy = Literal["html-only", "markdown-only", "html-with-image", "markdown-with-image"]

STRATEGIES: tuple[str, ...] = get_args(Strategy)
DEFAULT_MAX_LENGTH = 100_000


@dataclass(frozen=True)
class PageContent:
    """Cleaned page text plus an optional screenshot.

    `text` is markdown or cleaned HTML produced by the scraping side.
    """

    text: str
    screenshot: ImageInput | None = None
    source_url: str | None = None


def uses_image(strategy: str) -> bool:
    return strategy.endswith("-with-image")


def prepare_text(text: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Collapse whitespace and cap the text at `max_length` characters.

    Truncation prefers the last sentence end when it falls within the final
    fifth of the window; otherwise "..." marks the cut.
    """
    cleaned = re.sub(r"\n{3,}", "\n\n", text)
    cleaned = re.sub(r"[ \t]{3,}", " ", cleaned).strip()
    if len(cleaned) <= max_length:
        return cleaned

    truncated = cleaned[:max_length]
    last_sentence = truncated.rfind(".")
    if last_sentence > max_length * 0.8:
        return truncated[: last_sentence + 1]
    return truncated + "..."


def load_image(image: ImageInput) -> Image.Image:
    """Load a screenshot from a path, raw bytes or a PIL image."""
    if isinstance(image, Image.Image):
        return image

    if isinstance(image, bytes):
        try:
            return Image.open(BytesIO(image))
        except Exception as e:
            raise ImageError(f"Failed to open image: {e}") from e

    path = Path(image) if isinstance(image, str) else image
    if not path.exists():
        raise ImageError(f"Image file not found: {path}")

    try:
        return Image.open(path)
    except Exception as e:
        raise ImageError(f"Failed to open image: {e}") from e


def image_to_png_bytes(image: ImageInput) -> bytes:
    pil_image = load_image(image)
    with BytesIO() as buffer:
        pil_image.save(buffer, format="PNG")
        return buffer.getvalue()
