from io import BytesIO

import pytest
from PIL import Image

from cigar_lens.content import image_to_png_bytes, load_image, prepare_text, uses_image
from cigar_lens.exceptions import ImageError
from cigar_lens.prompts import build_user_prompt


def _png_bytes():
    with BytesIO() as buffer:
        Image.new("RGB", (10, 10), color="brown").save(buffer, format="PNG")
        return buffer.getvalue()


def test_prepare_text_collapses_whitespace():
    text = "# Padron\n\n\n\n\nMaduro    wrapper\n\nRobusto"

    assert prepare_text(text) == "# Padron\n\nMaduro wrapper\n\nRobusto"


def test_prepare_text_cuts_at_sentence_end():
    text = "A" * 90 + ". " + "B" * 50

    assert prepare_text(text, max_length=100) == "A" * 90 + "."


def test_prepare_text_marks_hard_cut():
    text = "Short. " + "B" * 200

    result = prepare_text(text, max_length=100)

    assert result == ("Short. " + "B" * 200)[:100] + "..."


def test_prepare_text_keeps_short_text():
    assert prepare_text("  Robusto 5 x 50  ") == "Robusto 5 x 50"


@pytest.mark.parametrize(
    ("strategy", "expected"),
    [
        ("html-only", False),
        ("markdown-only", False),
        ("html-with-image", True),
        ("markdown-with-image", True),
    ],
)
def test_uses_image(strategy, expected):
    assert uses_image(strategy) is expected


def test_load_image_from_path(tmp_path):
    path = tmp_path / "shot.png"
    path.write_bytes(_png_bytes())

    image = load_image(str(path))

    assert image.size == (10, 10)


def test_load_image_from_bytes():
    assert load_image(_png_bytes()).size == (10, 10)


def test_load_image_passes_pil_through():
    image = Image.new("RGB", (5, 5))
    assert load_image(image) is image


def test_load_image_missing_file(tmp_path):
    with pytest.raises(ImageError, match="not found"):
        load_image(tmp_path / "missing.png")


def test_load_image_rejects_garbage():
    with pytest.raises(ImageError):
        load_image(b"not an image")


def test_image_to_png_bytes_converts():
    jpeg = BytesIO()
    Image.new("RGB", (8, 8)).save(jpeg, format="JPEG")

    assert image_to_png_bytes(jpeg.getvalue()).startswith(b"\x89PNG")


def test_build_user_prompt_mentions_screenshot_only_with_image():
    assert "screenshot" in build_user_prompt("# Padron", with_image=True)
    assert "screenshot" not in build_user_prompt("# Padron")
    assert build_user_prompt("# Padron").endswith("# Padron")


def test_prepare_text_keeps_paragraph_break_before_indent():
    text = "# Padron\n\n\n\n      Robusto 5 x 50"

    assert prepare_text(text) == "# Padron\n\n Robusto 5 x 50"
