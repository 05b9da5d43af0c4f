import io
import random

import pytest
from PIL import Image, ImageDraw


def make_image_bytes(
    width: int,
    height: int,
    image_format: str = "PNG",
    mode: str = "RGB",
    seed: int = 7,
) -> bytes:
    """Encode a deterministic noise image, which compresses poorly on purpose."""
    rng = random.Random(seed)
    channels = len(mode)
    pixels = bytes(rng.getrandbits(8) for _ in range(width * height * channels))
    buf = io.BytesIO()
    Image.frombytes(mode, (width, height), pixels).save(buf, format=image_format)
    return buf.getvalue()


@pytest.fixture()
def small_png_bytes() -> bytes:
    """A tiny PNG well under any realistic upload budget."""
    return make_image_bytes(32, 20)


@pytest.fixture()
def noisy_png_bytes() -> bytes:
    """A 400x300 noise PNG (~360 KB)."""
    return make_image_bytes(400, 300)


@pytest.fixture()
def card_png_bytes() -> bytes:
    """A white card with black text lines, large enough for Tesseract."""
    image = Image.new("RGB", (300, 120), "white")
    draw = ImageDraw.Draw(image)
    for index, line in enumerate(("Jane Doe", "VP Engineering", "jane.doe@acme.com")):
        draw.text((10, 10 + index * 30), line, fill="black")
    image = image.resize((1200, 480), Image.Resampling.NEAREST)
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def jane_doe_card_text() -> str:
    return (
        "Jane Doe\n"
        "VP Engineering\n"
        "Acme Corp\n"
        "jane.doe@acme.com\n"
        "+1 (555) 123-4567\n"
        "123 Main Street, Springfield IL 62704\n"
        "United States\n"
    )
