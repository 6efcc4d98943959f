"""PNG text textures for labels.

Not used by the glTF generation itself; the HTML viewer draws its own label
textures. Kept for callers that want to embed pre-rendered labels.
"""

import base64
import io
import logging
from collections import namedtuple

import PIL.Image
import PIL.ImageDraw
import PIL.ImageFont

logger = logging.getLogger(__name__)

# Fixed glyph cell of the default bitmap font
CHAR_WIDTH = 8
CHAR_HEIGHT = 13
PADDING = 12

TextureResult = namedtuple("TextureResult", ["data_uri", "width", "height"])


def next_power_of_2(x):
    return 1 if x <= 0 else 2 ** (x - 1).bit_length()


def _load_font(font_path):
    if font_path is not None:
        try:
            return PIL.ImageFont.truetype(font_path, CHAR_HEIGHT)
        except OSError:
            logger.warning("couldn't open font path %s, using the default font", font_path)
    return PIL.ImageFont.load_default()


def create_text_texture(text, text_color=(25, 77, 102, 255), bg_color=(255, 255, 255, 230), font_path=None):
    """
    Render a single line of text into a PNG data URI.

    Parameters:
        text: string to render
        text_color: RGBA tuple, 0-255 per channel (default: dark blue)
        bg_color: RGBA tuple, 0-255 per channel (default: translucent white)
        font_path: optional path to a font file that Freetype can open

    Returns:
        TextureResult: (data_uri, width, height); both dimensions are powers of 2

    Example:
        texture = create_text_texture("Person")
        texture.width, texture.height  # (128, 64)
    """
    text_width = len(text) * CHAR_WIDTH
    width = next_power_of_2(text_width + PADDING * 2)
    height = next_power_of_2(CHAR_HEIGHT + PADDING * 2)

    image = PIL.Image.new("RGBA", (width, height), tuple(bg_color))
    draw = PIL.ImageDraw.Draw(image)

    # Backing panel behind the text
    draw.rectangle(
        (PADDING - 4, PADDING - 4, PADDING + text_width + 4, PADDING + CHAR_HEIGHT + 4),
        fill=tuple(bg_color)
    )
    draw.text((PADDING, PADDING), text, font=_load_font(font_path), fill=tuple(text_color))

    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    data_uri = f"data:image/png;base64,{base64.b64encode(buffer.getvalue()).decode('ascii')}"

    return TextureResult(data_uri, width, height)
