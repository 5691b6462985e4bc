"""
Caption rendering for hint images.

Draws a centred caption over a background image using Pillow: the text gets
a thick black outline and a white fill so it stays readable on any
background. The result is written to a new file.
"""

import logging
import os
from typing import List, Union

from PIL import Image, ImageDraw, ImageFont

from hint_server import constants
from hint_server.exceptions.engine_exception import CaptionException

logger = logging.getLogger(__name__)

TEXT_COLOR = (255, 255, 255)
OUTLINE_COLOR = (0, 0, 0)

FONT_PATHS = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/freefont/FreeSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
]

PathLike = Union[str, os.PathLike]


def get_font(size: int):
    """Get a font, falling back to Pillow's default if none is installed."""
    for path in FONT_PATHS:
        if os.path.exists(path):
            return ImageFont.truetype(path, size)
    return ImageFont.load_default(size)


def wrap_text(text: str, font, max_width: int, draw: ImageDraw.ImageDraw) -> List[str]:
    """Wrap text to fit within max_width. Explicit newlines are kept."""
    lines = []
    for paragraph in text.split('\n'):
        current_line: List[str] = []
        for word in paragraph.split():
            test_line = ' '.join(current_line + [word])
            bbox = draw.textbbox((0, 0), test_line, font=font)
            if bbox[2] - bbox[0] <= max_width or not current_line:
                current_line.append(word)
            else:
                lines.append(' '.join(current_line))
                current_line = [word]
        lines.append(' '.join(current_line))
    return lines


class Captioner:
    """
    Renders captions with a fixed font size and line spacing.
    """

    def __init__(
        self,
        font_size: int = constants.CAPTION_FONT_SIZE,
        interline_spacing: int = constants.CAPTION_INTERLINE_SPACING,
        stroke_width: int = constants.CAPTION_STROKE_WIDTH,
        margin: int = constants.CAPTION_MARGIN,
    ):
        self.font_size = font_size
        self.interline_spacing = interline_spacing
        self.stroke_width = stroke_width
        self.margin = margin
        self._font = None

    @property
    def font(self):
        if self._font is None:
            self._font = get_font(self.font_size)
        return self._font

    def render(self, image: Image.Image, text: str) -> Image.Image:
        """Return a copy of image with text drawn centred on it."""
        img = image.convert('RGB')
        draw = ImageDraw.Draw(img)
        width, height = img.size

        # Bitmap fonts cannot be stroked
        stroke = self.stroke_width if isinstance(self.font, ImageFont.FreeTypeFont) else 0

        lines = wrap_text(text, self.font, max(width - 2 * self.margin, 1), draw)
        line_boxes = [
            draw.textbbox((0, 0), line or ' ', font=self.font, stroke_width=stroke)
            for line in lines
        ]
        line_height = max(box[3] - box[1] for box in line_boxes)
        step = line_height + self.interline_spacing
        block_height = step * len(lines) - self.interline_spacing

        y = (height - block_height) // 2
        for line, box in zip(lines, line_boxes):
            x = (width - (box[2] - box[0])) // 2 - box[0]
            draw.text(
                (x, y - box[1]),
                line,
                font=self.font,
                fill=TEXT_COLOR,
                stroke_width=stroke,
                stroke_fill=OUTLINE_COLOR,
            )
            y += step

        return img

    def add_caption(self, source: PathLike, destination: PathLike, text: str) -> str:
        """
        Render text over the image at source and write it to destination.

        Args:
            source: Background image to read
            destination: Output file; the format follows its suffix
            text: Caption to draw

        Returns:
            The destination path as a string

        Raises:
            CaptionException: If the source cannot be read or the result
                cannot be written
        """
        try:
            with Image.open(source) as background:
                captioned = self.render(background, text)
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            raise CaptionException(str(source), str(e)) from e

        try:
            captioned.save(destination)
        except (OSError, ValueError) as e:
            raise CaptionException(str(destination), str(e)) from e

        logger.info(f"Rendered caption onto {source} -> {destination}")
        return str(destination)
