from __future__ import annotations

from domain.models import GeometryConfig, Size
from domain.ports.text_metrics import TextMetrics


class EstimatedTextMetrics(TextMetrics):
    """Sizes text from its character count instead of real glyph metrics.

    Every character is assumed to be ``char_width_ratio`` of the font size wide
    and a line ``line_height_ratio`` of it tall. The result is an estimate: wide
    glyphs overflow it, narrow ones leave slack, and newlines are counted as
    characters on a single line.
    """

    def __init__(self, config: GeometryConfig | None = None) -> None:
        self.config = config or GeometryConfig()

    def measure(self, text: str, font_size: float) -> Size:
        size = font_size or self.config.default_font_size
        return Size(
            len(text) * size * self.config.char_width_ratio,
            size * self.config.line_height_ratio,
        )
