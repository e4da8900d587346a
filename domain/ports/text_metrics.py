from __future__ import annotations

from typing import Protocol

from domain.models import Size


class TextMetrics(Protocol):
    def measure(self, text: str, font_size: float) -> Size:
        ...
