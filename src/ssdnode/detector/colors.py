from __future__ import annotations

import numpy as np

Color = tuple[int, int, int]

FALLBACK_COLOR: Color = (255, 255, 255)


class ColorTable:
    """Random RGB color per class index, stable until the next generate()."""

    def __init__(self) -> None:
        self._colors: list[Color] = []

    def generate(self, count: int, rng: np.random.Generator | None = None) -> None:
        if count < 0:
            raise ValueError(f"color count must be >= 0, got {count}")
        generator = rng if rng is not None else np.random.default_rng()
        values = generator.integers(0, 256, size=(count, 3))
        self._colors = [(int(r), int(g), int(b)) for r, g, b in values]

    def resolve(self, class_id: int) -> Color:
        if 0 <= class_id < len(self._colors):
            return self._colors[class_id]
        return FALLBACK_COLOR

    @property
    def colors(self) -> list[Color]:
        return list(self._colors)

    def __len__(self) -> int:
        return len(self._colors)
