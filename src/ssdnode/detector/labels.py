from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from ssdnode.detector.errors import ResourceUnavailable


class LabelTable:
    """Class index to human readable name, loaded from a newline-delimited file."""

    def __init__(self, labels: list[str] | None = None) -> None:
        self._labels: tuple[str, ...] = tuple(labels or ())

    @classmethod
    def from_file(cls, path: str | Path) -> LabelTable:
        table = cls()
        table.load(path)
        return table

    def load(self, path: str | Path) -> None:
        label_path = Path(path)
        if not label_path.is_file():
            raise ResourceUnavailable(f"Label file missing: {label_path}")

        try:
            text = label_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise ResourceUnavailable(f"Label file is not valid UTF-8: {label_path}") from exc

        labels = [raw.strip() for raw in text.splitlines()]
        # Interior blank lines are kept so indices stay aligned with class ids.
        while labels and not labels[-1]:
            labels.pop()
        self._labels = tuple(labels)

    def resolve(self, class_id: int) -> str:
        if 0 <= class_id < len(self._labels):
            return self._labels[class_id]
        return f"unknown {class_id}"

    @property
    def labels(self) -> tuple[str, ...]:
        return self._labels

    def __len__(self) -> int:
        return len(self._labels)

    def __iter__(self) -> Iterator[str]:
        return iter(self._labels)
