from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from ssdnode.detector.errors import ResourceUnavailable
from ssdnode.detector.labels import LabelTable


class LabelTableTests(unittest.TestCase):
    def test_load_keeps_line_order_as_class_index(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            labels_path = Path(tmpdir) / "names.txt"
            labels_path.write_text("background\naeroplane\n bicycle \nbird\n\n", encoding="utf-8")

            table = LabelTable.from_file(labels_path)

            self.assertEqual(table.labels, ("background", "aeroplane", "bicycle", "bird"))
            self.assertEqual(len(table), 4)
            self.assertEqual(table.resolve(2), "bicycle")

    def test_interior_blank_line_keeps_indices_aligned(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            labels_path = Path(tmpdir) / "names.txt"
            labels_path.write_text("a\n\nc\n", encoding="utf-8")

            table = LabelTable.from_file(labels_path)

            self.assertEqual(table.resolve(2), "c")
            self.assertEqual(table.resolve(1), "")

    def test_out_of_range_class_gets_placeholder(self) -> None:
        table = LabelTable(["background", "cat"])

        self.assertEqual(table.resolve(1), "cat")
        self.assertEqual(table.resolve(2), "unknown 2")
        self.assertEqual(table.resolve(57), "unknown 57")
        self.assertEqual(table.resolve(-1), "unknown -1")

    def test_missing_file_raises_resource_unavailable(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            with self.assertRaises(ResourceUnavailable):
                LabelTable.from_file(Path(tmpdir) / "missing.txt")

    def test_undecodable_file_raises_resource_unavailable(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            labels_path = Path(tmpdir) / "names.txt"
            labels_path.write_bytes(b"background\n\xff\xfecat\n")

            with self.assertRaises(ResourceUnavailable):
                LabelTable.from_file(labels_path)

    def test_reload_replaces_previous_labels(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            first = Path(tmpdir) / "first.txt"
            second = Path(tmpdir) / "second.txt"
            first.write_text("a\nb\nc\n", encoding="utf-8")
            second.write_text("x\n", encoding="utf-8")

            table = LabelTable.from_file(first)
            table.load(second)

            self.assertEqual(list(table), ["x"])
            self.assertEqual(table.resolve(1), "unknown 1")


if __name__ == "__main__":
    unittest.main()
