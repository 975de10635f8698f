"""Tests for the JSON artifact sink."""

import json
import tempfile
import unittest
from pathlib import Path

from core.run_artifacts import write_chunk_artifact, write_json


class TestRunArtifacts(unittest.TestCase):
    def test_write_json_creates_parents(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            target = Path(tmpdir, "a", "b", "report.json")
            path = write_json({"status": "ok", "name": "Größe"}, str(target))
            self.assertEqual(path, str(target))
            text = target.read_text(encoding="utf-8")
            self.assertIn("Größe", text)
            self.assertIn("\n  ", text)
            self.assertEqual(json.loads(text)["status"], "ok")

    def test_write_json_compact(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            target = Path(tmpdir, "report.json")
            write_json({"a": [1, 2]}, str(target), pretty=False)
            self.assertNotIn("\n", target.read_text(encoding="utf-8"))

    def test_write_chunk_artifact(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            out_dir = Path(tmpdir, "classes")
            path = write_chunk_artifact({"kind": "CLASS"}, str(out_dir), "a_B_class.json")
            self.assertEqual(Path(path), out_dir / "a_B_class.json")
            self.assertEqual(json.loads(Path(path).read_text(encoding="utf-8")), {"kind": "CLASS"})


if __name__ == "__main__":
    unittest.main()
