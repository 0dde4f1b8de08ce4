"""
Tests for the cross-check harness and its JSONL run logging.
"""

import json
import unittest
import tempfile
import sys
import os
from pathlib import Path

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from bigarith import RunLogger, ValidationConfig, run_validation
from bigarith.logging import create_manifest


class TestRunValidation(unittest.TestCase):

    def test_small_run_passes(self):
        summary = run_validation(ValidationConfig(seed=1, n_cases=10, max_bits=256))
        self.assertTrue(summary["passed"], summary["operations"])
        self.assertEqual(summary["failures"], 0)
        self.assertGreater(summary["checks"], 10 * 20)
        for op in ["add", "divmod", "mod_pow", "xor", "round_trip", "gcd",
                   "rational_add", "rational_reduced"]:
            self.assertIn(op, summary["operations"])

    def test_deterministic(self):
        config = ValidationConfig(seed=5, n_cases=5, max_bits=128)
        a = run_validation(config)
        b = run_validation(config)
        self.assertEqual(a["operations"], b["operations"])

    def test_writes_logs(self):
        with tempfile.TemporaryDirectory() as tmp:
            config = ValidationConfig(seed=2, n_cases=3, max_bits=64, output_dir=tmp)
            summary = run_validation(config)

            manifest = json.loads((Path(tmp) / "manifest.json").read_text())
            self.assertEqual(manifest["config"]["seed"], 2)
            self.assertEqual(len(manifest["config_hash"]), 16)

            lines = (Path(tmp) / "checks.jsonl").read_text().splitlines()
            self.assertEqual(len(lines), summary["checks"])
            record = json.loads(lines[0])
            self.assertIn("op", record)
            self.assertTrue(record["passed"])
            self.assertEqual((Path(tmp) / "failures.jsonl").read_text(), "")

    def test_external_logger_left_open(self):
        with tempfile.TemporaryDirectory() as tmp:
            with RunLogger(Path(tmp)) as logger:
                run_validation(ValidationConfig(n_cases=2, max_bits=32), logger=logger)
                self.assertGreater(logger.summary["checks_logged"], 0)
                logger.log_check({"op": "extra", "passed": True})


class TestRunLogger(unittest.TestCase):

    def test_failures_routed(self):
        with tempfile.TemporaryDirectory() as tmp:
            with RunLogger(Path(tmp)) as logger:
                logger.log_check({"op": "add", "passed": True})
                logger.log_check({"op": "add", "passed": False, "got": "1", "want": "2"})
                self.assertEqual(logger.summary,
                                 {"checks_logged": 2, "failures_logged": 1})
            failures = (Path(tmp) / "failures.jsonl").read_text().splitlines()
            self.assertEqual(len(failures), 1)
            self.assertEqual(json.loads(failures[0])["want"], "2")

    def test_close_twice(self):
        with tempfile.TemporaryDirectory() as tmp:
            logger = RunLogger(Path(tmp) / "nested" / "dir")
            logger.close()
            logger.close()
            self.assertTrue((Path(tmp) / "nested" / "dir" / "checks.jsonl").exists())

    def test_manifest(self):
        manifest = create_manifest("run1", {"b": 2, "a": 1})
        same = create_manifest("run2", {"a": 1, "b": 2})
        self.assertEqual(manifest.config_hash, same.config_hash)
        self.assertEqual(manifest.to_dict()["run_id"], "run1")
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "out" / "manifest.json"
            manifest.save(path)
            self.assertEqual(json.loads(path.read_text())["config"], {"b": 2, "a": 1})


if __name__ == "__main__":
    unittest.main()
