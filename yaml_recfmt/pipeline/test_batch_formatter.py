import io
import logging
import tempfile
import unittest
from pathlib import Path

from yaml_recfmt.config.config_templates import get_default_config
from yaml_recfmt.pipeline.batch_formatter import BatchFormatter, BatchResult

NESTED = "foo: |\n    bar:\n        baz: 345\n"
NESTED_FORMATTED = "foo: |\n  bar:\n    baz: 345\n"


class TestBatchFormatter(unittest.TestCase):

    def setUp(self):
        self.input_dir_obj = tempfile.TemporaryDirectory()
        self.input_dir = Path(self.input_dir_obj.name)
        self.logger = logging.getLogger("test_batch_formatter")

        self._write("nested.yaml", NESTED)
        self._write("clean.yml", "a: 1\n")
        self._write("messy.yml", "a:     1\n")
        self._write("broken.yaml", "a: [unclosed\n")
        self._write("notes.txt", "not: yaml: at all\n")

    def tearDown(self):
        self.input_dir_obj.cleanup()

    def _write(self, name, content):
        with open(self.input_dir / name, "w", encoding="utf-8") as f:
            f.write(content)

    def _read(self, name):
        with open(self.input_dir / name, "r", encoding="utf-8") as f:
            return f.read()

    def test_format_text_respects_recursive_flag(self):
        self.assertEqual(BatchFormatter(recursive=True).format_text(NESTED), NESTED_FORMATTED)
        self.assertEqual(
            BatchFormatter(recursive=False).format_text(NESTED),
            "foo: |\n  bar:\n      baz: 345\n",
        )

    def test_format_stream(self):
        out = io.StringIO()
        BatchFormatter(recursive=True, logger=self.logger).format_stream(io.StringIO(NESTED), out)
        self.assertEqual(out.getvalue(), NESTED_FORMATTED)

    def test_format_file_to_stream(self):
        out = io.StringIO()
        changed = BatchFormatter(recursive=True, logger=self.logger).format_file(
            str(self.input_dir / "nested.yaml"), out
        )
        self.assertTrue(changed)
        self.assertEqual(out.getvalue(), NESTED_FORMATTED)
        self.assertEqual(self._read("nested.yaml"), NESTED)

    def test_format_file_in_place(self):
        formatter = BatchFormatter(recursive=True, in_place=True, logger=self.logger)
        self.assertTrue(formatter.format_file(str(self.input_dir / "nested.yaml")))
        self.assertEqual(self._read("nested.yaml"), NESTED_FORMATTED)
        self.assertFalse(formatter.format_file(str(self.input_dir / "nested.yaml")))

    def test_run_isolates_failures(self):
        formatter = BatchFormatter(recursive=True, in_place=True, logger=self.logger)
        with self.assertLogs(self.logger, level="WARNING") as logs:
            result = formatter.run([str(self.input_dir)])

        self.assertIsInstance(result, BatchResult)
        self.assertFalse(result.ok)
        self.assertEqual([Path(p).name for p in result.failed], ["broken.yaml"])
        self.assertEqual(
            sorted(Path(p).name for p in result.processed),
            ["clean.yml", "messy.yml", "nested.yaml"],
        )
        self.assertEqual(
            sorted(Path(p).name for p in result.changed),
            ["messy.yml", "nested.yaml"],
        )
        self.assertTrue(any("Failed to process" in line and "broken.yaml" in line for line in logs.output))
        self.assertEqual(self._read("messy.yml"), "a: 1\n")
        self.assertEqual(self._read("broken.yaml"), "a: [unclosed\n")
        self.assertEqual(self._read("notes.txt"), "not: yaml: at all\n")

    def test_run_writes_to_stream_in_order(self):
        (self.input_dir / "broken.yaml").unlink()
        out = io.StringIO()
        result = BatchFormatter(recursive=True, logger=self.logger).run([str(self.input_dir)], out)
        self.assertTrue(result.ok)
        self.assertEqual(out.getvalue(), "a: 1\n" + "a: 1\n" + NESTED_FORMATTED)

    def test_run_with_workers(self):
        for i in range(10):
            self._write(f"extra_{i}.yaml", f"key_{i}:      {i}\n")
        formatter = BatchFormatter(in_place=True, workers=4, logger=self.logger)
        with self.assertLogs(self.logger, level="WARNING"):
            result = formatter.run([str(self.input_dir)])

        self.assertEqual(len(result.failed), 1)
        self.assertEqual(len(result.processed), 13)
        for i in range(10):
            self.assertEqual(self._read(f"extra_{i}.yaml"), f"key_{i}: {i}\n")

    def test_missing_root_is_a_failure(self):
        missing = str(self.input_dir / "missing")
        with self.assertLogs(self.logger, level="WARNING"):
            result = BatchFormatter(logger=self.logger).run([missing])
        self.assertEqual(result.failed, [missing])

    def test_depth_limit_is_a_file_failure(self):
        self._write("deep.yaml", "a: |\n  b: |\n    c: 1\n")
        formatter = BatchFormatter(recursive=True, max_depth=1, logger=self.logger)
        with self.assertLogs(self.logger, level="WARNING"):
            result = formatter.run([str(self.input_dir / "deep.yaml")], io.StringIO())
        self.assertEqual(len(result.failed), 1)

    def test_invalid_arguments(self):
        with self.assertRaises(ValueError):
            BatchFormatter(workers=0)
        with self.assertRaises(ValueError):
            BatchFormatter(max_depth=0)
        with self.assertRaises(TypeError):
            BatchFormatter(workers="four")
        with self.assertRaises(TypeError):
            BatchFormatter(max_depth=2.5)

    def test_ignored_files_are_skipped(self):
        (self.input_dir / "broken.yaml").unlink()
        (self.input_dir / "vendor").mkdir()
        self._write("vendor/chart.yaml", "a:     1\n")
        self._write(".gitignore", "vendor/\n")

        result = BatchFormatter(in_place=True, logger=self.logger).run([str(self.input_dir)])
        self.assertEqual(self._read("vendor/chart.yaml"), "a:     1\n")
        self.assertEqual(len(result.processed), 3)

        formatter = BatchFormatter(in_place=True, use_ignore_files=False, logger=self.logger)
        result = formatter.run([str(self.input_dir)])
        self.assertEqual(self._read("vendor/chart.yaml"), "a: 1\n")
        self.assertEqual(len(result.processed), 4)

    def test_recursive_alias_is_a_file_failure(self):
        self._write("loop.yaml", "a: &x [1, *x]\n")
        with self.assertLogs(self.logger, level="WARNING"):
            result = BatchFormatter(logger=self.logger).run([str(self.input_dir / "loop.yaml")], io.StringIO())
        self.assertEqual(len(result.failed), 1)

    def test_from_settings(self):
        settings = get_default_config()
        settings["formatting"]["recursive"] = True
        settings["files"]["extensions"] = ["yaml"]
        settings["workers"] = 2
        formatter = BatchFormatter.from_settings(settings, logger=self.logger)
        self.assertTrue(formatter.recursive)
        self.assertFalse(formatter.in_place)
        self.assertEqual(formatter.extensions, ["yaml"])
        self.assertEqual(formatter.workers, 2)
        self.assertIs(formatter.logger, self.logger)


if __name__ == '__main__':
    unittest.main()
