import os
import tempfile
import unittest
from pathlib import Path

from yaml_recfmt.utils.paths import is_ignored, is_yaml, iter_yaml_files, load_ignore_spec


class TestIsYaml(unittest.TestCase):

    def test_default_extensions(self):
        self.assertTrue(is_yaml("a/b/values.yaml"))
        self.assertTrue(is_yaml("deploy.yml"))
        self.assertTrue(is_yaml("UPPER.YML"))
        self.assertFalse(is_yaml("notes.txt"))
        self.assertFalse(is_yaml("yaml"))

    def test_custom_extensions(self):
        self.assertTrue(is_yaml("chart.tpl", extensions=[".tpl"]))
        self.assertFalse(is_yaml("chart.yaml", extensions=["tpl"]))


class TestIterYamlFiles(unittest.TestCase):

    def setUp(self):
        self.root_obj = tempfile.TemporaryDirectory()
        self.root = Path(self.root_obj.name)

        (self.root / "sub").mkdir()
        (self.root / ".hidden").mkdir()
        for relative in ("b.yaml", "a.yml", "readme.md", "sub/c.yaml", ".hidden/d.yaml", ".dot.yaml"):
            with open(self.root / relative, "w", encoding="utf-8") as f:
                f.write("k: v\n")

    def tearDown(self):
        self.root_obj.cleanup()

    def _relative(self, paths):
        return [os.path.relpath(p, self.root) for p in paths]

    def test_directory_is_walked_in_sorted_order(self):
        found = self._relative(iter_yaml_files(str(self.root)))
        self.assertEqual(found, ["a.yml", "b.yaml", os.path.join("sub", "c.yaml")])

    def test_hidden_entries_can_be_included(self):
        found = self._relative(iter_yaml_files(str(self.root), include_hidden=True))
        self.assertIn(".dot.yaml", found)
        self.assertIn(os.path.join(".hidden", "d.yaml"), found)
        self.assertNotIn("readme.md", found)

    def test_file_root_is_yielded_whatever_its_extension(self):
        readme = str(self.root / "readme.md")
        self.assertEqual(list(iter_yaml_files(readme)), [readme])

    def test_custom_extensions(self):
        found = self._relative(iter_yaml_files(str(self.root), extensions=["md"]))
        self.assertEqual(found, ["readme.md"])

    def test_missing_root_raises(self):
        with self.assertRaises(FileNotFoundError):
            list(iter_yaml_files(str(self.root / "missing")))

    def _write(self, relative, content="k: v\n"):
        with open(self.root / relative, "w", encoding="utf-8") as f:
            f.write(content)

    def test_gitignore_prunes_directories_and_files(self):
        (self.root / "build").mkdir()
        self._write("build/out.yaml")
        self._write("sub/skip.yaml")
        self._write(".gitignore", "# generated\nbuild/\nskip.yaml\n")
        found = self._relative(iter_yaml_files(str(self.root)))
        self.assertEqual(found, ["a.yml", "b.yaml", os.path.join("sub", "c.yaml")])

    def test_ignore_files_can_be_disabled(self):
        self._write(".gitignore", "*.yml\n")
        found = self._relative(iter_yaml_files(str(self.root), use_ignore_files=False))
        self.assertIn("a.yml", found)

    def test_nested_ignore_file_is_relative_to_its_directory(self):
        self._write("sub/.ignore", "/c.yaml\n")
        self._write("c.yaml")
        found = self._relative(iter_yaml_files(str(self.root)))
        self.assertIn("c.yaml", found)
        self.assertNotIn(os.path.join("sub", "c.yaml"), found)

    def test_nested_negation_re_includes(self):
        self._write(".gitignore", "*.yaml\n")
        self._write("sub/.gitignore", "!c.yaml\n")
        found = self._relative(iter_yaml_files(str(self.root)))
        self.assertEqual(found, ["a.yml", os.path.join("sub", "c.yaml")])

    def test_dot_ignore_wins_over_gitignore(self):
        self._write(".gitignore", "a.yml\n")
        self._write(".ignore", "!a.yml\n")
        self.assertIn("a.yml", self._relative(iter_yaml_files(str(self.root))))


class TestIgnoreSpecs(unittest.TestCase):

    def setUp(self):
        self.root_obj = tempfile.TemporaryDirectory()
        self.root = self.root_obj.name

    def tearDown(self):
        self.root_obj.cleanup()

    def test_no_ignore_file(self):
        self.assertIsNone(load_ignore_spec(self.root))

    def test_directory_pattern_only_matches_directories(self):
        with open(os.path.join(self.root, ".gitignore"), "w", encoding="utf-8") as f:
            f.write("charts/\n")
        specs = [(self.root, load_ignore_spec(self.root))]
        self.assertTrue(is_ignored(os.path.join(self.root, "charts"), True, specs))
        self.assertFalse(is_ignored(os.path.join(self.root, "charts"), False, specs))
        self.assertFalse(is_ignored(os.path.join(self.root, "values.yaml"), False, specs))


if __name__ == '__main__':
    unittest.main()
