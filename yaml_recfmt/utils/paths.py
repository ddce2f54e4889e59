"""
This module offers file discovery for the formatter. `is_yaml` tells whether
a path carries one of the configured YAML extensions, and `iter_yaml_files`
expands the roots given on the command line into the list of files to
format, walking directories recursively while honouring `.gitignore` and
`.ignore` files.
"""
# yaml_recfmt/utils/paths.py

import os
from typing import Iterable, Iterator, List, Optional, Tuple

from pathspec import GitIgnoreSpec

from yaml_recfmt.utils.constants import IGNORE_FILES, YAML_EXTENSIONS


def is_yaml(path: str, extensions: Optional[Iterable[str]] = None) -> bool:
    """
    Check if a file is (likely) YAML, judging by its extension.

    Args:
        path (str): The file path.
        extensions (Optional[Iterable[str]]): Accepted extensions without the
            leading dot. Defaults to `YAML_EXTENSIONS`.

    Returns:
        bool: True if the extension is one of `extensions` (case-insensitive).
    """
    accepted = {ext.lower().lstrip(".") for ext in (extensions or YAML_EXTENSIONS)}
    ext = os.path.splitext(path)[1].lstrip(".").lower()
    return ext in accepted


def _is_hidden(name: str) -> bool:
    return name.startswith(".") and name not in (".", "..")


def load_ignore_spec(directory: str) -> Optional[GitIgnoreSpec]:
    """
    Reads the ignore files of `directory` into a single spec.

    `.ignore` patterns come after `.gitignore` ones, so they win when both
    files match a path.

    Returns:
        Optional[GitIgnoreSpec]: None if the directory has no ignore file.
    """
    lines = []
    for name in IGNORE_FILES:
        path = os.path.join(directory, name)
        if os.path.isfile(path):
            with open(path, "r", encoding="utf-8", errors="replace") as f:
                lines.extend(f.read().splitlines())
    if not lines:
        return None
    return GitIgnoreSpec.from_lines(lines)


def is_ignored(path: str, is_dir: bool, specs: List[Tuple[str, GitIgnoreSpec]]) -> bool:
    """
    Tells whether `path` is excluded by the ignore files in effect.

    `specs` holds (directory, spec) pairs from the outermost directory to the
    innermost. The innermost ignore file with a matching pattern decides, so a
    negated pattern (`!keep.yaml`) in a subdirectory re-includes a path that
    a parent directory ignores. Within one directory the last matching pattern
    decides, as in git.
    """
    for base, spec in reversed(specs):
        relative = os.path.relpath(path, base).replace(os.sep, "/")
        if is_dir:
            relative += "/"
        include = None
        for pattern in spec.patterns:
            if pattern.include is not None and pattern.match_file(relative) is not None:
                include = pattern.include
        if include is not None:
            return include
    return False


def iter_yaml_files(root: str,
                    extensions: Optional[Iterable[str]] = None,
                    include_hidden: bool = False,
                    use_ignore_files: bool = True) -> Iterator[str]:
    """
    Yields the YAML files found under `root`.

    A file given directly is yielded as is, whatever its extension. A
    directory is walked recursively in sorted order; hidden files and
    directories are skipped unless `include_hidden` is set, entries matched
    by a `.gitignore` or `.ignore` file of the walked tree are skipped unless
    `use_ignore_files` is unset, and only files accepted by `is_yaml` are
    yielded.

    Args:
        root (str): A file or directory path.
        extensions (Optional[Iterable[str]]): Accepted extensions.
        include_hidden (bool): Whether to descend into dot-directories and
            yield dot-files.
        use_ignore_files (bool): Whether to honour ignore files.

    Yields:
        str: Paths of the files to format.

    Raises:
        FileNotFoundError: If `root` does not exist.
    """
    if os.path.isfile(root):
        yield root
        return
    if not os.path.isdir(root):
        raise FileNotFoundError(f"No such file or directory: {root}")

    specs_by_dir = {}
    for dirpath, dirnames, filenames in os.walk(root):
        specs = list(specs_by_dir.pop(dirpath, []))
        if use_ignore_files:
            spec = load_ignore_spec(dirpath)
            if spec is not None:
                specs.append((dirpath, spec))

        kept = []
        for d in sorted(dirnames):
            if not include_hidden and _is_hidden(d):
                continue
            subdir = os.path.join(dirpath, d)
            if specs and is_ignored(subdir, True, specs):
                continue
            specs_by_dir[subdir] = specs
            kept.append(d)
        dirnames[:] = kept

        for filename in sorted(filenames):
            if not include_hidden and _is_hidden(filename):
                continue
            path = os.path.join(dirpath, filename)
            if specs and is_ignored(path, False, specs):
                continue
            if is_yaml(filename, extensions):
                yield path
