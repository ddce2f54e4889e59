"""
This module provides the `BatchFormatter` class, which applies the YAML
formatting pipeline to standard input or to a set of files and directories.
Each file is formatted independently: a file that fails to parse is logged
and skipped without stopping the batch. Files can be formatted concurrently
on a thread pool.
"""
# yaml_recfmt/pipeline/batch_formatter.py

import concurrent.futures
import logging
import threading
from dataclasses import dataclass, field
from typing import IO, Iterable, List, Optional

import yaml

from yaml_recfmt.formatting.yaml_formatter import format_yaml
from yaml_recfmt.utils.constants import MAX_NESTING_DEPTH, YAML_EXTENSIONS
from yaml_recfmt.utils.paths import iter_yaml_files

# Errors that make a single file fail without aborting the batch
FILE_ERRORS = (yaml.YAMLError, ValueError, OSError, RuntimeError)


@dataclass
class BatchResult:
    processed: List[str] = field(default_factory=list)
    changed: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


class BatchFormatter:
    """
    Formats YAML read from a stream or from files.

    Without `in_place`, formatted documents are written to the output stream
    one after the other. With `in_place`, each file is rewritten, and only
    when its content actually changed.
    """

    def __init__(self,
                 recursive: bool = False,
                 in_place: bool = False,
                 max_depth: int = MAX_NESTING_DEPTH,
                 extensions: Optional[Iterable[str]] = None,
                 include_hidden: bool = False,
                 use_ignore_files: bool = True,
                 workers: int = 1,
                 logger: Optional[logging.Logger] = None):
        """
        Args:
            recursive (bool): Also format YAML held in string values.
            in_place (bool): Write results back into the files.
            max_depth (int): Nesting limit for recursive formatting.
            extensions (Optional[Iterable[str]]): Extensions picked up when walking directories.
            include_hidden (bool): Walk into hidden files and directories.
            use_ignore_files (bool): Skip paths matched by `.gitignore` and `.ignore` files.
            workers (int): Number of files formatted concurrently.
            logger (Optional[logging.Logger]): Logger to report progress and failures to.

        Raises:
            TypeError: If `workers` or `max_depth` is not an integer.
            ValueError: If `workers` or `max_depth` is below 1.
        """
        for name, number in (("workers", workers), ("max_depth", max_depth)):
            if isinstance(number, bool) or not isinstance(number, int):
                raise TypeError(f"{name} must be an integer, got {number!r}")
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        if max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {max_depth}")
        self.recursive = recursive
        self.in_place = in_place
        self.max_depth = max_depth
        self.extensions = list(extensions or YAML_EXTENSIONS)
        self.include_hidden = include_hidden
        self.use_ignore_files = use_ignore_files
        self.workers = workers
        self.logger = logger or logging.getLogger(__name__)
        self._output_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: dict, logger: Optional[logging.Logger] = None) -> "BatchFormatter":
        """Creates a formatter from a settings dictionary (see `load_settings`)."""
        return cls(
            recursive=settings["formatting"]["recursive"],
            in_place=settings["files"]["in_place"],
            max_depth=settings["formatting"]["max_depth"],
            extensions=settings["files"]["extensions"],
            include_hidden=settings["files"]["include_hidden"],
            use_ignore_files=settings["files"]["use_ignore_files"],
            workers=settings["workers"],
            logger=logger,
        )

    def format_text(self, text: str) -> str:
        return format_yaml(text, recursive=self.recursive, max_depth=self.max_depth)

    def format_stream(self, in_stream: IO[str], out_stream: IO[str]) -> None:
        """Read from `in_stream` and write the formatted document to `out_stream`."""
        self.logger.info("Processing stdin")
        formatted = self.format_text(in_stream.read())
        out_stream.write(formatted)

    def format_file(self, path: str, out_stream: Optional[IO[str]] = None) -> bool:
        """
        Read from a file and write to `out_stream` or back to the file.

        Args:
            path (str): The file to format.
            out_stream (Optional[IO[str]]): Destination when not formatting in place.

        Returns:
            bool: True if the formatted text differs from the file content.
        """
        self.logger.info(f"Processing {path}")
        with open(path, "r", encoding="utf-8") as f:
            original = f.read()

        formatted = self.format_text(original)
        changed = formatted != original

        if self.in_place:
            if changed:
                with open(path, "w", encoding="utf-8") as f:
                    f.write(formatted)
                self.logger.debug(f"Rewrote {path}")
        elif out_stream is not None:
            with self._output_lock:
                out_stream.write(formatted)
        return changed

    def collect_files(self, roots: Iterable[str], result: BatchResult) -> List[str]:
        """Expands `roots` into file paths; missing roots are recorded as failures."""
        paths = []
        for root in roots:
            try:
                paths.extend(iter_yaml_files(root, self.extensions, self.include_hidden, self.use_ignore_files))
            except FileNotFoundError as e:
                self.logger.warning(f"Failed to process {root}: {e}")
                result.failed.append(root)
        return paths

    def run(self, roots: Iterable[str], out_stream: Optional[IO[str]] = None) -> BatchResult:
        """
        Formats every YAML file found under `roots`.

        Args:
            roots (Iterable[str]): Files and directories to format.
            out_stream (Optional[IO[str]]): Destination when not formatting in place.

        Returns:
            BatchResult: Which files were processed, changed, or failed.
        """
        result = BatchResult()
        paths = self.collect_files(roots, result)

        if self.workers == 1:
            for path in paths:
                self._record(path, self._try_format(path, out_stream), result)
            return result

        with concurrent.futures.ThreadPoolExecutor(max_workers=self.workers) as ex:
            futures = {ex.submit(self._try_format, path, out_stream): path for path in paths}
            for fut in concurrent.futures.as_completed(futures):
                self._record(futures[fut], fut.result(), result)
        return result

    def _try_format(self, path: str, out_stream: Optional[IO[str]]) -> Optional[bool]:
        """Formats one file; returns None when it failed."""
        try:
            return self.format_file(path, out_stream)
        except FILE_ERRORS as e:
            self.logger.warning(
                f"Failed to process {path}: {e}",
                extra={"extra_data": {"path": path}},
            )
            return None

    @staticmethod
    def _record(path: str, outcome: Optional[bool], result: BatchResult) -> None:
        if outcome is None:
            result.failed.append(path)
            return
        result.processed.append(path)
        if outcome:
            result.changed.append(path)
