"""
This module restores scalar quoting that a parse/dump round-trip drops.

PyYAML only quotes a string when it has to, so `bar: "bar"` comes back as
`bar: bar`. `requote` compares the original text with the dumped text and
puts the quotes back around every `key: value` pair and `- value` element
that was quoted in the original. `quote_zero_prefixed` force-quotes digit
strings with a leading zero (`0123`) so they are never read as numbers.

Both passes work on text, not on the parsed tree, because the tree cannot
tell a quoted string from an unquoted one.
"""
# yaml_recfmt/formatting/quote_corrector.py
import re
from typing import List, NamedTuple

from yaml_recfmt.utils.yaml_utils import reads_as_string

QUOTED_MAP = re.compile(r"""^\s*(.*):\s*(['"])(.*)(['"])\s*$""", re.MULTILINE)
QUOTED_SEQ = re.compile(r"""^\s*-\s*(['"])(.*)(['"])\s*$""", re.MULTILINE)
ZERO_PREFIXED_NUMBERS = re.compile(r"([:-])([ \t]+)(0\d+)$")
# A line opening a literal or folded block scalar: `key: |`, `- >-`, ...
BLOCK_SCALAR_HEADER = re.compile(r"^(?P<indent>[ \t]*(?:-[ \t]+)*)(?P<key>[^ \t#].*?:[ \t]+)?[|>][-+1-9]*[ \t]*(?:#.*)?$")


class MapEntry(NamedTuple):
    key: str
    lquote: str
    value: str
    rquote: str


class SequenceElement(NamedTuple):
    lquote: str
    value: str
    rquote: str


def map_entries(text: str) -> List[MapEntry]:
    """Collects every `key: <quote>value<quote>` line of `text`."""
    return [MapEntry(*match.groups()) for match in QUOTED_MAP.finditer(text)]


def sequence_elements(text: str) -> List[SequenceElement]:
    """Collects every `- <quote>value<quote>` line of `text`."""
    return [SequenceElement(*match.groups()) for match in QUOTED_SEQ.finditer(text)]


def _replace_lines(text: str, plain: str, quoted: str) -> str:
    """
    Replaces every whole line reading `plain` (after its indentation) with
    `quoted`, keeping the indentation.
    """
    pattern = re.compile(r"^([ \t]*)" + re.escape(plain) + r"$", re.MULTILINE)
    return pattern.sub(lambda match: match.group(1) + quoted, text)


def requote_map_entries(original: str, unquoted: str) -> str:
    requoted = unquoted
    for key, lquote, value, rquote in map_entries(original):
        if lquote != rquote or not reads_as_string(value):
            continue
        requoted = _replace_lines(
            requoted,
            f"{key}: {value}",
            f"{key}: {lquote}{value}{rquote}",
        )
    return requoted


def requote_sequence_elements(original: str, unquoted: str) -> str:
    requoted = unquoted
    for lquote, value, rquote in sequence_elements(original):
        if lquote != rquote or not reads_as_string(value):
            continue
        requoted = _replace_lines(requoted, f"- {value}", f"- {lquote}{value}{rquote}")
    return requoted


def requote(original: str, unquoted: str) -> str:
    """
    Restores quotes that were present in `original` but are missing in
    `unquoted`.

    If either a key value pair `key: value` or an element `- value` is found
    in the original text with `value` quoted, the same line is quoted in the
    output. Only values that read back as strings when unquoted are touched;
    a value that reads as a number or boolean was converted on purpose and
    keeps its plain form.

    Warning: matching is by value, not by position. If the same `key: value`
    line appears in several places, all of them are quoted.

    Args:
        original (str): The YAML text before formatting.
        unquoted (str): The formatted YAML text.

    Returns:
        str: `unquoted` with the original quotes restored.
    """
    requoted = requote_map_entries(original, unquoted)
    return requote_sequence_elements(original, requoted)


def _indentation(line: str) -> int:
    return len(line) - len(line.lstrip(" \t"))


def _block_parent_column(header: re.Match) -> int:
    """Column that the lines of a block scalar must be indented past."""
    indent = header.group("indent")
    if header.group("key") is not None:
        return len(indent)
    # `- |`: the block belongs to the sequence entry's dash
    return len(indent.rstrip(" \t")) - 1


def quote_zero_prefixed(text: str) -> str:
    """
    Wraps zero-prefixed digit strings ending a mapping or sequence line in
    single quotes (`foo: 0123` becomes `foo: '0123'`).

    Lines inside literal or folded block scalars are string content and are
    left untouched.
    """
    lines = text.splitlines(keepends=True)
    block_parent = None
    for i, line in enumerate(lines):
        content = line.rstrip("\r\n")
        if block_parent is not None:
            if not content.strip() or _indentation(content) > block_parent:
                continue
            block_parent = None

        header = BLOCK_SCALAR_HEADER.match(content)
        if header:
            block_parent = _block_parent_column(header)
            continue
        lines[i] = ZERO_PREFIXED_NUMBERS.sub(r"\1\2'\3'", content) + line[len(content):]
    return "".join(lines)
