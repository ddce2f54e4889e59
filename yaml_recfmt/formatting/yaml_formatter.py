"""
This module contains the YAML formatting pipeline. `format_value` walks a
parsed document and reformats every string that itself holds a YAML mapping
or sequence (e.g. a Helm value carrying a serialized sub-document), and
`format_yaml` runs the whole parse -> normalize -> dump -> requote sequence
on a document's text.

Reformatting an embedded document changes the bytes of the string that holds
it, so recursive mode should be used with care.
"""
# yaml_recfmt/formatting/yaml_formatter.py
from typing import Any

import yaml

from yaml_recfmt.formatting.quote_corrector import quote_zero_prefixed, requote
from yaml_recfmt.utils.constants import MAX_NESTING_DEPTH
from yaml_recfmt.utils.yaml_utils import dump_yaml, load_yaml


class NestingDepthError(ValueError):
    """Raised when YAML-in-string nesting goes deeper than the allowed limit."""

    def __init__(self, max_depth: int):
        super().__init__(f"YAML nested in strings exceeds the maximum depth of {max_depth}")
        self.max_depth = max_depth


def format_value(value: Any, depth: int = 0, max_depth: int = MAX_NESTING_DEPTH) -> Any:
    """
    Recursively formats strings found within a parsed YAML value.

    Mappings and sequences are rebuilt with every child formatted, keeping key
    order. A string is parsed as YAML: if it holds a mapping or a sequence,
    that inner document is formatted in turn and dumped back into a string.
    If it holds a bare number or boolean, that value replaces the string. Any
    other string (plain text, invalid YAML, null-looking text) is kept
    exactly as it was.

    Args:
        value (Any): A value produced by `load_yaml`.
        depth (int): How many string layers deep `value` sits.
        max_depth (int): The deepest string layer that may be formatted.

    Returns:
        Any: The formatted value.

    Raises:
        NestingDepthError: If embedded documents nest deeper than `max_depth`.
        RuntimeError: If a freshly parsed inner document cannot be dumped.
    """
    if isinstance(value, dict):
        return {key: format_value(item, depth, max_depth) for key, item in value.items()}
    if isinstance(value, list):
        return [format_value(item, depth, max_depth) for item in value]
    if not isinstance(value, str):
        return value

    try:
        inner = load_yaml(value)
    except (yaml.YAMLError, ValueError):
        # Not yaml, keep original
        return value

    if isinstance(inner, (dict, list)):
        if depth >= max_depth:
            raise NestingDepthError(max_depth)
        formatted = format_value(inner, depth + 1, max_depth)
        try:
            return dump_yaml(formatted)
        except yaml.YAMLError as e:
            raise RuntimeError("failed to serialize yaml") from e

    # bool is a subclass of int
    if isinstance(inner, (int, float)):
        return inner
    return value


def format_yaml(text: str, recursive: bool = False, max_depth: int = MAX_NESTING_DEPTH) -> str:
    """
    Formats a YAML document.

    The document is parsed, optionally normalized with `format_value`, dumped
    with 2-space indentation, and then corrected so that values quoted in
    `text` stay quoted and zero-prefixed numbers are quoted.

    Args:
        text (str): The YAML document.
        recursive (bool): If True, also format YAML held in string values.
        max_depth (int): Nesting limit for recursive formatting.

    Returns:
        str: The formatted document.

    Raises:
        yaml.YAMLError: If `text` is not a valid YAML document.
        NestingDepthError: If recursive formatting nests deeper than `max_depth`.
    """
    parsed = load_yaml(text)
    if recursive:
        parsed = format_value(parsed, max_depth=max_depth)
    formatted = dump_yaml(parsed)
    return quote_zero_prefixed(requote(text, formatted))


def format_plain(text: str) -> str:
    """Formats a YAML document without descending into string values."""
    return format_yaml(text, recursive=False)


def format_recursive(text: str, max_depth: int = MAX_NESTING_DEPTH) -> str:
    """Formats a YAML document and every YAML document nested in its strings."""
    return format_yaml(text, recursive=True, max_depth=max_depth)
