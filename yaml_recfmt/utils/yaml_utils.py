"""
This module holds the PyYAML plumbing shared by the formatter. It provides
`RecfmtLoader`, a safe loader that keeps zero-prefixed digit strings such as
`0123` and YAML 1.1 words such as `yes` or `off` as strings, and that rejects
recursive or runaway aliases, and `RecfmtDumper`, a safe dumper that keeps
mapping order, expands aliases and renders multi-line strings as literal
block scalars. `load_yaml` and `dump_yaml` wrap them with the fixed
formatting conventions (2-space indentation, block style, no line wrapping).
"""
# yaml_recfmt/utils/yaml_utils.py
import re
from typing import Any

import yaml

from yaml_recfmt.utils.constants import MAX_ALIAS_EXPANSION

STR_TAG = "tag:yaml.org,2002:str"
INT_TAG = "tag:yaml.org,2002:int"
BOOL_TAG = "tag:yaml.org,2002:bool"
DOCUMENT_END = "\n...\n"

# Decimal, binary and hexadecimal integers only. Leading-zero digit strings
# and sexagesimal numbers stay strings.
_INT_PATTERN = re.compile(
    r"""^(?:[-+]?0b[0-1_]+
        |[-+]?(?:0|[1-9][0-9_]*)
        |[-+]?0x[0-9a-fA-F_]+)$""",
    re.X,
)

# The YAML 1.2 core schema booleans; yes/no/on/off stay strings.
_BOOL_PATTERN = re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$")


class AliasError(yaml.composer.ComposerError):
    """Raised for an alias that refers to its own node or expands too far."""


def _expanded_size(node: yaml.Node, sizes: dict) -> int:
    """Counts the nodes of `node` with every alias written out in full."""
    key = id(node)
    if key not in sizes:
        if isinstance(node, yaml.SequenceNode):
            children = node.value
        elif isinstance(node, yaml.MappingNode):
            children = [child for pair in node.value for child in pair]
        else:
            children = []
        sizes[key] = 1 + sum(_expanded_size(child, sizes) for child in children)
    return sizes[key]


class RecfmtLoader(yaml.SafeLoader):
    """
    Safe loader used for every parse performed by the formatter.

    Plain scalars are resolved the YAML 1.2 way for integers and booleans:
    `0123`, `1:30`, `yes` or `off` are loaded as strings. Reading them the
    YAML 1.1 way would silently change the value during a reformat.

    Anchors and aliases are accepted, but an alias inside the node its anchor
    names (`a: &x [1, *x]`) is rejected, as is a document whose aliases
    expand to more than `MAX_ALIAS_EXPANSION` nodes. Both raise `AliasError`,
    so they fail like any other parse error.
    """

    def __init__(self, stream):
        super().__init__(stream)
        self._open_anchors = []
        self._alias_count = 0

    def compose_node(self, parent, index):
        event = self.peek_event()
        if isinstance(event, yaml.AliasEvent):
            if event.anchor in self._open_anchors:
                raise AliasError(None, None, f"found recursive alias {event.anchor!r}", event.start_mark)
            self._alias_count += 1
            return super().compose_node(parent, index)

        self._open_anchors.append(event.anchor)
        try:
            return super().compose_node(parent, index)
        finally:
            self._open_anchors.pop()

    def compose_document(self):
        node = super().compose_document()
        if self._alias_count and _expanded_size(node, {}) > MAX_ALIAS_EXPANSION:
            raise AliasError(
                None, None,
                f"aliases expand to more than {MAX_ALIAS_EXPANSION} nodes",
                node.start_mark,
            )
        return node


def _replace_resolver(loader, tag: str, pattern, first: str) -> None:
    loader.yaml_implicit_resolvers = {
        key: [(t, regexp) for t, regexp in resolvers if t != tag]
        for key, resolvers in loader.yaml_implicit_resolvers.items()
    }
    loader.add_implicit_resolver(tag, pattern, list(first))


_replace_resolver(RecfmtLoader, INT_TAG, _INT_PATTERN, "-+0123456789")
_replace_resolver(RecfmtLoader, BOOL_TAG, _BOOL_PATTERN, "tTfF")


class RecfmtDumper(yaml.SafeDumper):
    """
    Safe dumper producing the canonical layout of the formatter.

    Repeated objects are written out in full instead of as anchors and
    aliases, and strings spanning several lines use the literal block style.
    Quoting decisions use the stock YAML 1.1 resolvers, so any string that a
    YAML 1.1 parser could misread (`0123`, `yes`, `1:30`) is quoted.
    """

    def ignore_aliases(self, data: Any) -> bool:
        return True

    def represent_str(self, data: str) -> yaml.ScalarNode:
        """
        Represents multi-line strings as literal block scalars (`|`).

        PyYAML falls back to a quoted style on its own when the text cannot
        be written as a block (e.g. trailing spaces before a line break).

        Args:
            data (str): The string being dumped.

        Returns:
            yaml.ScalarNode: The node for the string.
        """
        if "\n" in data:
            return self.represent_scalar(STR_TAG, data, style="|")
        return super().represent_str(data)


RecfmtDumper.add_representer(str, RecfmtDumper.represent_str)


def load_yaml(text: str) -> Any:
    """
    Parses a single YAML document into plain Python values.

    Args:
        text (str): The YAML text.

    Returns:
        Any: The parsed value (dict, list, str, int, float, bool, None, ...).

    Raises:
        yaml.YAMLError: If the text is not a valid single YAML document.
    """
    return yaml.load(text, Loader=RecfmtLoader)


def dump_yaml(value: Any) -> str:
    """
    Serializes a value to YAML text using the canonical formatting rules.

    Args:
        value (Any): A value made of the types `load_yaml` produces.

    Returns:
        str: The YAML text, always terminated by a newline. A plain scalar
        at the root is not followed by a `...` document end marker.
    """
    text = yaml.dump(
        value,
        Dumper=RecfmtDumper,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
        indent=2,
        width=float("inf"),
    )
    if text.endswith(DOCUMENT_END):
        text = text[:-len(DOCUMENT_END) + 1]
    return text


def reads_as_string(text: str) -> bool:
    """Return True if `text`, written as a plain scalar, loads back as a string."""
    try:
        return isinstance(load_yaml(text), str)
    except (yaml.YAMLError, ValueError):
        return False
