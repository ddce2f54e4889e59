"""
yaml-recfmt: a formatter for YAML files.

YAML can contain multiline strings that are also YAML, but normal formatters
will (understandably) not format these nested values. In recursive mode this
package does so anyway.
"""
from yaml_recfmt.formatting.quote_corrector import requote
from yaml_recfmt.formatting.yaml_formatter import (
    NestingDepthError,
    format_plain,
    format_recursive,
    format_value,
    format_yaml,
)

__version__ = "0.1.0"

__all__ = [
    "format_yaml",
    "format_plain",
    "format_recursive",
    "format_value",
    "requote",
    "NestingDepthError",
]
