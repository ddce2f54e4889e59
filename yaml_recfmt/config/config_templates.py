"""
This module supplies the `get_default_config` function, which returns the
default settings of the formatter as a Python dictionary. A settings file
and command-line flags are layered over this template.
"""
from yaml_recfmt.utils.constants import MAX_NESTING_DEPTH, YAML_EXTENSIONS


def get_default_config() -> dict:
    """
    Returns the default settings template.
    """
    return {
        "formatting": {
            "recursive": False,
            "max_depth": MAX_NESTING_DEPTH,
        },
        "files": {
            "in_place": False,
            "extensions": list(YAML_EXTENSIONS),
            "include_hidden": False,
            "use_ignore_files": True,
        },
        "workers": 1,
        "logging": {
            "level": "INFO",
            "use_color": True,
            "log_file": None,
            "use_json": False,
        },
    }
