"""
Command-line entry point of yaml-recfmt.

Formats YAML files given as arguments (directories are searched for .yml and
.yaml files), or standard input when no file is given. With --recursive, YAML
documents held in string values are formatted as well. Note that this
changes the data of those strings, so use with care.

Examples:
    cat input.yaml | yaml-recfmt > output.yaml
    yaml-recfmt --in-place --recursive examples/
"""
import argparse
import os
import sys
from typing import List, Optional

import yaml

from yaml_recfmt.config.config_loader import load_settings
from yaml_recfmt.pipeline.batch_formatter import BatchFormatter
from yaml_recfmt.utils.constants import EXIT_FAILURE, EXIT_OK, EXIT_USAGE, LOG_LEVEL_ENV_VAR
from yaml_recfmt.utils.logger import LoggerManager


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="yaml-recfmt", description="Formats YAML files.")
    parser.add_argument("files", nargs="*", help="Files or directories to format. Defaults to standard in.")
    parser.add_argument("-i", "--in-place", action="store_true", default=None, help="Overwrite the files in place.")
    parser.add_argument("-r", "--recursive", action="store_true", default=None,
                        help="Recursively format YAML-formatted strings.")
    parser.add_argument("--max-depth", type=int, help="Maximum nesting depth of YAML-formatted strings.")
    parser.add_argument("-j", "--jobs", type=int, help="Number of files formatted concurrently.")
    parser.add_argument("--hidden", action="store_true", default=None,
                        help="Also format hidden files and directories.")
    parser.add_argument("--no-ignore", dest="use_ignore_files", action="store_false", default=None,
                        help="Do not skip paths listed in .gitignore and .ignore files.")
    parser.add_argument("--config", help="Path to a settings YAML file.")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log debug messages.")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors.")
    return parser


def settings_from_args(args: argparse.Namespace) -> dict:
    """Builds the effective settings, with command-line flags taking precedence."""
    level = os.environ.get(LOG_LEVEL_ENV_VAR) or None
    if args.verbose:
        level = "DEBUG"
    elif args.quiet:
        level = "WARNING"
    overrides = {
        "formatting": {"recursive": args.recursive, "max_depth": args.max_depth},
        "files": {
            "in_place": args.in_place,
            "include_hidden": args.hidden,
            "use_ignore_files": args.use_ignore_files,
        },
        "workers": args.jobs,
        "logging": {"level": level},
    }
    return load_settings(args.config, overrides)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = settings_from_args(args)
        log_settings = settings["logging"]
        logger = LoggerManager.get_logger(
            "yaml_recfmt",
            log_file=log_settings["log_file"],
            level=log_settings["level"],
            use_json=log_settings["use_json"],
            use_color=log_settings["use_color"] and sys.stderr.isatty(),
        )
        formatter = BatchFormatter.from_settings(settings, logger=logger)
    except (FileNotFoundError, ValueError, TypeError, KeyError, yaml.YAMLError) as e:
        print(f"Error: invalid configuration. Details: {e}", file=sys.stderr)
        return EXIT_USAGE

    logger.debug(f"Settings: {settings}")

    if not args.files:
        try:
            formatter.format_stream(sys.stdin, sys.stdout)
        except (yaml.YAMLError, ValueError, RuntimeError) as e:
            logger.error(f"Failed to process stdin: {e}")
            return EXIT_FAILURE
        return EXIT_OK

    result = formatter.run(args.files, sys.stdout)
    logger.debug(
        f"Processed {len(result.processed)} file(s), "
        f"{len(result.changed)} changed, {len(result.failed)} failed"
    )
    return EXIT_OK if result.ok else EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
