# File extensions treated as YAML when walking directories
YAML_EXTENSIONS = ["yml", "yaml"]

# Maximum number of YAML-in-string layers the recursive formatter descends into
MAX_NESTING_DEPTH = 32

# Settings file picked up from the working directory when no --config is given
DEFAULT_CONFIG_FILE = ".yaml-recfmt.yml"

# Environment variable overriding the configured log level
LOG_LEVEL_ENV_VAR = "YAML_RECFMT_LOG"

# Exit statuses of the command-line tool
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

# Largest node count a document may reach once its aliases are expanded
MAX_ALIAS_EXPANSION = 100_000

# Per-directory ignore files honoured when walking directories, lowest
# precedence first
IGNORE_FILES = [".gitignore", ".ignore"]
