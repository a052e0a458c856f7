"""
Configuration constants to replace magic numbers throughout tclish
"""

# Interpreter identity
VERSION = "0.4.0"
DEFAULT_SCRIPT_NAME = "<script>"

# Namespace resolution constants
NAMESPACE_SEPARATOR = "::"
ROOT_NAMESPACE = "::"
GLOBAL_LEVEL_PREFIX = "#"

# Command limits
MAX_ARITY = 255            # Maximum number of declared procedure parameters
VARIADIC_PARAMETER = "args"
MAX_NESTING_DEPTH = 1000   # Nested script evaluations before giving up

# Special variables (read-only ones are resolved on demand)
VAR_VERSION = "tcl_version"
VAR_DEPTH = "tcl_depth"
VAR_COMMAND = "tcl_command"
VAR_ARGV0 = "argv0"
VAR_ARGV = "argv"
VAR_ARGC = "argc"
READONLY_VARIABLES = frozenset((VAR_VERSION, VAR_DEPTH, VAR_COMMAND))
SPECIAL_VARIABLES = READONLY_VARIABLES | {VAR_ARGV0, VAR_ARGV, VAR_ARGC}

# Boolean literal words accepted by expressions
TRUE_WORDS = frozenset(("1", "t", "T", "true", "TRUE", "True", "yes", "on"))
FALSE_WORDS = frozenset(("0", "f", "F", "false", "FALSE", "False", "no", "off"))

# Float formatting: shortest %g form switches to exponent notation
FLOAT_EXPONENT_THRESHOLD = 6
FLOAT_SMALL_EXPONENT = -4

# File encoding constants
DEFAULT_FILE_ENCODING = "utf-8"

# Standard channels
STDIN_CHANNEL = "stdin"
STDOUT_CHANNEL = "stdout"
STDERR_CHANNEL = "stderr"
STANDARD_CHANNELS = (STDIN_CHANNEL, STDOUT_CHANNEL, STDERR_CHANNEL)
CHANNEL_PREFIX = "file"

# Diagnostics
COLOR_ENV = "TCLISH_COLOR"

# REPL prompts
REPL_INPUT_PROMPT = "in [{:3d}]: "
REPL_OUTPUT_PROMPT = "out[{:3d}]: "
REPL_CONTINUATION_PROMPT = "   ...  : "

# catch return codes
CATCH_OK = 0
CATCH_ERROR = 1
CATCH_RETURN = 2
CATCH_BREAK = 3
CATCH_CONTINUE = 4
