"""
Constants for bkmr.

These constants are used by various modules for sensible defaults.
Most of them can be overridden via the config system.
"""

# Storage
DEFAULT_DATABASE = "~/.config/bkmr/bkmr.db"
USER_CONFIG_PATH = "~/.config/bkmr/config.toml"
LOCAL_CONFIG_NAMES = ("bkmr.toml", ".bkmrrc")

# Tags
TAG_DELIMITER = ","

# Launching
SHELL_PREFIX = "shell::"
DEFAULT_EDITOR = "vi"
DEFAULT_WINDOWS_EDITOR = "notepad"

# Network timeouts (in seconds)
DEFAULT_REQUEST_TIMEOUT = 10
DEFAULT_USER_AGENT = "bkmr/0.7 (+https://github.com/sysid/bkmr)"

# Edit template
TEMPLATE_COMMENT = "#"
TEMPLATE_FIELD_COUNT = 4

INTERACTIVE_HELP = """
    <n1> <n2>:      opens selection in browser
    p <n1> <n2>:    print id-list of selection
    p:              print all ids
    d <n1> <n2>:    delete selection
    e <n1> <n2>:    edit selection
    q | ENTER:      quit
    h:              help
"""
