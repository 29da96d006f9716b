"""Configuration defaults for ports."""

VERSION = "0.1.0"

# Logging
LOG_LEVEL_ENV = "PORTS_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"

# External commands
LSOF_COMMAND = [
    "lsof",
    "-i",  # List IP sockets.
    "-n",  # Do not resolve hostnames (no DNS).
    "-P",  # Do not resolve port names.
]
PS_COMMAND = ["ps", "aux"]

# Columns that must appear in each tool's header (any order, any case)
LSOF_REQUIRED_COLUMNS = ["COMMAND", "PID", "USER", "TYPE", "NODE", "NAME"]
PS_REQUIRED_COLUMNS = ["USER", "PID", "%CPU", "%MEM", "START", "TIME", "COMMAND"]

# Alternate header spellings seen across ps versions
PS_COLUMN_SYNONYMS = {
    "STARTED": "START",
}

# lsof appends this to listening sockets; it has no header column
LISTEN_MARKER = "(LISTEN)"

# Port arguments
MIN_PORT = 0
MAX_PORT = 65535
