import os

# Default log level for the command line tools - can be overridden by env var
LOG_LEVEL = os.environ.get("GVAS_LOG_LEVEL", "WARNING").upper()

# Output paths
OUTPUT_DIR = os.environ.get("GVAS_OUTPUT_DIR", os.path.join(os.getcwd(), "output"))
JSON_INDENT = 2
