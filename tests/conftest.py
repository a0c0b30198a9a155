"""Root conftest — shared test configuration."""

import os

# Tests never seed the demo list or emit JSON logs unless they ask for it
os.environ.setdefault("REMOTING_SEED_TODOS", "false")
os.environ.setdefault("REMOTING_LOG_FORMAT", "text")
