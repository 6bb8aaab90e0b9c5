"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach a real store or pick up a developer's .env values
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/user_api_test")
os.environ.setdefault("ERROR_MODE", "compat")
os.environ.setdefault("LOG_FORMAT", "text")
