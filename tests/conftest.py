"""Pytest configuration shared across all test modules.

This file is loaded by pytest before any test module, so the environment
below is in place before ``app.core.config`` builds its settings.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"

os.environ.setdefault("APP_RATE_LIMIT_MAX_REQUESTS", "3")
os.environ.setdefault("APP_RATE_LIMIT_WINDOW_SECONDS", "3600")
os.environ.setdefault("APP_RATE_LIMIT_SWEEP_INTERVAL_SECONDS", "300")
os.environ.setdefault("LOG_FORMAT", "plain")
os.environ.setdefault("LOG_LEVEL", "WARNING")
