"""
Shared pytest configuration.

Pins the test environment before any application module reads settings.
"""

import os

os.environ.setdefault("ENVIRONMENT", "test")
