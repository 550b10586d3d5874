# src/conftest.py
"""
Root pytest configuration.

Loaded before the rowmodel package is imported, so the test environment is
selected before rowmodel.config reads it.
"""

import os

os.environ["ROWMODEL_ENV"] = "test"
