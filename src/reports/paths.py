"""
Path resolution utilities for the reports package.

Resolves bundled resources (HTML templates, built-in template catalog)
relative to the installed package.
"""

from __future__ import annotations

from pathlib import Path


def get_reports_dir() -> Path:
    """Get the reports package root directory."""
    return Path(__file__).parent


def get_templates_dir() -> Path:
    """Get the directory holding the Jinja2 HTML templates."""
    return get_reports_dir() / "templates"


def get_catalog_dir() -> Path:
    """Get the report template catalog package directory."""
    return get_reports_dir() / "catalog"


def get_builtin_catalog_path() -> Path:
    """Get the YAML file with the built-in report templates."""
    return get_catalog_dir() / "builtin.yml"
