"""
Exceptions for the reporting engine.

Each error kind names a ``message_key`` in the locale tables so callers can
show one user-facing message per kind without leaking internal details.
"""

from __future__ import annotations

from typing import Optional


class ReportError(Exception):
    """Base exception for reporting errors."""

    message_key = "error_generic"

    def user_message(self, locale: Optional[str] = None) -> str:
        """Localized, user-facing message for this error kind."""
        from .locales import get_translations

        return get_translations(locale)[self.message_key]


class InvalidFilterError(ReportError):
    """Raised when a filter is malformed or contradictory."""

    message_key = "error_invalid_filter"


class TemplateNotFoundError(ReportError):
    """Raised when a template id is not registered."""

    message_key = "error_template_not_found"

    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(f"Report template '{template_id}' not found")


class DataSourceError(ReportError):
    """Raised when the data-access collaborator fails during assembly."""

    message_key = "error_data_source"


class RenderSurfaceError(ReportError):
    """Raised when a print/export surface cannot be obtained."""

    message_key = "error_render_surface"


class PresentationConfigError(ReportError):
    """Raised when a presentation configuration value is invalid."""

    message_key = "error_presentation_config"
