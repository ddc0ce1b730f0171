"""
Report localization module.

Provides translation dictionaries for every string the renderers emit.
Supports Spanish (es, default) and English (en) locales.

Usage:
    from reports.locales import get_translations, SUPPORTED_LOCALES

    t = get_translations("en")
    print(t["applied_filters"])  # "APPLIED FILTERS"
"""

from __future__ import annotations

from typing import Dict, Optional

# Type alias for translation dictionary
TranslationDict = Dict[str, str]

TRANSLATIONS: Dict[str, TranslationDict] = {
    "es": {
        # ===================
        # Header block
        # ===================
        "banner": "SISTEMA {brand} - GESTIÓN DE CURSOS",
        "logo_placeholder": "[LOGO {brand}]",
        "report": "REPORTE",
        "description": "DESCRIPCIÓN",
        "generated": "GENERADO",
        "generated_by": "GENERADO POR",
        "watermark": "MARCA DE AGUA",
        "generated_short": "Generado",
        "by": "Por",

        # ===================
        # Filters
        # ===================
        "applied_filters": "FILTROS APLICADOS",
        "no_filters": "Sin filtros aplicados",
        "filter_date_range": "Rango de Fechas",
        "filter_departments": "Departamentos",
        "filter_courses": "Cursos",
        "filter_users": "Usuarios",
        "filter_status": "Estados",
        "filter_min_progress": "Progreso Mínimo",
        "filter_max_progress": "Progreso Máximo",

        # ===================
        # Data / summary
        # ===================
        "report_data": "DATOS DEL REPORTE",
        "total_records": "Total de Registros",
        "more_records": "... y {remaining} registros más",
        "no_records": "No se encontraron registros",
        "summary_title": "RESUMEN Y ESTADÍSTICAS",
        "summary": "RESUMEN",

        # ===================
        # Footer
        # ===================
        "copyright": "{brand} © {year} - {tagline}",
        "page_of": "Página {page} de {pages}",
        "page": "Página",
        "generation_date": "Fecha de Generación",

        # ===================
        # Errors
        # ===================
        "error_generic": "Error al generar el reporte",
        "error_invalid_filter": "Los filtros del reporte no son válidos",
        "error_template_not_found": "La plantilla de reporte no existe",
        "error_data_source": "No se pudieron obtener los datos del reporte",
        "error_render_surface": "No se pudo abrir la ventana de impresión",
        "error_presentation_config": "La configuración de impresión no es válida",
    },
    "en": {
        # ===================
        # Header block
        # ===================
        "banner": "{brand} SYSTEM - COURSE MANAGEMENT",
        "logo_placeholder": "[{brand} LOGO]",
        "report": "REPORT",
        "description": "DESCRIPTION",
        "generated": "GENERATED",
        "generated_by": "GENERATED BY",
        "watermark": "WATERMARK",
        "generated_short": "Generated",
        "by": "By",

        # ===================
        # Filters
        # ===================
        "applied_filters": "APPLIED FILTERS",
        "no_filters": "No filters applied",
        "filter_date_range": "Date Range",
        "filter_departments": "Departments",
        "filter_courses": "Courses",
        "filter_users": "Users",
        "filter_status": "Status",
        "filter_min_progress": "Minimum Progress",
        "filter_max_progress": "Maximum Progress",

        # ===================
        # Data / summary
        # ===================
        "report_data": "REPORT DATA",
        "total_records": "Total Records",
        "more_records": "... and {remaining} more records",
        "no_records": "No records found",
        "summary_title": "SUMMARY AND STATISTICS",
        "summary": "SUMMARY",

        # ===================
        # Footer
        # ===================
        "copyright": "{brand} © {year} - {tagline}",
        "page_of": "Page {page} of {pages}",
        "page": "Page",
        "generation_date": "Generation Date",

        # ===================
        # Errors
        # ===================
        "error_generic": "The report could not be generated",
        "error_invalid_filter": "The report filters are not valid",
        "error_template_not_found": "The report template does not exist",
        "error_data_source": "The report data could not be retrieved",
        "error_render_surface": "The print window could not be opened",
        "error_presentation_config": "The print configuration is not valid",
    },
}

SUPPORTED_LOCALES = list(TRANSLATIONS.keys())
DEFAULT_LOCALE = "es"

# Locale display names for UI
LOCALE_NAMES = {
    "es": "Español",
    "en": "English",
}


def get_translations(locale: Optional[str] = DEFAULT_LOCALE) -> TranslationDict:
    """Return translation dict for locale, fallback to Spanish.

    Args:
        locale: Locale code (e.g., "es", "en")

    Returns:
        Dictionary mapping translation keys to localized strings
    """
    return TRANSLATIONS.get(locale or DEFAULT_LOCALE, TRANSLATIONS[DEFAULT_LOCALE])


def get_locale_name(locale: str) -> str:
    """Return display name for a locale."""
    return LOCALE_NAMES.get(locale, locale)


def format_translation(t: TranslationDict, key: str, **kwargs) -> str:
    """Get a translation and format it with provided values.

    Args:
        t: Translation dictionary
        key: Translation key
        **kwargs: Format arguments

    Returns:
        Formatted translation string, or key if not found
    """
    template = t.get(key, key)
    try:
        return template.format(**kwargs)
    except (KeyError, ValueError):
        return template
