"""
Template registry for report definitions.

Templates are configuration, not data: the registry is populated once from
YAML catalogs (the built-in ``builtin.yml`` plus any extra catalogs named in
the engine configuration) and is read-only afterwards.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

import yaml

from core.enums import ReportType, Role

from ..exceptions import TemplateNotFoundError
from ..paths import get_builtin_catalog_path
from .base import ReportTemplate

logger = logging.getLogger(__name__)


class TemplateRegistry:
    """Registry for looking up report templates.

    Usage:
        registry = TemplateRegistry(load_catalog(path))

        template = registry.get("rpt_employee_progress")
        for template in registry.list_for("rh"):
            print(template.name)
    """

    def __init__(self, templates: Iterable[ReportTemplate] = ()):
        self._templates: Dict[str, ReportTemplate] = {}
        for template in templates:
            if template.id in self._templates:
                raise ValueError(f"Duplicate report template id: {template.id}")
            self._templates[template.id] = template
            logger.debug("Registered report template: %s", template.id)

    def get(self, template_id: str) -> ReportTemplate:
        """Get a template by id.

        Raises:
            TemplateNotFoundError: If no template has that id
        """
        try:
            return self._templates[template_id]
        except KeyError:
            raise TemplateNotFoundError(template_id) from None

    def get_by_type(self, report_type: ReportType | str) -> ReportTemplate:
        """Get the first registered template of a report type."""
        for template in self._templates.values():
            if template.type == report_type:
                return template
        raise TemplateNotFoundError(str(report_type))

    def list_for(self, role: Role | str) -> List[ReportTemplate]:
        """Templates visible to ``role``, in registration order."""
        return [t for t in self._templates.values() if t.is_available_for(role)]

    def list_templates(self) -> List[ReportTemplate]:
        return list(self._templates.values())

    def get_all_template_ids(self) -> List[str]:
        return list(self._templates.keys())

    def __contains__(self, template_id: object) -> bool:
        return template_id in self._templates

    def __iter__(self) -> Iterator[ReportTemplate]:
        return iter(self._templates.values())

    def __len__(self) -> int:
        return len(self._templates)


def load_catalog(path: Path) -> List[ReportTemplate]:
    """Load report templates from a YAML catalog file.

    The file holds either a list of template mappings or a mapping with a
    ``templates`` list.

    Raises:
        ValueError: If the file structure or an entry is invalid
    """
    with Path(path).open("r", encoding="utf-8") as handle:
        content = yaml.safe_load(handle) or []
    if isinstance(content, dict):
        content = content.get("templates", [])
    if not isinstance(content, list):
        raise ValueError(f"Catalog {path} must contain a list of templates.")

    templates = [ReportTemplate.from_mapping(entry) for entry in content]
    logger.info("Loaded %d report template(s) from %s", len(templates), path)
    return templates


def build_registry(extra_catalogs: Sequence[Path] = ()) -> TemplateRegistry:
    """Build a registry from the built-in catalog plus ``extra_catalogs``."""
    templates = load_catalog(get_builtin_catalog_path())
    for catalog in extra_catalogs:
        templates.extend(load_catalog(catalog))
    return TemplateRegistry(templates)


@lru_cache(maxsize=1)
def _default_registry(extra_catalogs: tuple) -> TemplateRegistry:
    return build_registry(extra_catalogs)


def get_registry(extra_catalogs: Optional[Sequence[Path]] = None) -> TemplateRegistry:
    """Get the process-wide registry (built once, read-only afterwards)."""
    return _default_registry(tuple(Path(p) for p in (extra_catalogs or ())))
