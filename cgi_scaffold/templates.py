"""Template registry: built-in starter kits merged with on-disk descriptors."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional

from .catalog import build_embedded_catalog
from .models import Template, TemplateError
from .template_assets import AssetProvider

logger = logging.getLogger(__name__)

DESCRIPTOR_SUFFIX = ".json"


def read_template(path: Path) -> Template:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise TemplateError(f"Failed to read template {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise TemplateError(f"Template {path} is not valid UTF-8: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise TemplateError(f"Failed to parse template {path}: {exc}") from exc

    try:
        return Template.from_dict(payload)
    except TemplateError as exc:
        raise TemplateError(f"Invalid template {path}: {exc}") from exc


def write_template(template: Template, path: Path) -> None:
    path.write_text(
        json.dumps(template.to_dict(), indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )


def list_dir(template_dir: Path) -> Dict[str, Template]:
    """Load every ``<name>.json`` descriptor directly inside *template_dir*.

    A missing directory yields an empty mapping. Any unreadable or malformed
    descriptor aborts the whole scan.
    """
    if not template_dir.exists():
        return {}

    try:
        entries = sorted(template_dir.iterdir())
    except OSError as exc:
        raise TemplateError(f"Failed to scan template directory {template_dir}: {exc}") from exc

    found: Dict[str, Template] = {}
    for candidate in entries:
        if candidate.is_dir() or not candidate.name.endswith(DESCRIPTOR_SUFFIX):
            continue
        name = candidate.name[: -len(DESCRIPTOR_SUFFIX)]
        found[name] = read_template(candidate)
        logger.debug("Loaded template %r from %s", name, candidate)
    return found


def list_templates(template_dir: Path, assets: Optional[AssetProvider] = None) -> Dict[str, Template]:
    """Return built-in templates with on-disk descriptors layered on top.

    An override replaces a built-in entry wholesale when their names match
    case-insensitively, and keeps the built-in spelling of the name.
    """
    merged = build_embedded_catalog(assets)
    canonical = {name.casefold(): name for name in merged}

    for name, template in list_dir(template_dir).items():
        target = canonical.get(name.casefold(), name)
        if target in merged:
            logger.info("Template %r overridden from %s", target, template_dir)
        merged[target] = template
    return merged


def resolve_template(registry: Dict[str, Template], name: str) -> Template:
    if name in registry:
        return registry[name]
    available = ", ".join(sorted(registry)) or "none"
    raise RuntimeError(f"Template not found: {name!r}. Available templates: {available}")


def export_templates(
    target_dir: Path,
    overwrite: bool = False,
    assets: Optional[AssetProvider] = None,
) -> int:
    """Write the built-in templates into *target_dir* as editable descriptors."""
    target_dir.mkdir(parents=True, exist_ok=True)

    copied = 0
    for name, template in build_embedded_catalog(assets).items():
        dst = target_dir / f"{name}{DESCRIPTOR_SUFFIX}"
        if dst.exists() and not overwrite:
            continue
        write_template(template, dst)
        copied += 1
    return copied
