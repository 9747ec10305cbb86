"""Materialize a selected template into a new project directory."""

from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .models import Manifest, Template

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "manifest.json"


@dataclass(frozen=True)
class ScaffoldResult:
    project_dir: Path
    files: List[Path]
    manifest_path: Path
    post_clone: Optional[str]


def _target_path(project_dir: Path, relative: str) -> Path:
    root = project_dir.resolve()
    target = (root / relative).resolve()
    if target != root and root not in target.parents:
        raise ValueError(f"Template file escapes project directory: {relative}")
    return target


def materialize(template: Template, project_dir: Path, overwrite: bool = False) -> List[Path]:
    project_dir.mkdir(parents=True, exist_ok=True)

    targets = [(_target_path(project_dir, relative), content) for relative, content in sorted(template.files.items())]
    if not overwrite:
        existing = [str(path) for path, _ in targets if path.exists()]
        if existing:
            raise FileExistsError(f"Refusing to overwrite existing files: {', '.join(existing)}")

    written: List[Path] = []
    for path, content in targets:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as fh:
            fh.write(content)
        written.append(path)
        logger.debug("Wrote %s", path)
    return written


def save_manifest(manifest: Manifest, project_dir: Path) -> Path:
    path = project_dir / MANIFEST_FILENAME
    path.write_text(json.dumps(manifest.to_dict(), indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    return path


def run_post_clone(project_dir: Path, action: str) -> None:
    logger.info("Running post-clone action %r in %s", action, project_dir)
    try:
        subprocess.run(["make", action], cwd=str(project_dir), check=True)
    except FileNotFoundError as exc:
        raise RuntimeError(f"Post-clone action {action!r} requires 'make': {exc}") from exc
    except subprocess.CalledProcessError as exc:
        raise RuntimeError(f"Post-clone action {action!r} failed with exit code {exc.returncode}") from exc


def create_project(
    template: Template,
    project_dir: Path,
    overwrite: bool = False,
    skip_post_clone: bool = False,
) -> ScaffoldResult:
    files = materialize(template, project_dir, overwrite=overwrite)
    manifest_path = save_manifest(template.manifest, project_dir)
    logger.info("Scaffolded %s files into %s", len(files), project_dir)

    if template.post_clone and not skip_post_clone:
        run_post_clone(project_dir, template.post_clone)

    return ScaffoldResult(
        project_dir=project_dir,
        files=files,
        manifest_path=manifest_path,
        post_clone=None if skip_post_clone else template.post_clone,
    )
