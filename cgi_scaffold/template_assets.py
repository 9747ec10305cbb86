"""Bundled starter-kit asset helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Protocol


class AssetProvider(Protocol):
    """Read-only access to a tree of bundled starter files."""

    def list_tree(self, root: str) -> List[str]:
        """Return every file under *root*, relative to it, using ``/`` separators.

        Raises:
            FileNotFoundError: If *root* does not exist.
        """
        ...

    def read_file(self, path: str) -> str:
        """Return the content of the file at *path* (relative to the asset base)."""
        ...


class DirectoryAssets:
    def __init__(self, base_dir: Path):
        self.base_dir = base_dir

    def list_tree(self, root: str) -> List[str]:
        root_dir = self.base_dir / root.strip("/")
        if not root_dir.is_dir():
            raise FileNotFoundError(f"Asset root not found: {root_dir}")
        return sorted(
            candidate.relative_to(root_dir).as_posix()
            for candidate in root_dir.rglob("*")
            if candidate.is_file()
        )

    def read_file(self, path: str) -> str:
        return (self.base_dir / path.lstrip("/")).read_bytes().decode("utf-8")


def _builtin_asset_dir() -> Path:
    return Path(__file__).resolve().parent / "assets"


def builtin_assets() -> DirectoryAssets:
    return DirectoryAssets(_builtin_asset_dir())


def extract_tree(assets: AssetProvider, root: str) -> Dict[str, str]:
    """Read every file below *root* into a path -> content mapping.

    Keys are relative to *root* with leading ``/`` and ``.`` characters
    stripped. A missing root is a packaging defect and is not caught here.
    """
    out: Dict[str, str] = {}
    prefix = root.strip("/")
    for relative in assets.list_tree(root):
        key = relative.lstrip("/.")
        out[key] = assets.read_file(f"{prefix}/{relative}" if prefix else relative)
    return out
