"""Template and manifest records shared by the registry and scaffolding."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import PurePosixPath
from typing import Any, Dict, List, Optional, Tuple

from .durations import format_duration, parse_duration


class TemplateError(ValueError):
    """Raised when a template descriptor cannot be read or is malformed."""


def _string_map(value: Any, field_name: str) -> Dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise TemplateError(f"'{field_name}' must be an object")
    for key, item in value.items():
        if not isinstance(item, str):
            raise TemplateError(f"'{field_name}.{key}' must be a string")
    return dict(value)


def _string(value: Any, field_name: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TemplateError(f"'{field_name}' must be a string")
    return value


def _normalize_file_key(key: str) -> str:
    path = PurePosixPath(key)
    if not key or path.is_absolute() or key.startswith("./") or ".." in path.parts:
        raise TemplateError(f"Invalid file path in template: {key!r}")
    return key


@dataclass(frozen=True)
class Manifest:
    name: str = ""
    description: str = ""
    run: Tuple[str, ...] = ()
    time_limit: timedelta = timedelta(0)
    maximum_payload: int = 0
    output_headers: Dict[str, str] = field(default_factory=dict)
    input_headers: Dict[str, str] = field(default_factory=dict)
    query: Dict[str, str] = field(default_factory=dict)
    environment: Dict[str, str] = field(default_factory=dict)
    method: str = ""
    public: bool = False
    static: str = ""

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "run": list(self.run),
            "time_limit": format_duration(self.time_limit),
            "maximum_payload": self.maximum_payload,
            "output_headers": dict(self.output_headers),
        }
        if self.input_headers:
            payload["input_headers"] = dict(self.input_headers)
        if self.query:
            payload["query"] = dict(self.query)
        if self.environment:
            payload["environment"] = dict(self.environment)
        if self.method:
            payload["method"] = self.method
        if self.public:
            payload["public"] = True
        if self.static:
            payload["static"] = self.static
        return payload

    @classmethod
    def from_dict(cls, data: Any) -> "Manifest":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise TemplateError("'manifest' must be an object")

        run = data.get("run") or []
        if not isinstance(run, list) or not all(isinstance(arg, str) for arg in run):
            raise TemplateError("'manifest.run' must be a list of strings")

        try:
            time_limit = parse_duration(data.get("time_limit") or 0)
            maximum_payload = int(data.get("maximum_payload") or 0)
        except (TypeError, ValueError, OverflowError) as exc:
            raise TemplateError(f"Invalid manifest limits: {exc}") from exc

        public = data.get("public")
        if public is None:
            public = False
        if not isinstance(public, bool):
            raise TemplateError("'manifest.public' must be a boolean")

        return cls(
            name=_string(data.get("name"), "manifest.name"),
            description=_string(data.get("description"), "manifest.description"),
            run=tuple(run),
            time_limit=time_limit,
            maximum_payload=maximum_payload,
            output_headers=_string_map(data.get("output_headers"), "manifest.output_headers"),
            input_headers=_string_map(data.get("input_headers"), "manifest.input_headers"),
            query=_string_map(data.get("query"), "manifest.query"),
            environment=_string_map(data.get("environment"), "manifest.environment"),
            method=_string(data.get("method"), "manifest.method"),
            public=public,
            static=_string(data.get("static"), "manifest.static"),
        )


@dataclass(frozen=True)
class Template:
    """One starter kit: manifest, files, availability probes and build action.

    ``check`` is an ordered list of argument vectors; an empty list means the
    template is always available. ``files`` maps relative paths to verbatim
    text content.
    """

    description: str = ""
    manifest: Manifest = field(default_factory=Manifest)
    post_clone: Optional[str] = None
    check: Tuple[Tuple[str, ...], ...] = ()
    files: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "description": self.description,
            "manifest": self.manifest.to_dict(),
        }
        if self.post_clone:
            payload["post_clone"] = self.post_clone
        if self.check:
            payload["check"] = [list(probe) for probe in self.check]
        if self.files:
            payload["files"] = dict(self.files)
        return payload

    @classmethod
    def from_dict(cls, data: Any) -> "Template":
        if not isinstance(data, dict):
            raise TemplateError("Template descriptor must be a JSON object")

        raw_check = data.get("check") or []
        if not isinstance(raw_check, list):
            raise TemplateError("'check' must be a list of commands")
        check: List[Tuple[str, ...]] = []
        for idx, probe in enumerate(raw_check):
            if not isinstance(probe, list) or not probe or not all(isinstance(arg, str) for arg in probe):
                raise TemplateError(f"Check at index {idx} must be a non-empty list of strings")
            check.append(tuple(probe))

        post_clone = data.get("post_clone") or None
        if post_clone is not None and not isinstance(post_clone, str):
            raise TemplateError("'post_clone' must be a string")

        files = {
            _normalize_file_key(key): content
            for key, content in _string_map(data.get("files"), "files").items()
        }

        return cls(
            description=_string(data.get("description"), "description"),
            manifest=Manifest.from_dict(data.get("manifest")),
            post_clone=post_clone,
            check=tuple(check),
            files=files,
        )
