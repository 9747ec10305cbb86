"""Command-line entrypoint for function project scaffolding."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .checks import Operation, check_all, is_available
from .config import ensure_templates_dir, load_settings
from .scaffold import create_project
from .templates import export_templates, list_templates, resolve_template


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def cmd_templates_list(check: bool, timeout: Optional[float]) -> int:
    settings = load_settings()
    _configure_logging(settings.log_level)

    templates = list_templates(settings.templates_dir)
    if not templates:
        print("No templates found")
        return 0

    availability = check_all(templates, timeout or settings.check_timeout) if check else {}
    for name in sorted(templates):
        line = f"{name}\t{templates[name].description}"
        if check:
            line += "\t" + ("available" if availability[name] else "unavailable")
        print(line)
    return 0


def cmd_templates_show(name: str) -> int:
    settings = load_settings()
    _configure_logging(settings.log_level)

    template = resolve_template(list_templates(settings.templates_dir), name)
    print(json.dumps(template.to_dict(), indent=2, ensure_ascii=False))
    return 0


def cmd_templates_export(overwrite: bool) -> int:
    settings = load_settings()
    _configure_logging(settings.log_level)
    ensure_templates_dir(settings)

    copied = export_templates(settings.templates_dir, overwrite=overwrite)
    print(f"Exported {copied} templates to {settings.templates_dir}")
    return 0


def cmd_create(args: argparse.Namespace) -> int:
    settings = load_settings()
    _configure_logging(settings.log_level)

    template = resolve_template(list_templates(settings.templates_dir), args.template)
    if not args.skip_check and not is_available(template, Operation(settings.check_timeout)):
        raise RuntimeError(
            f"Template {args.template!r} is not available on this host. "
            "Install its tools or pass --skip-check."
        )

    result = create_project(
        template,
        Path(args.dir),
        overwrite=args.force,
        skip_post_clone=args.skip_post_clone,
    )

    print(f"Project: {result.project_dir}")
    print(f"Files: {len(result.files)}")
    print(f"Manifest: {result.manifest_path}")
    if result.post_clone:
        print(f"Post-clone: {result.post_clone}")
    return 0


def cmd_wizard() -> int:
    from .interactive import run_interactive_wizard

    return run_interactive_wizard()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cgi-scaffold", description="Scaffold function projects from templates")
    sub = parser.add_subparsers(dest="command", required=True)

    tmpl_parser = sub.add_parser("templates", help="Template operations")
    tmpl_sub = tmpl_parser.add_subparsers(dest="templates_command", required=True)
    list_parser = tmpl_sub.add_parser("list", help="List templates")
    list_parser.add_argument("--check", action="store_true", help="Probe host availability of each template")
    list_parser.add_argument("--timeout", type=float, required=False, help="Seconds allowed per template check")
    show_parser = tmpl_sub.add_parser("show", help="Print a template descriptor")
    show_parser.add_argument("--name", required=True, help="Template name")
    export_parser = tmpl_sub.add_parser("export", help="Write built-in templates into the templates directory")
    export_parser.add_argument("--overwrite", action="store_true", help="Replace existing descriptor files")

    create = sub.add_parser("create", help="Create a project from a template")
    create.add_argument("--template", required=True, help="Template name")
    create.add_argument("--dir", required=True, help="Project directory")
    create.add_argument("--force", action="store_true", help="Overwrite existing files")
    create.add_argument("--skip-check", action="store_true", help="Do not probe template availability")
    create.add_argument("--skip-post-clone", action="store_true", help="Do not run the post-clone action")

    sub.add_parser("wizard", help="Interactive project creation")

    return parser


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "templates" and args.templates_command == "list":
            return cmd_templates_list(args.check, args.timeout)

        if args.command == "templates" and args.templates_command == "show":
            return cmd_templates_show(args.name)

        if args.command == "templates" and args.templates_command == "export":
            return cmd_templates_export(args.overwrite)

        if args.command == "create":
            return cmd_create(args)

        if args.command == "wizard":
            return cmd_wizard()

        parser.print_help()
        return 1
    except Exception as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
