"""Interactive wizard for project creation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

from .checks import check_all
from .config import Settings, load_settings
from .models import Template
from .scaffold import create_project
from .templates import list_templates

RICH_IMPORT_ERROR: Exception | None = None

try:
    from rich.console import Console
    from rich.panel import Panel
    from rich.prompt import Confirm, IntPrompt, Prompt
    from rich.table import Table
except ImportError as exc:  # pragma: no cover
    RICH_IMPORT_ERROR = exc


@dataclass(frozen=True)
class WizardConfig:
    template_name: str
    project_dir: Path
    run_post_clone: bool


def _available_names(console: Console, settings: Settings, templates: Dict[str, Template]) -> List[str]:
    with console.status("Checking template requirements..."):
        availability = check_all(templates, settings.check_timeout)

    table = Table(title="Templates")
    table.add_column("#", justify="right")
    table.add_column("Template")
    table.add_column("Description")
    table.add_column("Status")

    names = sorted(name for name, ok in availability.items() if ok)
    for idx, name in enumerate(names, start=1):
        table.add_row(str(idx), name, templates[name].description, "[green]available[/green]")
    for name in sorted(name for name, ok in availability.items() if not ok):
        table.add_row("-", name, templates[name].description, "[red]missing tools[/red]")

    console.print(table)
    return names


def _select_template(console: Console, settings: Settings, templates: Dict[str, Template]) -> str:
    names = _available_names(console, settings, templates)
    if not names:
        raise RuntimeError("No templates can run on this host. Install the required tools first.")

    index = IntPrompt.ask("Select template", default=1)
    if index < 1 or index > len(names):
        raise RuntimeError(f"Template selection out of range: {index}")
    return names[index - 1]


def _ask_project_dir(console: Console) -> Path:
    while True:
        value = Prompt.ask("Project directory").strip()
        if not value:
            console.print("A project directory is required.", style="yellow")
            continue
        project_dir = Path(value).expanduser()
        if project_dir.exists() and any(project_dir.iterdir()):
            if not Confirm.ask(f"{project_dir} is not empty. Use it anyway?", default=False):
                continue
        return project_dir


def _collect_wizard_config(console: Console, settings: Settings, templates: Dict[str, Template]) -> WizardConfig:
    template_name = _select_template(console, settings, templates)
    template = templates[template_name]
    project_dir = _ask_project_dir(console)

    run_post_clone = False
    if template.post_clone:
        run_post_clone = Confirm.ask(f"Run '{template.post_clone}' after creating files?", default=True)

    summary = Table(title="Summary")
    summary.add_column("Field")
    summary.add_column("Value")
    summary.add_row("Template", template_name)
    summary.add_row("Run", " ".join(template.manifest.run) or "-")
    summary.add_row("Files", str(len(template.files)))
    summary.add_row("Directory", str(project_dir))
    summary.add_row("Post-clone", template.post_clone if run_post_clone else "-")
    console.print(summary)

    if not Confirm.ask("Create project now?", default=True):
        raise RuntimeError("Cancelled by user")

    return WizardConfig(template_name=template_name, project_dir=project_dir, run_post_clone=run_post_clone)


def run_interactive_wizard() -> int:
    if RICH_IMPORT_ERROR is not None:
        raise RuntimeError("Interactive mode requires 'rich'. Install the package dependencies.") from RICH_IMPORT_ERROR

    settings = load_settings()
    templates = list_templates(settings.templates_dir)

    console = Console()
    console.print(Panel("Function Project Wizard", border_style="cyan", title="cgi-scaffold"))

    config = _collect_wizard_config(console, settings, templates)
    result = create_project(
        templates[config.template_name],
        config.project_dir,
        overwrite=True,
        skip_post_clone=not config.run_post_clone,
    )

    result_table = Table(title="Done")
    result_table.add_column("Output")
    result_table.add_column("Path")
    result_table.add_row("Project", str(result.project_dir))
    result_table.add_row("Manifest", str(result.manifest_path))
    for path in result.files:
        result_table.add_row("File", str(path))
    console.print(result_table)

    return 0
