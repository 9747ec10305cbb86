import json
from pathlib import Path

import pytest

from cgi_scaffold.catalog import build_embedded_catalog
from cgi_scaffold.checks import is_available
from cgi_scaffold.models import Manifest, Template, TemplateError
from cgi_scaffold.templates import export_templates, list_dir, list_templates, read_template, write_template


def _descriptor(**overrides):
    payload = {
        "description": "Custom function",
        "manifest": {
            "name": "Custom",
            "description": "custom usage",
            "run": ["./run.sh"],
            "time_limit": "2s",
            "maximum_payload": 1024,
            "output_headers": {"Content-Type": "text/plain"},
        },
        "check": [],
        "files": {"run.sh": "#!/bin/sh\necho hi\n"},
    }
    payload.update(overrides)
    return payload


def test_missing_directory_returns_embedded_catalog(tmp_path: Path):
    registry = list_templates(tmp_path / "does-not-exist")
    assert registry == build_embedded_catalog()
    assert set(registry) == {"Python", "Node JS", "PHP", "Nim"}


def test_list_dir_ignores_subdirectories_and_other_suffixes(tmp_path: Path):
    (tmp_path / "custom.json").write_text(json.dumps(_descriptor()), encoding="utf-8")
    (tmp_path / "notes.txt").write_text("not a template", encoding="utf-8")
    (tmp_path / "nested.json").mkdir()

    found = list_dir(tmp_path)
    assert list(found) == ["custom"]
    assert found["custom"].manifest.run == ("./run.sh",)
    assert found["custom"].post_clone is None


def test_malformed_descriptor_aborts_listing(tmp_path: Path):
    (tmp_path / "good.json").write_text(json.dumps(_descriptor()), encoding="utf-8")
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")

    with pytest.raises(TemplateError) as excinfo:
        list_templates(tmp_path)
    assert str(broken) in str(excinfo.value)


def test_invalid_file_key_is_rejected(tmp_path: Path):
    (tmp_path / "evil.json").write_text(
        json.dumps(_descriptor(files={"../outside.txt": "x"})), encoding="utf-8"
    )
    with pytest.raises(TemplateError):
        list_dir(tmp_path)


def test_override_replaces_embedded_template_wholesale(tmp_path: Path):
    override = _descriptor(description="My PHP")
    (tmp_path / "PHP.json").write_text(json.dumps(override), encoding="utf-8")

    registry = list_templates(tmp_path)
    assert registry["PHP"] == Template.from_dict(override)
    assert "app.php" not in registry["PHP"].files
    assert registry["Nim"] == build_embedded_catalog()["Nim"]


def test_lowercase_override_shadows_python_and_drops_its_checks(tmp_path: Path):
    (tmp_path / "python.json").write_text(json.dumps(_descriptor(check=[])), encoding="utf-8")

    registry = list_templates(tmp_path)
    assert "python" not in registry
    assert registry["Python"].check == ()
    assert is_available(registry["Python"])


def test_new_override_name_is_added(tmp_path: Path):
    (tmp_path / "Go.json").write_text(json.dumps(_descriptor()), encoding="utf-8")
    registry = list_templates(tmp_path)
    assert "Go" in registry
    assert len(registry) == 5


def test_descriptor_round_trip(tmp_path: Path):
    original = Template(
        description="Shell function",
        manifest=Manifest(
            name="Shell",
            description="usage",
            run=("sh", "app.sh"),
            time_limit=build_embedded_catalog()["PHP"].manifest.time_limit,
            maximum_payload=4096,
            output_headers={"Content-Type": "text/plain"},
            environment={"MODE": "prod"},
        ),
        post_clone="install",
        check=(("which", "sh"), ("sh", "-c", "true")),
        files={"app.sh": "echo hello\n", "lib/util.sh": "\tindented\r\n"},
    )
    path = tmp_path / "shell.json"
    write_template(original, path)

    assert read_template(path) == original
    assert list_dir(tmp_path)["shell"] == original


def test_export_writes_builtin_descriptors(tmp_path: Path):
    target = tmp_path / "templates"
    assert export_templates(target) == 4
    assert export_templates(target) == 0
    assert export_templates(target, overwrite=True) == 4

    assert list_dir(target)["Python"] == build_embedded_catalog()["Python"]
    assert list_templates(target) == build_embedded_catalog()


def test_non_utf8_descriptor_names_the_file(tmp_path: Path):
    bad = tmp_path / "bad.json"
    bad.write_bytes(b'{"description": "\xff\xfe"}')

    with pytest.raises(TemplateError) as excinfo:
        list_templates(tmp_path)
    assert str(bad) in str(excinfo.value)


@pytest.mark.parametrize("time_limit", [[1], {"s": 1}, "99999999999h", 1e30])
def test_bad_time_limit_names_the_file(tmp_path: Path, time_limit):
    manifest = dict(_descriptor()["manifest"], time_limit=time_limit)
    bad = tmp_path / "limits.json"
    bad.write_text(json.dumps(_descriptor(manifest=manifest)), encoding="utf-8")

    with pytest.raises(TemplateError) as excinfo:
        list_templates(tmp_path)
    assert str(bad) in str(excinfo.value)


def test_case_variant_overrides_are_kept_apart(tmp_path: Path):
    (tmp_path / "go.json").write_text(json.dumps(_descriptor(description="lower")), encoding="utf-8")
    (tmp_path / "Go.json").write_text(json.dumps(_descriptor(description="upper")), encoding="utf-8")

    registry = list_templates(tmp_path)
    assert registry["go"].description == "lower"
    assert registry["Go"].description == "upper"
    assert len(registry) == 6
