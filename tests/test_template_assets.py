from pathlib import Path

import pytest

from cgi_scaffold.template_assets import DirectoryAssets, builtin_assets, extract_tree


def test_extract_tree_returns_relative_keys_and_exact_content(tmp_path: Path):
    root = tmp_path / "kit"
    (root / "src").mkdir(parents=True)
    (root / "main.py").write_bytes(b"print('hi')\r\n")
    (root / "src" / "lib.py").write_bytes("x = 'é'\n".encode("utf-8"))

    files = extract_tree(DirectoryAssets(tmp_path), "kit")
    assert files == {"main.py": "print('hi')\r\n", "src/lib.py": "x = 'é'\n"}
    for key in files:
        assert not key.startswith(("/", "."))


def test_extract_tree_strips_leading_dots(tmp_path: Path):
    root = tmp_path / "kit"
    root.mkdir()
    (root / ".env").write_text("A=1", encoding="utf-8")

    assert extract_tree(DirectoryAssets(tmp_path), "/kit/") == {"env": "A=1"}


def test_missing_root_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        extract_tree(DirectoryAssets(tmp_path), "missing")


def test_builtin_python_assets_present():
    source = Path(builtin_assets().base_dir) / "python" / "app.py"
    files = extract_tree(builtin_assets(), "python")
    assert files["app.py"].encode("utf-8") == source.read_bytes()
