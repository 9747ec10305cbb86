"""Built-in starter kits compiled into the package."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Dict, List, Optional, Tuple

from .models import Manifest, Template
from .template_assets import AssetProvider, builtin_assets, extract_tree

DEFAULT_TIME_LIMIT = timedelta(seconds=1)
DEFAULT_MAXIMUM_PAYLOAD = 8192
DEFAULT_OUTPUT_HEADERS = {"Content-Type": "application/json"}

USAGE_DESCRIPTION = """### Usage

    curl --data-binary '{"name": "reddec"}' -H 'Content-Type: application/json' "http://example.com/a/xyz"

Replace url to the real
"""


@dataclass(frozen=True)
class StarterKit:
    name: str
    description: str
    title: str
    run: Tuple[str, ...]
    check: Tuple[Tuple[str, ...], ...] = ()
    post_clone: Optional[str] = None
    asset_root: Optional[str] = None
    files: Dict[str, str] = field(default_factory=dict)


NODE_JS_SCRIPT = """
async function run(request) {
     return ["hello", "world"];
}

let input = '';
process.stdin.resume();
process.stdin.setEncoding('utf8');
process.stdin.on('data', function (chunk) {
    input += chunk;
});
process.stdin.on('end', function () {
	run(JSON.parse(input)).catch((e)=> {
		return {"error": e + ''};
	}).then((response)=> {
		process.stdout.write(JSON.stringify(response));
	})
});
"""

NODE_JS_PACKAGE = """{
  "name": "",
  "version": "1.0.0",
  "description": "",
  "main": "index.js",
  "scripts": {
    "test": "echo \\"Error: no test specified\\" && exit 1"
  },
  "author": "",
  "license": "",
  "dependencies": {
    "axios": "^0.19.2"
  }
}"""

NODE_JS_MAKEFILE = """
install:
\tnpm install .
"""

PHP_SCRIPT = """
<?php
$request = json_decode(stream_get_contents(STDIN));

$response = array("hello", "world");

echo json_encode($response, JSON_PRETTY_PRINT);
?>"""

NIM_SCRIPT = """
import json

let request = stdin.readAll().parseJson()

echo pretty(%*["hello", "world"])
"""

NIMBLE_MANIFEST = """
version       = "0.1.0"
author        = ""
description   = ""
license       = ""
srcDir        = "src"
bin           = @["lambda"]

# Dependencies
requires "nim >= 1.2.0"
"""

NIM_MAKEFILE = """
build:
\tnimble build
\tmkdir -p bin
\tmv -f lambda bin/
"""

STARTER_KITS: List[StarterKit] = [
    StarterKit(
        name="Python",
        description="Python basic function",
        title="Example Python Function",
        run=("./venv/bin/python3", "app.py"),
        check=(("which", "make"), ("which", "python3"), ("python3", "-m", "venv", "--help")),
        post_clone="install",
        asset_root="python",
        files={".cgiignore": "venv"},
    ),
    StarterKit(
        name="Node JS",
        description="Node JS basic function",
        title="Example NodeJS Function",
        run=("node", "app.js"),
        check=(("which", "make"), ("which", "node"), ("which", "npm")),
        post_clone="install",
        files={
            "app.js": NODE_JS_SCRIPT,
            "package.json": NODE_JS_PACKAGE,
            "Makefile": NODE_JS_MAKEFILE,
            ".cgiignore": "node_modules",
        },
    ),
    StarterKit(
        name="PHP",
        description="PHP basic function",
        title="Example PHP Function",
        run=("php", "app.php"),
        check=(("which", "php"),),
        files={"app.php": PHP_SCRIPT},
    ),
    StarterKit(
        name="Nim",
        description="Nim lang basic function",
        title="Fast python-like function",
        run=("./bin/lambda",),
        check=(("which", "make"), ("which", "nim"), ("which", "nimble")),
        post_clone="build",
        files={
            "src/lambda.nim": NIM_SCRIPT,
            "lambda.nimble": NIMBLE_MANIFEST,
            "Makefile": NIM_MAKEFILE,
        },
    ),
]


def _kit_template(kit: StarterKit, assets: AssetProvider) -> Template:
    files: Dict[str, str] = {}
    if kit.asset_root:
        files.update(extract_tree(assets, kit.asset_root))
    files.update(kit.files)

    return Template(
        description=kit.description,
        manifest=Manifest(
            name=kit.title,
            description=USAGE_DESCRIPTION,
            run=kit.run,
            time_limit=DEFAULT_TIME_LIMIT,
            maximum_payload=DEFAULT_MAXIMUM_PAYLOAD,
            output_headers=dict(DEFAULT_OUTPUT_HEADERS),
        ),
        post_clone=kit.post_clone,
        check=kit.check,
        files=files,
    )


def build_embedded_catalog(
    assets: Optional[AssetProvider] = None,
    kits: Optional[List[StarterKit]] = None,
) -> Dict[str, Template]:
    """Build a fresh name -> Template map of the built-in starter kits.

    Asset errors propagate: a missing asset root means the package was built
    without its data files.
    """
    assets = assets if assets is not None else builtin_assets()
    kits = kits if kits is not None else STARTER_KITS
    return {kit.name: _kit_template(kit, assets) for kit in kits}
