import json
import sys
from pathlib import Path

import pytest

from mcp_ditaa_renderer.renderer import RendererInvoker

# Stand-in for ditaa: records its argv, then "renders" by copying the input
# file to the destination.
FAKE_DITAA = """#!{python}
import json, shutil, sys
args = sys.argv[1:]
with open({log!r}, "a", encoding="utf-8") as f:
    f.write(json.dumps(args) + "\\n")
shutil.copyfile(args[-2], args[-1])
print("fake ditaa: rendered " + args[-1])
"""

# Stand-in for a ditaa run that fails (bad syntax, crash, ...).
FAILING_DITAA = """#!{python}
import json, sys
args = sys.argv[1:]
with open({log!r}, "a", encoding="utf-8") as f:
    f.write(json.dumps(args) + "\\n")
print("fake ditaa: cannot parse " + args[-2])
sys.exit(1)
"""


def _script(path: Path, template: str, log: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(template.format(python=sys.executable, log=str(log)), encoding="utf-8")
    path.chmod(0o755)
    return path


@pytest.fixture
def ditaa_log(tmp_path):
    return tmp_path / "ditaa-calls.jsonl"


@pytest.fixture
def ditaa_calls(ditaa_log):
    def read():
        if not ditaa_log.exists():
            return []
        return [json.loads(line) for line in ditaa_log.read_text(encoding="utf-8").splitlines()]

    return read


@pytest.fixture
def fake_ditaa(tmp_path, ditaa_log):
    return _script(tmp_path / "bin" / "ditaa", FAKE_DITAA, ditaa_log)


@pytest.fixture
def failing_ditaa(tmp_path, ditaa_log):
    return _script(tmp_path / "badbin" / "ditaa", FAILING_DITAA, ditaa_log)


@pytest.fixture
def renderer(fake_ditaa):
    return RendererInvoker.locate(str(fake_ditaa))


@pytest.fixture
def failing_renderer(failing_ditaa):
    return RendererInvoker.locate(str(failing_ditaa))


@pytest.fixture
def no_ditaa_on_path(tmp_path, monkeypatch):
    empty = tmp_path / "empty-path"
    empty.mkdir()
    monkeypatch.setenv("PATH", str(empty))
    return empty


@pytest.fixture
def output_root(tmp_path):
    return tmp_path / "_site"
