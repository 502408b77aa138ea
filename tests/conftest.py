import os
import textwrap
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--run-network",
        action="store_true",
        default=False,
        help="Run tests that fetch real external documentation sites",
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "network: mark tests that reach real documentation hosts (use --run-network)"
    )


def pytest_collection_modifyitems(config, items):
    run_network = (
        config.getoption("--run-network")
        or os.getenv("JDOCSITE_RUN_NETWORK_TESTS") == "1"
    )
    if not run_network:
        skip_network = pytest.mark.skip(
            reason="network tests skipped (use --run-network or JDOCSITE_RUN_NETWORK_TESTS=1)"
        )
        for item in items:
            if "network" in item.keywords:
                item.add_marker(skip_network)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Ensure tests run with a clean environment.

    - Unset JDOCSITE_* variables that can alter build configuration.
    - Force plain CLI output so assertions see uncolored text.
    """
    for k in [k for k in os.environ.keys() if k.startswith("JDOCSITE_")]:
        monkeypatch.delenv(k, raising=False)
    monkeypatch.setenv("JDOCSITE_NO_RICH", "1")
    yield


@pytest.fixture
def java_project(tmp_path: Path):
    """Write Java sources under a root directory.

    Usage: ``root = java_project({"a/b/C.java": "..."})``. Sources are
    dedented so tests can write them inline. Calling it again with a
    ``root`` name creates a sibling tree.
    """

    def _write(files: dict[str, str], root: str = "src") -> Path:
        base = tmp_path / root
        for relative, content in files.items():
            path = base / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
        base.mkdir(parents=True, exist_ok=True)
        return base

    return _write
