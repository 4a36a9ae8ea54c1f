"""Shared test fixtures — sample diff reports, temp build trees."""

from __future__ import annotations

import os
import shutil
import stat
import textwrap
from pathlib import Path
from typing import Callable, Dict

import pytest


def pytest_configure(config):
    config.addinivalue_line("markers", "requires_diff: needs the diff binary on PATH")
    config.addinivalue_line("markers", "posix_only: needs a POSIX shell and symlinks")


def pytest_runtest_setup(item):
    if item.get_closest_marker("requires_diff") and shutil.which("diff") is None:
        pytest.skip("diff is not installed")
    if item.get_closest_marker("posix_only") and os.name == "nt":
        pytest.skip("needs a POSIX shell")


def _write_tree(root: Path, files: Dict[str, str]) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return root


@pytest.fixture
def write_tree() -> Callable[[Path, Dict[str, str]], Path]:
    """Create files (relative path -> content) under a root."""
    return _write_tree


@pytest.fixture
def write_script() -> Callable[[Path, str], Path]:
    """Write an executable shell script standing in for diff."""

    def _write(path: Path, body: str) -> Path:
        path.write_text("#!/bin/sh\n" + textwrap.dedent(body))
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path

    return _write


BASE_BUILD = {
    "index.html": "<html>v1</html>\n",
    "css/site.css": "body { color: black; }\n",
    "js/app.js": "console.log('v1');\n",
    "img/logo.svg": "<svg></svg>\n",
}


@pytest.fixture
def old_build(tmp_path: Path) -> Path:
    return _write_tree(tmp_path / "build-old", BASE_BUILD)


@pytest.fixture
def new_build(tmp_path: Path) -> Path:
    """An identical copy of ``old_build``; tests mutate it."""
    return _write_tree(tmp_path / "build-new", BASE_BUILD)


@pytest.fixture
def sample_report() -> str:
    """A report covering all three line forms, rooted at /builds/old and /builds/new."""
    return textwrap.dedent("""\
        Only in /builds/new: fresh.txt
        Only in /builds/new/css: print.css
        Only in /builds/new: vendor
        Only in /builds/old: gone.txt
        Only in /builds/old/js: legacy.js
        Files /builds/old/index.html and /builds/new/index.html differ
        Files /builds/old/css/site.css and /builds/new/css/site.css differ
    """)


@pytest.fixture
def sample_report_noise() -> str:
    """A report with lines diff emits that carry no classification."""
    return textwrap.dedent("""\

        File /builds/old/data is a directory while file /builds/new/data is a regular file
        Common subdirectories: /builds/old/css and /builds/new/css
        diff: /builds/new/broken-link: No such file or directory

        Only in /builds/new: fresh.txt
    """)
