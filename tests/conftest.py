"""Pytest configuration and fixtures for capres tests.

Keeps the stdio guards needed on Python 3.13, where a test that closes
stdout/stderr breaks pytest's capture during teardown
(https://github.com/pytest-dev/pytest/issues/11439), and provides builders
for on-disk SDK and third-party trees.
"""

import io
import os
import sys
import warnings
from pathlib import Path
from typing import Callable, Iterable

import pytest

from capres import output
from capres.layouts import SdkLayout
from capres.targets import get_target

# Suppress ResourceWarnings from file cleanup in Python 3.13
if sys.version_info >= (3, 13):
    warnings.filterwarnings("ignore", category=ResourceWarning)

# Layout used throughout the tests:
#   <root>/Interface/api.h
#   <root>/Lib/Win64/a.lib, b.lib
#   <root>/Win64/api.dll
SDK_DIRS = ("Interface", "Lib/Win64", "Win64")
SDK_FILES = ("Interface/api.h", "Lib/Win64/a.lib", "Lib/Win64/b.lib", "Win64/api.dll")


@pytest.fixture(autouse=True)
def _restore_stdio():  # noqa: PT004
    """Ensure stdout/stderr are always restored after each test."""
    yield

    if sys.stdout.closed:
        sys.stdout = sys.__stdout__
    if sys.stderr.closed:
        sys.stderr = sys.__stderr__


@pytest.fixture(autouse=True)
def log_stream():
    """Route capres.output into a fresh buffer for every test."""
    stream = io.StringIO()
    output.init_timer(stream)
    output.set_verbose(True)
    output.set_output_file(None)
    yield stream
    output.init_timer(sys.stdout)


@pytest.fixture
def win64():
    return get_target("Win64")


@pytest.fixture
def api_layout():
    return SdkLayout(
        name="api",
        flag="WITH_API",
        interface_dir="Interface",
        header="api.h",
        lib_dir="Lib",
        import_libraries=("a.lib", "b.lib"),
        runtime_library="api.dll",
        platform_groups=("Windows",),
    )


@pytest.fixture
def make_sdk(tmp_path) -> Callable[..., Path]:
    """Factory building the api SDK tree under tmp_path/sdk.

    Entries listed in omit (relative paths from SDK_DIRS or SDK_FILES) are
    left out; omitting a directory also drops its files.
    """

    def _make(omit: Iterable[str] = (), root: Path = None) -> Path:
        omit = set(omit)
        root = root or tmp_path / "sdk"
        root.mkdir(parents=True, exist_ok=True)
        for rel in SDK_DIRS:
            if rel not in omit:
                (root / rel).mkdir(parents=True, exist_ok=True)
        for rel in SDK_FILES:
            if rel in omit or os.path.dirname(rel) in omit:
                continue
            (root / rel).write_bytes(rel.encode("utf-8"))
        return root

    return _make


@pytest.fixture
def write_descriptor(tmp_path) -> Callable[[str, str], Path]:
    """Factory writing a build descriptor under tmp_path/ThirdParty."""

    def _write(relative_path: str, content: str) -> Path:
        path = tmp_path / "ThirdParty" / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write

