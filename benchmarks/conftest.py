from __future__ import annotations

import json
import os
import platform
import sys
from pathlib import Path

import pytest

from benchmarks.fixtures.context_complex import COMPLEX_CONTEXT
from benchmarks.fixtures.context_large import LARGE_CONTEXT
from benchmarks.fixtures.context_medium import MEDIUM_CONTEXT
from wafview import Environment, FileSystemLoader

try:
    import importlib.metadata as importlib_metadata
except ModuleNotFoundError:  # pragma: no cover
    import importlib_metadata  # type: ignore


BASE_DIR = Path(__file__).resolve().parent
TEMPLATE_DIR = BASE_DIR / "templates"
BENCHMARK_OUTPUT_DIR = BASE_DIR.parent / ".benchmarks"


def _version(dist: str) -> str:
    try:
        return importlib_metadata.version(dist)
    except importlib_metadata.PackageNotFoundError:
        return "unknown"


def collect_environment_metadata() -> dict[str, object]:
    """Capture reproducibility metadata for each benchmark run."""
    return {
        "python": {
            "version": platform.python_version(),
            "implementation": platform.python_implementation(),
            "executable": sys.executable,
        },
        "os": {
            "system": platform.system(),
            "release": platform.release(),
            "machine": platform.machine(),
        },
        "cpu": {
            "processor": platform.processor(),
            "count": os.cpu_count(),
        },
        "wafview": _version("wafview"),
    }


@pytest.fixture(scope="session")
def environment_metadata() -> dict[str, object]:
    """Write environment metadata to .benchmarks for ingestion."""
    metadata = collect_environment_metadata()
    BENCHMARK_OUTPUT_DIR.mkdir(exist_ok=True)
    (BENCHMARK_OUTPUT_DIR / "environment.json").write_text(json.dumps(metadata, indent=2))
    return metadata


@pytest.fixture(scope="session")
def template_source() -> dict[str, str]:
    """Raw template sources keyed by template name."""
    return {
        name: (TEMPLATE_DIR / (name.replace(".", "/") + ".html")).read_text()
        for name in ("minimal", "medium", "large", "complex.article")
    }


@pytest.fixture(scope="session")
def wafview_env() -> Environment:
    return Environment(loader=FileSystemLoader(TEMPLATE_DIR))


@pytest.fixture(scope="session")
def medium_context() -> dict[str, object]:
    return MEDIUM_CONTEXT


@pytest.fixture(scope="session")
def large_context() -> dict[str, object]:
    return LARGE_CONTEXT


@pytest.fixture(scope="session")
def complex_context() -> dict[str, object]:
    return COMPLEX_CONTEXT
