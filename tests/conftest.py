import sys
from pathlib import Path
import importlib
import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture()
def m():
    """Lazily import the main module for tests to avoid module-level import."""
    return importlib.import_module("main")


@pytest.fixture()
def no_progress(monkeypatch, m):
    """Capture progress rendering in main module during tests."""
    calls = []

    def _stub(line: str):
        calls.append(line)

    monkeypatch.setattr(m, "_print_progress", _stub)
    return calls


@pytest.fixture()
def progress_recorder():
    """Provide a reusable progress callback and its call log."""
    calls = []

    def cb(done, total):
        calls.append((done, total))

    return cb, calls


REFERENCE_INPUT = b"abcaabbaaaccaaaa"
REFERENCE_OUTPUT = "1000111000011101011111"


@pytest.fixture()
def reference_vector():
    """The canonical regression vector: input bytes and expected bit-string."""
    return REFERENCE_INPUT, REFERENCE_OUTPUT


def is_prefix_free(codes):
    """Return ``True`` if no code is a prefix of another code."""
    ordered = sorted(codes)
    return all(
        not ordered[i + 1].startswith(ordered[i])
        for i in range(len(ordered) - 1)
    )


@pytest.fixture()
def prefix_free_fn():
    """
    Fixture that provides the is_prefix_free helper without importing conftest.
    """
    return is_prefix_free
