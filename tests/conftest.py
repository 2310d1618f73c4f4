from datetime import date

import pytest

from pii_sweep.pii.registry import build_registry

REFERENCE_DATE = date(2024, 6, 1)


@pytest.fixture
def registry():
    return build_registry(REFERENCE_DATE)


@pytest.fixture
def write(tmp_path):
    """Write a file under tmp_path and return its path as str."""

    def _write(name, content):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return str(path)

    return _write
