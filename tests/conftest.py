import runpy
from pathlib import Path

import pytest

REPO = Path(__file__).resolve().parents[1]
SAMPLE_TOOL = REPO / "tools" / "make_sample_nvram.py"

_sample = runpy.run_path(str(SAMPLE_TOOL))


@pytest.fixture(scope="session")
def sample():
    """Namespace of the sample generator (tables of known names and times)."""
    return _sample


@pytest.fixture(scope="session")
def sample_image() -> bytes:
    return _sample["build_sample_image"]()


@pytest.fixture
def sample_path(tmp_path, sample_image) -> Path:
    p = tmp_path / "srally2-sample.nv"
    p.write_bytes(sample_image)
    return p
