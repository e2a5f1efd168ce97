import pytest
from pathlib import Path


@pytest.fixture
def test_assets_dir() -> Path:
    """Return the path to the test assets directory."""
    return Path(__file__).parent / 'assets'


@pytest.fixture
def read_asset(test_assets_dir):
    """Return a function reading an asset file as bytes."""
    def _read(name: str) -> bytes:
        return (test_assets_dir / name).read_bytes()
    return _read
