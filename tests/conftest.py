import sys
from pathlib import Path

import pytest

# Add src directory to Python path
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from rleimage.config import Settings, use_settings


@pytest.fixture(autouse=True)
def _default_settings(monkeypatch):
    # every test starts unchecked, whatever the shell exports
    monkeypatch.delenv("RLEIMAGE_CHECKED", raising=False)
    previous = use_settings(Settings())
    yield
    use_settings(previous)
