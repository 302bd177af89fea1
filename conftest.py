# Ensure project root is on sys.path so 'twitchplay' is importable when running pytest from
# environments that don't automatically include it.
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).parent.resolve()
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def _no_debug_env(monkeypatch):
    """Keep log formatting in concise mode unless a test opts into DEBUG."""
    monkeypatch.delenv("DEBUG", raising=False)
    yield
