from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
for entry in (ROOT, ROOT / "src"):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))


import pytest

from tests.fakes import FakeOracle


@pytest.fixture
def oracle() -> FakeOracle:
    return FakeOracle({"Teh": ["the", "Ten"]})
