import os
import sys


# Ensure `src/backend` is on sys.path so imports like `import adapters...` work when running this folder alone.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

import json
from pathlib import Path

import pytest


FIXTURE_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def statement_payload() -> dict:
    return json.loads((FIXTURE_DIR / "statement_2025_03.json").read_text(encoding="utf-8"))
