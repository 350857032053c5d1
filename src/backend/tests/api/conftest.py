import os
import sys


# Ensure `src/backend` is on sys.path so `import api...` works when running this folder alone.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

import json
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.interchange import router


FIXTURE = Path(__file__).parents[1] / "adapters" / "fixtures" / "statement_2025_03.json"


@pytest.fixture
def client() -> TestClient:
    app = FastAPI()
    app.include_router(router)
    return TestClient(app)


@pytest.fixture
def statement_payload() -> dict:
    return json.loads(FIXTURE.read_text(encoding="utf-8"))
