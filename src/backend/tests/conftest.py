import os
import sys


# `common`, `adapters`, `api` and `scripts` are namespace packages under src/backend;
# put it on sys.path for runs from the repository root (pyproject testpaths).
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)
