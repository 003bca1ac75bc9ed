"""Root conftest: test environment must be in place before settings are imported."""
from __future__ import annotations

import os
from pathlib import Path

os.environ.setdefault("PRINT_QR_IN_TERMINAL", "false")
os.environ.setdefault("BACKEND_URL", "http://backend.test")

_env_test = Path(__file__).resolve().parent / ".env.test"
if _env_test.exists():
    for line in _env_test.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        key, _, value = line.partition("=")
        os.environ.setdefault(key.strip(), value.strip())
