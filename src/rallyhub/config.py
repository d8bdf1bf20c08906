"""Configuration for rallyhub."""
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Hosted backend (REST tables + auth)
BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:54321")
BACKEND_ANON_KEY = os.getenv("BACKEND_ANON_KEY", "")
BACKEND_SERVICE_ROLE_KEY = os.getenv("BACKEND_SERVICE_ROLE_KEY", "")  # server-side admin routes only

# Timeouts (seconds)
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "30"))
QUERY_TIMEOUT = float(os.getenv("QUERY_TIMEOUT", "30"))

# API call log
LOG_DIR = os.getenv("RALLYHUB_LOG_DIR", str(Path(__file__).resolve().parent.parent.parent / "logs"))
