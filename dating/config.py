from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")


@dataclass(frozen=True)
class AppConfig:
    session_secret: str = os.getenv("SESSION_SECRET", "dating-secret-change-in-production")
    store_backend: str = os.getenv("STORE_BACKEND", "memory")  # memory | supabase
    candidate_pool_limit: int = 50


DEFAULT_APP_CONFIG = AppConfig()
