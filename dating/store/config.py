from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class SupabaseConfig:
    url: str = os.getenv("SUPABASE_URL", "")
    service_key: str = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
    timeout: float = float(os.getenv("SUPABASE_TIMEOUT", "10"))


DEFAULT_SUPABASE_CONFIG = SupabaseConfig()
