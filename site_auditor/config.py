"""Centralised settings for the site auditor.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

# Value shipped in the sample .env; treated the same as "not configured".
PLACEHOLDER_API_KEY = "your_gemini_api_key_here"


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # HTTP server
    # ------------------------------------------------------------------
    host: str = field(
        default_factory=lambda: os.environ.get("AUDITOR_HOST", "127.0.0.1")
    )
    port: int = field(
        default_factory=lambda: int(os.environ.get("PORT", "3333"))
    )
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper()
    )

    # ------------------------------------------------------------------
    # Probes
    # ------------------------------------------------------------------
    user_agent: str = field(
        default_factory=lambda: os.environ.get("AUDITOR_USER_AGENT", "LocalSiteAuditor/1.0")
    )
    tls_timeout: float = field(
        default_factory=lambda: float(os.environ.get("TLS_TIMEOUT", "5.0"))
    )
    fetch_timeout: float = field(
        default_factory=lambda: float(os.environ.get("FETCH_TIMEOUT", "15.0"))
    )

    # ------------------------------------------------------------------
    # Explanation endpoint (Gemini generateContent)
    # ------------------------------------------------------------------
    gemini_api_key: str = field(
        default_factory=lambda: os.environ.get("GEMINI_API_KEY", "")
    )
    gemini_model: str = field(
        default_factory=lambda: os.environ.get("GEMINI_MODEL", "gemini-2.0-flash")
    )
    gemini_api_base: str = field(
        default_factory=lambda: os.environ.get(
            "GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta"
        )
    )
    explain_timeout: float = field(
        default_factory=lambda: float(os.environ.get("EXPLAIN_TIMEOUT", "60.0"))
    )

    # ------------------------------------------------------------------
    # Static image-count utility
    # ------------------------------------------------------------------
    public_dir: Path = field(
        default_factory=lambda: Path(os.environ.get("AUDITOR_PUBLIC_DIR", "public"))
    )


# Module-level singleton — import this everywhere:
#   from site_auditor.config import settings
settings = Settings()
