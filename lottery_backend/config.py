from __future__ import annotations

import os
from typing import List

# Game rules: 7 main numbers plus 1 bonus, all drawn from 1..49
NUMBERS_PER_DRAW = 7
MIN_NUMBER = 1
MAX_NUMBER = 49


def get_host() -> str:
    return os.getenv("HOST", "0.0.0.0")


def get_port() -> int:
    return int(os.getenv("PORT", "5000"))


def get_cors_origins() -> List[str]:
    raw = os.getenv("CORS_ORIGINS", "*")
    return [o.strip() for o in raw.split(",") if o.strip()] or ["*"]


def get_chat_mode() -> str:
    """'demo' answers from canned text; 'anthropic' asks Claude."""
    return os.getenv("CHAT_MODE", "demo").strip().lower()


def get_anthropic_model() -> str:
    return os.getenv("ANTHROPIC_MODEL", "claude-3-5-haiku-20241022")
