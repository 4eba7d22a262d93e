# app/utils.py
"""Shared utilities: the service logger and search text helpers."""
import os
import re
import logging
from dotenv import load_dotenv

load_dotenv()

def get_logger(name=__name__):
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        level=getattr(logging, level, logging.INFO)
    )
    return logging.getLogger(name)

logger = get_logger("listings-service")

_WS = re.compile(r"\s+")
_LEADING_INT = re.compile(r"^[+-]?\d+")

def normalize_query(raw: str) -> str:
    """Trim, collapse whitespace and title-case every word."""
    text = _WS.sub(" ", (raw or "").strip())
    return " ".join(w[:1].upper() + w[1:].lower() for w in text.split(" ") if w)

def leading_int(text: str):
    # "500", "500 rs" -> 500; anything without a leading number -> None
    m = _LEADING_INT.match(text or "")
    return int(m.group(0)) if m else None

def escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
