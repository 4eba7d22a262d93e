# app/config.py
"""Runtime settings read from the environment (and `.env` via python-dotenv).

The database engine and the log level are process-wide and read by
`app.db` and `app.utils`; `Settings` carries what `create_app` wires up.
"""
import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    map_token: str = ""
    mapbox_base_url: str = "https://api.mapbox.com"
    session_secret: str = "dev-session-secret"
    media_root: str = "media"
    media_url: str = "/media"


def normalize_database_url(url: str) -> str:
    # SQLAlchemy 2.x doesn't accept 'postgres://'
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg2://", 1)
    return url


def database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL not set")
    return normalize_database_url(url)


def load_settings() -> Settings:
    return Settings(
        map_token=os.getenv("MAP_TOKEN", ""),
        mapbox_base_url=os.getenv("MAPBOX_BASE_URL", "https://api.mapbox.com").rstrip("/"),
        session_secret=os.getenv("SESSION_SECRET", "dev-session-secret"),
        media_root=os.getenv("MEDIA_ROOT", "media"),
        media_url=os.getenv("MEDIA_URL", "/media").rstrip("/"),
    )
