# config.py
import logging
import os

try:
    import streamlit as st
    _secrets = getattr(st, "secrets", {})
except Exception:
    _secrets = {}


def _lookup(key: str, default: str) -> str:
    try:
        value = _secrets.get(key)
    except Exception:
        # st.secrets raises when no secrets.toml exists
        value = None
    return str(value or os.getenv(key) or default)


def _as_bool(raw: str) -> bool:
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    def __init__(self):
        self.recent_done_days = int(_lookup("DONEO_RECENT_DONE_DAYS", "7"))
        self.week_window_days = int(_lookup("DONEO_WEEK_WINDOW_DAYS", "7"))
        self.log_level = _lookup("DONEO_LOG_LEVEL", "INFO").upper()
        self.load_mock_data = _as_bool(_lookup("DONEO_LOAD_MOCK_DATA", "true"))


settings = Settings()


def configure_logging(level: str = None) -> None:
    logging.basicConfig(
        level=level or settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
