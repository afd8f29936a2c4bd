"""
Configuration for the Meeting Slot Engine
Settings are read from the environment, after loading a .env file if present
"""

import os
from functools import lru_cache

from dotenv import load_dotenv


class Settings:
    def __init__(self):
        load_dotenv()
        self.database_url = os.getenv("DATABASE_URL", "sqlite:///./meetings.db")
        self.host = os.getenv("HOST", "0.0.0.0")
        self.port = int(os.getenv("PORT", "8080"))
        self.resolution_workers = int(os.getenv("RESOLUTION_WORKERS", "1"))
        self.tie_break = os.getenv("TIE_BREAK", "prefer_latest")
        self.backend_url = os.getenv("BACKEND_URL", f"http://localhost:{self.port}")


@lru_cache()
def get_settings() -> Settings:
    """Get the cached settings instance"""
    settings = Settings()
    print(f"[config] tie_break={settings.tie_break} workers={settings.resolution_workers}")
    return settings
