from __future__ import annotations
import os
from pathlib import Path

def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")

class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
    BASE_DIR = Path(__file__).resolve().parent
    # SQLite file in project directory
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR / 'app.db'}")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    # week_day 0..6 and non-blank tutor/class fields; off reproduces the permissive API
    CLASSES_STRICT_VALIDATION = _env_flag("CLASSES_STRICT_VALIDATION")
    SEED_TEST_DATA = False
    DEMO_CLASSES = []

class DevConfig(BaseConfig):
    DEBUG = True
    SEED_TEST_DATA = True
    DEMO_CLASSES = [
        {
            "tutor": {"name": "Ana Souza", "avatar": "https://i.pravatar.cc/150?u=ana",
                      "whatsapp": "5511999990001", "bio": "Math tutor, 10 years with high-school students."},
            "class": {"subject": "Math", "cost": 50},
            "schedule": [
                {"week_day": 1, "from": "08:00", "to": "10:00"},
                {"week_day": 3, "from": "14:00", "to": "18:00"},
            ],
        },
        {
            "tutor": {"name": "Bruno Lima", "avatar": "https://i.pravatar.cc/150?u=bruno",
                      "whatsapp": "5511999990002", "bio": "Chemistry and lab practice."},
            "class": {"subject": "Chemistry", "cost": 65},
            "schedule": [
                {"week_day": 2, "from": "19:00", "to": "21:30"},
            ],
        },
    ]

class TestConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    CLASSES_STRICT_VALIDATION = False

class ProdConfig(BaseConfig):
    DEBUG = False
    SEED_TEST_DATA = False

config_map = {
    "dev": DevConfig,
    "test": TestConfig,
    "prod": ProdConfig,
    "default": DevConfig,
}
