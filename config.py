#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Project Tracker - Configuration
Centralised settings with validation, loaded from the environment / .env
"""

import sys
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List

import pytz
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Project tracker settings"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # ===== GENERAL =====

    APP_NAME: str = Field(default="Project Tracker", description="Application name")
    VERSION: str = Field(default="1.0.0", description="Application version")
    ENVIRONMENT: str = Field(
        default="development",
        description="Runtime environment (development/production/testing)",
    )
    DEBUG: bool = Field(default=False, description="Debug mode")

    # ===== SCHEDULING =====

    TIMEZONE: str = Field(
        default="America/Sao_Paulo",
        description="Timezone used to interpret naive timestamps and calendar days",
    )
    UNCLASSIFIED_LABEL: str = Field(
        default="Sem classificação",
        description="Bucket name for projects without a classification",
    )
    RECENT_TASKS_LIMIT: int = Field(default=5, ge=1, description="Size of the recent open tasks list")

    # ===== DATA FILES =====

    DATA_DIR: Path = Field(default=Path("data"), description="Directory holding the JSON store")
    TASKS_FILE: str = Field(default="tasks.json", description="Task records file name")
    PROFILES_FILE: str = Field(default="profiles.json", description="Profile records file name")

    # ===== LOGGING =====

    LOG_LEVEL: str = Field(default="INFO", description="Log level (DEBUG/INFO/WARNING/ERROR/CRITICAL)")
    LOG_FORMAT: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        description="Log record format",
    )
    LOG_DIR: Path = Field(default=Path("logs"), description="Log directory")
    LOG_TO_FILE: bool = Field(default=False, description="Also write logs to a rotating file")

    # ===== DASHBOARD =====

    DASHBOARD_HOST: str = Field(default="0.0.0.0", description="Dashboard bind host")
    DASHBOARD_PORT: int = Field(default=8000, description="Dashboard bind port")
    ALLOWED_ORIGINS: List[str] = Field(default=["*"], description="CORS origins")

    # ===== VALIDATORS =====

    @field_validator("TIMEZONE")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        try:
            pytz.timezone(v)
        except pytz.UnknownTimeZoneError:
            raise ValueError(f"Unknown timezone: {v}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of: {', '.join(_LOG_LEVELS)}")
        return level

    @field_validator("DASHBOARD_PORT")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not 1024 <= v <= 65535:
            raise ValueError(f"Port {v} is outside the allowed range (1024-65535)")
        return v

    # ===== HELPERS =====

    @property
    def tzinfo(self):
        return pytz.timezone(self.TIMEZONE)

    @property
    def tasks_path(self) -> Path:
        return self.DATA_DIR / self.TASKS_FILE

    @property
    def profiles_path(self) -> Path:
        return self.DATA_DIR / self.PROFILES_FILE

    def get_logging_config(self) -> Dict[str, Any]:
        """Build a logging.config.dictConfig dictionary"""
        handlers = ["console"]
        config: Dict[str, Any] = {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": self.LOG_FORMAT,
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": self.LOG_LEVEL,
                    "formatter": "default",
                    "stream": sys.stdout,
                }
            },
            "loggers": {
                "": {"level": self.LOG_LEVEL, "handlers": handlers, "propagate": False},
                "uvicorn.access": {"level": logging.getLevelName(logging.WARNING)},
            },
        }

        if self.LOG_TO_FILE:
            handlers.append("file")
            config["handlers"]["file"] = {
                "class": "logging.handlers.RotatingFileHandler",
                "level": self.LOG_LEVEL,
                "formatter": "default",
                "filename": str(self.LOG_DIR / f"tracker_{self.ENVIRONMENT}.log"),
                "maxBytes": 10485760,  # 10MB
                "backupCount": 5,
                "encoding": "utf-8",
            }

        return config


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance"""
    return Settings()
