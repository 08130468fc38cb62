"""Application settings and validation."""

import os

from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Settings:
    ENV: str
    DATABASE_URL: str
    SQL_ECHO: bool
    LOG_LEVEL: str
    ALLOW_DEV_CORS: bool
    ALLOW_SQLITE_IN_PROD: bool
    DEFAULT_PAGE_SIZE: int
    MAX_PAGE_SIZE: int
    LEGACY_ERROR_STATUS: bool
    FILE_BASE_URL: str

    def __init__(self):
        self.ENV = os.getenv("ENV", "dev").lower()
        self.DATABASE_URL = os.getenv("DATABASE_URL", "")
        self.SQL_ECHO = _flag("SQL_ECHO", "false")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.ALLOW_DEV_CORS = _flag("ALLOW_DEV_CORS", "true")
        self.ALLOW_SQLITE_IN_PROD = _flag("ALLOW_SQLITE_IN_PROD", "false")
        self.DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
        self.MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", "1000"))
        # collapse service errors to HTTP 500 like the first API generation did
        self.LEGACY_ERROR_STATUS = _flag("LEGACY_ERROR_STATUS", "false")
        self.FILE_BASE_URL = os.getenv("FILE_BASE_URL", "http://localhost:9000").rstrip("/")
        self._validate()

    def _validate(self):
        if self.DEFAULT_PAGE_SIZE <= 0 or self.MAX_PAGE_SIZE <= 0:
            raise RuntimeError("DEFAULT_PAGE_SIZE and MAX_PAGE_SIZE must be positive")
        if self.DEFAULT_PAGE_SIZE > self.MAX_PAGE_SIZE:
            raise RuntimeError("DEFAULT_PAGE_SIZE must not exceed MAX_PAGE_SIZE")
        uses_sqlite = not self.DATABASE_URL or self.DATABASE_URL.startswith("sqlite")
        if self.ENV == "prod" and uses_sqlite and not self.ALLOW_SQLITE_IN_PROD:
            raise RuntimeError("DATABASE_URL must point to a server database in prod")


settings = Settings()
