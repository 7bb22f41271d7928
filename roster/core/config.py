import sys

from pydantic_settings import BaseSettings

_ENV_FILE = None if "pytest" in sys.modules else ".env"


class Settings(BaseSettings):
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    ROSTER_API_URL: str = "https://dotnetbackend.onrender.com/api"
    ROSTER_RETRY_DELAY_SECONDS: float = 2.0
    ROSTER_REQUEST_TIMEOUT_SECONDS: float = 30.0

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    model_config = {
        "env_file": _ENV_FILE,
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }

    @property
    def api_base(self) -> str:
        return self.ROSTER_API_URL.rstrip("/")


settings = Settings()
