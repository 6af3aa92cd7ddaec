import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    TARGET_ENDPOINT: str | None = os.getenv("TARGET_ENDPOINT")
    CHECK_ENDPOINT_URL: str = os.getenv(
        "CHECK_ENDPOINT_URL", "http://127.0.0.1:8000/check"
    )
    POLL_INTERVAL_S: float = float(os.getenv("POLL_INTERVAL_S", "60"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()


class ConfigurationError(RuntimeError):
    pass


def require_target_endpoint(value: str | None = None) -> str:
    target = settings.TARGET_ENDPOINT if value is None else value
    if not target or not target.strip():
        raise ConfigurationError("TARGET_ENDPOINT not defined")
    return target.strip()
