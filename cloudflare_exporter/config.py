import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_API_URL = "https://api.cloudflare.com/client/v4"
# levels both logging and uvicorn accept
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _number(env: Mapping[str, str], name: str, default, cast):
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {raw!r}")
    return value


@dataclass(frozen=True)
class Settings:
    api_token: Optional[str] = None
    api_email: Optional[str] = None
    api_key: Optional[str] = None
    api_url: str = DEFAULT_API_URL
    window_minutes: int = 1440
    http_timeout: float = 10.0
    scrape_timeout: Optional[float] = 30.0
    max_workers: Optional[int] = None
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8080

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        scrape_timeout = _number(env, "SCRAPE_TIMEOUT", 30.0, float)
        max_workers = _number(env, "SCRAPE_MAX_WORKERS", None, int)
        if max_workers == 0:
            raise ValueError("SCRAPE_MAX_WORKERS must be at least 1")
        log_level = (env.get("LOG_LEVEL") or "INFO").upper()
        if log_level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}")
        return cls(
            api_token=env.get("CF_API_TOKEN") or None,
            api_email=env.get("CF_API_EMAIL") or None,
            api_key=env.get("CF_API_KEY") or None,
            api_url=(env.get("CF_API_URL") or DEFAULT_API_URL).rstrip("/"),
            window_minutes=_number(env, "CF_ANALYTICS_WINDOW_MINUTES", 1440, int),
            http_timeout=_number(env, "CF_HTTP_TIMEOUT", 10.0, float),
            # 0 disables the deadline
            scrape_timeout=scrape_timeout or None,
            max_workers=max_workers,
            log_level=log_level,
            host=env.get("HOST") or "0.0.0.0",
            port=_number(env, "PORT", 8080, int),
        )

    def auth_headers(self) -> dict:
        if self.api_token:
            return {"Authorization": f"Bearer {self.api_token}"}
        if self.api_email and self.api_key:
            return {"X-Auth-Email": self.api_email, "X-Auth-Key": self.api_key}
        return {}
