# settings/config.py
from pydantic import BaseModel
import os
import secrets
from pathlib import Path
from dotenv import load_dotenv

# ===== .env is loaded once =====
def _load_env() -> None:
    here = Path(__file__).resolve()
    for p in [here.parent, *here.parents]:
        env_path = p / ".env"
        if env_path.exists():
            load_dotenv(env_path, override=True)
            return
    load_dotenv(override=True)


_load_env()


def _env_bool(key: str, default: str = "false") -> bool:
    return os.getenv(key, default).strip().lower() in ("1", "true", "yes", "on")


def _env_int(key: str, default: int = 0) -> int:
    raw = os.getenv(key, "")
    try:
        return int(raw)
    except Exception:
        return default


def _env_list(key: str, default: str = "") -> list:
    return [item.strip() for item in os.getenv(key, default).split(",") if item.strip()]


class Settings(BaseModel):
    # ---------- SIWE ----------
    # Empty means "resolve from the request" (Origin, then Host).
    siwe_domain: str = os.getenv("SIWE_DOMAIN", "").strip()
    siwe_chain_id: int = _env_int("SIWE_CHAIN_ID", 80002)
    siwe_nonce_ttl_seconds: int = _env_int("SIWE_NONCE_TTL_SECONDS", 600)
    siwe_session_cookie: str = os.getenv("SIWE_SESSION_COOKIE", "siwe_session")
    siwe_expose_failure_reason: bool = _env_bool("SIWE_EXPOSE_FAILURE_REASON", "true")

    # ---------- Session cookie ----------
    # A per-process secret is enough: records live in memory for minutes only.
    jwt_secret: str = os.getenv("JWT_SECRET", "") or secrets.token_hex(32)
    cookie_secure: bool = _env_bool("COOKIE_SECURE", "false")
    cookie_samesite: str = os.getenv("COOKIE_SAMESITE", "lax")

    # ---------- HTTP ----------
    server_host: str = os.getenv("SERVER_HOST", "127.0.0.1")
    server_port: int = _env_int("SERVER_PORT", 3001)
    cors_allow_origins: list = _env_list("CORS_ALLOW_ORIGINS", "http://localhost:5173")

    # ---------- Logging ----------
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
