import os
from dataclasses import dataclass
from typing import List

from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: str = "") -> str:
    # Hosting dashboards sometimes append whitespace/newlines to pasted values
    return os.getenv(name, default).strip()


@dataclass(frozen=True)
class Config:
    """Application configuration loaded from environment variables.

    Provides validated access to the content store, session signing,
    identity provider and notification settings.
    """

    SUPABASE_URL: str = _env("SUPABASE_URL")
    SUPABASE_SERVICE_KEY: str = _env("SUPABASE_SERVICE_KEY")
    SUPABASE_BUCKET: str = _env("SUPABASE_BUCKET", "investor-documents")
    ENVIRONMENT: str = _env("ENVIRONMENT", "production")

    SITE_URL: str = _env("SITE_URL", "https://goldengateadvisors.com").rstrip("/")
    # Proxies in front of the app that append to X-Forwarded-For
    TRUSTED_PROXY_HOPS: int = int(_env("TRUSTED_PROXY_HOPS", "1") or 1)

    ADMIN_PASSWORD: str = _env("ADMIN_PASSWORD")
    SESSION_SECRET: str = _env("SESSION_SECRET")
    PREVIEW_SECRET: str = _env("PREVIEW_SECRET")

    CLERK_JWKS_URL: str = _env("CLERK_JWKS_URL")
    CLERK_JWT_KEY: str = _env("CLERK_JWT_KEY")
    CLERK_ISSUER: str = _env("CLERK_ISSUER")
    CLERK_WEBHOOK_SECRET: str = _env("CLERK_WEBHOOK_SECRET")

    RESEND_API_KEY: str = _env("RESEND_API_KEY")
    EMAIL_FROM: str = _env("EMAIL_FROM", "Golden Gate Home Advisors <noreply@goldengateadvisors.com>")
    ADMIN_EMAIL: str = _env("ADMIN_EMAIL", "hello@goldengateadvisors.com")

    SENTRY_DSN: str = _env("SENTRY_DSN")
    SENTRY_TRACES_SAMPLE_RATE: float = float(_env("SENTRY_TRACES_SAMPLE_RATE", "0.1") or 0.1)
    GA_MEASUREMENT_ID: str = _env("GA_MEASUREMENT_ID")

    @classmethod
    def is_development(cls) -> bool:
        return cls.ENVIRONMENT == "development"

    @staticmethod
    def allowed_origins(extra_origins: List[str] | None = None) -> List[str]:
        env_origins = [o.strip() for o in os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:5175").split(",") if o.strip()]
        defaults = [
            "https://goldengateadvisors.com",
            "https://www.goldengateadvisors.com",
        ]
        merged = env_origins + defaults
        if extra_origins:
            merged.extend(extra_origins)
        # Deduplicate while preserving order
        seen = set()
        result: List[str] = []
        for origin in merged:
            if origin not in seen:
                seen.add(origin)
                result.append(origin)
        return result

    @classmethod
    def validate(cls) -> None:
        if not cls.SUPABASE_URL:
            raise ValueError("SUPABASE_URL environment variable is required")
        if not cls.SUPABASE_SERVICE_KEY:
            raise ValueError("SUPABASE_SERVICE_KEY environment variable is required")

    @classmethod
    def session_secret(cls) -> str:
        if not cls.SESSION_SECRET:
            raise ValueError("SESSION_SECRET environment variable is required")
        return cls.SESSION_SECRET
