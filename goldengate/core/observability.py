import logging
from typing import Any, Optional

import sentry_sdk

from .config import Config


logger = logging.getLogger(__name__)

_initialized = False


def _before_send(event: dict, hint: dict) -> Optional[dict]:
    # 4xx responses are expected outcomes, not errors
    status_code = (event.get("extra") or {}).get("status_code")
    if isinstance(status_code, int) and 400 <= status_code < 500:
        return None
    return event


def init_sentry() -> bool:
    """Initialise Sentry once. Returns whether error tracking is active."""
    global _initialized
    if _initialized:
        return True

    if not Config.SENTRY_DSN:
        if not Config.is_development():
            logger.warning("SENTRY_DSN not set - server error tracking disabled")
        return False

    sentry_sdk.init(
        dsn=Config.SENTRY_DSN,
        environment=Config.ENVIRONMENT,
        traces_sample_rate=1.0 if Config.is_development() else Config.SENTRY_TRACES_SAMPLE_RATE,
        before_send=_before_send,
    )
    _initialized = True
    logger.info("Server-side error tracking initialized")
    return True


def capture_exception(exc: BaseException, **context: Any) -> None:
    if not Config.SENTRY_DSN:
        return
    with sentry_sdk.new_scope() as scope:
        for key, value in context.items():
            scope.set_extra(key, value)
        sentry_sdk.capture_exception(exc)


def set_user(user_id: Optional[str], email: Optional[str] = None) -> None:
    if not Config.SENTRY_DSN:
        return
    sentry_sdk.set_user({"id": user_id, "email": email} if user_id else None)
