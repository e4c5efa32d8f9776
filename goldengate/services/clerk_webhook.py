"""Keeps investor records in step with Clerk user lifecycle events."""

import json
import logging
from typing import Mapping, Optional

from svix.webhooks import Webhook, WebhookVerificationError

from . import investor_service
from ..core.config import Config
from ..models import AccreditedStatus, InvestorStatus


logger = logging.getLogger(__name__)

SVIX_HEADERS = ("svix-id", "svix-timestamp", "svix-signature")


class WebhookSignatureError(Exception):
    pass


def verify_event(payload: bytes, headers: Mapping[str, str]) -> dict:
    if not Config.CLERK_WEBHOOK_SECRET:
        raise RuntimeError(
            "CLERK_WEBHOOK_SECRET is not set. Configure it in Clerk Dashboard > Webhooks "
            "and add it to the environment."
        )
    try:
        Webhook(Config.CLERK_WEBHOOK_SECRET).verify(payload, {h: headers[h] for h in SVIX_HEADERS})
    except WebhookVerificationError as e:
        raise WebhookSignatureError(str(e)) from e
    # Newer svix releases only check the signature and return nothing
    return json.loads(payload)


def _verified_email(user: dict) -> Optional[str]:
    for address in user.get("email_addresses") or []:
        if (address.get("verification") or {}).get("status") == "verified":
            return address.get("email_address")
    return None


def _full_name(user: dict) -> str:
    parts = [user.get("first_name"), user.get("last_name")]
    return " ".join(p for p in parts if p) or "Investor"


def handle_user_created(user: dict) -> Optional[str]:
    email = _verified_email(user)
    if not email:
        logger.info(f"No verified email found for Clerk user {user.get('id')}")
        return None

    existing = investor_service.get_investor_by_email(email)
    if existing:
        investor_service.update_investor(existing["id"], {"clerk_id": user["id"]})
        logger.info(f"Linked Clerk user {user['id']} to existing investor {existing['id']}")
        return existing["id"]

    investor = investor_service.create_investor(
        name=_full_name(user),
        email=email,
        clerk_id=user["id"],
        status=InvestorStatus.ACTIVE.value,
        accredited_status=AccreditedStatus.PENDING.value,
    )
    logger.info(f"Created investor {investor['id']} for Clerk user {user['id']}")
    return investor["id"]


def handle_user_updated(user: dict) -> Optional[str]:
    investor = investor_service.get_investor_by_clerk_id(user["id"])
    if not investor:
        logger.info(f"No investor found for Clerk user {user['id']}")
        return None

    changes = {"name": _full_name(user)}
    email = _verified_email(user)
    if email:
        changes["email"] = email
    investor_service.update_investor(investor["id"], changes)
    logger.info(f"Updated investor {investor['id']} for Clerk user {user['id']}")
    return investor["id"]


def handle_user_deleted(user: dict) -> Optional[str]:
    investor = investor_service.get_investor_by_clerk_id(user["id"])
    if not investor:
        logger.info(f"No investor found to deactivate for Clerk user {user['id']}")
        return None

    # Keep the record so historical LOIs stay attached
    investor_service.update_investor(investor["id"], {"status": InvestorStatus.INACTIVE.value})
    logger.info(f"Marked investor {investor['id']} inactive for deleted Clerk user {user['id']}")
    return investor["id"]


HANDLERS = {
    "user.created": handle_user_created,
    "user.updated": handle_user_updated,
    "user.deleted": handle_user_deleted,
}


def process_event(event: dict) -> Optional[str]:
    handler = HANDLERS.get(event.get("type"))
    if handler is None:
        logger.info(f"Unhandled webhook event type: {event.get('type')}")
        return None
    return handler(event.get("data") or {})
