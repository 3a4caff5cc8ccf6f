"""
alerts.py — Operator notifications through a Discord webhook.

Plain text messages only. Alerts are optional: with no webhook URL
configured every function here is a no-op.
"""

import logging
import time

import requests

logger = logging.getLogger(__name__)

MAX_RETRIES = 3
BASE_DELAY = 2
MAX_RETRY_AFTER = 30
MAX_CONTENT = 2000  # Discord message limit


def send_startup_message(webhook_url: str, config_summary: str) -> bool:
    return post_alert(
        webhook_url,
        f"✅  **DAILY LOG BOT — ONLINE**\n\n"
        f"Bot is now running and accepting `$logday` entries.\n"
        f"```\n{config_summary}\n```",
    )


def send_error_alert(webhook_url: str, command: str, user_id: str, error_msg: str) -> bool:
    return post_alert(
        webhook_url,
        f"⚠️  **DAILY LOG BOT — ERROR**\n\n"
        f"`{command}` failed for user `{user_id}`.\n"
        f"```\n{error_msg[:500]}\n```",
    )


def post_alert(webhook_url: str, message: str) -> bool:
    """
    Post a text alert to the operator webhook.

    Mentions are never resolved, so user ids in an alert can't ping anyone.
    Rate limits honour `retry_after` (capped); network errors back off
    exponentially. Delivery failures are logged, not raised.

    Returns:
        True if Discord accepted the message.
    """
    if not webhook_url:
        return False

    payload = {
        "content": message.strip()[:MAX_CONTENT],
        "allowed_mentions": {"parse": []},
    }

    for attempt in range(1, MAX_RETRIES + 1):
        try:
            response = requests.post(webhook_url, json=payload, timeout=15)
        except requests.RequestException as e:
            logger.warning(f"Alert attempt {attempt}/{MAX_RETRIES} failed: {e}")
            wait = BASE_DELAY ** attempt
        else:
            if response.status_code == 429:
                wait = min(float(response.json().get("retry_after", 5)), MAX_RETRY_AFTER)
                logger.warning(f"Alert rate limited, retry after {wait:g}s")
            elif response.ok:
                logger.info("Alert delivered.")
                return True
            else:
                logger.warning(f"Alert attempt {attempt}/{MAX_RETRIES} rejected: HTTP {response.status_code}")
                wait = BASE_DELAY ** attempt

        if attempt < MAX_RETRIES:
            time.sleep(wait)

    logger.error(f"Alert delivery failed after {MAX_RETRIES} attempts.")
    return False
