"""Delivery of rendered insight reports to a Telegram chat."""

import requests
from wisdom_insights.infra import log_utils


def send_telegram_message(token: str, chat_id: str, message: str) -> bool:
    """
    Post a report to a chat through the bot's `sendMessage` method.

    Args:
        token: The bot's credential, usually settings.TELEGRAM_TOKEN.
        chat_id: Target chat, usually settings.TELEGRAM_CHAT_ID.
        message: Report text, sent without markup.

    Returns:
        False if the request failed (the error is logged), True otherwise.
    """
    url = f"https://api.telegram.org/bot{token}/sendMessage"
    payload = {"chat_id": chat_id, "text": message}
    try:
        response = requests.post(url, json=payload, timeout=20)
        response.raise_for_status()
        log_utils.log_message("Telegram message sent.", "INFO")
        return True
    except requests.RequestException as e:
        log_utils.log_message(f"Telegram send failed: {e}", "ERROR")
        return False
