from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError
from app.core.config import settings

import logging

logger = logging.getLogger(__name__)

def send_slack_alert(message, title=None):
    """Send alert to Slack with optional title. No-op without a bot token."""
    if not settings.SLACK_BOT_TOKEN:
        logger.debug(f"Slack not configured, skipping alert: {message}")
        return

    try:
        client = WebClient(token=settings.SLACK_BOT_TOKEN)

        formatted_message = f"*{title}*\n{message}" if title else message

        client.chat_postMessage(
            channel=settings.SLACK_ALERT_CHANNEL,
            text=formatted_message,
            mrkdwn=True
        )
        logger.info(f"Slack alert sent: {message}")
    except SlackApiError as e:
        logger.error(f"Slack alert failed: {e.response['error']}")
