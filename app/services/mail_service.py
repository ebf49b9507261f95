"""
MailService Module

This module renders notification emails with Jinja2 and delivers them through
the Resend transactional email API.
"""

import datetime
import logging
import os
from typing import Any, Dict, List, Optional

import httpx
from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import escape
from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.models.contact import ContactSubmission
from app.utils.slack import send_slack_alert

logger = logging.getLogger(__name__)

# Autoescaping covers & < > " ' in every interpolated value
template_dir = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")
jinja_env = Environment(
    loader=FileSystemLoader(template_dir),
    autoescape=select_autoescape(['html', 'xml']),
    enable_async=True
)


class MailServiceError(Exception):
    """Raised when an email could not be handed to the provider."""

    pass


class MailService:
    """Mail service with template rendering capabilities."""

    async def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Asynchronously render a Jinja template with the given context.

        Args:
            template_name: The name of the template file to render
            context: Dictionary of variables to pass to the template

        Returns:
            The rendered template as a string
        """
        try:
            template = jinja_env.get_template(template_name)
            if jinja_env.is_async:
                return await template.render_async(**context)
            else:
                return template.render(**context)
        except Exception as e:
            logger.error(f"Error rendering template {template_name}: {str(e)}")
            raise MailServiceError(f"Error rendering template: {str(e)}")

    def build_contact_subject(self, subject: str) -> str:
        return f"{settings.CONTACT_SUBJECT_PREFIX} {escape(subject)}"

    async def send_contact_notification(self, submission: ContactSubmission) -> Optional[str]:
        """
        Notify the shop operator about a contact form submission.

        Args:
            submission: A validated, spam-cleared contact submission

        Returns:
            The provider message id, if the provider returned one

        Raises:
            MailServiceError: If the email could not be sent
        """
        html_content = await self.render_template(
            "contact_form_notification.html",
            {
                "name": submission.name,
                "email": submission.email,
                "subject": submission.subject,
                "message": submission.message,
                "current_year": datetime.datetime.now().year,
            },
        )

        return await self.send_mail(
            sender=settings.CONTACT_SENDER,
            recipients=[settings.CONTACT_RECIPIENT],
            title=self.build_contact_subject(submission.subject),
            body=html_content,
            reply_to=submission.email,
        )

    async def send_mail(
        self,
        sender: str,
        recipients: List[str],
        title: str,
        body: str,
        reply_to: Optional[str] = None,
    ) -> Optional[str]:
        """
        Sends an HTML email through the Resend API.

        Args:
            sender (str): Sender identity, e.g. 'Shop <noreply@example.com>'.
            recipients (list): List of recipient email addresses.
            title (str): Subject line of the email.
            body (str): HTML body of the email.
            reply_to (str, optional): Address replies should go to.

        Returns:
            The Resend message id, if present in the response.

        Raises:
            MailServiceError: If the API key is missing, the request fails or
                the provider answers with a non-2xx status.
        """
        if not settings.RESEND_API_KEY:
            logger.error("RESEND_API_KEY is not configured")
            raise MailServiceError("Email provider is not configured")

        payload = {
            "from": sender,
            "to": recipients,
            "subject": title,
            "html": body,
        }
        if reply_to:
            payload["reply_to"] = reply_to

        try:
            async with httpx.AsyncClient(timeout=settings.OUTBOUND_TIMEOUT_SECONDS) as client:
                response = await client.post(
                    settings.RESEND_API_URL,
                    headers={
                        "Authorization": f"Bearer {settings.RESEND_API_KEY}",
                        "Content-Type": "application/json",
                    },
                    json=payload,
                )
        except httpx.HTTPError as e:
            logger.error(f"Failed to reach Resend API: {str(e)}")
            raise MailServiceError("Email provider unreachable") from e

        if not response.is_success:
            logger.error(f"Resend API error: {response.status_code} - {response.text}")
            await run_in_threadpool(
                send_slack_alert,
                f"Resend returned {response.status_code} for a contact form email",
                "Contact form delivery failed",
            )
            raise MailServiceError(f"Email provider returned {response.status_code}")

        try:
            message_id = response.json().get("id")
        except ValueError:
            message_id = None

        logger.info(f"Email sent successfully to {', '.join(recipients)}")
        return message_id


mail_service = MailService()
