"""
Account notifications (created / password reset).

Sending is fire-and-report: the notifier never raises, it returns a
``NotificationResult`` whose ``success`` flag is surfaced to API callers as
``email_sent``. Account changes are always committed before the notifier runs.

Usage:
    from libs.common.emails.accounts import get_account_notifier

    result = await get_account_notifier().notify_account_created(user, "pa55")
    if not result.success:
        ...
"""

import smtplib
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Optional

from libs.common.config import get_settings
from libs.common.emails.core import EmailNotConfigured, send_email
from libs.common.emails.templates import account_created_email, password_reset_email
from libs.common.logging import get_logger

logger = get_logger(__name__)


@dataclass
class NotificationResult:
    success: bool
    error: Optional[str] = None


class AccountNotifier:
    """Notification collaborator used by the user-management workflows."""

    def __init__(self, login_url: Optional[str] = None):
        self.login_url = login_url or get_settings().LOGIN_URL

    async def _deliver(self, to_email: str, message: tuple[str, str, str]) -> NotificationResult:
        subject, body, html_body = message
        try:
            await send_email(to_email, subject, body, html_body)
        except EmailNotConfigured as e:
            return NotificationResult(success=False, error=str(e))
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Email send to %s failed: %s", to_email, e)
            return NotificationResult(success=False, error=str(e))
        return NotificationResult(success=True)

    async def notify_account_created(self, user: Any, password: str) -> NotificationResult:
        return await self._deliver(
            user.email,
            account_created_email(
                first_name=user.first_name,
                last_name=user.last_name,
                email=user.email,
                role=user.role,
                password=password,
                trainee_code=user.trainee_id,
                login_url=self.login_url,
            ),
        )

    async def notify_password_reset(self, user: Any, new_password: str) -> NotificationResult:
        return await self._deliver(
            user.email,
            password_reset_email(
                first_name=user.first_name,
                last_name=user.last_name,
                email=user.email,
                new_password=new_password,
                login_url=self.login_url,
            ),
        )


@lru_cache
def get_account_notifier() -> AccountNotifier:
    """
    FastAPI dependency returning the shared notifier.
    """
    return AccountNotifier()
