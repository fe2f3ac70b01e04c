"""Notifier that emails the affected user through Django's mail backend."""

from typing import Any

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.mail import send_mail

from festival.domain import UserId
from festival.stores.interfaces import Notifier


class MailNotifier(Notifier):
    """Sends a plain-text email describing the payload."""

    def notify(self, user_id: UserId, payload: dict[str, Any]) -> None:
        user = get_user_model().objects.filter(pk=user_id.value).first()
        if user is None or not user.email:
            return
        program = payload.get("program", "a program")
        subject = f"Registration {payload.get('event', 'update')}: {program}"
        lines = [f"{key}: {value}" for key, value in payload.items()]
        send_mail(
            subject,
            "\n".join(lines),
            settings.FESTIVAL_NOTIFY_FROM_EMAIL,
            [user.email],
        )
