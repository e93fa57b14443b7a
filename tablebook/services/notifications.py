"""
Best-effort customer notifications.

SMS goes through Twilio's REST API, email through SMTP. Either channel is
silently skipped when it is not configured. Nothing here may fail a booking:
``notify_booking`` logs every delivery problem and returns.
"""
import logging
import smtplib
from dataclasses import dataclass
from datetime import date
from email.message import EmailMessage
from typing import Any, Optional

import requests

from tablebook.core.config import Settings, get_settings
from tablebook.core.errors import NotificationFailure
from tablebook.core.timeslots import time_to_str

logger = logging.getLogger(__name__)

TWILIO_MESSAGES_URL = "https://api.twilio.com/2010-04-01/Accounts/{sid}/Messages.json"


class Notifier:
    """Sends SMS and email using the credentials in ``Settings``."""

    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.settings = settings or get_settings()
        self.session = session or requests.Session()

    def send_sms(self, phone_number: str, message: str) -> None:
        """
        Send a text message.

        Raises:
            NotificationFailure: Twilio rejected the message or was unreachable
        """
        if not self.settings.sms_configured:
            logger.info("SMS not configured, skipping message to %s", phone_number)
            return

        try:
            response = self.session.post(
                TWILIO_MESSAGES_URL.format(sid=self.settings.TWILIO_ACCOUNT_SID),
                data={
                    "To": phone_number,
                    "From": self.settings.TWILIO_PHONE_NUMBER,
                    "Body": message,
                },
                auth=(self.settings.TWILIO_ACCOUNT_SID, self.settings.TWILIO_AUTH_TOKEN),
                timeout=self.settings.NOTIFICATION_TIMEOUT_SECONDS,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise NotificationFailure(f"SMS to {phone_number} failed: {e}")

        logger.info("SMS sent to %s", phone_number)

    def send_email(self, address: str, subject: str, body: str) -> None:
        """
        Send a plain-text email.

        Raises:
            NotificationFailure: the SMTP exchange failed
        """
        if not self.settings.email_configured:
            logger.info("Email not configured, skipping message to %s", address)
            return

        message = EmailMessage()
        message["From"] = self.settings.EMAIL_FROM or self.settings.SMTP_USER
        message["To"] = address
        message["Subject"] = subject
        message.set_content(body)

        try:
            with smtplib.SMTP(
                self.settings.SMTP_HOST,
                self.settings.SMTP_PORT,
                timeout=self.settings.NOTIFICATION_TIMEOUT_SECONDS,
            ) as smtp:
                smtp.starttls()
                if self.settings.SMTP_USER:
                    smtp.login(self.settings.SMTP_USER, self.settings.SMTP_PASSWORD or "")
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationFailure(f"Email to {address} failed: {e}")

        logger.info("Email sent to %s", address)


@dataclass(frozen=True)
class BookingNotice:
    """Detached copy of what a notification needs, safe to use after the session closed."""
    reservation_id: Any
    customer_name: str
    customer_email: Optional[str]
    customer_phone: Optional[str]
    guests: int
    date: date
    time: str
    status: str

    @classmethod
    def from_reservation(cls, reservation) -> "BookingNotice":
        return cls(
            reservation_id=reservation.id,
            customer_name=reservation.customer_name,
            customer_email=reservation.customer_email,
            customer_phone=reservation.customer_phone,
            guests=reservation.guests,
            date=reservation.date,
            time=time_to_str(reservation.time),
            status=reservation.status,
        )


def booking_message(notice: BookingNotice, restaurant_name: str) -> tuple[str, str]:
    """Subject and body for a booking, depending on whether it is confirmed yet."""
    when = f"{notice.time} on {notice.date.isoformat()}"
    if notice.status == "pending":
        return (
            "Reservation request received",
            f"We received your reservation request for {notice.guests} guests at {when} "
            f"at {restaurant_name}. We will confirm it shortly.",
        )
    return (
        "Reservation confirmation",
        f"Your reservation for {notice.guests} guests at {when} at {restaurant_name} "
        f"is confirmed. We look forward to serving you!",
    )


def notify_booking(notifier: Notifier, notice: BookingNotice, restaurant_name: str) -> None:
    """
    Tell the customer about a new booking over every channel they gave us.

    Meant to run as a background task after the booking was committed.
    Failures are logged and swallowed.
    """
    subject, body = booking_message(notice, restaurant_name)

    if notice.customer_phone:
        try:
            notifier.send_sms(notice.customer_phone, body)
        except NotificationFailure as e:
            logger.warning("Booking %s: %s", notice.reservation_id, e)
        except Exception:
            logger.exception("Booking %s: unexpected SMS error", notice.reservation_id)

    if notice.customer_email:
        try:
            notifier.send_email(notice.customer_email, subject, body)
        except NotificationFailure as e:
            logger.warning("Booking %s: %s", notice.reservation_id, e)
        except Exception:
            logger.exception("Booking %s: unexpected email error", notice.reservation_id)
