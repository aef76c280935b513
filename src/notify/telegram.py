"""
Telegram change notices.

Sends a photo-with-caption message to a tenant's admin chat when a product
price changes. Delivery is best-effort: one attempt, failures are logged
and never propagate to the caller.
"""

import html
import logging
import math
import re
from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

import requests

from ..common.constants import CAPTION_MAX_LENGTH, NOTIFY_TIMEZONE, TELEGRAM_API_URL
from ..common.errors import NotificationError
from ..models import PriceDelta, PriceStatus, TenantConfig

logger = logging.getLogger(__name__)

STATUS_LABELS = {
    PriceStatus.PRICE_UPDATED: "✅ تم تحديث السعر",
    PriceStatus.OUT_OF_STOCK: "❌ نفد من المخزون",
}

CURRENCY = "ج.م"
UNTITLED = "بدون عنوان"


def local_time(now: Optional[datetime] = None, tz: str = NOTIFY_TIMEZONE) -> str:
    """12-hour clock time in ``tz`` with Arabic AM/PM markers, e.g. ``03:05 م``."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    local = now.astimezone(ZoneInfo(tz))
    hour = local.hour % 12 or 12
    marker = "ص" if local.hour < 12 else "م"
    return f"{hour:02d}:{local.minute:02d} {marker}"


def _fit(escaped: str, limit: int) -> str:
    """Cut HTML-escaped text to ``limit`` characters without splitting an entity."""
    if len(escaped) <= limit:
        return escaped
    return re.sub(r"&[#\w]*$", "", escaped[:max(limit, 0)])


def format_caption(
    delta: PriceDelta,
    now: Optional[datetime] = None,
    tz: str = NOTIFY_TIMEZONE,
    max_length: int = CAPTION_MAX_LENGTH,
) -> str:
    """
    HTML caption for a changed product, at most ``max_length`` characters.

    Long titles are shortened before the markup is assembled so tags stay
    balanced; the final cut only applies if the other fields alone overflow.
    """
    old_price = math.floor(delta.old_price or 0)
    new_price = math.floor(delta.new_price or 0)
    status = STATUS_LABELS.get(delta.status, delta.status)

    def render(title: str) -> str:
        return "\n".join([
            "🔔 <b>تحديث تلقائي للمنتج</b>",
            "",
            f"📌 <b>الاسم:</b> {title}",
            f"🆔 <b>ASIN:</b> <code>{html.escape(delta.asin)}</code>",
            "",
            f"💰 <b>السعر:</b> {old_price} ← <b>{new_price} {CURRENCY}</b>",
            f"✅ <b>الحالة:</b> {status}",
            "",
            "🔗 <b>رابط المنتج:</b>",
            html.escape(delta.link or ""),
            "",
            f"🕒 {local_time(now, tz)}",
        ])

    budget = max_length - len(render(""))
    text = render(_fit(html.escape(delta.title or UNTITLED), budget))
    return text[:max_length]


class TelegramNotifier:
    """
    Sends change notices through the Telegram Bot API.

    Usage:
        notifier = TelegramNotifier.for_tenant(tenant)
        if notifier:
            notifier.notify(delta)
    """

    def __init__(
        self,
        bot_token: str,
        chat_id: str,
        session: Optional[requests.Session] = None,
        tz: str = NOTIFY_TIMEZONE,
        max_length: int = CAPTION_MAX_LENGTH,
        timeout: int = 15,
    ):
        self.chat_id = chat_id
        self.base_url = f"{TELEGRAM_API_URL}/bot{bot_token}"
        self.session = session or requests.Session()
        self.tz = tz
        self.max_length = max_length
        self.timeout = timeout

    @classmethod
    def for_tenant(cls, tenant: TenantConfig, **kwargs) -> Optional["TelegramNotifier"]:
        """Notifier for the tenant's admin chat, or None if not configured."""
        if not tenant.has_notification_channel:
            return None
        return cls(tenant.bot_token, tenant.admin_chat_id, **kwargs)

    def send_photo(self, photo: str, caption: str) -> None:
        """
        Post one sendPhoto message.

        Raises:
            NotificationError: On network failure or a non-ok response
        """
        try:
            response = self.session.post(
                f"{self.base_url}/sendPhoto",
                json={
                    "chat_id": self.chat_id,
                    "photo": photo,
                    "caption": caption[:self.max_length],
                    "parse_mode": "HTML",
                },
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise NotificationError(f"sendPhoto failed: {e}") from e

        if response.status_code >= 400:
            raise NotificationError(f"sendPhoto HTTP {response.status_code}: {response.text[:200]}")

    def notify(self, delta: PriceDelta, now: Optional[datetime] = None) -> bool:
        """
        Deliver a change notice for ``delta``. Never raises.

        Returns:
            True if Telegram accepted the message
        """
        caption = format_caption(delta, now=now, tz=self.tz, max_length=self.max_length)
        try:
            self.send_photo(delta.image, caption)
        except NotificationError as e:
            logger.warning("Admin notify failed for %s: %s", delta.asin, e)
            return False
        logger.debug("Notified %s about %s (%s)", self.chat_id, delta.asin, delta.status)
        return True
