"""
Change notices for reconciled products.

Modules:
    telegram - Best-effort Telegram sendPhoto delivery
"""

from .telegram import TelegramNotifier, format_caption, local_time

__all__ = ['TelegramNotifier', 'format_caption', 'local_time']
