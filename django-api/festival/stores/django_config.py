"""Configuration provider backed by the Configuration table.

Values are read on every call; callers decide how fresh they need them.
"""

import logging

from festival.models import Configuration
from festival.stores.interfaces import ConfigProvider

logger = logging.getLogger(__name__)


class DjangoConfigProvider(ConfigProvider):
    """Reads integer settings from the key/value Configuration table."""

    def get_int(self, key: str) -> int | None:
        raw = Configuration.objects.filter(key=key).values_list("value", flat=True).first()
        if raw is None:
            return None
        try:
            return int(raw.strip())
        except ValueError:
            logger.warning("Ignoring non-integer configuration value: %s=%r", key, raw)
            return None
