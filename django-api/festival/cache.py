"""Cache keys shared by the handlers and the invalidation signals."""

from django.core.cache import cache

LEADERBOARD_CACHE_KEY = "festival:leaderboard"


def invalidate_leaderboard() -> None:
    cache.delete(LEADERBOARD_CACHE_KEY)
