"""
Caching utilities for expensive aggregate responses
Uses the default Django cache (Redis in production, local memory otherwise)
"""
from django.conf import settings
from django.core.cache import cache
import hashlib
import logging

logger = logging.getLogger(__name__)

DASHBOARD_KPI_CACHE_TTL = getattr(settings, 'DASHBOARD_CACHE_TTL', 300)


def make_cache_key(prefix, *args, **kwargs):
    """Generate a unique cache key from arguments"""
    key_data = f"{prefix}:{args}:{sorted(kwargs.items())}"
    # Hash it to keep key length reasonable
    key_hash = hashlib.md5(key_data.encode()).hexdigest()
    return f"{prefix}:{key_hash}"


def dashboard_cache_key(day):
    """Dashboard metrics depend on 'today', so the key is per calendar day"""
    return make_cache_key("dashboard_kpis", day.isoformat())


def get_cached_dashboard_kpis(day):
    """Get cached dashboard KPIs for the given day"""
    cache_key = dashboard_cache_key(day)
    cached_data = cache.get(cache_key)
    if cached_data is not None:
        logger.debug(f"Cache HIT for dashboard_kpis: {cache_key}")
    return cached_data, cache_key


def cache_dashboard_kpis(cache_key, data, ttl=DASHBOARD_KPI_CACHE_TTL):
    """Cache dashboard KPIs data"""
    cache.set(cache_key, data, ttl)
    logger.debug(f"Cached dashboard KPIs: {cache_key}")


def invalidate_dashboard_cache(day=None):
    """Invalidate dashboard KPIs cache"""
    from django.utils import timezone
    day = day or timezone.localdate()
    cache.delete(dashboard_cache_key(day))
    logger.debug(f"Invalidated dashboard cache for {day.isoformat()}")
