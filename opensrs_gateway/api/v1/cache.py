"""Lookup/price cache endpoints"""
import logging

from fastapi import APIRouter, Depends

from opensrs_gateway.api.deps import get_domain_cache
from opensrs_gateway.api.responses import now_iso
from opensrs_gateway.core.security import get_current_admin

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/stats")
async def cache_stats(cache=Depends(get_domain_cache)):
    """Entry counts and hit/miss counters"""
    return {"success": True, "data": await cache.stats(), "timestamp": now_iso()}


@router.delete("")
async def clear_cache(
    cache=Depends(get_domain_cache),
    current_admin=Depends(get_current_admin)
):
    """Drop every cached lookup and price"""
    await cache.clear()
    logger.info("Domain cache cleared by %s", current_admin.username)
    return {"success": True, "message": "Cache cleared", "timestamp": now_iso()}
