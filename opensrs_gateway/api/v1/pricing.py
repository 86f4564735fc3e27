"""Pricing endpoints"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from opensrs_gateway.api.deps import get_opensrs_client
from opensrs_gateway.api.responses import envelope, now_iso, require_success
from opensrs_gateway.core.config import settings
from opensrs_gateway.opensrs.client import OpenSRSClient
from opensrs_gateway.opensrs.result import OpenSRSResult
from opensrs_gateway.schemas.domain import BulkDomainsRequest

router = APIRouter()

PRICE_FIELDS = ("price", "currency", "is_registry_premium", "registry_premium_group", "prices")


def price_data(result: OpenSRSResult) -> Dict[str, Any]:
    """Keep only the pricing fields of a GET_PRICE result"""
    return {key: result.data[key] for key in PRICE_FIELDS if result.data.get(key) not in (None, "")}


async def bulk_price(client: OpenSRSClient, domains: List[str]) -> Dict[str, Any]:
    """Price at most BULK_PRICE_LIMIT domains"""
    selected = domains[:settings.BULK_PRICE_LIMIT]
    results = []
    for domain, result in await client.bulk_price(selected):
        results.append({
            "domain": domain,
            "success": result.success,
            "price": result.data.get("price") if result.success else None,
            "currency": result.data.get("currency") if result.success else None,
            "error": None if result.success else result.error,
        })
    return {
        "success": True,
        "results": results,
        "total": len(results),
        "successful": sum(1 for item in results if item["success"]),
        "truncated": len(domains) > len(selected),
        "timestamp": now_iso(),
    }


@router.get("/{domain}")
async def get_domain_price(
    domain: str,
    period: Optional[int] = Query(None, ge=1, le=10),
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """Get registration price for a domain"""
    result = require_success(
        await client.get_price(domain.lower(), period=period), "Failed to get domain price"
    )
    return envelope(result, data=price_data(result), domain=domain.lower())


@router.post("/bulk")
async def get_bulk_prices(
    request: BulkDomainsRequest,
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """Get prices for several domains"""
    return await bulk_price(client, request.domains)
