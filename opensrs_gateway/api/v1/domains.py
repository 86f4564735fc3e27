"""Domain endpoints backed by OpenSRS"""
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from opensrs_gateway.api.deps import get_opensrs_client
from opensrs_gateway.api.responses import OpenSRSRequestFailed, envelope, now_iso, require_success
from opensrs_gateway.api.v1.pricing import bulk_price, price_data
from opensrs_gateway.core.config import settings
from opensrs_gateway.core.database import get_db
from opensrs_gateway.opensrs.client import OpenSRSClient
from opensrs_gateway.opensrs.parser import lookup_availability
from opensrs_gateway.opensrs.result import OpenSRSResult
from opensrs_gateway.schemas.contact import ContactSet
from opensrs_gateway.schemas.domain import (
    BulkDomainsRequest,
    DomainLookupRequest,
    DomainModificationRequest,
    DomainModifyRequest,
    DomainRegisterRequest,
    DomainRenewRequest,
)
from opensrs_gateway.services.domain_service import DomainService
from opensrs_gateway.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


def _flag(value: Any) -> bool:
    return str(value) in ("1", "true", "True")


def _expiring_domains(result: OpenSRSResult) -> List[Dict[str, Any]]:
    """Normalize the domain list of GET_DOMAINS_BY_EXPIREDATE"""
    raw = result.data.get("exp_domains") or result.data.get("domains") or []
    domains = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        name = item.get("name") or item.get("domain") or ""
        domains.append({
            "id": item.get("id") or name,
            "domain": name,
            "status": item.get("status") or "active",
            "expiry_date": item.get("expiredate") or item.get("expiry_date"),
            "creation_date": item.get("creation_date"),
            "auto_renew": _flag(item.get("f_auto_renew", item.get("auto_renew"))),
            "whois_privacy": _flag(item.get("f_let_expire_privacy", item.get("whois_privacy"))),
            "tld": name.rsplit(".", 1)[-1] if "." in name else "",
        })
    return domains


@router.post("/lookup")
async def lookup_domain(
    request: DomainLookupRequest,
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """Check if a domain is available"""
    result = await client.lookup_domain(request.domain)
    if result.is_local_failure:
        raise OpenSRSRequestFailed(result, "Domain lookup failed")

    available, message = lookup_availability(result)
    return envelope(result, domain=request.domain, available=available, message=message)


@router.post("/bulk-lookup")
async def bulk_lookup(
    request: BulkDomainsRequest,
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """Check availability of several domains"""
    selected = request.domains[:settings.BULK_LOOKUP_LIMIT]
    results = []
    for domain, result in await client.bulk_lookup(selected):
        available, message = lookup_availability(result)
        results.append({
            "domain": domain,
            "success": result.success,
            "available": available,
            "message": message,
            "responseCode": result.response_code,
            "responseText": result.response_text,
            "error": None if result.success else result.error,
        })
    return {
        "success": True,
        "results": results,
        "summary": {
            "total": len(results),
            "available": sum(1 for item in results if item["available"]),
            "taken": sum(1 for item in results if item["success"] and not item["available"]),
            "failed": sum(1 for item in results if not item["success"]),
        },
        "truncated": len(request.domains) > len(selected),
        "timestamp": now_iso(),
    }


@router.post("/register")
async def register_domain(
    request: DomainRegisterRequest,
    client: OpenSRSClient = Depends(get_opensrs_client),
    db: AsyncSession = Depends(get_db)
):
    """Register a domain, mirroring it locally when ``user_id`` is given"""
    if request.user_id is not None and await UserService(db).get_by_id(request.user_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    contacts = request.as_contacts()
    result = require_success(
        await client.register_domain(
            request.domain,
            contacts,
            period=request.period,
            nameservers=request.nameservers,
            auto_renew=request.auto_renew,
            whois_privacy=request.whois_privacy,
            reg_username=request.reg_username,
            reg_password=request.reg_password,
        ),
        "Failed to register domain",
    )

    local_id = None
    if request.user_id is not None:
        domain = await DomainService(db).record_registration(
            request.user_id,
            request.domain,
            result,
            period=request.period,
            contacts=contacts,
            nameservers=request.nameservers,
            auto_renew=request.auto_renew,
            whois_privacy=request.whois_privacy,
            price=request.price,
            currency=request.currency,
        )
        await db.commit()
        local_id = domain.id

    return envelope(
        result,
        domain=request.domain,
        period=request.period,
        orderId=result.data.get("id") or result.data.get("order_id"),
        localDomainId=local_id,
    )


@router.post("/bulk-price")
async def bulk_domain_price(
    request: BulkDomainsRequest,
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """Get prices for several domains"""
    return await bulk_price(client, request.domains)


@router.post("/modify")
async def modify_domain(
    request: DomainModificationRequest,
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """Apply a typed modification such as ``auto_renew`` or ``locking``"""
    result = require_success(
        await client.modify_domain(
            request.domain, request.modification_type, **request.modification_attributes()
        ),
        "Failed to modify domain",
    )
    return envelope(result, domain=request.domain, modificationType=request.modification_type)


@router.get("")
async def list_domains(
    status_filter: str = Query("all", alias="status"),
    limit: int = Query(100, ge=1, le=1000),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """List reseller domains by expiration window, ten years ahead by default"""
    if start_date and end_date:
        start, end = start_date, end_date
    else:
        today = datetime.utcnow().date()
        start, end = today.isoformat(), (today + timedelta(days=3650)).isoformat()

    result = require_success(
        await client.get_domains_by_expiredate(start, end, limit=limit), "Failed to get domains list"
    )
    domains = _expiring_domains(result)
    if status_filter != "all":
        domains = [domain for domain in domains if domain["status"] == status_filter]
    domains = sorted(domains, key=lambda domain: domain["domain"])[:limit]

    return envelope(
        result,
        data=domains,
        total=len(domains),
        status=status_filter,
        limit=limit,
        dateRange={"start": start, "end": end},
    )


@router.get("/by-date-range")
async def domains_by_date_range(
    start_date: str = Query(..., alias="startDate"),
    end_date: str = Query(..., alias="endDate"),
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """List reseller domains expiring between two dates (YYYY-MM-DD)"""
    result = require_success(
        await client.get_domains_by_expiredate(start_date, end_date),
        "Failed to get domains by date range",
    )
    domains = _expiring_domains(result)
    return envelope(
        result,
        data=domains,
        total=len(domains),
        dateRange={"startDate": start_date, "endDate": end_date},
    )


@router.get("/deleted")
async def deleted_domains(
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """List domains recently deleted at the registry"""
    result = require_success(await client.get_deleted_domains(), "Failed to get deleted domains")
    deleted = result.data.get("del_domains") or result.data.get("domains") or []
    return envelope(result, data=deleted, total=len(deleted))


@router.get("/{domain}")
async def get_domain(
    domain: str,
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """Get domain information from OpenSRS"""
    result = require_success(await client.get_domain(domain.lower()), "Failed to get domain information")
    return envelope(result, domain=domain.lower())


@router.post("/{domain}/renew")
async def renew_domain(
    domain: str,
    request: DomainRenewRequest,
    client: OpenSRSClient = Depends(get_opensrs_client),
    db: AsyncSession = Depends(get_db)
):
    """Renew a domain and extend its local mirror"""
    domain = domain.lower()
    result = require_success(
        await client.renew_domain(
            domain,
            request.period,
            current_expiration_year=request.current_expiration_year,
            auto_renew=request.auto_renew,
        ),
        "Failed to renew domain",
    )
    mirrored = await DomainService(db).record_renewal(domain, request.period)
    if mirrored is not None:
        await db.commit()
    return envelope(result, domain=domain, period=request.period)


@router.put("/{domain}")
async def modify_domain_settings(
    domain: str,
    request: DomainModifyRequest,
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """Change nameservers, auto-renew, WHOIS privacy or lock state.

    Each setting is a separate OpenSRS command; processing stops at the
    first rejected one.
    """
    domain = domain.lower()
    changes = []
    if request.nameservers is not None:
        changes.append(("nameserver_list", {"nameservers": request.nameservers}))
    if request.auto_renew is not None:
        changes.append(("auto_renew", {"auto_renew": request.auto_renew}))
    if request.whois_privacy is not None:
        changes.append(("whois_privacy_state", {"state": request.whois_privacy}))
    if request.lock_state is not None:
        changes.append(("locking", {"lock_state": request.lock_state}))

    applied = []
    result = None
    for modification_type, attributes in changes:
        result = require_success(
            await client.modify_domain(domain, modification_type, **attributes),
            f"Failed to modify domain ({modification_type})",
            applied=applied,
        )
        applied.append(modification_type)

    return envelope(result, domain=domain, applied=applied)


@router.put("/{domain}/contacts")
async def update_domain_contacts(
    domain: str,
    request: ContactSet,
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """Replace the contacts of the given roles"""
    contacts = request.as_contacts()
    if not contacts:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="At least one contact is required")

    result = require_success(
        await client.update_contacts(domain.lower(), contacts), "Failed to update domain contacts"
    )
    return envelope(result, domain=domain.lower(), updated=sorted(contacts))


@router.get("/{domain}/price")
async def get_domain_price(
    domain: str,
    period: Optional[int] = Query(None, ge=1, le=10),
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """Get registration price for a domain"""
    result = require_success(
        await client.get_price(domain.lower(), period=period), "Failed to get domain pricing"
    )
    return envelope(result, data=price_data(result), domain=domain.lower())


@router.get("/{domain}/orders")
async def get_domain_orders(
    domain: str,
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """List orders placed for a domain"""
    result = require_success(
        await client.get_orders_by_domain(domain.lower()), "Failed to get domain orders"
    )
    orders = result.data.get("orders") or []
    return envelope(result, data=orders, domain=domain.lower(), total=len(orders))
