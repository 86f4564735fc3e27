"""Endpoints over the local domain mirror"""
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from opensrs_gateway.api.responses import ok, pagination
from opensrs_gateway.core.database import get_db
from opensrs_gateway.models.domain import Domain, DomainStatus
from opensrs_gateway.schemas.dns import StoredDNSRecord, StoredDNSRecords
from opensrs_gateway.schemas.domain import DomainResponse, DomainUpdate
from opensrs_gateway.services.domain_service import DomainService
from opensrs_gateway.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


def _domain_data(domain: Domain) -> dict:
    return DomainResponse.model_validate(domain).model_dump(mode="json")


async def _get_domain_or_404(domain_service: DomainService, domain_id: int) -> Domain:
    domain = await domain_service.get_by_id(domain_id)
    if not domain:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Domain not found"
        )
    return domain


async def _require_user(db: AsyncSession, user_id: int):
    user = await UserService(db).get_by_id(user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return user


@router.get("/user/{user_id}/domains")
async def list_user_domains(
    user_id: int,
    domain_status: Optional[DomainStatus] = Query(None, alias="status"),
    sort: str = "-registrationDate",
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    db: AsyncSession = Depends(get_db)
):
    """List a user's domains"""
    await _require_user(db, user_id)

    domains, total = await DomainService(db).list_by_owner(user_id, domain_status, sort, page, limit)
    page_info = pagination(page, limit, total)
    page_info["totalDomains"] = page_info.pop("totalResults")
    return ok({
        "domains": [_domain_data(domain) for domain in domains],
        "pagination": page_info,
    })


@router.get("/user/{user_id}/domains/stats")
async def user_domain_stats(
    user_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Domain counts for a user"""
    user = await _require_user(db, user_id)
    statistics = await DomainService(db).stats(user_id)
    return ok({
        "user": {"id": user.id, "username": user.username, "email": user.email},
        "statistics": statistics,
    })


@router.get("/domain/name/{domain_name}")
async def get_domain_by_name(
    domain_name: str,
    db: AsyncSession = Depends(get_db)
):
    """Get a mirrored domain by name"""
    domain = await DomainService(db).get_by_name(domain_name)
    if not domain:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Domain not found"
        )
    return ok(_domain_data(domain))


@router.get("/domain/{domain_id}")
async def get_domain(
    domain_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Get a mirrored domain"""
    domain = await _get_domain_or_404(DomainService(db), domain_id)
    return ok(_domain_data(domain))


@router.put("/domain/{domain_id}")
async def update_domain(
    domain_id: int,
    domain_update: DomainUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Update mirror fields; name, owner and registration date are fixed"""
    domain_service = DomainService(db)
    domain = await _get_domain_or_404(domain_service, domain_id)

    domain = await domain_service.update(domain, domain_update)
    await db.commit()
    return ok(_domain_data(domain), message="Domain updated successfully")


@router.put("/domain/{domain_id}/dns")
async def replace_domain_dns(
    domain_id: int,
    request: StoredDNSRecords,
    db: AsyncSession = Depends(get_db)
):
    """Replace the DNS records stored on the mirror"""
    domain_service = DomainService(db)
    domain = await _get_domain_or_404(domain_service, domain_id)

    records = [record.model_dump(mode="json", exclude_none=True) for record in request.records]
    domain = await domain_service.replace_dns_records(domain, records)
    await db.commit()
    return ok({
        "domainId": domain.id,
        "domainName": domain.domain_name,
        "recordCount": len(records),
        "records": domain.dns_records,
    }, message="DNS records updated successfully")


@router.post("/domain/{domain_id}/dns/add")
async def add_domain_dns_record(
    domain_id: int,
    record: StoredDNSRecord = Body(..., embed=True),
    db: AsyncSession = Depends(get_db)
):
    """Append one DNS record to the mirror"""
    domain_service = DomainService(db)
    domain = await _get_domain_or_404(domain_service, domain_id)

    new_record = record.model_dump(mode="json", exclude_none=True)
    domain = await domain_service.add_dns_record(domain, new_record)
    await db.commit()
    return ok({
        "domainId": domain.id,
        "domainName": domain.domain_name,
        "newRecord": new_record,
        "totalRecords": len(domain.dns_records),
    }, message="DNS record added successfully")


@router.get("/domains/expiring")
async def expiring_domains(
    days: int = Query(30, ge=1, le=3650),
    user_id: Optional[int] = Query(None, alias="userId"),
    db: AsyncSession = Depends(get_db)
):
    """Active mirrored domains expiring within ``days``"""
    domains = await DomainService(db).expiring(days, owner_id=user_id)
    return ok({
        "expiringDomains": [_domain_data(domain) for domain in domains],
        "count": len(domains),
        "daysThreshold": days,
    })


@router.get("/domains/search")
async def search_domains(
    q: Optional[str] = None,
    owner: Optional[int] = None,
    domain_status: Optional[DomainStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db)
):
    """Search mirrored domains by name fragment or owner"""
    if not q and owner is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Search query (q) or owner parameter is required"
        )

    domains, total = await DomainService(db).search(q, owner, domain_status, page, limit)
    return ok({
        "domains": [_domain_data(domain) for domain in domains],
        "searchQuery": {
            "q": q,
            "owner": owner,
            "status": domain_status.value if domain_status else None,
        },
        "pagination": pagination(page, limit, total),
    })


@router.delete("/domain/{domain_id}")
async def remove_domain(
    domain_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Remove a domain from local records; the registration is untouched"""
    domain_service = DomainService(db)
    domain = await _get_domain_or_404(domain_service, domain_id)

    domain = await domain_service.soft_remove(domain)
    await db.commit()
    return ok(
        {"deletedDomain": {"id": domain.id, "domainName": domain.domain_name}},
        message="Domain removed from database successfully",
    )
