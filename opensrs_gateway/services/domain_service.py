"""Local domain mirror service"""
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple
from datetime import datetime, timedelta
from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from opensrs_gateway.models.domain import Domain, DomainStatus, DNSZoneStatus
from opensrs_gateway.opensrs.result import OpenSRSResult
from opensrs_gateway.schemas.domain import DomainUpdate

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    "registrationDate": Domain.registration_date,
    "registration_date": Domain.registration_date,
    "expirationDate": Domain.expiration_date,
    "expiration_date": Domain.expiration_date,
    "domainName": Domain.domain_name,
    "domain_name": Domain.domain_name,
}


def _add_years(moment: datetime, years: int) -> datetime:
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        # 29 February
        return moment.replace(year=moment.year + years, day=28)


def _order_by(sort: str):
    descending = sort.startswith("-")
    column = SORT_FIELDS.get(sort.lstrip("-"), Domain.registration_date)
    return column.desc() if descending else column.asc()


class DomainService:
    """Domain service for database operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, domain_id: int) -> Optional[Domain]:
        """Get domain by ID"""
        result = await self.db.execute(
            select(Domain).where(Domain.id == domain_id)
        )
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Optional[Domain]:
        """Get domain by name"""
        result = await self.db.execute(
            select(Domain).where(Domain.domain_name == name.strip().lower())
        )
        return result.scalar_one_or_none()

    async def list_by_owner(
        self,
        owner_id: int,
        status: Optional[DomainStatus] = None,
        sort: str = "-registrationDate",
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[Domain], int]:
        """List a user's domains with pagination"""
        conditions = [Domain.owner_id == owner_id]
        if status is not None:
            conditions.append(Domain.status == status)

        total = (await self.db.execute(
            select(func.count(Domain.id)).where(*conditions)
        )).scalar_one()
        result = await self.db.execute(
            select(Domain)
            .where(*conditions)
            .order_by(_order_by(sort), Domain.id)
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return list(result.scalars().all()), total

    async def record_registration(
        self,
        owner_id: int,
        domain_name: str,
        result: OpenSRSResult,
        period: int = 1,
        contacts: Optional[Dict[str, Any]] = None,
        nameservers: Sequence[str] = (),
        auto_renew: bool = False,
        whois_privacy: bool = False,
        price: Optional[float] = None,
        currency: str = "USD",
    ) -> Domain:
        """Mirror a successful SW_REGISTER call.

        A row left behind by an earlier registration of the same name
        (e.g. a soft-removed mirror) is reused and reset.
        """
        now = datetime.utcnow()
        data = result.data
        order_id = data.get("id") or data.get("order_id")
        values = dict(
            owner_id=owner_id,
            status=DomainStatus.ACTIVE,
            registration_date=now,
            expiration_date=_add_years(now, period),
            auto_renew=auto_renew,
            registration_period=period,
            price_amount=price,
            price_currency=currency,
            opensrs_data={
                "order_id": order_id,
                "transfer_id": data.get("transfer_id"),
                "registration_id": data.get("registration_id"),
                "response_code": result.response_code,
                "response_text": result.response_text,
            },
            order_id=order_id,
            contacts=contacts,
            nameservers=[{"name": name} for name in nameservers],
            dns_records=[],
            dns_zone_status=DNSZoneStatus.INACTIVE,
            privacy_enabled=whois_privacy,
            removed_at=None,
        )

        domain = await self.get_by_name(domain_name)
        if domain is None:
            domain = Domain(domain_name=domain_name.strip().lower(), **values)
            self.db.add(domain)
        else:
            logger.info("Reusing existing mirror row %s for %s", domain.id, domain.domain_name)
            for field, value in values.items():
                setattr(domain, field, value)
            domain.updated_at = now

        await self.db.flush()
        await self.db.refresh(domain)
        logger.info("Recorded registration of %s for user %s", domain.domain_name, owner_id)
        return domain

    async def record_renewal(self, domain_name: str, period: int) -> Optional[Domain]:
        """Push the expiration date of a mirrored domain forward"""
        domain = await self.get_by_name(domain_name)
        if domain is None:
            return None
        domain.expiration_date = _add_years(domain.expiration_date, period)
        if domain.status == DomainStatus.EXPIRED:
            domain.status = DomainStatus.ACTIVE
        await self.db.flush()
        await self.db.refresh(domain)
        return domain

    async def update(self, domain: Domain, domain_update: DomainUpdate) -> Domain:
        """Update domain"""
        data = domain_update.model_dump(exclude_unset=True)
        for field, value in data.items():
            setattr(domain, field, value)

        domain.updated_at = datetime.utcnow()
        await self.db.flush()
        await self.db.refresh(domain)
        return domain

    async def replace_dns_records(self, domain: Domain, records: List[Dict[str, Any]]) -> Domain:
        now = datetime.utcnow().isoformat()
        domain.dns_records = [{**record, "last_modified": now} for record in records]
        domain.dns_zone_status = DNSZoneStatus.ACTIVE
        domain.updated_at = datetime.utcnow()
        await self.db.flush()
        await self.db.refresh(domain)
        return domain

    async def add_dns_record(self, domain: Domain, record: Dict[str, Any]) -> Domain:
        records = list(domain.dns_records or [])
        records.append({**record, "last_modified": datetime.utcnow().isoformat()})
        # reassign so the JSON column is flagged dirty
        domain.dns_records = records
        domain.dns_zone_status = DNSZoneStatus.ACTIVE
        domain.updated_at = datetime.utcnow()
        await self.db.flush()
        await self.db.refresh(domain)
        return domain

    async def expiring(self, days: int = 30, owner_id: Optional[int] = None) -> List[Domain]:
        """Active domains expiring within ``days``, soonest first"""
        conditions = [
            Domain.status == DomainStatus.ACTIVE,
            Domain.expiration_date <= datetime.utcnow() + timedelta(days=days),
        ]
        if owner_id is not None:
            conditions.append(Domain.owner_id == owner_id)
        result = await self.db.execute(
            select(Domain).where(*conditions).order_by(Domain.expiration_date.asc())
        )
        return list(result.scalars().all())

    async def stats(self, owner_id: int) -> Dict[str, int]:
        async def count(*conditions) -> int:
            result = await self.db.execute(
                select(func.count(Domain.id)).where(Domain.owner_id == owner_id, *conditions)
            )
            return result.scalar_one()

        soon = datetime.utcnow() + timedelta(days=30)
        return {
            "total_domains": await count(),
            "active_domains": await count(Domain.status == DomainStatus.ACTIVE),
            "expired_domains": await count(Domain.status == DomainStatus.EXPIRED),
            "expiring_domains": await count(
                Domain.status == DomainStatus.ACTIVE, Domain.expiration_date <= soon
            ),
            "domains_with_dns": await count(Domain.dns_zone_status == DNSZoneStatus.ACTIVE),
            "auto_renew_enabled": await count(Domain.auto_renew.is_(True)),
        }

    async def search(
        self,
        query: Optional[str] = None,
        owner_id: Optional[int] = None,
        status: Optional[DomainStatus] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Domain], int]:
        """Search by name fragment, owner and status, ordered by name"""
        conditions = []
        if query:
            conditions.append(Domain.domain_name.ilike(f"%{query.strip().lower()}%"))
        if owner_id is not None:
            conditions.append(Domain.owner_id == owner_id)
        if status is not None:
            conditions.append(Domain.status == status)

        total = (await self.db.execute(
            select(func.count(Domain.id)).where(*conditions)
        )).scalar_one()
        result = await self.db.execute(
            select(Domain)
            .where(*conditions)
            .order_by(Domain.domain_name.asc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return list(result.scalars().all()), total

    async def soft_remove(self, domain: Domain) -> Domain:
        """Mark the mirror deleted; the registration itself is untouched"""
        domain.status = DomainStatus.DELETED
        domain.removed_at = datetime.utcnow()
        domain.updated_at = datetime.utcnow()
        await self.db.flush()
        await self.db.refresh(domain)
        logger.info("Domain %s removed from local records", domain.domain_name)
        return domain

    async def mark_expired(self, now: Optional[datetime] = None) -> int:
        """Flip active domains past their expiration date to expired"""
        now = now or datetime.utcnow()
        result = await self.db.execute(
            update(Domain)
            .where(Domain.status == DomainStatus.ACTIVE, Domain.expiration_date < now)
            .values(status=DomainStatus.EXPIRED, updated_at=now)
        )
        return result.rowcount or 0
