"""DNS zone endpoints"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from opensrs_gateway.api.deps import get_dns_service, get_opensrs_client
from opensrs_gateway.api.responses import OpenSRSRequestFailed, envelope, require_success
from opensrs_gateway.opensrs.client import OpenSRSClient
from opensrs_gateway.opensrs.parser import records_of
from opensrs_gateway.schemas.dns import (
    AddRecordRequest,
    CreateZoneRequest,
    DeleteRecordRequest,
    ManageRecordRequest,
    UpdateRecordRequest,
    ZoneRequest,
)
from opensrs_gateway.services.dns_service import DNSService, ZoneChange

logger = logging.getLogger(__name__)

router = APIRouter()


def _change_body(change: ZoneChange) -> Dict[str, Any]:
    body = {
        "domain": change.domain,
        "action": change.action,
        "record": change.record,
        "originalCount": len(change.original_records),
        "finalCount": len(change.final_records),
        "records": change.final_records,
    }
    if change.old_record is not None:
        body["oldRecord"] = change.old_record
    if change.confirmed_records is not None:
        body["confirmedRecords"] = change.confirmed_records
    return body


def _require_change(change: ZoneChange, message: str) -> ZoneChange:
    if not change.success:
        raise OpenSRSRequestFailed(change.result, message, workflow=change.workflow)
    return change


@router.get("/get-zone/{domain}")
async def get_zone(
    domain: str,
    dns: DNSService = Depends(get_dns_service)
):
    """Get the DNS zone of a domain as a flat record list"""
    domain = domain.lower()
    result = require_success(await dns.get_zone(domain), "Failed to get DNS zone")
    records = records_of(result)
    return envelope(result, data={"records": records}, domain=domain, total=len(records))


@router.post("/set-zone")
async def set_zone(
    request: ZoneRequest,
    dns: DNSService = Depends(get_dns_service)
):
    """Replace every record of a zone"""
    records = [record.as_record() for record in request.records]
    result = require_success(await dns.set_zone(request.domain, records), "Failed to set DNS zone")
    return envelope(result, domain=request.domain, total=len(records))


@router.post("/add-record")
async def add_record(
    request: AddRecordRequest,
    dns: DNSService = Depends(get_dns_service)
):
    """Add one record, keeping every existing record"""
    change = _require_change(
        await dns.add_record(request.domain, request.record.as_record(), confirm=request.confirm),
        "Failed to add DNS record",
    )
    return envelope(change.result, data=_change_body(change))


@router.post("/update-record")
async def update_record(
    request: UpdateRecordRequest,
    dns: DNSService = Depends(get_dns_service)
):
    """Replace the record matching ``oldRecord`` by ``newRecord``"""
    change = _require_change(
        await dns.update_record(
            request.domain,
            request.old_record.as_criteria(),
            request.new_record.as_record(),
            confirm=request.confirm,
        ),
        "Failed to update DNS record",
    )
    return envelope(change.result, data=_change_body(change))


@router.post("/delete-record")
async def delete_record(
    request: DeleteRecordRequest,
    dns: DNSService = Depends(get_dns_service)
):
    """Delete the record matching type, subdomain and optionally address"""
    change = _require_change(
        await dns.delete_record(request.domain, request.record.as_criteria(), confirm=request.confirm),
        "Failed to delete DNS record",
    )
    return envelope(change.result, data=_change_body(change))


@router.post("/manage-record")
async def manage_record(
    request: ManageRecordRequest,
    dns: DNSService = Depends(get_dns_service)
):
    """Add, update or delete a record and report every workflow step"""
    old_record = request.old_record.as_criteria() if request.old_record else None
    change = _require_change(
        await dns.apply(
            request.domain,
            request.action,
            request.record,
            old_record=old_record,
            confirm=request.confirm,
        ),
        f"Failed to {request.action} DNS record",
    )
    return envelope(change.result, data=_change_body(change), workflow=change.workflow)


@router.post("/create-zone")
async def create_zone(
    request: CreateZoneRequest,
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """Create a zone, optionally from a DNS template"""
    records = [record.as_record() for record in request.records]
    result = require_success(
        await client.create_dns_zone(request.domain, records, request.dns_template),
        "Failed to create DNS zone",
    )
    return envelope(result, domain=request.domain)


@router.delete("/delete-zone/{domain}")
async def delete_zone(
    domain: str,
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """Delete the zone of a domain"""
    domain = domain.lower()
    result = require_success(await client.delete_dns_zone(domain), "Failed to delete DNS zone")
    return envelope(result, domain=domain)


@router.post("/reset-zone/{domain}")
async def reset_zone(
    domain: str,
    dns_template: Optional[str] = None,
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """Reset a zone to its template records"""
    domain = domain.lower()
    result = require_success(
        await client.reset_dns_zone(domain, dns_template), "Failed to reset DNS zone"
    )
    return envelope(result, domain=domain)
