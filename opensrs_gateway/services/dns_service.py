"""DNS zone editing on top of OpenSRS full-replace zones

OpenSRS only offers ``set_dns_zone``, which replaces the whole zone. A
single-record change therefore reads the zone, merges the change locally
and writes the complete record list back exactly once.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from opensrs_gateway.opensrs.client import OpenSRSClient
from opensrs_gateway.opensrs.errors import (
    AmbiguousRecordError,
    RecordNotFoundError,
    RecordValidationError,
    ZoneReadError,
)
from opensrs_gateway.opensrs.parser import records_of
from opensrs_gateway.opensrs.records import DEFAULT_TTL, records_match, validate_record, validate_records
from opensrs_gateway.opensrs.result import OpenSRSResult

logger = logging.getLogger(__name__)

ACTIONS = ("add", "update", "delete")


def _find_matches(records: List[Dict[str, Any]], criteria: Dict[str, Any]) -> List[int]:
    matches = [index for index, record in enumerate(records) if records_match(record, criteria)]
    if len(matches) > 1 and not criteria.get("address"):
        raise AmbiguousRecordError(
            f"{len(matches)} {criteria.get('type')} records match, specify address",
            matches=[records[index] for index in matches],
        )
    return matches


def merge_add(records: List[Dict[str, Any]], new_record: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Existing records plus ``new_record`` (TTL defaults to 3600)"""
    prepared = validate_record(new_record)
    prepared.setdefault("ttl", DEFAULT_TTL)
    return list(records) + [prepared]


def merge_update(
    records: List[Dict[str, Any]], criteria: Dict[str, Any], new_record: Dict[str, Any]
) -> List[Dict[str, Any]]:
    """Replace the record matching ``criteria`` by ``new_record``.

    The replacement keeps the old TTL unless it carries its own.
    """
    prepared = validate_record(new_record)
    matches = _find_matches(records, criteria)
    if not matches:
        raise RecordNotFoundError("Record to update not found", criteria=criteria)

    updated = list(records)
    for index in matches:
        replacement = dict(prepared)
        replacement.setdefault("ttl", records[index].get("ttl") or DEFAULT_TTL)
        updated[index] = replacement
    return updated


def merge_delete(records: List[Dict[str, Any]], criteria: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Drop the record matching ``criteria``"""
    matches = set(_find_matches(records, criteria))
    if not matches:
        raise RecordNotFoundError("Record to delete not found", criteria=criteria)
    return [record for index, record in enumerate(records) if index not in matches]


def _step(**values) -> Dict[str, Any]:
    return {"timestamp": datetime.utcnow().isoformat(), **values}


@dataclass
class ZoneChange:
    """Outcome of a single-record zone change"""

    domain: str
    action: str
    record: Dict[str, Any]
    original_records: List[Dict[str, Any]]
    final_records: List[Dict[str, Any]]
    result: OpenSRSResult
    old_record: Optional[Dict[str, Any]] = None
    confirmed_records: Optional[List[Dict[str, Any]]] = None
    workflow: Dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.result.success


class DNSService:
    """Read-merge-replace editing of OpenSRS DNS zones"""

    def __init__(self, client: OpenSRSClient):
        self.client = client

    async def get_zone(self, domain: str) -> OpenSRSResult:
        return await self.client.get_dns_zone(domain)

    async def set_zone(self, domain: str, records: List[Dict[str, Any]]) -> OpenSRSResult:
        """Replace the whole zone after validating every record"""
        prepared = validate_records(records)
        for record in prepared:
            record.setdefault("ttl", DEFAULT_TTL)
        return await self.client.set_dns_zone(domain, prepared)

    async def add_record(self, domain: str, record: Dict[str, Any], confirm: bool = False) -> ZoneChange:
        return await self.apply(domain, "add", record, confirm=confirm)

    async def update_record(
        self, domain: str, old_record: Dict[str, Any], new_record: Dict[str, Any], confirm: bool = False
    ) -> ZoneChange:
        return await self.apply(domain, "update", new_record, old_record=old_record, confirm=confirm)

    async def delete_record(self, domain: str, record: Dict[str, Any], confirm: bool = False) -> ZoneChange:
        return await self.apply(domain, "delete", record, confirm=confirm)

    async def apply(
        self,
        domain: str,
        action: str,
        record: Dict[str, Any],
        old_record: Optional[Dict[str, Any]] = None,
        confirm: bool = False,
    ) -> ZoneChange:
        """Run the retrieve, prepare, merge, update, confirm sequence.

        Raises ZoneReadError when the current zone cannot be read, and
        RecordValidationError, RecordNotFoundError or AmbiguousRecordError
        before anything is written. A rejected write is reported through
        the returned ``ZoneChange``.
        """
        if action not in ACTIONS:
            raise RecordValidationError("Action must be one of: add, update, delete")
        if action == "update" and not old_record:
            raise RecordValidationError("oldRecord is required for update action")

        workflow: Dict[str, Any] = dict.fromkeys(
            ("step1_retrieve", "step2_prepare", "step3_merge", "step4_update", "step5_confirm")
        )

        # the record is checked before the zone is read
        if action == "delete":
            prepared = dict(record)
            prepared["type"] = str(prepared.get("type") or "").upper()
            if not prepared["type"]:
                raise RecordValidationError("Record must have type", record=record)
        else:
            prepared = validate_record(record)

        # 1. retrieve
        zone = await self.client.get_dns_zone(domain)
        if not zone.success:
            workflow["step1_retrieve"] = _step(success=False, error=zone.error, responseCode=zone.response_code)
            logger.warning("Aborting %s on %s: zone read failed (%s)", action, domain, zone.response_code)
            raise ZoneReadError(
                f"Failed to retrieve existing DNS records: {zone.error or 'Unknown error'}",
                result=zone,
                workflow=workflow,
            )
        existing = records_of(zone)
        workflow["step1_retrieve"] = _step(success=True, recordCount=len(existing), records=existing)

        # 2. prepare
        workflow["step2_prepare"] = _step(success=True, action=action, record=prepared)

        # 3. merge
        if action == "add":
            final = merge_add(existing, prepared)
            operation = "Added new record to existing set"
        elif action == "update":
            criteria = dict(old_record)
            criteria["type"] = str(criteria.get("type") or "").upper()
            final = merge_update(existing, criteria, prepared)
            operation = "Replaced existing record with updated version"
        else:
            final = merge_delete(existing, prepared)
            operation = "Removed specified record from set"
        workflow["step3_merge"] = _step(
            success=True,
            action=action,
            operation=operation,
            originalCount=len(existing),
            finalCount=len(final),
        )

        # 4. update
        result = await self.client.set_dns_zone(domain, final)
        change = ZoneChange(
            domain=domain,
            action=action,
            record=prepared,
            old_record=old_record,
            original_records=existing,
            final_records=final,
            result=result,
            workflow=workflow,
        )
        if not result.success:
            workflow["step4_update"] = _step(
                success=False, error=result.error, responseCode=result.response_code
            )
            logger.error("DNS %s on %s failed: %s", action, domain, result.response_text)
            return change
        workflow["step4_update"] = _step(
            success=True, responseCode=result.response_code, responseText=result.response_text
        )

        # 5. confirm
        if confirm:
            check = await self.client.get_dns_zone(domain)
            change.confirmed_records = records_of(check) if check.success else None
            workflow["step5_confirm"] = _step(
                success=check.success,
                operation=f"{action} operation completed successfully",
                finalRecordCount=len(change.confirmed_records or []),
                verified=check.success,
            )
        else:
            workflow["step5_confirm"] = _step(
                success=True,
                operation=f"{action} operation completed successfully",
                finalRecordCount=len(final),
                verified=False,
            )

        logger.info("DNS %s on %s: %d -> %d records", action, domain, len(existing), len(final))
        return change
