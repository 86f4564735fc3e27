"""Nameserver endpoints"""
from typing import Optional

from fastapi import APIRouter, Depends

from opensrs_gateway.api.deps import get_opensrs_client
from opensrs_gateway.api.responses import envelope, require_success
from opensrs_gateway.opensrs.client import OpenSRSClient
from opensrs_gateway.schemas.nameserver import (
    NameserverCheckRequest,
    NameserverCreateRequest,
    NameserverModifyRequest,
    NameserverUpdateRequest,
)

router = APIRouter()


@router.post("/update")
async def update_nameservers(
    request: NameserverUpdateRequest,
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """Assign, add or remove the nameservers of a domain"""
    result = require_success(
        await client.advanced_update_nameservers(request.domain, request.nameservers, request.op_type),
        "Failed to update nameservers",
    )
    return envelope(result, domain=request.domain, nameservers=request.nameservers, opType=request.op_type)


@router.post("/create")
async def create_nameserver(
    request: NameserverCreateRequest,
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """Create a host object at the registry"""
    result = require_success(
        await client.create_nameserver(request.name, request.ip_address, request.domain),
        "Failed to create nameserver",
    )
    return envelope(result, name=request.name, ipAddress=request.ip_address)


@router.post("/check")
async def check_nameserver(
    request: NameserverCheckRequest,
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """Ask the registry whether a nameserver exists"""
    result = require_success(
        await client.registry_check_nameserver(request.nameserver, request.tld),
        "Failed to check nameserver",
    )
    return envelope(result, nameserver=request.nameserver)


@router.get("/{nameserver}")
async def get_nameserver(
    nameserver: str,
    domain: Optional[str] = None,
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """Get a host object"""
    result = require_success(await client.get_nameserver(nameserver, domain), "Failed to get nameserver")
    return envelope(result, nameserver=nameserver)


@router.put("/{nameserver}")
async def modify_nameserver(
    nameserver: str,
    request: NameserverModifyRequest,
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """Change the addresses or name of a host object"""
    result = require_success(
        await client.modify_nameserver(nameserver, request.ip_addresses, request.new_name),
        "Failed to modify nameserver",
    )
    return envelope(result, nameserver=request.new_name or nameserver)


@router.delete("/{nameserver}")
async def delete_nameserver(
    nameserver: str,
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """Delete a host object"""
    result = require_success(await client.delete_nameserver(nameserver), "Failed to delete nameserver")
    return envelope(result, nameserver=nameserver)
