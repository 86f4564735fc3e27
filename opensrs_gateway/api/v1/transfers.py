"""Domain transfer endpoints"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from opensrs_gateway.api.deps import get_opensrs_client
from opensrs_gateway.api.responses import envelope, require_success
from opensrs_gateway.opensrs.client import OpenSRSClient
from opensrs_gateway.schemas.transfer import TransferCheckRequest, TransferProcessRequest

router = APIRouter()


@router.post("/check")
async def check_transfer(
    request: TransferCheckRequest,
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """Check whether a domain can be transferred in"""
    result = require_success(
        await client.check_transfer(request.domain.lower(), request.auth_info),
        "Failed to check transfer",
    )
    transferrable = str(result.data.get("transferrable", "")) == "1"
    return envelope(
        result,
        domain=request.domain.lower(),
        transferrable=transferrable,
        reason=result.data.get("reason"),
    )


@router.post("/process")
async def process_transfer(
    request: TransferProcessRequest,
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """Start a transfer in"""
    contacts = request.as_contacts()
    if "registrant_contact" not in contacts:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="registrant_contact is required")

    result = require_success(
        await client.process_transfer(
            request.domain.lower(), request.auth_info, contacts, nameservers=request.nameservers
        ),
        "Failed to process transfer",
    )
    return envelope(
        result,
        domain=request.domain.lower(),
        orderId=result.data.get("id") or result.data.get("order_id"),
    )


@router.post("/{domain}/cancel")
async def cancel_transfer(
    domain: str,
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """Cancel a pending transfer in"""
    result = require_success(await client.cancel_transfer(domain.lower()), "Failed to cancel transfer")
    return envelope(result, domain=domain.lower())


@router.get("/in")
async def transfers_in(
    transfer_status: Optional[str] = None,
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """List transfers in"""
    result = require_success(await client.get_transfers_in(transfer_status), "Failed to get transfers in")
    transfers = result.data.get("transfers") or []
    return envelope(result, data=transfers, total=len(transfers))


@router.get("/away")
async def transfers_away(
    transfer_status: Optional[str] = None,
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """List transfers away"""
    result = require_success(await client.get_transfers_away(transfer_status), "Failed to get transfers away")
    transfers = result.data.get("transfers") or []
    return envelope(result, data=transfers, total=len(transfers))
