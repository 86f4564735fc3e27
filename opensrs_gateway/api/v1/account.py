"""Reseller account endpoints"""
from fastapi import APIRouter, Depends

from opensrs_gateway.api.deps import get_opensrs_client
from opensrs_gateway.api.responses import envelope, require_success
from opensrs_gateway.opensrs.client import OpenSRSClient

router = APIRouter()


@router.get("/balance")
async def get_balance(
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """Get the reseller account balance"""
    result = require_success(await client.get_balance(), "Failed to get account balance")
    data = {
        "balance": result.data.get("balance"),
        "hold_balance": result.data.get("hold_balance"),
    }
    return envelope(result, data=data)
