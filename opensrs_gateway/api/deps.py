"""API dependencies"""
from fastapi import Depends, Request

from opensrs_gateway.opensrs.client import OpenSRSClient
from opensrs_gateway.opensrs.errors import OpenSRSConfigError
from opensrs_gateway.services.dns_service import DNSService


def get_domain_cache(request: Request):
    """Lookup/price cache created at startup"""
    return request.app.state.domain_cache


def get_opensrs_client(request: Request) -> OpenSRSClient:
    """Shared OpenSRS client created at startup"""
    client = getattr(request.app.state, "opensrs_client", None)
    if client is None:
        raise getattr(request.app.state, "opensrs_error", None) or OpenSRSConfigError(
            "OpenSRS client is not configured"
        )
    return client


def get_dns_service(client: OpenSRSClient = Depends(get_opensrs_client)) -> DNSService:
    return DNSService(client)
