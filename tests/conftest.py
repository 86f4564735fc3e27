"""Shared fixtures: a fake OpenSRS endpoint, a fake clock and an in-memory database."""
import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("OPENSRS_RESELLER_USERNAME", "reseller")
os.environ.setdefault("OPENSRS_API_KEY", "secret-key")
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret")
os.environ.setdefault("CACHE_BACKEND", "memory")

import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from opensrs_gateway.core.database import Base, get_db
from opensrs_gateway.opensrs.client import OpenSRSClient
from opensrs_gateway.opensrs.envelope import DOCTYPE, XML_DECLARATION, encode_value
from opensrs_gateway.opensrs.parser import decode_document
from opensrs_gateway.opensrs.transport import OpenSRSTransport
from opensrs_gateway.services.cache_service import DomainCache

OPENSRS_HOST = "https://opensrs.test:55443"


def opensrs_reply(
    attributes: Optional[Dict[str, Any]] = None,
    response_code: str = "200",
    response_text: str = "Command completed successfully",
    is_success: bool = True,
    object_type: str = "DOMAIN",
) -> str:
    """Build an OPS_envelope reply the way OpenSRS sends it"""
    root = ET.Element("OPS_envelope")
    version = ET.SubElement(ET.SubElement(root, "header"), "version")
    version.text = "0.9"
    data_block = ET.SubElement(ET.SubElement(root, "body"), "data_block")
    encode_value(data_block, {
        "protocol": "XCP",
        "action": "REPLY",
        "object": object_type,
        "is_success": is_success,
        "response_code": response_code,
        "response_text": response_text,
        "attributes": attributes or {},
    })
    return f"{XML_DECLARATION}\n{DOCTYPE}\n{ET.tostring(root, encoding='unicode')}"


def zone_reply(records: Dict[str, List[Dict[str, Any]]]) -> str:
    return opensrs_reply({"records": records})


class FakeOpenSRS:
    """Stands in for the OpenSRS endpoint behind an ``httpx.MockTransport``.

    Replies are registered per action; a list is consumed one item per
    call. An item may be reply XML, an ``httpx.Response`` or an exception
    to raise.
    """

    def __init__(self):
        self.replies: Dict[str, Any] = {}
        self.requests: List[Dict[str, Any]] = []

    def reply(self, action: str, *replies):
        self.replies[action] = list(replies) if len(replies) > 1 else replies[0]

    def calls(self, action: str) -> List[Dict[str, Any]]:
        return [request for request in self.requests if request["action"] == action]

    def handler(self, request: httpx.Request) -> httpx.Response:
        xml = request.content.decode("utf-8")
        block = decode_document(xml)
        self.requests.append({
            "action": block["action"],
            "object": block["object"],
            "attributes": block.get("attributes") or {},
            "domain": block.get("domain"),
            "headers": dict(request.headers),
            "xml": xml,
        })

        reply = self.replies.get(block["action"])
        if isinstance(reply, list):
            reply = reply.pop(0)
        if reply is None:
            return httpx.Response(200, text=opensrs_reply(
                response_code="400", response_text="No reply registered", is_success=False
            ))
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, httpx.Response):
            return reply
        return httpx.Response(200, text=reply)


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def fake_opensrs() -> FakeOpenSRS:
    return FakeOpenSRS()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def domain_cache(clock) -> DomainCache:
    return DomainCache(ttl_seconds=300, clock=clock)


@pytest_asyncio.fixture
async def opensrs_client(fake_opensrs, domain_cache):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake_opensrs.handler))
    transport = OpenSRSTransport(
        username="reseller",
        api_key="secret-key",
        host=OPENSRS_HOST,
        timeout=5.0,
        http_client=http_client,
    )
    client = OpenSRSClient(
        transport,
        cache=domain_cache,
        reg_username="reguser",
        reg_password="regpass",
        batch_delay=0,
    )
    yield client
    await http_client.aclose()


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def app(session_factory, opensrs_client, domain_cache):
    from opensrs_gateway.main import app as fastapi_app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    fastapi_app.state.opensrs_client = opensrs_client
    fastapi_app.state.opensrs_error = None
    fastapi_app.state.domain_cache = domain_cache
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def http_client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def contact() -> Dict[str, Any]:
    return {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "org_name": "Analytical Engines",
        "address1": "12 St James's Square",
        "city": "London",
        "state": "ldn",
        "country": "gb",
        "postal_code": "SW1Y 4JH",
        "phone": "+1 (416) 555-0123",
        "email": "ada@analytical-engines.co.uk",
    }
