"""OpenSRS client facade, one coroutine per command"""
import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx

from opensrs_gateway.core.config import settings
from opensrs_gateway.opensrs import templates
from opensrs_gateway.opensrs.result import OpenSRSResult
from opensrs_gateway.opensrs.transport import OpenSRSTransport

logger = logging.getLogger(__name__)


class OpenSRSClient:
    """Async client for the OpenSRS reseller API.

    Vendor, network and parse failures come back as unsuccessful
    ``OpenSRSResult`` objects. Only LOOKUP and GET_PRICE consult the
    cache, and only successful results are stored in it.
    """

    def __init__(
        self,
        transport: OpenSRSTransport,
        cache=None,
        reg_username: str = "",
        reg_password: str = "",
        register_timeout: float = 30.0,
        batch_size: int = 5,
        batch_delay: float = 0.1,
    ):
        self.transport = transport
        self.cache = cache
        self.reg_username = reg_username
        self.reg_password = reg_password
        self.register_timeout = register_timeout
        self.batch_size = max(1, batch_size)
        self.batch_delay = batch_delay

    @classmethod
    def from_settings(cls, cache=None, http_client: Optional[httpx.AsyncClient] = None) -> "OpenSRSClient":
        """Build a client from application settings.

        Raises OpenSRSConfigError when the reseller credentials are missing.
        """
        host = settings.OPENSRS_TEST_HOST if settings.OPENSRS_TEST_MODE else settings.OPENSRS_LIVE_HOST
        transport = OpenSRSTransport(
            username=settings.OPENSRS_RESELLER_USERNAME,
            api_key=settings.OPENSRS_API_KEY,
            host=host,
            timeout=settings.OPENSRS_TIMEOUT,
            http_client=http_client,
        )
        logger.info(
            "OpenSRS client initialized for %s environment",
            "test" if settings.OPENSRS_TEST_MODE else "live",
        )
        return cls(
            transport,
            cache=cache,
            reg_username=settings.OPENSRS_REG_USERNAME,
            reg_password=settings.OPENSRS_REG_PASSWORD,
            register_timeout=settings.OPENSRS_REGISTER_TIMEOUT,
            batch_size=settings.BULK_BATCH_SIZE,
            batch_delay=settings.BULK_BATCH_DELAY_SECONDS,
        )

    @property
    def username(self) -> str:
        return self.transport.username

    @property
    def host(self) -> str:
        return self.transport.host

    async def _send(self, label: str, xml: str, timeout: Optional[float] = None) -> OpenSRSResult:
        return await self.transport.send(xml, label=label, timeout=timeout)

    async def aclose(self):
        await self.transport.aclose()

    # Lookup and pricing

    async def lookup_domain(self, domain: str, use_cache: bool = True) -> OpenSRSResult:
        if use_cache and self.cache is not None:
            cached = await self.cache.get_lookup(domain)
            if cached is not None:
                return OpenSRSResult.model_validate(cached)

        result = await self._send("LOOKUP DOMAIN", templates.lookup_domain(domain))
        if result.success and self.cache is not None:
            await self.cache.set_lookup(domain, result.model_dump(mode="json"))
        return result

    async def get_price(self, domain: str, period: Optional[int] = None, use_cache: bool = True) -> OpenSRSResult:
        # Cache entries are per domain, so a custom period bypasses them
        cacheable = use_cache and self.cache is not None and not period
        if cacheable:
            cached = await self.cache.get_price(domain)
            if cached is not None:
                return OpenSRSResult.model_validate(cached)

        result = await self._send("GET_PRICE DOMAIN", templates.get_price(domain, period))
        if result.success and cacheable:
            await self.cache.set_price(domain, result.model_dump(mode="json"))
        return result

    async def _in_batches(self, domains: Sequence[str], call) -> List[Tuple[str, OpenSRSResult]]:
        results: List[Tuple[str, OpenSRSResult]] = []
        for start in range(0, len(domains), self.batch_size):
            if start and self.batch_delay:
                await asyncio.sleep(self.batch_delay)
            batch = domains[start:start + self.batch_size]
            batch_results = await asyncio.gather(*(call(domain) for domain in batch))
            results.extend(zip(batch, batch_results))
        return results

    async def bulk_lookup(self, domains: Sequence[str]) -> List[Tuple[str, OpenSRSResult]]:
        """LOOKUP several domains, a batch at a time, keeping input order"""
        return await self._in_batches(list(domains), self.lookup_domain)

    async def bulk_price(self, domains: Sequence[str]) -> List[Tuple[str, OpenSRSResult]]:
        """GET_PRICE several domains, a batch at a time, keeping input order"""
        return await self._in_batches(list(domains), self.get_price)

    async def name_suggest(self, search_string: str, **options) -> OpenSRSResult:
        return await self._send("NAME_SUGGEST DOMAIN", templates.name_suggest(search_string, **options))

    # Domain lifecycle

    async def register_domain(
        self,
        domain: str,
        contacts: Dict[str, Any],
        period: int = 1,
        nameservers: Optional[Sequence[str]] = None,
        auto_renew: bool = False,
        whois_privacy: bool = False,
        reg_username: Optional[str] = None,
        reg_password: Optional[str] = None,
        **extra,
    ) -> OpenSRSResult:
        xml = templates.register_domain(
            domain,
            contacts,
            reg_username=reg_username or self.reg_username,
            reg_password=reg_password or self.reg_password,
            period=period,
            nameservers=nameservers,
            auto_renew=auto_renew,
            whois_privacy=whois_privacy,
            **extra,
        )
        return await self._send("SW_REGISTER DOMAIN", xml, timeout=self.register_timeout)

    async def renew_domain(self, domain: str, period: int = 1, **options) -> OpenSRSResult:
        return await self._send("RENEW DOMAIN", templates.renew_domain(domain, period, **options))

    async def get_domain(self, domain: str, info_type: str = "all_info") -> OpenSRSResult:
        return await self._send("GET DOMAIN", templates.get_domain(domain, info_type))

    async def modify_domain(self, domain: str, modification_type: str, **attributes) -> OpenSRSResult:
        xml = templates.modify_domain(domain, modification_type, **attributes)
        return await self._send(f"MODIFY DOMAIN ({modification_type})", xml)

    async def update_contacts(self, domain: str, contacts: Dict[str, Any]) -> OpenSRSResult:
        return await self._send("UPDATE_CONTACTS DOMAIN", templates.update_contacts(domain, contacts))

    # DNS zones

    async def get_dns_zone(self, domain: str) -> OpenSRSResult:
        return await self._send("GET_DNS_ZONE DOMAIN", templates.get_dns_zone(domain))

    async def set_dns_zone(self, domain: str, records: List[Dict[str, Any]]) -> OpenSRSResult:
        return await self._send("SET_DNS_ZONE DOMAIN", templates.set_dns_zone(domain, records))

    async def create_dns_zone(
        self, domain: str, records: Optional[List[Dict[str, Any]]] = None, dns_template: Optional[str] = None
    ) -> OpenSRSResult:
        return await self._send("CREATE_DNS_ZONE DOMAIN", templates.create_dns_zone(domain, records, dns_template))

    async def delete_dns_zone(self, domain: str) -> OpenSRSResult:
        return await self._send("DELETE_DNS_ZONE DOMAIN", templates.delete_dns_zone(domain))

    async def reset_dns_zone(self, domain: str, dns_template: Optional[str] = None) -> OpenSRSResult:
        return await self._send("RESET_DNS_ZONE DOMAIN", templates.reset_dns_zone(domain, dns_template))

    # Nameservers

    async def advanced_update_nameservers(
        self, domain: str, nameservers: Sequence[str], op_type: str = "assign"
    ) -> OpenSRSResult:
        xml = templates.advanced_update_nameservers(domain, nameservers, op_type)
        return await self._send("ADVANCED_UPDATE_NAMESERVERS DOMAIN", xml)

    async def create_nameserver(self, name: str, ip_address: str, domain: Optional[str] = None) -> OpenSRSResult:
        return await self._send("CREATE NAMESERVER", templates.create_nameserver(name, ip_address, domain))

    async def get_nameserver(self, name: str, domain: Optional[str] = None) -> OpenSRSResult:
        return await self._send("GET NAMESERVER", templates.get_nameserver(name, domain))

    async def modify_nameserver(
        self, name: str, ip_addresses: Sequence[str], new_name: Optional[str] = None
    ) -> OpenSRSResult:
        return await self._send("MODIFY NAMESERVER", templates.modify_nameserver(name, ip_addresses, new_name))

    async def delete_nameserver(self, name: str) -> OpenSRSResult:
        return await self._send("DELETE NAMESERVER", templates.delete_nameserver(name))

    async def registry_check_nameserver(self, name: str, tld: Optional[str] = None) -> OpenSRSResult:
        return await self._send("REGISTRY_CHECK_NAMESERVER NAMESERVER", templates.registry_check_nameserver(name, tld))

    # Transfers

    async def check_transfer(self, domain: str, auth_info: Optional[str] = None) -> OpenSRSResult:
        return await self._send("CHECK_TRANSFER DOMAIN", templates.check_transfer(domain, auth_info))

    async def process_transfer(
        self,
        domain: str,
        auth_info: str,
        contacts: Dict[str, Any],
        nameservers: Optional[Sequence[str]] = None,
    ) -> OpenSRSResult:
        xml = templates.process_transfer(
            domain,
            auth_info,
            contacts,
            reg_username=self.reg_username,
            reg_password=self.reg_password,
            nameservers=nameservers,
        )
        return await self._send("SW_REGISTER DOMAIN (transfer)", xml, timeout=self.register_timeout)

    async def cancel_transfer(self, domain: str) -> OpenSRSResult:
        return await self._send("CANCEL_TRANSFER TRANSFER", templates.cancel_transfer(domain, self.username))

    async def get_transfers_in(self, status: Optional[str] = None) -> OpenSRSResult:
        return await self._send("GET_TRANSFERS_IN DOMAIN", templates.get_transfers_in(status))

    async def get_transfers_away(self, status: Optional[str] = None) -> OpenSRSResult:
        return await self._send("GET_TRANSFERS_AWAY DOMAIN", templates.get_transfers_away(status))

    # Account and reporting

    async def get_balance(self) -> OpenSRSResult:
        return await self._send("GET_BALANCE BALANCE", templates.get_balance())

    async def get_domains_by_expiredate(
        self, exp_from: str, exp_to: str, limit: int = 100, page: int = 1
    ) -> OpenSRSResult:
        xml = templates.get_domains_by_expiredate(exp_from, exp_to, limit, page)
        return await self._send("GET_DOMAINS_BY_EXPIREDATE DOMAIN", xml)

    async def get_orders_by_domain(self, domain: str) -> OpenSRSResult:
        return await self._send("GET_ORDERS_BY_DOMAIN DOMAIN", templates.get_orders_by_domain(domain))

    async def get_deleted_domains(
        self, del_from: Optional[str] = None, del_to: Optional[str] = None, limit: int = 100
    ) -> OpenSRSResult:
        return await self._send("GET_DELETED_DOMAINS DOMAIN", templates.get_deleted_domains(del_from, del_to, limit))
