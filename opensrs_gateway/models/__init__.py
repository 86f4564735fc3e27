from opensrs_gateway.models.user import User, UserRole
from opensrs_gateway.models.domain import Domain, DomainStatus, DNSZoneStatus

__all__ = ["User", "UserRole", "Domain", "DomainStatus", "DNSZoneStatus"]
