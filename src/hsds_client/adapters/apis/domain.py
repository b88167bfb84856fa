"""Domain API: create, inspect, delete and list HSDS domains and folders."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from hsds_client.core.domain.models import (
    Acl,
    AclResponse,
    AclsResponse,
    AclUpdateRequest,
    Domain,
    DomainCreateRequest,
    DomainList,
)

if TYPE_CHECKING:
    from hsds_client.client import HsdsClient

log = logging.getLogger(__name__)


class DomainApi:
    """Operations on `/` (the domain itself) and `/acls`."""

    def __init__(self, client: HsdsClient) -> None:
        self._client = client

    async def create_domain(
        self,
        domain: str,
        request: DomainCreateRequest | None = None,
    ) -> Domain:
        """Create a domain (or a folder when `request.folder == 1`).

        `domain` is the domain path, e.g. `/home/user/myfile.h5`.
        """

        log.info("Creating domain: %s", domain)
        body = request.to_wire() if request is not None else None
        log.debug("HTTP PUT / with domain=%s body=%s", domain, body)
        return await self._client.request_model(Domain, "PUT", "/", domain=domain, body=body)

    async def create_folder(self, domain: str) -> Domain:
        log.info("Creating folder: %s", domain)
        return await self.create_domain(domain, DomainCreateRequest(folder=1))

    async def get_domain(self, domain: str) -> Domain:
        log.info("Getting domain: %s", domain)
        return await self._client.request_model(Domain, "GET", "/", domain=domain)

    async def delete_domain(self, domain: str) -> dict[str, Any]:
        log.info("Deleting domain: %s", domain)
        return await self._client.request("DELETE", "/", domain=domain)

    async def list_domains(self) -> DomainList:
        """List domains (GET `/` without a domain parameter)."""

        log.info("Listing domains")
        return await self._client.request_model(DomainList, "GET", "/")

    async def get_acls(self, domain: str) -> AclsResponse:
        return await self._client.request_model(AclsResponse, "GET", "/acls", domain=domain)

    async def get_acl(self, domain: str, user: str) -> Acl:
        path = f"/acls/{quote(user, safe='')}"
        response = await self._client.request_model(AclResponse, "GET", path, domain=domain)
        return response.acl

    async def put_acl(self, domain: str, user: str, acl: AclUpdateRequest) -> dict[str, Any]:
        log.info("Updating ACL of %s on domain: %s", user, domain)
        path = f"/acls/{quote(user, safe='')}"
        return await self._client.request("PUT", path, domain=domain, body=acl.to_wire())
