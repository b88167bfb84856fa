"""Group API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from hsds_client.core.domain.models import Group, GroupCreateRequest, Groups

if TYPE_CHECKING:
    from hsds_client.client import HsdsClient

log = logging.getLogger(__name__)


class GroupApi:
    def __init__(self, client: HsdsClient) -> None:
        self._client = client

    async def create_group(
        self,
        domain: str,
        request: GroupCreateRequest | None = None,
    ) -> Group:
        """Create a group, optionally linked into a parent via `request.link`."""

        log.info("Creating group in domain: %s", domain)
        body = request.to_wire() if request is not None else None
        log.debug("HTTP POST /groups with domain=%s body=%s", domain, body)
        return await self._client.request_model(Group, "POST", "/groups", domain=domain, body=body)

    async def list_groups(self, domain: str) -> Groups:
        log.info("Listing groups in domain: %s", domain)
        return await self._client.request_model(Groups, "GET", "/groups", domain=domain)

    async def get_group(self, domain: str, group_id: str, get_alias: bool = False) -> Group:
        """Get a group; `get_alias` asks the server for the group's paths."""

        log.info("Getting group %s in domain: %s", group_id, domain)
        params = {"getalias": 1} if get_alias else None
        return await self._client.request_model(
            Group,
            "GET",
            f"/groups/{group_id}",
            domain=domain,
            params=params,
        )

    async def delete_group(self, domain: str, group_id: str) -> dict[str, Any]:
        log.info("Deleting group %s in domain: %s", group_id, domain)
        return await self._client.request("DELETE", f"/groups/{group_id}", domain=domain)
