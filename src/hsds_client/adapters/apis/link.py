"""Link API.

Links are named edges inside a group:
- hard: points to an object id
- soft: points to a path in the same domain
- external: points to a path in another domain
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from hsds_client.core.domain.models import Link, LinkCreateRequest, Links, parse_model

if TYPE_CHECKING:
    from hsds_client.client import HsdsClient

log = logging.getLogger(__name__)


def _link_path(group_id: str, link_name: str) -> str:
    return f"/groups/{group_id}/links/{quote(link_name, safe='')}"


class LinkApi:
    def __init__(self, client: HsdsClient) -> None:
        self._client = client

    async def list_links(
        self,
        domain: str,
        group_id: str,
        limit: int | None = None,
        marker: str | None = None,
    ) -> Links:
        """List links in a group.

        `limit` caps the number of links returned; `marker` is the link name
        after which listing resumes.
        """

        params = self._client.pagination_params(limit, marker)
        return await self._client.request_model(
            Links,
            "GET",
            f"/groups/{group_id}/links",
            domain=domain,
            params=params,
        )

    async def create_link(
        self,
        domain: str,
        group_id: str,
        link_name: str,
        request: LinkCreateRequest,
    ) -> dict[str, Any]:
        log.info("Creating link %s in group %s", link_name, group_id)
        return await self._client.request(
            "PUT",
            _link_path(group_id, link_name),
            domain=domain,
            body=request.to_wire(),
        )

    async def get_link(self, domain: str, group_id: str, link_name: str) -> Link:
        payload = await self._client.request("GET", _link_path(group_id, link_name), domain=domain)
        # the server wraps the link: {"link": {...}, "hrefs": [...]}
        if isinstance(payload, dict) and isinstance(payload.get("link"), dict):
            payload = payload["link"]
        return parse_model(Link, payload)

    async def delete_link(self, domain: str, group_id: str, link_name: str) -> dict[str, Any]:
        log.info("Deleting link %s in group %s", link_name, group_id)
        return await self._client.request("DELETE", _link_path(group_id, link_name), domain=domain)

    async def create_hard_link(
        self,
        domain: str,
        group_id: str,
        link_name: str,
        target_id: str,
    ) -> dict[str, Any]:
        return await self.create_link(domain, group_id, link_name, LinkCreateRequest.hard(target_id))

    async def create_soft_link(
        self,
        domain: str,
        group_id: str,
        link_name: str,
        target_path: str,
    ) -> dict[str, Any]:
        return await self.create_link(domain, group_id, link_name, LinkCreateRequest.soft(target_path))

    async def create_external_link(
        self,
        domain: str,
        group_id: str,
        link_name: str,
        target_path: str,
        target_domain: str,
    ) -> dict[str, Any]:
        request = LinkCreateRequest.external(target_path, target_domain)
        return await self.create_link(domain, group_id, link_name, request)
