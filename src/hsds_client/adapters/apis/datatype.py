"""Committed datatype API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from hsds_client.core.domain.models import Datatype, DatatypeCreateRequest

if TYPE_CHECKING:
    from hsds_client.client import HsdsClient


class DatatypeApi:
    def __init__(self, client: HsdsClient) -> None:
        self._client = client

    async def commit_datatype(self, domain: str, request: DatatypeCreateRequest) -> Datatype:
        """Store a named type definition in the domain."""

        return await self._client.request_model(
            Datatype,
            "POST",
            "/datatypes",
            domain=domain,
            body=request.to_wire(),
        )

    async def get_datatype(self, domain: str, datatype_id: str) -> Datatype:
        return await self._client.request_model(Datatype, "GET", f"/datatypes/{datatype_id}", domain=domain)

    async def delete_datatype(self, domain: str, datatype_id: str) -> dict[str, Any]:
        return await self._client.request("DELETE", f"/datatypes/{datatype_id}", domain=domain)
