"""Dataset API: metadata, shape, type and values."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from hsds_client.core.domain.models import (
    DataType,
    Dataset,
    DatasetCreateRequest,
    Datasets,
    DatasetValueRequest,
    DatasetValues,
    Shape,
    ShapeResponse,
    ShapeUpdateRequest,
    TypeResponse,
)

if TYPE_CHECKING:
    from hsds_client.client import HsdsClient

log = logging.getLogger(__name__)

OCTET_STREAM = "application/octet-stream"


class DatasetApi:
    def __init__(self, client: HsdsClient) -> None:
        self._client = client

    async def create_dataset(self, domain: str, request: DatasetCreateRequest) -> Dataset:
        log.debug("Creating dataset in domain: %s", domain)
        body = request.to_wire()
        log.debug("DatasetCreateRequest: %s", body)
        return await self._client.request_model(Dataset, "POST", "/datasets", domain=domain, body=body)

    async def list_datasets(self, domain: str) -> Datasets:
        return await self._client.request_model(Datasets, "GET", "/datasets", domain=domain)

    async def get_dataset(self, domain: str, dataset_id: str) -> Dataset:
        return await self._client.request_model(Dataset, "GET", f"/datasets/{dataset_id}", domain=domain)

    async def delete_dataset(self, domain: str, dataset_id: str) -> dict[str, Any]:
        return await self._client.request("DELETE", f"/datasets/{dataset_id}", domain=domain)

    async def get_shape(self, domain: str, dataset_id: str) -> Shape:
        response = await self._client.request_model(
            ShapeResponse,
            "GET",
            f"/datasets/{dataset_id}/shape",
            domain=domain,
        )
        return response.shape

    async def update_shape(
        self,
        domain: str,
        dataset_id: str,
        request: ShapeUpdateRequest,
    ) -> dict[str, Any]:
        """Resize an extensible dataset (within its maxdims)."""

        return await self._client.request(
            "PUT",
            f"/datasets/{dataset_id}/shape",
            domain=domain,
            body=request.to_wire(),
        )

    async def get_type(self, domain: str, dataset_id: str) -> DataType:
        response = await self._client.request_model(
            TypeResponse,
            "GET",
            f"/datasets/{dataset_id}/type",
            domain=domain,
        )
        return response.type

    async def write_values(
        self,
        domain: str,
        dataset_id: str,
        request: DatasetValueRequest,
    ) -> dict[str, Any]:
        """Write `request.value` (or `value_base64`) into the selection.

        `start`/`stop`/`step` select a hyperslab, `points` a list of
        coordinates; no selection writes the whole dataset.
        """

        return await self._client.request(
            "PUT",
            f"/datasets/{dataset_id}/value",
            domain=domain,
            body=request.to_wire(),
        )

    def _read_params(self, select: str | None, query: str | None, limit: int | None) -> dict[str, Any]:
        params = self._client.selection_params(select)
        params.update(self._client.query_params(query, limit))
        return params

    async def read_values(
        self,
        domain: str,
        dataset_id: str,
        select: str | None = None,
        query: str | None = None,
        limit: int | None = None,
        *,
        binary: bool = False,
    ) -> bytes:
        """Read values and return the raw response body.

        `select` is a hyperslab string such as `"[3:9,0:5:2]"`; `query` a
        condition on a compound field (with `limit` capping matches). With
        `binary=True` the server is asked for packed little-endian bytes.
        """

        headers = {"Accept": OCTET_STREAM} if binary else None
        return await self._client.request_bytes(
            "GET",
            f"/datasets/{dataset_id}/value",
            domain=domain,
            params=self._read_params(select, query, limit),
            headers=headers,
        )

    async def read_values_json(
        self,
        domain: str,
        dataset_id: str,
        select: str | None = None,
        query: str | None = None,
        limit: int | None = None,
    ) -> DatasetValues:
        return await self._client.request_model(
            DatasetValues,
            "GET",
            f"/datasets/{dataset_id}/value",
            domain=domain,
            params=self._read_params(select, query, limit),
            headers={"Accept": "application/json"},
        )

    async def read_points(
        self,
        domain: str,
        dataset_id: str,
        points: list[list[int]] | list[int],
    ) -> DatasetValues:
        """Read the elements at `points` (coordinates; plain ints for 1-D)."""

        return await self._client.request_model(
            DatasetValues,
            "POST",
            f"/datasets/{dataset_id}/value",
            domain=domain,
            body={"points": points},
        )
