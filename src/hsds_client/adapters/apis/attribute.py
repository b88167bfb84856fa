"""Attribute API.

Two layers:
- Explicit: (collection, object id, name) plus an `AttributeCreateRequest`.
- Convenience: `set_attribute` & co. route by object-id prefix and infer the
  HSDS type and shape from a native Python/numpy value.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from hsds_client.core.domain.models import Attribute, AttributeCreateRequest, Attributes
from hsds_client.core.domain.types import collection_for_id, infer_value

if TYPE_CHECKING:
    from hsds_client.client import HsdsClient

log = logging.getLogger(__name__)


def _attributes_path(collection: str, obj_id: str, name: str | None = None) -> str:
    path = f"/{collection}/{obj_id}/attributes"
    if name is not None:
        path += "/" + quote(name, safe="")
    return path


class AttributeApi:
    def __init__(self, client: HsdsClient) -> None:
        self._client = client

    async def list_attributes(self, domain: str, collection: str, obj_id: str) -> Attributes:
        """List attributes of an object.

        `collection` is `groups`, `datasets` or `datatypes`.
        """

        return await self._client.request_model(
            Attributes,
            "GET",
            _attributes_path(collection, obj_id),
            domain=domain,
        )

    async def put_attribute(
        self,
        domain: str,
        collection: str,
        obj_id: str,
        name: str,
        request: AttributeCreateRequest,
        *,
        replace: bool = False,
    ) -> dict[str, Any]:
        """Create an attribute; with `replace=True` an existing one is overwritten.

        Without `replace` the server answers 409 for an existing name.
        """

        log.debug("PUT attribute %s on %s/%s", name, collection, obj_id)
        return await self._client.request(
            "PUT",
            _attributes_path(collection, obj_id, name),
            domain=domain,
            params={"replace": 1} if replace else None,
            body=request.to_wire(),
        )

    async def get_attribute(self, domain: str, collection: str, obj_id: str, name: str) -> Attribute:
        return await self._client.request_model(
            Attribute,
            "GET",
            _attributes_path(collection, obj_id, name),
            domain=domain,
        )

    async def delete_attribute(self, domain: str, collection: str, obj_id: str, name: str) -> dict[str, Any]:
        return await self._client.request(
            "DELETE",
            _attributes_path(collection, obj_id, name),
            domain=domain,
        )

    # Per-collection shortcuts

    async def list_group_attributes(self, domain: str, group_id: str) -> Attributes:
        return await self.list_attributes(domain, "groups", group_id)

    async def list_dataset_attributes(self, domain: str, dataset_id: str) -> Attributes:
        return await self.list_attributes(domain, "datasets", dataset_id)

    async def list_datatype_attributes(self, domain: str, datatype_id: str) -> Attributes:
        return await self.list_attributes(domain, "datatypes", datatype_id)

    async def put_group_attribute(
        self, domain: str, group_id: str, name: str, request: AttributeCreateRequest
    ) -> dict[str, Any]:
        return await self.put_attribute(domain, "groups", group_id, name, request)

    async def put_dataset_attribute(
        self, domain: str, dataset_id: str, name: str, request: AttributeCreateRequest
    ) -> dict[str, Any]:
        return await self.put_attribute(domain, "datasets", dataset_id, name, request)

    async def put_datatype_attribute(
        self, domain: str, datatype_id: str, name: str, request: AttributeCreateRequest
    ) -> dict[str, Any]:
        return await self.put_attribute(domain, "datatypes", datatype_id, name, request)

    # Prefix-routed convenience layer

    async def set_attribute(
        self, domain: str, obj_id: str, name: str, value: Any, *, replace: bool = False
    ) -> dict[str, Any]:
        """Attach `value` to the object `obj_id` under `name`.

        The collection comes from the id prefix (`g-`, `d-`, `t-`), the HSDS
        type and shape from the value. Raises `InvalidParameterError` for an
        unknown prefix or a value whose type cannot be inferred, before any
        request is sent.
        """

        collection = collection_for_id(obj_id)
        inferred = infer_value(value)
        request = AttributeCreateRequest(type=inferred.type, shape=inferred.shape, value=inferred.value)
        log.debug("Inferred attribute %s: type=%s shape=%s", name, inferred.type, inferred.shape)
        return await self.put_attribute(domain, collection, obj_id, name, request, replace=replace)

    async def get_attribute_value(self, domain: str, obj_id: str, name: str) -> Any:
        attribute = await self.get_attribute(domain, collection_for_id(obj_id), obj_id, name)
        return attribute.value

    async def remove_attribute(self, domain: str, obj_id: str, name: str) -> dict[str, Any]:
        return await self.delete_attribute(domain, collection_for_id(obj_id), obj_id, name)
