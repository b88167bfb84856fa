from __future__ import annotations

import json

import numpy as np
import pytest

from fake_hsds import DOMAIN
from hsds_client import ApiError, InvalidParameterError, ObjectNotFoundError
from hsds_client.core.domain.models import AttributeCreateRequest, DatasetCreateRequest, DatatypeCreateRequest


@pytest.mark.asyncio
async def test_explicit_put_and_get(client):
    domain = await client.domains.create_domain(DOMAIN)

    await client.attributes.put_group_attribute(
        DOMAIN,
        domain.root,
        "units",
        AttributeCreateRequest(type="H5T_STD_I32LE", shape=[2], value=[1, 2]),
    )
    attribute = await client.attributes.get_attribute(DOMAIN, "groups", domain.root, "units")

    assert attribute.name == "units"
    assert attribute.value == [1, 2]
    assert attribute.shape.dims == [2]

    listing = await client.attributes.list_group_attributes(DOMAIN, domain.root)
    assert [attr.name for attr in listing.attributes] == ["units"]


@pytest.mark.asyncio
async def test_set_attribute_routes_by_prefix_and_infers_type(client, fake_hsds):
    domain = await client.domains.create_domain(DOMAIN)

    await client.attributes.set_attribute(DOMAIN, domain.root, "title", "Test Group")

    request = fake_hsds.requests[-1]
    assert request.method == "PUT"
    assert request.url.path == f"/groups/{domain.root}/attributes/title"
    body = json.loads(request.content)
    assert body["type"]["class"] == "H5T_STRING"
    assert body["type"]["charSet"] == "H5T_CSET_UTF8"
    assert "shape" not in body
    assert body["value"] == "Test Group"

    assert await client.attributes.get_attribute_value(DOMAIN, domain.root, "title") == "Test Group"


@pytest.mark.asyncio
async def test_set_attribute_on_dataset_with_array(client, fake_hsds):
    await client.domains.create_domain(DOMAIN)
    dataset = await client.datasets.create_dataset(
        DOMAIN,
        DatasetCreateRequest(type="H5T_STD_I32LE", shape=[3]),
    )

    await client.attributes.set_attribute(DOMAIN, dataset.id, "scale", [[1.5, 2.0], [3.0, 4.0]])
    await client.attributes.set_attribute(DOMAIN, dataset.id, "valid", True)
    await client.attributes.set_attribute(DOMAIN, dataset.id, "offsets", np.array([1, 2, 3], dtype=np.int16))

    scale = await client.attributes.get_attribute(DOMAIN, "datasets", dataset.id, "scale")
    assert scale.shape.dims == [2, 2]
    assert scale.type.base == "H5T_IEEE_F64LE"

    valid = await client.attributes.get_attribute(DOMAIN, "datasets", dataset.id, "valid")
    assert valid.type.class_ == "H5T_ENUM"
    assert valid.value == 1

    offsets = await client.attributes.get_attribute(DOMAIN, "datasets", dataset.id, "offsets")
    assert offsets.type.base == "H5T_STD_I16LE"
    assert offsets.value == [1, 2, 3]

    listing = await client.attributes.list_dataset_attributes(DOMAIN, dataset.id)
    assert {attr.name for attr in listing.attributes} == {"scale", "valid", "offsets"}


@pytest.mark.asyncio
async def test_set_attribute_on_datatype(client, fake_hsds):
    await client.domains.create_domain(DOMAIN)
    datatype = await client.datatypes.commit_datatype(DOMAIN, DatatypeCreateRequest(type="H5T_STD_U8LE"))

    await client.attributes.set_attribute(DOMAIN, datatype.id, "note", 7)
    assert fake_hsds.requests[-1].url.path == f"/datatypes/{datatype.id}/attributes/note"

    listing = await client.attributes.list_datatype_attributes(DOMAIN, datatype.id)
    assert listing.attributes[0].value == 7


@pytest.mark.asyncio
async def test_invalid_id_fails_before_any_request(client, fake_hsds):
    with pytest.raises(InvalidParameterError):
        await client.attributes.set_attribute(DOMAIN, "invalid-id-format", "x", "value")
    assert fake_hsds.requests == []


@pytest.mark.asyncio
async def test_uninferable_value_fails_before_any_request(client, fake_hsds):
    with pytest.raises(InvalidParameterError):
        await client.attributes.set_attribute(DOMAIN, "g-123", "x", [[1, 2], [3]])
    assert fake_hsds.requests == []


@pytest.mark.asyncio
async def test_removed_attribute_is_not_found(client):
    domain = await client.domains.create_domain(DOMAIN)
    await client.attributes.set_attribute(DOMAIN, domain.root, "tmp", 1)

    await client.attributes.remove_attribute(DOMAIN, domain.root, "tmp")

    with pytest.raises(ObjectNotFoundError):
        await client.attributes.get_attribute_value(DOMAIN, domain.root, "tmp")


@pytest.mark.asyncio
async def test_attribute_names_are_path_escaped(client, fake_hsds):
    domain = await client.domains.create_domain(DOMAIN)

    await client.attributes.set_attribute(DOMAIN, domain.root, "a b/c", 1)

    assert "/attributes/a%20b%2Fc" in fake_hsds.requests[-1].url.raw_path.decode()
    assert await client.attributes.get_attribute_value(DOMAIN, domain.root, "a b/c") == 1


@pytest.mark.asyncio
async def test_existing_attribute_needs_replace(client, fake_hsds):
    domain = await client.domains.create_domain(DOMAIN)
    await client.attributes.set_attribute(DOMAIN, domain.root, "version", 1)

    with pytest.raises(ApiError) as excinfo:
        await client.attributes.set_attribute(DOMAIN, domain.root, "version", 2)
    assert excinfo.value.status == 409
    assert "replace" not in fake_hsds.requests[-1].url.params

    await client.attributes.set_attribute(DOMAIN, domain.root, "version", 2, replace=True)

    assert fake_hsds.requests[-1].url.params["replace"] == "1"
    assert await client.attributes.get_attribute_value(DOMAIN, domain.root, "version") == 2
