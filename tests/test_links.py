from __future__ import annotations

import pytest

from fake_hsds import DOMAIN
from hsds_client import ObjectNotFoundError
from hsds_client.core.domain.models import LinkClass


async def _root_with_children(client, count: int) -> str:
    domain = await client.domains.create_domain(DOMAIN)
    for index in range(count):
        group = await client.groups.create_group(DOMAIN)
        await client.links.create_hard_link(DOMAIN, domain.root, f"child{index}", group.id)
    return domain.root


@pytest.mark.asyncio
async def test_hard_link_round_trip(client):
    domain = await client.domains.create_domain(DOMAIN)
    group = await client.groups.create_group(DOMAIN)

    await client.links.create_hard_link(DOMAIN, domain.root, "g1", group.id)
    link = await client.links.get_link(DOMAIN, domain.root, "g1")

    assert link.title == "g1"
    assert link.class_ is LinkClass.HARD
    assert link.id == group.id
    assert link.collection == "groups"


@pytest.mark.asyncio
async def test_soft_and_external_links(client):
    domain = await client.domains.create_domain(DOMAIN)

    await client.links.create_soft_link(DOMAIN, domain.root, "soft", "/g1/data")
    await client.links.create_external_link(DOMAIN, domain.root, "ext", "/data", "/home/other.h5")

    soft = await client.links.get_link(DOMAIN, domain.root, "soft")
    ext = await client.links.get_link(DOMAIN, domain.root, "ext")
    assert soft.class_ is LinkClass.SOFT
    assert soft.h5path == "/g1/data"
    assert ext.class_ is LinkClass.EXTERNAL
    assert ext.h5domain == "/home/other.h5"


@pytest.mark.asyncio
async def test_list_links_respects_limit_and_marker(client, fake_hsds):
    root = await _root_with_children(client, 5)

    everything = await client.links.list_links(DOMAIN, root)
    limited = await client.links.list_links(DOMAIN, root, limit=2)
    after = await client.links.list_links(DOMAIN, root, limit=2, marker="child1")

    assert len(everything.links) == 5
    assert len(limited.links) <= 2
    assert fake_hsds.requests[-1].url.params["Limit"] == "2"
    assert [link.title for link in after.links] == ["child2", "child3"]


@pytest.mark.asyncio
async def test_link_names_are_path_escaped(client, fake_hsds):
    domain = await client.domains.create_domain(DOMAIN)

    await client.links.create_soft_link(DOMAIN, domain.root, "a b/c", "/x")

    assert "a%20b%2Fc" in fake_hsds.requests[-1].url.raw_path.decode()
    link = await client.links.get_link(DOMAIN, domain.root, "a b/c")
    assert link.title == "a b/c"


@pytest.mark.asyncio
async def test_deleted_link_is_not_found(client):
    root = await _root_with_children(client, 1)

    await client.links.delete_link(DOMAIN, root, "child0")

    with pytest.raises(ObjectNotFoundError):
        await client.links.get_link(DOMAIN, root, "child0")
