from __future__ import annotations

import h5py
import numpy as np
import pytest

from fake_hsds import DOMAIN
from hsds_client import ApiError
from hsds_client.core.services.h5_loader import (
    LoaderHooks,
    LoadRequest,
    load_file,
    plan_chunks,
    verify_upload,
)


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / "sample.h5"
    with h5py.File(path, "w") as f:
        f.attrs["title"] = "Test File"

        g1 = f.create_group("g1")
        g1.attrs["count"] = 3
        g1.attrs["empty"] = h5py.Empty("f")
        ints = g1.create_dataset("ints", data=np.arange(10, dtype=np.int32))
        ints.attrs["scale"] = [1.0, 2.0]
        g1.create_group("sub")

        f.create_dataset("big", data=np.linspace(0.0, 1.0, 2000))
        f.create_dataset("matrix", data=np.arange(1200, dtype=np.int16).reshape(60, 20))
        f.create_dataset("names", data=["a", "bb"], dtype=h5py.string_dtype())
        f.create_dataset("answer", data=42)
        f.create_dataset("flags", data=np.array([True, False, True]))
        f.create_dataset("compound", data=np.zeros(2, dtype=[("a", "<i4"), ("b", "<f8")]))

        f["alias"] = h5py.SoftLink("/g1/ints")
        f["ext"] = h5py.ExternalLink("other.h5", "/data")
    return path


def _request(path, **kwargs) -> LoadRequest:
    return LoadRequest(source=path, domain=DOMAIN, max_payload_bytes=1000, chunk_elements=300, **kwargs)


async def _values(client, root_id: str, *names: str):
    parent = root_id
    for name in names:
        link = await client.links.get_link(DOMAIN, parent, name)
        parent = link.id
    return (await client.datasets.read_values_json(DOMAIN, parent)).value


@pytest.mark.asyncio
async def test_load_copies_structure_data_and_attributes(client, sample_file):
    items: list[tuple[str, str]] = []
    progress: list[tuple[str, int, int]] = []
    hooks = LoaderHooks(
        item=lambda kind, path: items.append((kind, path)),
        chunk_progress=lambda path, done, total: progress.append((path, done, total)),
    )

    result = await load_file(client, _request(sample_file), hooks)

    stats = result.stats
    assert stats.groups_created == 2
    assert stats.datasets_created == 6
    assert stats.datasets_skipped == 1
    assert stats.attributes_created == 3
    assert stats.attributes_failed == 1
    assert stats.links_created == 2
    assert stats.failed_chunks == 0
    assert ("group", "/g1/sub") in items
    assert ("link", "/alias") in items

    root = result.root_id
    assert await _values(client, root, "g1", "ints") == list(range(10))
    assert np.allclose(await _values(client, root, "big"), np.linspace(0.0, 1.0, 2000))
    assert await _values(client, root, "matrix") == np.arange(1200).reshape(60, 20).tolist()
    assert await _values(client, root, "names") == ["a", "bb"]
    assert await _values(client, root, "answer") == 42
    assert await _values(client, root, "flags") == [1, 0, 1]

    big_blocks = [entry for entry in progress if entry[0] == "/big"]
    assert big_blocks[-1] == ("/big", 7, 7)
    matrix_blocks = [entry for entry in progress if entry[0] == "/matrix"]
    assert matrix_blocks[-1] == ("/matrix", 30, 30)

    assert await client.attributes.get_attribute_value(DOMAIN, root, "title") == "Test File"


@pytest.mark.asyncio
async def test_links_are_recreated(client, sample_file):
    result = await load_file(client, _request(sample_file))

    alias = await client.links.get_link(DOMAIN, result.root_id, "alias")
    ext = await client.links.get_link(DOMAIN, result.root_id, "ext")

    assert alias.h5path == "/g1/ints"
    assert ext.h5path == "/data"
    assert ext.h5domain == "other.h5"


@pytest.mark.asyncio
async def test_failed_chunks_become_warnings(client, fake_hsds, tmp_path):
    path = tmp_path / "big.h5"
    with h5py.File(path, "w") as f:
        f.create_dataset("big", data=np.arange(2000, dtype=np.float64))
    fake_hsds.fail_value_writes = 2
    warnings: list[str] = []

    result = await load_file(client, _request(path), LoaderHooks(warning=warnings.append))

    assert result.stats.datasets_created == 1
    assert result.stats.failed_chunks == 2
    assert any("2 out of 7 chunks" in message for message in warnings)
    assert warnings == result.warnings


@pytest.mark.asyncio
async def test_shared_and_cyclic_hard_links_are_copied_once(client, fake_hsds, tmp_path):
    path = tmp_path / "cycle.h5"
    with h5py.File(path, "w") as f:
        g1 = f.create_group("g1")
        g1.create_dataset("ints", data=np.arange(3))
        g1["back"] = g1
        f["shared"] = g1["ints"]

    result = await load_file(client, _request(path))

    assert result.stats.groups_created == 1
    assert result.stats.datasets_created == 1
    assert result.stats.links_created == 2
    group_posts = [r for r in fake_hsds.requests if r.method == "POST" and r.url.path == "/groups"]
    assert len(group_posts) == 1

    g1_link = await client.links.get_link(DOMAIN, result.root_id, "g1")
    back = await client.links.get_link(DOMAIN, g1_link.id, "back")
    ints = await client.links.get_link(DOMAIN, g1_link.id, "ints")
    shared = await client.links.get_link(DOMAIN, result.root_id, "shared")
    assert back.id == g1_link.id
    assert shared.id == ints.id
    assert await _values(client, result.root_id, "shared") == [0, 1, 2]


@pytest.mark.asyncio
async def test_undecodable_strings_do_not_stop_the_load(client, tmp_path):
    path = tmp_path / "bytes.h5"
    with h5py.File(path, "w") as f:
        f.create_dataset("a_bytes", data=np.array([b"\xff\xfe", b"ok"], dtype="S2"))
        f.create_dataset("b_ints", data=np.arange(3))

    result = await load_file(client, _request(path))

    assert result.stats.datasets_created == 2
    assert await _values(client, result.root_id, "b_ints") == [0, 1, 2]
    strings = await _values(client, result.root_id, "a_bytes")
    assert strings[1] == "ok"
    assert "\ufffd" in strings[0]


@pytest.mark.asyncio
async def test_attributes_can_be_skipped(client, sample_file):
    result = await load_file(client, _request(sample_file, copy_attributes=False))

    assert result.stats.attributes_created == 0
    assert result.stats.attributes_failed == 0


@pytest.mark.asyncio
async def test_existing_domain_is_fatal(client, sample_file):
    await client.domains.create_domain(DOMAIN)

    with pytest.raises(ApiError) as excinfo:
        await load_file(client, _request(sample_file))
    assert excinfo.value.status == 409


@pytest.mark.asyncio
async def test_verify_upload_lists_root_links(client, sample_file):
    await load_file(client, _request(sample_file))

    links = await verify_upload(client, DOMAIN)

    assert [link.title for link in links.links] == [
        "alias",
        "answer",
        "big",
        "ext",
        "flags",
        "g1",
        "matrix",
        "names",
    ]


def test_small_data_is_one_block():
    assert plan_chunks((5,), 4) == [(0, 5)]
    assert plan_chunks((100_000,), 8) == [(0, 100_000)]


def test_empty_and_scalar_shapes_have_no_blocks():
    assert plan_chunks((), 8) == []
    assert plan_chunks((0,), 8) == []
    assert plan_chunks((0, 5), 8) == []


def test_one_dimensional_runs():
    blocks = plan_chunks((200_000,), 8)

    assert len(blocks) == 7
    assert blocks[0] == (0, 32_768)
    assert blocks[-1] == (196_608, 200_000)


def test_row_blocks_follow_payload_budget():
    blocks = plan_chunks((1000, 1000), 8)
    assert blocks[0] == (0, 32)
    assert len(blocks) == 32

    capped = plan_chunks((20_000, 10), 8)
    assert capped[0] == (0, 128)

    wide = plan_chunks((10, 100_000), 8)
    assert wide == [(row, row + 1) for row in range(10)]


def test_blocks_cover_every_row_once():
    blocks = plan_chunks((1_001, 7), 4, max_payload_bytes=100, chunk_elements=50, max_chunk_rows=5)

    covered = [row for start, stop in blocks for row in range(start, stop)]
    assert covered == list(range(1_001))
