"""HDF5 file to HSDS domain loader.

This module copies a local HDF5 file (read with h5py) into a new HSDS domain:
groups, datasets with their data, soft/external links and attributes. The CLI
delegates the whole flow to `load_file`, which keeps side-effects (printing,
progress bars) out of the copy logic; UI layers plug in through
`LoaderHooks`.

Failure policy:
- Creating the domain, a group or a dataset is fatal (the error propagates).
- A failed value read or write, an unreadable/unsupported attribute or an
  unsupported dataset type is downgraded to a warning and counted; the load
  continues.
- An object reachable through several hard links is copied once; later names
  become hard links to that copy, so cycles in the source terminate.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

import h5py
import numpy as np

from hsds_client.client import HsdsClient
from hsds_client.core.domain.models import (
    H5S_NULL,
    DatasetCreateRequest,
    DatasetValueRequest,
    GroupCreateRequest,
    LinkCreateRequest,
    LinkRequest,
    Links,
)
from hsds_client.core.domain.types import hsds_type_for_dtype
from hsds_client.core.errors import HsdsError, InvalidParameterError, OperationFailedError

log = logging.getLogger(__name__)

MAX_PAYLOAD_BYTES = 950_000
CHUNK_ELEMENTS = 32 * 1024
MAX_CHUNK_ROWS = 128
# Rough JSON cost of one element, used to size N-D row blocks.
JSON_BYTES_PER_ELEMENT = 20


@dataclass
class LoadRequest:
    """Parameters that control one upload."""

    source: Path
    domain: str
    max_payload_bytes: int = MAX_PAYLOAD_BYTES
    chunk_elements: int = CHUNK_ELEMENTS
    max_chunk_rows: int = MAX_CHUNK_ROWS
    copy_attributes: bool = True


@dataclass
class LoaderHooks:
    """Optional callbacks for UI layers (progress, warnings)."""

    warning: Callable[[str], None] | None = None
    item: Callable[[str, str], None] | None = None
    chunk_progress: Callable[[str, int, int], None] | None = None


@dataclass
class LoadStats:
    groups_created: int = 0
    datasets_created: int = 0
    attributes_created: int = 0
    links_created: int = 0
    datasets_skipped: int = 0
    attributes_failed: int = 0
    failed_chunks: int = 0


@dataclass
class LoadResult:
    """Output of a loader invocation."""

    domain: str
    root_id: str
    stats: LoadStats = field(default_factory=LoadStats)
    warnings: list[str] = field(default_factory=list)


def plan_chunks(
    shape: tuple[int, ...],
    itemsize: int,
    *,
    max_payload_bytes: int = MAX_PAYLOAD_BYTES,
    chunk_elements: int = CHUNK_ELEMENTS,
    max_chunk_rows: int = MAX_CHUNK_ROWS,
) -> list[tuple[int, int]]:
    """Split a dataset along its first axis into `(start, stop)` blocks.

    Returns a single block covering everything when the estimated size fits in
    `max_payload_bytes`, and no block at all for empty or scalar shapes.
    """

    if not shape:
        return []
    total = math.prod(shape)
    if total == 0:
        return []
    rows = shape[0]
    if total * itemsize <= max_payload_bytes:
        return [(0, rows)]

    if len(shape) == 1:
        step = max(1, min(chunk_elements, rows))
    else:
        row_elements = math.prod(shape[1:])
        budget = min(max_payload_bytes // JSON_BYTES_PER_ELEMENT, chunk_elements)
        step = min(max(budget // row_elements, 1), max_chunk_rows)
    return [(start, min(start + step, rows)) for start in range(0, rows, step)]


def _json_values(data: Any) -> Any:
    """Turn data read from h5py into JSON-ready nested lists."""

    if isinstance(data, np.ndarray):
        if data.dtype.kind == "b":
            data = data.astype(np.int8)
        elif data.dtype.kind == "S":
            data = np.char.decode(data, "utf-8", errors="replace")
        return data.tolist()
    if isinstance(data, (bytes, np.bytes_)):
        return bytes(data).decode("utf-8", errors="replace")
    if isinstance(data, np.bool_):
        return int(data)
    if isinstance(data, np.generic):
        return data.item()
    return data


class _Loader:
    def __init__(
        self,
        client: HsdsClient,
        request: LoadRequest,
        hooks: LoaderHooks,
        result: LoadResult,
    ) -> None:
        self._client = client
        self._request = request
        self._hooks = hooks
        self._result = result
        # h5py object id -> HSDS id of its copy
        self._visited: dict[Any, str] = {}

    @property
    def _domain(self) -> str:
        return self._request.domain

    @property
    def _stats(self) -> LoadStats:
        return self._result.stats

    def _warn(self, message: str) -> None:
        log.warning(message)
        self._result.warnings.append(message)
        if self._hooks.warning:
            self._hooks.warning(message)

    def _item(self, kind: str, path: str) -> None:
        if self._hooks.item:
            self._hooks.item(kind, path)

    async def load_group(self, h5_group: h5py.Group, group_id: str) -> None:
        log.info("Processing group: %s", h5_group.name)
        self._visited.setdefault(h5_group.id, group_id)
        for name in h5_group:
            path = f"{h5_group.name.rstrip('/')}/{name}"
            link = h5_group.get(name, getlink=True)

            if isinstance(link, h5py.SoftLink):
                await self._copy_link(group_id, name, path, LinkCreateRequest.soft(link.path))
                continue
            if isinstance(link, h5py.ExternalLink):
                external = LinkCreateRequest.external(link.path, link.filename)
                await self._copy_link(group_id, name, path, external)
                continue

            member = h5_group[name]
            # An object reached a second time (shared or cyclic hard link) is
            # linked to the copy made on the first visit.
            known_id = self._visited.get(member.id)
            if known_id is not None:
                await self._copy_link(group_id, name, path, LinkCreateRequest.hard(known_id))
                continue

            if isinstance(member, h5py.Group):
                self._item("group", path)
                request = GroupCreateRequest(link=LinkRequest(id=group_id, name=name))
                created = await self._client.groups.create_group(self._domain, request)
                self._stats.groups_created += 1
                self._visited[member.id] = created.id
                await self.copy_attributes(member, created.id)
                await self.load_group(member, created.id)
            elif isinstance(member, h5py.Dataset):
                self._item("dataset", path)
                dataset_id = await self.copy_dataset(member, group_id, name)
                if dataset_id is not None:
                    self._visited[member.id] = dataset_id
            else:
                self._warn(f"Unknown member type: {path}")

    async def _copy_link(self, group_id: str, name: str, path: str, request: LinkCreateRequest) -> None:
        self._item("link", path)
        try:
            await self._client.links.create_link(self._domain, group_id, name, request)
        except HsdsError as exc:
            self._warn(f"Failed to create link '{path}': {exc}")
            return
        self._stats.links_created += 1

    async def copy_dataset(self, dataset: h5py.Dataset, parent_id: str, name: str) -> str | None:
        """Create the dataset and copy its values; returns the new id, or None if skipped."""

        dtype = dataset.dtype
        if dtype.kind == "O" and h5py.check_string_dtype(dtype) is None:
            self._warn(f"Skipping dataset '{dataset.name}': unsupported dtype {dtype}")
            self._stats.datasets_skipped += 1
            return None
        try:
            hsds_type = hsds_type_for_dtype(dtype)
        except InvalidParameterError as exc:
            self._warn(f"Skipping dataset '{dataset.name}': {exc.message}")
            self._stats.datasets_skipped += 1
            return None

        shape = dataset.shape
        request = DatasetCreateRequest(
            type=hsds_type,
            shape=H5S_NULL if shape is None else (list(shape) or None),
            link=LinkRequest(id=parent_id, name=name),
        )
        created = await self._client.datasets.create_dataset(self._domain, request)
        self._stats.datasets_created += 1

        if shape is not None:
            await self.copy_values(dataset, created.id)
        await self.copy_attributes(dataset, created.id)
        return created.id

    def _read(self, dataset: h5py.Dataset, selection: Any) -> Any:
        if h5py.check_string_dtype(dataset.dtype) is not None:
            return _json_values(dataset.asstr(errors="replace")[selection])
        return _json_values(dataset[selection])

    async def _write(
        self,
        dataset: h5py.Dataset,
        dataset_id: str,
        request: DatasetValueRequest,
        selection: Any,
    ) -> bool:
        try:
            request.value = self._read(dataset, selection)
        except (OSError, ValueError) as exc:
            self._stats.failed_chunks += 1
            self._warn(f"Failed to read values of {dataset.name}: {exc}")
            return False
        try:
            await self._client.datasets.write_values(self._domain, dataset_id, request)
        except HsdsError as exc:
            self._stats.failed_chunks += 1
            self._warn(f"Failed to upload values {request.start}-{request.stop}: {exc}")
            return False
        return True

    async def copy_values(self, dataset: h5py.Dataset, dataset_id: str) -> None:
        shape = dataset.shape
        if shape == ():
            await self._write(dataset, dataset_id, DatasetValueRequest(), ())
            return

        blocks = plan_chunks(
            shape,
            dataset.dtype.itemsize,
            max_payload_bytes=self._request.max_payload_bytes,
            chunk_elements=self._request.chunk_elements,
            max_chunk_rows=self._request.max_chunk_rows,
        )
        if len(blocks) == 1:
            await self._write(dataset, dataset_id, DatasetValueRequest(), ...)
            return

        log.info("Chunked upload of %s: %d blocks", dataset.name, len(blocks))
        failed = 0
        for index, (start, stop) in enumerate(blocks, start=1):
            request = DatasetValueRequest(
                start=[start, *([0] * (len(shape) - 1))],
                stop=[stop, *shape[1:]],
            )
            if not await self._write(dataset, dataset_id, request, slice(start, stop)):
                failed += 1
            if self._hooks.chunk_progress:
                self._hooks.chunk_progress(dataset.name, index, len(blocks))
        if failed:
            self._warn(f"{failed} out of {len(blocks)} chunks of {dataset.name} failed to upload")

    async def copy_attributes(self, obj: h5py.HLObject, obj_id: str) -> None:
        if not self._request.copy_attributes:
            return
        for name in obj.attrs:
            try:
                value = obj.attrs[name]
            except (OSError, TypeError) as exc:
                self._stats.attributes_failed += 1
                self._warn(f"Could not read attribute '{name}' of {obj.name}: {exc}")
                continue
            if isinstance(value, h5py.Empty):
                self._stats.attributes_failed += 1
                self._warn(f"Skipping empty attribute '{name}' of {obj.name}")
                continue
            try:
                await self._client.attributes.set_attribute(self._domain, obj_id, name, value)
            except HsdsError as exc:
                self._stats.attributes_failed += 1
                self._warn(f"Failed to set attribute '{name}' of {obj.name}: {exc}")
                continue
            self._stats.attributes_created += 1


async def load_file(
    client: HsdsClient,
    request: LoadRequest,
    hooks: LoaderHooks | None = None,
) -> LoadResult:
    """Copy `request.source` into the new domain `request.domain`.

    The domain must not exist yet. Raises `OperationFailedError` when the
    created domain has no root group.
    """

    hooks = hooks or LoaderHooks()
    log.info("Loading %s into %s", request.source, request.domain)

    with h5py.File(request.source, "r") as h5_file:
        domain = await client.domains.create_domain(request.domain)
        if not domain.root:
            raise OperationFailedError(f"domain {request.domain} has no root group")

        result = LoadResult(domain=request.domain, root_id=domain.root)
        loader = _Loader(client, request, hooks, result)
        await loader.copy_attributes(h5_file, domain.root)
        await loader.load_group(h5_file["/"], domain.root)

    log.info("Loaded %s: %s", request.domain, result.stats)
    return result


async def verify_upload(client: HsdsClient, domain: str) -> Links:
    """List the root group's links of an uploaded domain."""

    info = await client.domains.get_domain(domain)
    if not info.root:
        return Links()
    return await client.links.list_links(domain, info.root)
