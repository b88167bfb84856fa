"""HSDS type and shape inference from native values.

Maps Python scalars, nested lists and numpy arrays to the HSDS type object and
shape list that an attribute PUT or a dataset POST expects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from hsds_client.core.domain.models import StringDataType
from hsds_client.core.errors import InvalidParameterError

# Collection name per object-id prefix.
COLLECTION_BY_PREFIX: dict[str, str] = {
    "g-": "groups",
    "d-": "datasets",
    "t-": "datatypes",
}

BOOL_TYPE: dict[str, Any] = {
    "class": "H5T_ENUM",
    "base": {"class": "H5T_INTEGER", "base": "H5T_STD_I8LE"},
    "mapping": {"FALSE": 0, "TRUE": 1},
}
INT64_TYPE: dict[str, Any] = {"class": "H5T_INTEGER", "base": "H5T_STD_I64LE"}
FLOAT64_TYPE: dict[str, Any] = {"class": "H5T_FLOAT", "base": "H5T_IEEE_F64LE"}


def string_type() -> dict[str, Any]:
    return StringDataType.variable_utf8().to_wire()


@dataclass(frozen=True)
class InferredValue:
    """Type, shape and JSON-ready value for one attribute."""

    type: dict[str, Any]
    shape: list[int] | None
    value: Any

    @property
    def is_scalar(self) -> bool:
        return self.shape is None


def collection_for_id(obj_id: str) -> str:
    """Return the HSDS collection of an object id (`g-`, `d-`, `t-`)."""

    for prefix, collection in COLLECTION_BY_PREFIX.items():
        if obj_id.startswith(prefix):
            return collection
    raise InvalidParameterError(
        f"cannot infer collection from object id '{obj_id}' "
        "(expected prefix g-, d- or t-)"
    )


def hsds_type_for_dtype(dtype: np.dtype) -> dict[str, Any]:
    """HSDS type object for a numpy dtype (little-endian predefined tags).

    Raises `InvalidParameterError` for compound, complex and other dtypes the
    client does not map.
    """

    dtype = np.dtype(dtype)
    if dtype.kind == "b":
        return dict(BOOL_TYPE)
    if dtype.kind in ("i", "u"):
        sign = "I" if dtype.kind == "i" else "U"
        return {"class": "H5T_INTEGER", "base": f"H5T_STD_{sign}{dtype.itemsize * 8}LE"}
    if dtype.kind == "f" and dtype.itemsize in (2, 4, 8):
        return {"class": "H5T_FLOAT", "base": f"H5T_IEEE_F{dtype.itemsize * 8}LE"}
    if dtype.kind == "U":
        return string_type()
    if dtype.kind == "S":
        return StringDataType.fixed_ascii(dtype.itemsize).to_wire()
    if dtype.kind == "O":
        return string_type()
    raise InvalidParameterError(f"unsupported dtype: {dtype}")


def _scalar_type(value: Any) -> dict[str, Any]:
    # bool first: bool is a subclass of int
    if isinstance(value, (bool, np.bool_)):
        return dict(BOOL_TYPE)
    if isinstance(value, np.generic):
        return hsds_type_for_dtype(value.dtype)
    if isinstance(value, int):
        return dict(INT64_TYPE)
    if isinstance(value, float):
        return dict(FLOAT64_TYPE)
    if isinstance(value, (str, bytes)):
        return string_type()
    raise InvalidParameterError(f"unsupported attribute value type: {type(value).__name__}")


def _to_json_scalar(value: Any) -> Any:
    if isinstance(value, (bool, np.bool_)):
        return int(bool(value))
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, np.generic):
        return value.item()
    return value


def _nested_shape(value: Any) -> list[int]:
    if not isinstance(value, (list, tuple)):
        return []
    if not value:
        raise InvalidParameterError("cannot infer the type of an empty array")
    inner = [_nested_shape(item) for item in value]
    first = inner[0]
    if any(shape != first for shape in inner[1:]):
        raise InvalidParameterError("ragged arrays are not supported")
    return [len(value), *first]


def _leaves(value: Any) -> list[Any]:
    if isinstance(value, (list, tuple)):
        out: list[Any] = []
        for item in value:
            out.extend(_leaves(item))
        return out
    return [value]


def _map_leaves(value: Any, fn: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return [_map_leaves(item, fn) for item in value]
    return fn(value)


def infer_value(value: Any) -> InferredValue:
    """Infer HSDS type and shape from a native value.

    - str -> variable-length UTF-8 string
    - int -> H5T_STD_I64LE, float -> H5T_IEEE_F64LE, bool -> enum (0/1)
    - lists/tuples/numpy arrays -> shape = nested lengths
    - mixed int/float lists promote to float
    """

    if isinstance(value, np.ndarray):
        if value.size == 0:
            raise InvalidParameterError("cannot infer the type of an empty array")
        type_item = hsds_type_for_dtype(value.dtype)
        if value.ndim == 0:
            return InferredValue(type_item, None, _to_json_scalar(value[()]))
        data = value.tolist()
        if value.dtype.kind == "b":
            data = _map_leaves(data, _to_json_scalar)
        elif value.dtype.kind in ("S", "O"):
            data = _map_leaves(data, _to_json_scalar)
        return InferredValue(type_item, list(value.shape), data)

    if not isinstance(value, (list, tuple)):
        return InferredValue(_scalar_type(value), None, _to_json_scalar(value))

    shape = _nested_shape(value)
    leaves = _leaves(value)
    kinds = {_leaf_kind(leaf) for leaf in leaves}
    if kinds == {"int", "float"}:
        type_item = dict(FLOAT64_TYPE)
    elif len(kinds) == 1:
        type_item = _scalar_type(leaves[0])
    else:
        raise InvalidParameterError(f"arrays mixing {sorted(kinds)} are not supported")
    return InferredValue(type_item, shape, _map_leaves(value, _to_json_scalar))


def _leaf_kind(leaf: Any) -> str:
    if isinstance(leaf, (bool, np.bool_)):
        return "bool"
    if isinstance(leaf, (int, np.integer)):
        return "int"
    if isinstance(leaf, (float, np.floating)):
        return "float"
    if isinstance(leaf, (str, bytes)):
        return "str"
    raise InvalidParameterError(f"unsupported attribute value type: {type(leaf).__name__}")
