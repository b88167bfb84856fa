"""HSDS wire models (Pydantic v2).

Why Pydantic here:
- Strict validation and self-documenting fields (Field) without coupling the
  core to the HTTP layer.
- Wire names (`lastModified`, `class`, `creationProperties`) are aliases, so
  Python code works with snake_case while the JSON stays untouched.

Note:
- These models describe *what* the server holds, not *how* it is fetched.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal, TypeVar, Union

from pydantic import BaseModel, Field, RootModel, ValidationError
from pydantic.config import ConfigDict

from hsds_client.core.errors import InvalidResponseError

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_model(model: type[ModelT], payload: Any) -> ModelT:
    """Validate a decoded JSON payload against a response model."""

    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise InvalidResponseError(f"Invalid response format for {model.__name__}: {exc}") from exc


class WireModel(BaseModel):
    """Base for every model exchanged with HSDS."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready dict using wire names and omitting unset members."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ---- shared ----


class Href(WireModel):
    href: str
    rel: str


class Acl(WireModel):
    """Permissions of a single user on a domain."""

    create: bool | None = None
    update: bool | None = None
    delete: bool | None = None
    update_acl: bool | None = Field(default=None, alias="updateACL")
    read: bool | None = None
    read_acl: bool | None = Field(default=None, alias="readACL")


class Acls(RootModel[dict[str, Acl]]):
    """User name -> `Acl`."""

    def __getitem__(self, user: str) -> Acl:
        return self.root[user]

    def __contains__(self, user: object) -> bool:
        return user in self.root

    def users(self) -> list[str]:
        return list(self.root)


class ErrorResponse(WireModel):
    error: str | None = None
    message: str | None = None
    code: int | None = None


# ---- domains ----


class DomainClass(str, Enum):
    DOMAIN = "domain"
    FOLDER = "folder"


class Domain(WireModel):
    root: str | None = Field(
        default=None,
        description="Id of the root group (absent for folders).",
    )
    owner: str | None = None
    class_: DomainClass | None = Field(default=None, alias="class")
    created: float | None = None
    last_modified: float | None = Field(default=None, alias="lastModified")
    hrefs: list[Href] | None = None
    acls: Acls | None = None


class DomainEntry(WireModel):
    name: str
    class_: DomainClass | None = Field(default=None, alias="class")
    owner: str | None = None
    root: str | None = None
    created: float | None = None
    last_modified: float | None = Field(default=None, alias="lastModified")


class DomainList(WireModel):
    domains: list[DomainEntry] = Field(default_factory=list)
    hrefs: list[Href] | None = None


class DomainCreateRequest(WireModel):
    folder: Literal[0, 1] | None = Field(
        default=None,
        description="1 creates a folder instead of a domain.",
    )


class AclUpdateRequest(Acl):
    pass


class AclResponse(WireModel):
    acl: Acl
    hrefs: list[Href] | None = None


class AclsResponse(WireModel):
    acls: list[dict[str, Any]] = Field(default_factory=list)
    hrefs: list[Href] | None = None


# ---- types and shapes ----


class StringCharSet(str, Enum):
    ASCII = "H5T_CSET_ASCII"
    UTF8 = "H5T_CSET_UTF8"


class StringPadding(str, Enum):
    NULL_PAD = "H5T_STR_NULLPAD"
    NULL_TERM = "H5T_STR_NULLTERM"
    SPACE_PAD = "H5T_STR_SPACEPAD"


H5T_VARIABLE = "H5T_VARIABLE"

StringLength = Union[Literal["H5T_VARIABLE"], int]


class StringDataType(WireModel):
    """HSDS string type (`H5T_STRING`)."""

    class_: Literal["H5T_STRING"] = Field(default="H5T_STRING", alias="class")
    char_set: StringCharSet = Field(default=StringCharSet.ASCII, alias="charSet")
    str_pad: StringPadding = Field(default=StringPadding.NULL_PAD, alias="strPad")
    length: StringLength = H5T_VARIABLE

    @classmethod
    def variable_utf8(cls) -> StringDataType:
        return cls(char_set=StringCharSet.UTF8, length=H5T_VARIABLE)

    @classmethod
    def fixed_utf8(cls, length: int) -> StringDataType:
        return cls(char_set=StringCharSet.UTF8, length=length)

    @classmethod
    def variable_ascii(cls) -> StringDataType:
        return cls(char_set=StringCharSet.ASCII, length=H5T_VARIABLE)

    @classmethod
    def fixed_ascii(cls, length: int) -> StringDataType:
        return cls(char_set=StringCharSet.ASCII, length=length)

    @classmethod
    def custom(
        cls,
        char_set: StringCharSet,
        str_pad: StringPadding,
        length: StringLength,
    ) -> StringDataType:
        return cls(char_set=char_set, str_pad=str_pad, length=length)


class DataType(WireModel):
    """Type description as returned by the server (or a custom definition).

    Only the common members are named; compound fields, enum mappings and any
    other class-specific key are preserved as extras.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    class_: str = Field(..., alias="class")
    base: str | dict[str, Any] | None = None
    fields: list[dict[str, Any]] | None = None
    char_set: str | None = Field(default=None, alias="charSet")
    str_pad: str | None = Field(default=None, alias="strPad")
    length: str | int | None = None


DataTypeSpec = Union[str, StringDataType, DataType, dict[str, Any]]
"""Predefined tag (`"H5T_STD_I32LE"`), string type, or full type object."""


class Shape(WireModel):
    class_: str = Field(..., alias="class")
    dims: list[int] | None = None
    maxdims: list[int] | None = None


H5S_NULL = "H5S_NULL"

ShapeSpec = Union[list[int], Literal["H5S_NULL"]]


# ---- groups and links ----


class LinkRequest(WireModel):
    """Link a newly created object into `id` under `name`."""

    id: str
    name: str


class Group(WireModel):
    id: str
    root: str | None = None
    domain: str | None = None
    alias: list[str] | None = None
    created: float | None = None
    last_modified: float | None = Field(default=None, alias="lastModified")
    attribute_count: int | None = Field(default=None, alias="attributeCount")
    link_count: int | None = Field(default=None, alias="linkCount")
    hrefs: list[Href] | None = None


class Groups(WireModel):
    groups: list[str] = Field(default_factory=list)
    hrefs: list[Href] | None = None


class GroupCreateRequest(WireModel):
    link: LinkRequest | None = None


class LinkClass(str, Enum):
    HARD = "H5L_TYPE_HARD"
    SOFT = "H5L_TYPE_SOFT"
    EXTERNAL = "H5L_TYPE_EXTERNAL"


class Link(WireModel):
    id: str | None = None
    created: float | None = None
    class_: LinkClass | None = Field(default=None, alias="class")
    title: str
    target: str | None = None
    href: str | None = None
    collection: str | None = None
    h5path: str | None = None
    h5domain: str | None = None


class Links(WireModel):
    links: list[Link] = Field(default_factory=list)
    hrefs: list[Href] | None = None


class LinkCreateRequest(WireModel):
    """Body of a link PUT.

    - hard: `id`
    - soft: `h5path`
    - external: `h5path` + `h5domain`
    """

    id: str | None = None
    h5path: str | None = None
    h5domain: str | None = None

    @classmethod
    def hard(cls, target_id: str) -> LinkCreateRequest:
        return cls(id=target_id)

    @classmethod
    def soft(cls, target_path: str) -> LinkCreateRequest:
        return cls(h5path=target_path)

    @classmethod
    def external(cls, target_path: str, target_domain: str) -> LinkCreateRequest:
        return cls(h5path=target_path, h5domain=target_domain)


# ---- datasets ----


class Dataset(WireModel):
    id: str
    root: str | None = None
    domain: str | None = None
    created: float | None = None
    last_modified: float | None = Field(default=None, alias="lastModified")
    attribute_count: int | None = Field(default=None, alias="attributeCount")
    type: DataType | None = None
    shape: Shape | None = None
    layout: dict[str, Any] | None = None
    creation_properties: dict[str, Any] | None = Field(
        default=None,
        alias="creationProperties",
    )
    hrefs: list[Href] | None = None


class Datasets(WireModel):
    datasets: list[str] = Field(default_factory=list)
    hrefs: list[Href] | None = None


class DatasetCreateRequest(WireModel):
    type: DataTypeSpec
    shape: ShapeSpec | None = None
    maxdims: list[int] | None = Field(
        default=None,
        description="Maximum extent per dimension; 0 means unlimited.",
    )
    creation_properties: dict[str, Any] | None = Field(
        default=None,
        alias="creationProperties",
    )
    link: LinkRequest | None = None

    @classmethod
    def from_hsds_type(cls, hsds_type: str, dimensions: list[int]) -> DatasetCreateRequest:
        """Build a request from an HSDS type tag.

        `H5T_STRING` becomes a variable-length ASCII string type; any other tag
        is sent as a predefined type.
        """

        data_type: DataTypeSpec
        if hsds_type == "H5T_STRING":
            data_type = StringDataType.variable_ascii()
        else:
            data_type = hsds_type
        return cls(type=data_type, shape=list(dimensions))

    @classmethod
    def from_hsds_type_with_link(
        cls,
        hsds_type: str,
        dimensions: list[int],
        parent_group_id: str,
        dataset_name: str,
    ) -> DatasetCreateRequest:
        request = cls.from_hsds_type(hsds_type, dimensions)
        request.link = LinkRequest(id=parent_group_id, name=dataset_name)
        return request


class DatasetValueRequest(WireModel):
    """Selection and data for a value PUT."""

    start: list[int] | None = None
    stop: list[int] | None = None
    step: list[int] | None = None
    # Plain ints address a 1-D dataset.
    points: list[list[int]] | list[int] | None = None
    value: Any = None
    value_base64: str | None = None


class ShapeUpdateRequest(WireModel):
    shape: list[int]


class ShapeResponse(WireModel):
    shape: Shape
    created: float | None = None
    last_modified: float | None = Field(default=None, alias="lastModified")
    hrefs: list[Href] | None = None


class TypeResponse(WireModel):
    type: DataType
    hrefs: list[Href] | None = None


class DatasetValues(WireModel):
    value: Any = None
    index: list[int] | None = Field(
        default=None,
        description="Matching element indices (query reads only).",
    )
    hrefs: list[Href] | None = None


# ---- committed datatypes ----


class Datatype(WireModel):
    id: str
    root: str | None = None
    domain: str | None = None
    type: DataType | None = None
    created: float | None = None
    last_modified: float | None = Field(default=None, alias="lastModified")
    attribute_count: int | None = Field(default=None, alias="attributeCount")
    hrefs: list[Href] | None = None


class DatatypeCreateRequest(WireModel):
    type: DataTypeSpec
    link: LinkRequest | None = None


# ---- attributes ----


class Attribute(WireModel):
    name: str | None = None
    type: DataType | None = None
    shape: Shape | None = None
    value: Any = None
    created: float | None = None
    last_modified: float | None = Field(default=None, alias="lastModified")
    hrefs: list[Href] | None = None


class Attributes(WireModel):
    attributes: list[Attribute] = Field(default_factory=list)
    hrefs: list[Href] | None = None


class AttributeCreateRequest(WireModel):
    type: DataTypeSpec
    shape: ShapeSpec | None = Field(
        default=None,
        description="Omitted for scalar attributes.",
    )
    value: Any = None
