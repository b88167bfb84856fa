"""Asynchronous client for the HDF Scalable Data Service (HSDS) REST API.

Typical use:

    async with HsdsClient.from_settings() as client:
        domain = await client.domains.get_domain("/home/user/file.h5")
"""

__version__ = "0.1.0"

from hsds_client.adapters.auth import BasicAuth, BearerAuth, NoAuth, auth_from_settings  # noqa: E402
from hsds_client.client import HsdsClient  # noqa: E402
from hsds_client.core.config import HsdsSettings  # noqa: E402
from hsds_client.core.errors import (  # noqa: E402
    ApiError,
    AuthenticationError,
    DomainNotFoundError,
    HsdsError,
    InvalidParameterError,
    InvalidResponseError,
    NotFoundError,
    ObjectNotFoundError,
    OperationFailedError,
    PermissionDeniedError,
    SerializationError,
    StatusError,
    TransportError,
    UrlError,
)

__all__ = [
    "ApiError",
    "AuthenticationError",
    "BasicAuth",
    "BearerAuth",
    "DomainNotFoundError",
    "HsdsClient",
    "HsdsError",
    "HsdsSettings",
    "InvalidParameterError",
    "InvalidResponseError",
    "NoAuth",
    "NotFoundError",
    "ObjectNotFoundError",
    "OperationFailedError",
    "PermissionDeniedError",
    "SerializationError",
    "StatusError",
    "TransportError",
    "UrlError",
    "__version__",
    "auth_from_settings",
]
