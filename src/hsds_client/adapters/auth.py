"""Credential strategies for HSDS.

- `BasicAuth`: `Authorization: Basic base64(user:password)`
- `BearerAuth`: `Authorization: Bearer <token>`
- `NoAuth`: sends nothing
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import MutableMapping

from hsds_client.core.config import HsdsSettings
from hsds_client.core.errors import AuthenticationError
from hsds_client.core.interfaces.auth import Authentication

AUTHORIZATION = "Authorization"


def _set_authorization(headers: MutableMapping[str, str], value: str) -> None:
    if "\r" in value or "\n" in value:
        raise AuthenticationError("Invalid auth header: value contains a line break", status=None)
    headers[AUTHORIZATION] = value


@dataclass(frozen=True)
class BasicAuth(Authentication):
    username: str
    password: str = field(repr=False)

    async def apply_auth(self, headers: MutableMapping[str, str]) -> None:
        credentials = f"{self.username}:{self.password}"
        encoded = base64.b64encode(credentials.encode("utf-8")).decode("ascii")
        _set_authorization(headers, f"Basic {encoded}")


@dataclass(frozen=True)
class BearerAuth(Authentication):
    token: str = field(repr=False)

    async def apply_auth(self, headers: MutableMapping[str, str]) -> None:
        _set_authorization(headers, f"Bearer {self.token}")


@dataclass(frozen=True)
class NoAuth(Authentication):
    async def apply_auth(self, headers: MutableMapping[str, str]) -> None:
        return None


def auth_from_settings(settings: HsdsSettings) -> Authentication:
    """Pick the credential scheme the configuration describes.

    A token wins over username/password; nothing configured means `NoAuth`.
    """

    if settings.token:
        return BearerAuth(settings.token)
    if settings.username:
        return BasicAuth(settings.username, settings.password or "")
    return NoAuth()
