"""Authentication contract.

Why Protocol:
- A structural contract (duck typing) without rigid inheritance.
- Any credential source (static, token refresh, keyring) can plug into the
  transport as long as it fills the outgoing headers.
"""

from __future__ import annotations

from typing import MutableMapping, Protocol, runtime_checkable


@runtime_checkable
class Authentication(Protocol):
    """Minimal contract for a credential scheme.

    Design rules:
    - `apply_auth` is async so implementations may do I/O (token refresh).
    - It mutates the header mapping of the outgoing request in place.
    """

    async def apply_auth(self, headers: MutableMapping[str, str]) -> None:
        """Add authentication headers to an outgoing request."""

        ...
