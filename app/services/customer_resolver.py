"""
app/services/customer_resolver.py

Resolves a customer name from an import file to a customer id.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from typing import Protocol

logger = logging.getLogger(__name__)


class ReferenceNotFoundError(LookupError):
    """
    Raised when no customer matches the name on an invoice.
    """

    def __init__(self, customer_name: str) -> None:
        super().__init__(f"Customer '{customer_name}' not found")
        self.customer_name = customer_name


class CustomerLookup(Protocol):
    def find_customer_ids(
        self,
        name: str,
        *,
        timeout: float | None = None,
    ) -> Sequence[uuid.UUID]:
        ...


class CustomerResolver:
    """
    Exact-name customer resolution.

    Lookups are not cached: every aggregate queries the backend, which
    stays the single source of truth for customer identity.
    """

    def __init__(self, lookup: CustomerLookup, *, timeout: float | None = None) -> None:
        self._lookup = lookup
        self._timeout = timeout

    def resolve(self, customer_name: str) -> uuid.UUID:
        """
        Return the id of the customer called *customer_name*.

        When several customers share the name, the first one returned by
        the lookup (oldest first) wins.
        """

        name = customer_name.strip()
        if not name:
            raise ReferenceNotFoundError(name)

        matches = list(self._lookup.find_customer_ids(name, timeout=self._timeout))
        if not matches:
            raise ReferenceNotFoundError(name)

        if len(matches) > 1:
            logger.warning(
                "Customer name matched %d customers name=%r; using id=%s",
                len(matches),
                name,
                matches[0],
            )
        return matches[0]
