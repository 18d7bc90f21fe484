"""
db/models/customer.py

Customer model: the reference data invoices are resolved against.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from db.models.invoice import Invoice


class Customer(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """
    A billable customer.

    Imports match customers by exact ``name``; names are not unique, so
    lookups order by creation time to stay deterministic.
    """

    __tablename__ = "customers"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    email: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        comment="Inactive customers are invisible to invoice imports",
    )

    # ── Relationships ──────────────────────────────────────────────────────────

    invoices: Mapped[list["Invoice"]] = relationship(
        "Invoice",
        back_populates="customer",
    )

    # ── Indexes ────────────────────────────────────────────────────────────────

    __table_args__ = (
        Index("ix_customers_name", "name"),
        Index("ix_customers_is_active", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<Customer id={self.id} name={self.name!r}>"
