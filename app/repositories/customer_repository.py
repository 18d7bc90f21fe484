"""
app/repositories/customer_repository.py

Read access to customer reference data.
"""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models.customer import Customer


class CustomerRepository:
    """
    Repository for customer lookups used by invoice imports.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def find_ids_by_name(self, name: str) -> list[uuid.UUID]:
        """
        Return ids of active customers named exactly *name*, oldest first.
        """

        stmt = (
            select(Customer.id)
            .where(Customer.name == name, Customer.is_active.is_(True))
            .order_by(Customer.created_at.asc(), Customer.id.asc())
        )
        return list(self._session.scalars(stmt).all())

    def add(self, *, name: str, email: str | None = None, is_active: bool = True) -> Customer:
        customer = Customer(name=name.strip(), email=email, is_active=is_active)
        self._session.add(customer)
        self._session.flush()
        return customer
