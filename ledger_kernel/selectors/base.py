"""
Module: ledger_kernel.selectors.base
Responsibility: Abstract base class for all read-only query selectors.
Architecture position: Kernel > Selectors.  May import from db/, models/ and
    domain/.  MUST NOT import from engines, services or outer layers.

Invariants enforced:
    - Read-only access: selectors accept a Session from the caller but never
      call session.add(), session.delete(), session.commit() or session.flush().
    - Record return convention: selectors return the frozen records of
      ledger_kernel.domain.records, NOT ORM model instances.
    - Tenant scoping: every query filters on the selector's client_id.
"""

from abc import ABC
from typing import Generic, TypeVar
from uuid import UUID

from sqlalchemy.orm import Session

from ledger_kernel.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseSelector(ABC, Generic[ModelType]):
    """
    Abstract base class for all selectors.

    Contract:
        Selectors accept a Session and a client id from the caller, perform
        read-only queries scoped to that client, and return records.
    """

    def __init__(self, session: Session, client_id: UUID):
        self.session = session
        self.client_id = client_id
