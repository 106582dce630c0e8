"""
Module: payroll_kernel.selectors
Responsibility: Abstract base class for read-only query selectors.  Selectors
    form the "Q" side of the CQRS-lite pattern: structured read access to
    payroll data without mutation capability.
Architecture position: Kernel.  Module selectors (``payroll_modules.*.selectors``)
    subclass ``BaseSelector``.

Invariants enforced:
    - Read-only access: selectors MUST NOT call session.add(),
      session.delete(), session.commit() or session.flush().
    - DTO return convention: selectors return frozen dataclasses (or tuples
      of them), never ORM instances, so cached values cannot be mutated.
    - Session ownership: the caller owns the session and its transaction.
"""

from abc import ABC

from sqlalchemy.orm import Session

from payroll_kernel.cache import EntityCache


class BaseSelector(ABC):
    """
    Abstract base class for all selectors.

    Contract:
        Selectors accept a Session (and optionally a shared ``EntityCache``)
        from the caller, perform read-only queries and return DTOs.
    """

    def __init__(self, session: Session, cache: EntityCache | None = None):
        self.session = session
        self.cache = cache or EntityCache()
