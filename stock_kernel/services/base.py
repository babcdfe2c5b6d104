"""
BaseService -- abstract base for all kernel services.

Responsibility:
    Provides the common constructor contract for every service in the
    kernel layer.  All concrete services receive a ``RecordStore`` and
    reach persistent state only through it.

Architecture position:
    Kernel > Services -- imperative shell infrastructure.
    Every service in ``stock_kernel/services/`` that performs write
    operations extends this class.

Invariants enforced:
    Each store call is its own unit of work.  Services never assume two
    store calls commit together; multi-step operations (checkout) order
    their writes so a partial failure is detectable and repairable.

Failure modes:
    - Store exceptions (DuplicateRecordError, RecordNotFoundError)
      propagate unchanged unless the service documents a translation.
"""

from abc import ABC

from stock_kernel.store.base import RecordStore


class BaseService(ABC):
    """
    Abstract base class for all kernel services.

    Contract:
        Accepts a ``RecordStore`` from the caller.  The caller owns the
        store's lifetime (engine, connections).

    Non-goals:
        - Does NOT provide reporting methods -- those belong in
          ``stock_kernel/selectors/``.
    """

    def __init__(self, store: RecordStore):
        """
        Initialize the service.

        Args:
            store: Record store shared by every service of one application.
        """
        self.store = store
