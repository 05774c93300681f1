from __future__ import annotations

from typing import ContextManager, Protocol


class TransactionManager(Protocol):
    """Unit-of-work port used by services for multi-step writes.

    Every repository call made inside `atomic()` commits or rolls back together.
    Nested `atomic()` blocks join the outer transaction.
    """

    def atomic(self) -> ContextManager[None]:
        raise NotImplementedError
