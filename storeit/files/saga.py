"""
Two-phase file lifecycle sequences (store-then-describe on upload,
describe-then-store on delete) as an explicit compensation state machine.

    pending --all steps ok--> committed
    pending --a step fails--> rolled_back   (compensations run newest first)

Compensations are best effort: a failing compensation is logged and the
original error still propagates. Completed steps that have no compensation
are reported as orphans when a later step fails.
"""
import logging
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

log = logging.getLogger(__name__)


class SagaState(str, Enum):
    PENDING = "pending"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class Saga:
    def __init__(self, name: str):
        self.name = name
        self.state = SagaState.PENDING
        self.completed: List[Tuple[str, Any, Optional[Callable[[Any], None]]]] = []
        self.orphans: List[str] = []

    def step(self, name: str, action: Callable[[], Any],
             compensate: Optional[Callable[[Any], None]] = None) -> Any:
        if self.state is not SagaState.PENDING:
            raise RuntimeError(f"saga {self.name} is {self.state.value}")
        try:
            result = action()
        except Exception as exc:
            log.error(f"{self.name}: step '{name}' failed: {exc}")
            self._rollback()
            raise
        self.completed.append((name, result, compensate))
        return result

    def commit(self) -> None:
        if self.state is SagaState.PENDING:
            self.state = SagaState.COMMITTED

    def _rollback(self) -> None:
        for name, result, compensate in reversed(self.completed):
            if compensate is None:
                self.orphans.append(name)
                log.warning(f"{self.name}: step '{name}' cannot be undone; its effect is left behind")
                continue
            try:
                compensate(result)
            except Exception as exc:
                self.orphans.append(name)
                log.error(f"{self.name}: compensation for '{name}' failed: {exc}")
        self.state = SagaState.ROLLED_BACK
