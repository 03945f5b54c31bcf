"""
Step histories for pedagogical replay.

Algorithms that accept a ``history`` append immutable step records to it:
``OperationHistory`` for elementary row operations and
``ExpansionHistory`` for cofactor expansion. Every step stores its own
copy of the matrix, so later mutation of the working matrix never changes
what was recorded.

``run_recorded(func, *args)`` is the convenience entry point: it creates
the right kind of history, runs *func* with it and returns
``(result, history)``.
"""

from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Callable, Generic, Iterator, Optional, TypeVar

from linalg.matrix import Matrix


class OperationType(Enum):
    SWAP_ROWS = "swap_rows"
    SCALE_ROW = "scale_row"
    ADD_SCALED_ROW = "add_scaled_row"
    INITIAL_STATE = "initial_state"
    RESULT_STATE = "result_state"


class ExpansionType(Enum):
    INITIAL_STATE = "initial_state"
    ROW_EXPANSION = "row_expansion"
    COLUMN_EXPANSION = "column_expansion"
    SUBMATRIX_CALCULATION = "submatrix_calculation"
    RESULT_STATE = "result_state"


@dataclass(frozen=True)
class OperationStep:
    kind: OperationType
    description: str
    matrix: Matrix
    row1: Optional[int] = None
    row2: Optional[int] = None
    scalar: Optional[Fraction] = None

    def __str__(self) -> str:
        return f"{self.description}\n{self.matrix}"


@dataclass(frozen=True)
class ExpansionStep:
    kind: ExpansionType
    description: str
    matrix: Matrix
    expansion_index: Optional[int] = None
    element_index: Optional[int] = None
    element: Optional[Fraction] = None
    cofactor: Optional[Fraction] = None
    term_value: Optional[Fraction] = None
    accumulated_value: Optional[Fraction] = None

    def __str__(self) -> str:
        text = self.description
        if self.accumulated_value is not None:
            text += f"  (running total: {self.accumulated_value})"
        return f"{text}\n{self.matrix}"


StepT = TypeVar("StepT", OperationStep, ExpansionStep)


class _History(Generic[StepT]):
    """Append-only, ordered list of steps."""

    def __init__(self):
        self._steps: list[StepT] = []

    def append(self, step: StepT) -> None:
        self._steps.append(step)

    @property
    def steps(self) -> tuple[StepT, ...]:
        return tuple(self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[StepT]:
        return iter(self._steps)

    def __getitem__(self, index: int) -> StepT:
        return self._steps[index]

    def last(self) -> Optional[StepT]:
        return self._steps[-1] if self._steps else None

    def to_dicts(self) -> list[dict]:
        """Steps as ``{"step_number", "description", "expression", "kind"}`` dicts."""
        return [
            {
                "step_number": i,
                "kind": step.kind.value,
                "description": step.description,
                "expression": str(step.matrix),
            }
            for i, step in enumerate(self._steps, start=1)
        ]

    def format(self) -> str:
        return "\n\n".join(
            f"Step {i}: {step}" for i, step in enumerate(self._steps, start=1)
        )


class OperationHistory(_History[OperationStep]):
    def record(self, kind: OperationType, description: str, matrix: Matrix,
               row1: Optional[int] = None, row2: Optional[int] = None,
               scalar: Optional[Fraction] = None) -> OperationStep:
        step = OperationStep(kind, description, matrix.copy(), row1, row2, scalar)
        self.append(step)
        return step


class ExpansionHistory(_History[ExpansionStep]):
    def record(self, kind: ExpansionType, description: str, matrix: Matrix,
               **fields) -> ExpansionStep:
        step = ExpansionStep(kind, description, matrix.copy(), **fields)
        self.append(step)
        return step


# ── Recording entry point ───────────────────────────────────────────────

def recording(history_cls: type) -> Callable:
    """Mark a ``func(..., history=None)`` algorithm with the history it fills."""
    def decorate(func: Callable) -> Callable:
        func.history_type = history_cls
        return func
    return decorate


def run_recorded(func: Callable, *args, **kwargs):
    """Run a ``@recording`` algorithm with a fresh history; returns ``(result, history)``."""
    history = func.history_type()
    result = func(*args, history=history, **kwargs)
    return result, history
