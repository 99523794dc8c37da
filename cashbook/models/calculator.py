"""Calculator state models."""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


INITIAL_INPUT = "0"


class Operation(str, Enum):
    """Binary operations offered by the calculator keypad."""
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"


class CalculatorState(BaseModel):
    """
    Complete state of the calculator.

    Owned exclusively by Calculator; only an explicit clear (or the
    forced reset after a division by zero) returns it to the initial state.
    """

    current_input: str = Field(
        default=INITIAL_INPUT,
        description="Numeric accumulator as typed, e.g. '12.5'"
    )
    previous_operand: Optional[Decimal] = Field(
        default=None,
        description="Left-hand operand of the pending operation"
    )
    pending_operation: Optional[Operation] = None
    awaiting_reset: bool = Field(
        default=False,
        description="Next digit replaces the input instead of appending"
    )
