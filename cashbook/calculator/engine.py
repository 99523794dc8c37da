"""
Four-function calculator.

A keypad-driven state machine used to work out an amount before it is
entered into the ledger. Operations chain left to right: pressing an
operator while one is pending evaluates the pending one first, so
2 + 3 * 4 = gives 20.

Arithmetic is done on Decimals; results are rounded to a fixed number
of decimal places (8 by default) and rendered without exponent or
trailing zeros.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Optional

from cashbook.audit import AuditLogger
from cashbook.calculator.display import format_display
from cashbook.config import CalculatorSettings
from cashbook.models.calculator import INITIAL_INPUT, CalculatorState, Operation


DIGITS = frozenset("0123456789")
DECIMAL_POINT = "."
CLEAR_ENTRY = "C"
ALL_CLEAR = "AC"
SIGN_TOGGLE = "±"
PERCENT = "%"
EQUALS = "="


class DivisionByZeroError(ArithmeticError):
    """Division by zero. The calculator has already been fully reset."""
    pass


def _parse(text: str) -> Optional[Decimal]:
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def _format(value: Decimal) -> str:
    """Plain notation, no trailing zeros, no negative zero."""
    if value == 0:
        return INITIAL_INPUT
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


class Calculator:
    """
    Calculator state machine.

    Feed it key presses with press(), or call the event methods
    directly. `value` is what the ledger form reads; `display` is the
    grouped text shown on screen.
    """

    def __init__(
        self,
        max_input_length: int = 12,
        decimal_places: int = 8,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._state = CalculatorState()
        self._max_input_length = max_input_length
        self._places = decimal_places
        self._quantum = Decimal(1).scaleb(-decimal_places)
        self._audit_logger = audit_logger

    @classmethod
    def from_settings(
        cls,
        settings: CalculatorSettings,
        audit_logger: Optional[AuditLogger] = None,
    ) -> "Calculator":
        return cls(
            max_input_length=settings.max_input_length,
            decimal_places=settings.result_decimal_places,
            audit_logger=audit_logger,
        )

    # -------------------------------------------------------------------------
    # Read-only views
    # -------------------------------------------------------------------------

    @property
    def state(self) -> CalculatorState:
        """A copy of the current state."""
        return self._state.model_copy()

    @property
    def current_input(self) -> str:
        return self._state.current_input

    @property
    def value(self) -> Optional[Decimal]:
        """Current input as an unformatted number, or None if not numeric."""
        return _parse(self._state.current_input)

    @property
    def display(self) -> str:
        return format_display(self._state.current_input)

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def press(self, key: str) -> None:
        """
        Dispatch a keypad label.

        Raises:
            ValueError: If the key is not on the keypad
            DivisionByZeroError: If the key triggered a division by zero
        """
        if key in DIGITS:
            self.input_digit(key)
        elif key == DECIMAL_POINT:
            self.input_decimal_point()
        elif key == CLEAR_ENTRY:
            self.clear_entry()
        elif key == ALL_CLEAR:
            self.all_clear()
        elif key == SIGN_TOGGLE:
            self.toggle_sign()
        elif key == PERCENT:
            self.percent()
        elif key == EQUALS:
            self.equals()
        else:
            try:
                operation = Operation(key)
            except ValueError:
                raise ValueError(f"Unknown calculator key: {key!r}") from None
            self.choose_operation(operation)

    def input_digit(self, digit: str) -> None:
        if len(digit) != 1 or digit not in DIGITS:
            raise ValueError(f"Not a digit: {digit!r}")

        state = self._state
        if state.awaiting_reset:
            state.current_input = digit
            state.awaiting_reset = False
        elif state.current_input == INITIAL_INPUT:
            state.current_input = digit
        elif len(state.current_input) < self._max_input_length:
            state.current_input += digit

    def input_decimal_point(self) -> None:
        state = self._state
        if state.awaiting_reset:
            state.current_input = INITIAL_INPUT
            state.awaiting_reset = False

        if DECIMAL_POINT not in state.current_input:
            state.current_input += DECIMAL_POINT

    def clear_entry(self) -> None:
        """C: reset only the current input."""
        self._state.current_input = INITIAL_INPUT
        self._state.awaiting_reset = False

    def all_clear(self) -> None:
        """AC: back to the initial state."""
        self._state = CalculatorState()

    def toggle_sign(self) -> None:
        value = self.value
        if value is not None:
            self._state.current_input = _format(-value)

    def percent(self) -> None:
        value = self.value
        if value is not None:
            self._state.current_input = _format(value / 100)

    def choose_operation(self, operation: Operation) -> None:
        """
        Store an operator, evaluating any pending one first.

        Raises:
            DivisionByZeroError: If the chained evaluation divides by zero;
                                 the new operator is not stored
        """
        operation = Operation(operation)
        state = self._state

        if state.pending_operation is not None:
            self._calculate()

        state.previous_operand = self.value
        state.pending_operation = operation
        state.awaiting_reset = True

    def equals(self) -> None:
        state = self._state
        if state.pending_operation is not None:
            self._calculate()
            state.pending_operation = None

    # -------------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------------

    def _calculate(self) -> None:
        state = self._state
        previous = state.previous_operand
        current = self.value

        if previous is None or current is None:
            return

        operation = state.pending_operation
        if operation == Operation.ADD:
            result = previous + current
        elif operation == Operation.SUBTRACT:
            result = previous - current
        elif operation == Operation.MULTIPLY:
            result = previous * current
        elif operation == Operation.DIVIDE:
            if current == 0:
                self.all_clear()
                if self._audit_logger:
                    self._audit_logger.log_division_by_zero(_format(previous))
                raise DivisionByZeroError("Cannot divide by zero")
            result = previous / current
        else:
            return

        state.current_input = _format(self._round(result))
        state.awaiting_reset = True

    def _round(self, value: Decimal) -> Decimal:
        if value.as_tuple().exponent >= -self._places:
            return value
        with localcontext() as ctx:
            # quantize needs room for every integer digit plus the decimals
            ctx.prec = max(ctx.prec, value.adjusted() + self._places + 2)
            return value.quantize(self._quantum, rounding=ROUND_HALF_UP)
