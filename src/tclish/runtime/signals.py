"""
Control-flow signals.

These unwind the Python stack the way ``return``, ``break``, ``continue`` and
``exit`` unwind a script. They are not errors and sit outside the TclError
hierarchy so ``catch`` and the error reporter can tell them apart.
"""

from .values import Value, String


class ReturnSignal(Exception):
    def __init__(self, value: Value = String("")) -> None:
        super().__init__(value)
        self.value = value


class ExitSignal(Exception):
    def __init__(self, code: int = 0) -> None:
        super().__init__(code)
        self.code = code


class BreakSignal(Exception):
    def __init__(self) -> None:
        super().__init__()


class ContinueSignal(Exception):
    def __init__(self) -> None:
        super().__init__()
