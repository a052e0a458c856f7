"""
Value Model

Tagged script values: String, Number, Boolean, List and Array. Every value
renders a canonical string form and converts to the other variants through
fixed, side-effect free coercion rules. Link is the pseudo-value installed by
``upvar``/``global`` to alias a variable of another frame.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List as PyList, Tuple, Union

import numpy as np
from typing_extensions import TypeAlias

from ..frontend.scanner import Scanner
from ..frontend.words import Word, WordType
from ..shared.errors import CastError
from ..utils.config import FLOAT_EXPONENT_THRESHOLD, FLOAT_SMALL_EXPONENT


def format_number(value: float) -> str:
    """
    Shortest round-trip rendering of a float, ``%g`` style:
    ``3``, ``0.5``, ``1e+06``, ``1.5e-05``, ``Inf``, ``NaN``.
    """
    f = np.float64(value)
    if np.isnan(f):
        return "NaN"
    if np.isinf(f):
        return "Inf" if f > 0 else "-Inf"
    sci = np.format_float_scientific(f, unique=True, trim="-", exp_digits=2)
    exponent = int(sci.partition("e")[2])
    if exponent < FLOAT_SMALL_EXPONENT or exponent >= FLOAT_EXPONENT_THRESHOLD:
        return sci
    return np.format_float_positional(f, unique=True, trim="-")


def parse_float(text: str) -> float:
    """Parse a number from text; base-prefixed integers are accepted too."""
    if not text or text != text.strip() or "_" in text:
        raise CastError(f"expected number but got \"{text}\"")
    try:
        return float(text)
    except ValueError:
        pass
    try:
        return float(int(text, 0))
    except ValueError:
        raise CastError(f"expected number but got \"{text}\"") from None


class Value:
    """Base of the script value variants."""

    type_name = "value"

    def to_string(self) -> "String":
        return String(str(self))

    def to_number(self) -> "Number":
        raise CastError(f"{self.type_name} can not be converted to number")

    def to_boolean(self) -> "Boolean":
        raise CastError(f"{self.type_name} can not be converted to boolean")

    def to_list(self) -> "List":
        return List((self,))

    def to_array(self) -> "Array":
        raise CastError(f"{self.type_name} can not be converted to array")


@dataclass(frozen=True)
class String(Value):
    value: str = ""

    type_name = "string"

    def __str__(self) -> str:
        return self.value

    def to_string(self) -> "String":
        return self

    def to_number(self) -> "Number":
        return Number(parse_float(self.value))

    def to_boolean(self) -> "Boolean":
        return Boolean(self.value != "")

    def to_list(self) -> "List":
        return parse_list(self.value)

    def to_array(self) -> "Array":
        return self.to_list().to_array()


@dataclass(frozen=True)
class Number(Value):
    value: float = 0.0

    type_name = "number"

    def __str__(self) -> str:
        return format_number(self.value)

    def to_number(self) -> "Number":
        return self

    def to_boolean(self) -> "Boolean":
        # a zero integer part is true
        if not np.isfinite(self.value):
            raise CastError(f"{self} can not be converted to boolean")
        return Boolean(int(self.value) == 0)


@dataclass(frozen=True)
class Boolean(Value):
    value: bool = False

    type_name = "boolean"

    def __str__(self) -> str:
        return "1" if self.value else "0"

    def to_number(self) -> "Number":
        return Number(1.0 if self.value else 0.0)

    def to_boolean(self) -> "Boolean":
        return self


@dataclass(frozen=True)
class List(Value):
    values: Tuple[Value, ...] = ()

    type_name = "list"

    def __str__(self) -> str:
        return " ".join(_list_element(v) for v in self.values)

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self):
        return iter(self.values)

    def at(self, index: int) -> Value:
        """Element at ``index``; out of range yields an empty string."""
        if 0 <= index < len(self.values):
            return self.values[index]
        return String("")

    def append(self, *values: Value) -> "List":
        return List(self.values + tuple(values))

    def to_boolean(self) -> "Boolean":
        raise CastError("list can not be converted to boolean")

    def to_list(self) -> "List":
        return self

    def to_array(self) -> "Array":
        if len(self.values) % 2 != 0:
            raise CastError("list must have an even number of elements")
        items = {}
        for i in range(0, len(self.values), 2):
            items[str(self.values[i])] = self.values[i + 1]
        return Array(items)


@dataclass(frozen=True)
class Array(Value):
    """Associative array. Updates return a new Array."""
    values: Dict[str, Value] = field(default_factory=dict)

    type_name = "array"

    def __str__(self) -> str:
        return str(self.to_list())

    def __len__(self) -> int:
        return len(self.values)

    def __contains__(self, key: str) -> bool:
        return key in self.values

    def get(self, key: str) -> Value:
        return self.values[key]

    def names(self) -> PyList[str]:
        return list(self.values)

    def with_item(self, key: str, value: Value) -> "Array":
        items = dict(self.values)
        items[key] = value
        return Array(items)

    def without(self, key: str) -> "Array":
        items = dict(self.values)
        del items[key]
        return Array(items)

    def to_boolean(self) -> "Boolean":
        return Boolean(len(self.values) != 0)

    def to_list(self) -> "List":
        flat: PyList[Value] = []
        for key, value in self.values.items():
            flat.append(String(key))
            flat.append(value)
        return List(tuple(flat))

    def to_array(self) -> "Array":
        return self


@dataclass(frozen=True)
class Link:
    """Alias of variable ``name`` in the frame at absolute index ``level``."""
    name: str
    level: int


Binding: TypeAlias = Union[Value, Link]


# ---------------------------------------------------------------------------
# List syntax
# ---------------------------------------------------------------------------

_PLAIN_VARIABLE = re.compile(r"[\w:]+(\(.*\))?", re.DOTALL)
_DELIMITED_WORDS = (WordType.BLOCK, WordType.SCRIPT, WordType.QUOTE)


def _is_delimited(text: str) -> bool:
    """Whether ``text`` is exactly one brace block, script or quoted word."""
    if text != text.strip() or text[:1] not in ('{', '[', '"'):
        return False
    try:
        elements = _list_words(text)
    except CastError:
        return False
    return (
        len(elements) == 1
        and len(elements[0]) == 1
        and elements[0][0].type in _DELIMITED_WORDS
    )


def _list_element(value: Value) -> str:
    text = str(value)
    if text == "":
        return "{}"
    if any(ch.isspace() for ch in text) and not _is_delimited(text):
        return "{" + text + "}"
    return text


def _restore(word: Word) -> str:
    """Re-wrap a word with the punctuation the scanner stripped."""
    if word.type is WordType.BLOCK:
        return "{" + word.literal + "}"
    if word.type is WordType.SCRIPT:
        return "[" + word.literal + "]"
    if word.type is WordType.QUOTE:
        return '"' + word.literal + '"'
    if word.type is WordType.VARIABLE:
        if _PLAIN_VARIABLE.fullmatch(word.literal):
            return "$" + word.literal
        return "${" + word.literal + "}"
    return word.literal


def _list_words(text: str) -> PyList[PyList[Word]]:
    """Words of each list element; adjacent words form one element."""
    elements: PyList[PyList[Word]] = []
    current: PyList[Word] = []
    for word in Scanner(text.strip(), comments=False):
        if word.type in (WordType.BLANK, WordType.EOL):
            if current:
                elements.append(current)
                current = []
            continue
        if word.type is WordType.ILLEGAL:
            raise CastError(f"malformed list: \"{text}\"")
        current.append(word)
    if current:
        elements.append(current)
    return elements


def parse_list(text: str) -> List:
    """
    Split text into list elements through the command-mode scanner.

    A single word is taken as is (braces and quotes removed). With several
    elements, brace blocks, scripts, quotes and variable references keep
    their punctuation so the list renders back to equivalent syntax.
    """
    elements = _list_words(text)
    if len(elements) == 1 and len(elements[0]) == 1:
        word = elements[0][0]
        if word.type in (WordType.BLOCK, WordType.QUOTE, WordType.LITERAL):
            return List((String(word.literal),))
    return List(tuple(
        String("".join(_restore(w) for w in parts)) for parts in elements
    ))


def parse_words(text: str) -> PyList[str]:
    """
    Split text into elements with their delimiters removed, as needed for
    lists of scripts such as ``switch`` clauses.
    """
    unwrapped = (WordType.BLOCK, WordType.QUOTE)
    return [
        "".join(w.literal if w.type in unwrapped else _restore(w) for w in parts)
        for parts in _list_words(text)
    ]


def list_of(items: Iterable[Union[Value, str]]) -> List:
    """Build a List from values or plain strings."""
    return List(tuple(i if isinstance(i, Value) else String(i) for i in items))


# ---------------------------------------------------------------------------
# Conversion helpers for command implementations
# ---------------------------------------------------------------------------

def to_int(value: Value) -> int:
    if isinstance(value, String):
        try:
            return int(value.value, 0)
        except ValueError:
            pass
    number = value.to_number().value
    if not np.isfinite(number):
        raise CastError(f"expected integer but got \"{value}\"")
    return int(number)


def to_strings(value: Value) -> PyList[str]:
    return [str(v) for v in value.to_list()]
