"""
Atom selection language.

A selection picks single atoms or ordered tuples of distinct atoms in a
frame::

    all
    name O
    name O H and index < 100
    pairs: name($1) O and name($2) H
    two: type(#1) 1 and not type(#2) 1

The optional context prefix sets the number of atoms in each match (1 when
omitted). Properties without an explicit variable refer to the first atom
of the tuple.
"""

import re
from abc import ABC, abstractmethod
from itertools import combinations

import numpy as np

from .errors import SelectionError
from .trajectory import Frame

CONTEXTS = {
    "atoms": 1,
    "one": 1,
    "pairs": 2,
    "two": 2,
    "three": 3,
    "angles": 3,
    "four": 4,
    "dihedrals": 4,
}

KEYWORDS = {"and", "or", "not", "all", "none", "name", "type", "index"}

# number of candidate tuples tested at once by Selection.evaluate
BLOCK_SIZE = 1 << 20

_CONTEXT_RE = re.compile(r"^\s*([A-Za-z]+)\s*:(.*)$", re.DOTALL)
_TOKEN_RE = re.compile(
    r"""\s*(?:
        (?P<var>[$#]\d+)
        |(?P<op>==|!=|<=|>=|<|>)
        |(?P<paren>[()])
        |(?P<string>"[^"]*")
        |(?P<word>[^\s()"<>=!]+)
    )""",
    re.VERBOSE,
)

_COMPARISONS = {
    "==": np.equal,
    "!=": np.not_equal,
    "<": np.less,
    "<=": np.less_equal,
    ">": np.greater,
    ">=": np.greater_equal,
}


def tokenize(text: str) -> list[tuple[str, str]]:
    """Split a selection expression in (kind, value) tokens."""
    tokens = []
    position = 0
    text = text.rstrip()
    while position < len(text):
        match = _TOKEN_RE.match(text, position)
        if match is None or match.end() == position:
            raise SelectionError(f"Unexpected character '{text[position:].strip()[0]}' in selection")
        kind = match.lastgroup
        value = match.group(kind)
        if kind == "string":
            kind, value = "word", value[1:-1]
        tokens.append((kind, value))
        position = match.end()
    return tokens


class Node(ABC):
    """Node of a parsed selection expression."""

    @abstractmethod
    def mask(self, frame: Frame, size: int, rows: slice = slice(None)) -> np.ndarray:
        """
        Boolean array broadcastable to ``(natoms,) * size``.

        ``rows`` restricts the first atom of the tuple to a range of indices,
        the first axis of the result then has the length of that range.
        """


class All(Node):
    def mask(self, frame, size, rows=slice(None)):
        return np.ones((1,) * size, dtype=bool)


class Nothing(Node):
    def mask(self, frame, size, rows=slice(None)):
        return np.zeros((1,) * size, dtype=bool)


class Property(Node):
    """Per-atom test applied to the atom bound to ``variable``."""

    def __init__(self, variable: int):
        self.variable = variable

    @abstractmethod
    def test(self, frame: Frame) -> np.ndarray:
        """Boolean array of shape ``(natoms,)``."""

    def mask(self, frame, size, rows=slice(None)):
        values = self.test(frame)
        if self.variable == 1:
            values = values[rows]
        shape = [1] * size
        shape[self.variable - 1] = len(values)
        return values.reshape(shape)


class StringProperty(Property):
    def __init__(self, field: str, values: list[str], variable: int):
        super().__init__(variable)
        self.field = field
        self.values = values

    def test(self, frame):
        data = frame.names if self.field == "name" else frame.types
        return np.isin(data, self.values)


class IndexProperty(Property):
    def __init__(self, op: str, value: int, variable: int):
        super().__init__(variable)
        self.op = op
        self.value = value

    def test(self, frame):
        return _COMPARISONS[self.op](np.arange(frame.natoms), self.value)


class Not(Node):
    def __init__(self, child: Node):
        self.child = child

    def mask(self, frame, size, rows=slice(None)):
        return ~self.child.mask(frame, size, rows)


class And(Node):
    def __init__(self, left: Node, right: Node):
        self.left = left
        self.right = right

    def mask(self, frame, size, rows=slice(None)):
        return self.left.mask(frame, size, rows) & self.right.mask(frame, size, rows)


class Or(Node):
    def __init__(self, left: Node, right: Node):
        self.left = left
        self.right = right

    def mask(self, frame, size, rows=slice(None)):
        return self.left.mask(frame, size, rows) | self.right.mask(frame, size, rows)


class _Parser:
    """Recursive descent parser; ``not`` binds tighter than ``and``, then ``or``."""

    def __init__(self, tokens: list[tuple[str, str]], size: int):
        self.tokens = tokens
        self.size = size
        self.position = 0

    def peek(self) -> tuple[str, str] | None:
        if self.position < len(self.tokens):
            return self.tokens[self.position]
        return None

    def next(self) -> tuple[str, str]:
        token = self.peek()
        if token is None:
            raise SelectionError("Unexpected end of selection")
        self.position += 1
        return token

    def at_keyword(self, *keywords: str) -> bool:
        token = self.peek()
        return token is not None and token[0] == "word" and token[1] in keywords

    def parse(self) -> Node:
        if not self.tokens:
            raise SelectionError("Empty selection")

        node = self.parse_or()
        if self.peek() is not None:
            raise SelectionError(f"Unexpected '{self.peek()[1]}' in selection")
        return node

    def parse_or(self) -> Node:
        node = self.parse_and()
        while self.at_keyword("or"):
            self.next()
            node = Or(node, self.parse_and())
        return node

    def parse_and(self) -> Node:
        node = self.parse_not()
        while self.at_keyword("and"):
            self.next()
            node = And(node, self.parse_not())
        return node

    def parse_not(self) -> Node:
        if self.at_keyword("not"):
            self.next()
            return Not(self.parse_not())
        return self.parse_primary()

    def parse_primary(self) -> Node:
        kind, value = self.next()

        if kind == "paren" and value == "(":
            node = self.parse_or()
            if self.next() != ("paren", ")"):
                raise SelectionError("Expected ')' in selection")
            return node

        if kind != "word":
            raise SelectionError(f"Unexpected '{value}' in selection")

        if value == "all":
            return All()
        if value == "none":
            return Nothing()
        if value in ("name", "type"):
            variable = self.parse_variable()
            return StringProperty(value, self.parse_values(value), variable)
        if value == "index":
            variable = self.parse_variable()
            return self.parse_index(variable)

        raise SelectionError(f"Unknown selection keyword '{value}'")

    def parse_variable(self) -> int:
        if self.peek() != ("paren", "("):
            return 1

        self.next()
        kind, value = self.next()
        if kind != "var":
            raise SelectionError(f"Expected a variable like $1 or #1, got '{value}'")
        if self.next() != ("paren", ")"):
            raise SelectionError("Expected ')' after selection variable")

        variable = int(value[1:])
        if not 1 <= variable <= self.size:
            raise SelectionError(
                f"Variable {value} is out of range for a selection of size {self.size}"
            )
        return variable

    def parse_values(self, field: str) -> list[str]:
        values = []
        while True:
            token = self.peek()
            if token is None or token[0] != "word" or token[1] in KEYWORDS:
                break
            values.append(self.next()[1])

        if not values:
            raise SelectionError(f"Missing value after '{field}'")
        return values

    def parse_index(self, variable: int) -> Node:
        op = "=="
        if self.peek() is not None and self.peek()[0] == "op":
            op = self.next()[1]

        kind, value = self.next()
        try:
            number = int(value)
        except ValueError:
            raise SelectionError(f"Expected an integer after 'index', got '{value}'") from None
        if kind != "word":
            raise SelectionError(f"Expected an integer after 'index', got '{value}'")
        return IndexProperty(op, number, variable)


class Selection:
    """
    Compiled atom selection.

    ``size`` is the number of atoms in each match. Single atom selections
    are evaluated with :meth:`list`, multi-atom ones with :meth:`evaluate`.
    """

    def __init__(self, selection: str):
        """
        Parse a selection string.

        Raises:
            SelectionError: If the string is not a valid selection
        """
        self.string = selection
        self.size = 1

        expression = selection
        match = _CONTEXT_RE.match(selection)
        if match is not None:
            context = match.group(1)
            if context not in CONTEXTS:
                raise SelectionError(f"Unknown selection context '{context}'")
            self.size = CONTEXTS[context]
            expression = match.group(2)

        self._ast = _Parser(tokenize(expression), self.size).parse()

    def __repr__(self) -> str:
        return f"Selection({self.string!r})"

    def evaluate(self, frame: Frame) -> np.ndarray:
        """
        Find all matching tuples of distinct atoms.

        Tuples are tested in blocks of first atoms, so the temporary masks
        hold at most about ``BLOCK_SIZE`` entries whatever the atom count
        (at least one row of ``natoms ** (size - 1)`` entries).

        Returns:
            Integer array (n_matches, size), in lexicographic order
        """
        natoms = frame.natoms
        indices = np.arange(natoms)
        row_size = natoms ** (self.size - 1)
        block = max(1, BLOCK_SIZE // max(1, row_size))

        matches = []
        for start in range(0, natoms, block):
            rows = slice(start, min(start + block, natoms))
            shape = (rows.stop - rows.start,) + (natoms,) * (self.size - 1)
            mask = np.broadcast_to(self._ast.mask(frame, self.size, rows), shape).copy()

            for a, b in combinations(range(self.size), 2):
                shape_a = [1] * self.size
                shape_b = [1] * self.size
                shape_a[a] = shape[a]
                shape_b[b] = shape[b]
                first = indices[rows] if a == 0 else indices
                mask &= first.reshape(shape_a) != indices.reshape(shape_b)

            found = np.argwhere(mask)
            found[:, 0] += start
            matches.append(found)

        if not matches:
            return np.empty((0, self.size), dtype=np.intp)
        return np.concatenate(matches)

    def list(self, frame: Frame) -> np.ndarray:
        """
        Find the indices of matching atoms for a single atom selection.

        Raises:
            SelectionError: If the selection matches more than one atom at a time
        """
        if self.size != 1:
            raise SelectionError("Can not call list on a multi-atom selection")
        return self.evaluate(frame)[:, 0]
