"""Declaration mini-language: `<location> = <value>`.

A location is a register name or a numeral denoting a memory address, a value
is either the token SYM or a numeral. Numerals are decimal or 0x-prefixed
hexadecimal unsigned integers.
"""

import logging

from vexctx.errors import InvalidAssignment, InvalidLiteral

l = logging.getLogger(name=__name__)

SYM_TOKEN = "SYM"
MAX_LITERAL = 2**64 - 1

DEC_DIGITS = "0123456789"
HEX_DIGITS = "0123456789abcdefABCDEF"


class Value:
    """Right-hand side of an assignment."""

    def __eq__(self, other):
        return type(self) is type(other)

    def __hash__(self):
        return hash(type(self).__name__)

    def __repr__(self):
        return f"{type(self).__name__}()"


class Concrete(Value):
    def __init__(self, value):
        if not isinstance(value, int) or value < 0:
            raise ValueError(f"concrete values are unsigned integers, got {value!r}")
        self._value = value

    @property
    def value(self):
        return self._value

    def __eq__(self, other):
        return isinstance(other, Concrete) and self.value == other.value

    def __hash__(self):
        return hash(("Concrete", self.value))

    def __repr__(self):
        return f"Concrete({self.value:#x})"


class Symbolic(Value):
    pass


class Break(Value):
    # reserved, no token of the mini-language produces it
    pass


class Unknown(Value):
    # reserved, no token of the mini-language produces it
    def __init__(self, text):
        self._text = text

    @property
    def text(self):
        return self._text

    def __eq__(self, other):
        return isinstance(other, Unknown) and self.text == other.text

    def __hash__(self):
        return hash(("Unknown", self.text))

    def __repr__(self):
        return f"Unknown({self.text!r})"


class Location:
    """Left-hand side of an assignment: a memory address or a register."""


class Memory(Location):
    def __init__(self, address):
        if address < 0:
            raise ValueError(f"negative address {address}")
        self._address = address

    @property
    def address(self):
        return self._address

    def __eq__(self, other):
        return isinstance(other, Memory) and self.address == other.address

    def __hash__(self):
        return hash(("Memory", self.address))

    def __repr__(self):
        return f"Memory({self.address:#x})"


class Register(Location):
    def __init__(self, name):
        self._name = name

    @property
    def name(self):
        return self._name

    def __eq__(self, other):
        return isinstance(other, Register) and self.name == other.name

    def __hash__(self):
        return hash(("Register", self.name))

    def __repr__(self):
        return f"Register({self.name!r})"


class Assignment:
    def __init__(self, lvalue, rvalue):
        if not isinstance(lvalue, Location):
            raise TypeError(f"not a location: {lvalue!r}")
        if not isinstance(rvalue, Value):
            raise TypeError(f"not a value: {rvalue!r}")
        self._lvalue = lvalue
        self._rvalue = rvalue

    @property
    def lvalue(self):
        return self._lvalue

    @property
    def rvalue(self):
        return self._rvalue

    def __eq__(self, other):
        return (
            isinstance(other, Assignment)
            and self.lvalue == other.lvalue
            and self.rvalue == other.rvalue
        )

    def __hash__(self):
        return hash((self.lvalue, self.rvalue))

    def __repr__(self):
        return f"Assignment({self.lvalue!r}, {self.rvalue!r})"


class RejectedDeclaration:
    def __init__(self, token, reason):
        self.token = token
        self.reason = reason

    def __eq__(self, other):
        return (
            isinstance(other, RejectedDeclaration)
            and self.token == other.token
            and self.reason == other.reason
        )

    def __repr__(self):
        return f"RejectedDeclaration({self.token!r}, {self.reason!r})"


def _literal_base(token):
    """Return 16 or 10 if the token looks like a numeral, None otherwise."""
    if len(token) > 2 and token.startswith("0x"):
        return 16
    if token and token[0] in DEC_DIGITS:
        return 10
    return None


def read_literal(token):
    """Parse a numeral, raising InvalidLiteral if it is malformed.

    Tokens that do not look like numerals at all are also rejected, with
    base None.
    """
    base = _literal_base(token)
    if base == 16:
        digits, allowed = token[2:], HEX_DIGITS
    elif base == 10:
        digits, allowed = token, DEC_DIGITS
    else:
        raise InvalidLiteral(token, base)
    # int() would also accept signs, underscores and surrounding whitespace
    if not all(c in allowed for c in digits):
        raise InvalidLiteral(token, base)
    value = int(digits, base)
    if value > MAX_LITERAL:
        raise InvalidLiteral(token, base)
    return value


def convert_to_int(token):
    """Parse a decimal or 0x-prefixed hex numeral, or return None."""
    try:
        return read_literal(token)
    except InvalidLiteral:
        return None


def to_location(token):
    """Numerals are memory addresses, anything else is a register name."""
    if _literal_base(token) is not None:
        return Memory(read_literal(token))
    return Register(token)


def to_value(token):
    token = token.strip()
    if token == SYM_TOKEN:
        return Symbolic()
    value = convert_to_int(token)
    if value is None:
        return None
    return Concrete(value)


def parse_assignment(text):
    """Parse one `<location> = <value>` declaration.

    Raises InvalidAssignment naming the offending token when the line does
    not have exactly one `=`, when a side is empty, or when either side
    fails to classify.
    """
    parts = text.split("=")
    if len(parts) != 2:
        raise InvalidAssignment(text, f"expected one '=', found {len(parts) - 1}")
    left, right = parts[0].strip(), parts[1].strip()
    if not left:
        raise InvalidAssignment(text, "missing location")
    if not right:
        raise InvalidAssignment(text, "missing value")
    try:
        lvalue = to_location(left)
    except InvalidLiteral as e:
        raise InvalidAssignment(text, str(e)) from e
    rvalue = to_value(right)
    if rvalue is None:
        raise InvalidAssignment(text, f"cannot classify value {right!r}")
    return Assignment(lvalue, rvalue)


def to_assignment(text):
    try:
        return parse_assignment(text)
    except InvalidAssignment:
        return None


def parse_assignments(lines):
    """Parse a batch of declaration lines.

    Blank lines and lines starting with '#' are skipped. A bad line does not
    stop the batch.

    Returns:
        (assignments, rejected) where rejected is a list of
        RejectedDeclaration in input order
    """
    assignments = []
    rejected = []
    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        try:
            assignments.append(parse_assignment(stripped))
        except InvalidAssignment as e:
            l.warning("rejected declaration %r: %s", stripped, e.reason)
            rejected.append(RejectedDeclaration(stripped, e.reason))
    return assignments, rejected
