"""
clopts value kinds and coercion.

Overview
- Kind: the runtime tag of an option value (string, char, bool, int). Each kind
  knows its zero value and which Python objects it accepts as defaults.
- Coercion: outcome of converting one raw token, (value, regress). The regress
  flag asks the parser to give back a look-ahead token it tentatively consumed.
- coerce(kind, value, ...): dispatch through the per-kind coercion table.

Rules
- string: always succeeds with the raw text.
- char: exactly one character.
- bool: "", "1", "true" → True; "0", "false" → False. Any other look-ahead token
  that starts with '-' is the next option, so the option becomes True and the
  token is given back. Everything else is a type mismatch.
- int: ASCII digits only, accumulated left to right, with an overflow check
  before every step so that MAX_INT is accepted and MAX_INT + 1 is not.
"""
from enum import Enum
from types import MappingProxyType
from typing import NamedTuple

from .faults import *
from .utils import ordinal, spell

MAX_INT = 2 ** 31 - 1

TRUTHY = frozenset({"", "1", "true"})
FALSY = frozenset({"0", "false"})


class Kind(Enum):
    """
    Runtime tag for the value carried by an option.
    """
    STRING = "string"
    CHAR = "char"
    BOOL = "bool"
    INT = "int"

    @property
    def zero(self):
        """
        Value used when an option of this kind declares no default.
        """
        return {
            Kind.STRING: "",
            Kind.CHAR: "\0",
            Kind.BOOL: False,
            Kind.INT: 0,
        }[self]

    def accepts(self, object, /):
        """
        Tell whether a Python object is a valid value of this kind.
        """
        match self:
            case Kind.STRING:
                return isinstance(object, str)
            case Kind.CHAR:
                return isinstance(object, str) and len(object) == 1
            case Kind.BOOL:
                return isinstance(object, bool)
            case Kind.INT:
                # bool is an int subclass but never a valid int value here
                return isinstance(object, int) and not isinstance(object, bool) and 0 <= object <= MAX_INT


class Coercion(NamedTuple):
    value: object
    regress: bool = False


def _mismatch(kind, value, *, name, token, index, expected, hint):
    return TypeMismatchError(
        "expected %s for %s option %r at %s position, got %r" % (
            expected, kind.value, name, ordinal(index), value
        ),
        title="type mismatch",
        code=FaultCode.TYPE_MISMATCH,
        input=name,
        kind=kind,
        value=value,
        token=token,
        index=index,
        hint=hint,
        docs=getdoc(FaultCode.TYPE_MISMATCH),
    )


def _coerce_string(value, /, **context):
    return Coercion(value)


def _coerce_char(value, /, *, name, token, index, lookahead):
    if len(value) != 1:
        raise _mismatch(
            Kind.CHAR, value,
            name=name, token=token, index=index,
            expected="a single character",
            hint="pass exactly one character (for example: %s=x)" % spell(name),
        )
    return Coercion(value)


def _coerce_bool(value, /, *, name, token, index, lookahead):
    if value in TRUTHY:
        return Coercion(True)
    if value in FALSY:
        return Coercion(False)
    if value.startswith("-") and lookahead:
        # the look-ahead token is the next option, not a value: give it back
        return Coercion(True, regress=True)
    raise _mismatch(
        Kind.BOOL, value,
        name=name, token=token, index=index,
        expected="one of 1, true, 0, false",
        hint="use %s alone, or %s=true / %s=false" % (spell(name), spell(name), spell(name)),
    )


def _coerce_int(value, /, *, name, token, index, lookahead):
    result = 0
    for character in value:
        if not "0" <= character <= "9":
            raise _mismatch(
                Kind.INT, value,
                name=name, token=token, index=index,
                expected="a non-negative integer",
                hint="use digits only (for example: %s=4)" % spell(name),
            )
        digit = ord(character) - ord("0")
        if (MAX_INT - digit) // 10 < result:
            raise IntegerOverflowError(
                "value %r overflows int option %r at %s position" % (value, name, ordinal(index)),
                title="integer overflow",
                code=FaultCode.INTEGER_OVERFLOW,
                input=name,
                kind=Kind.INT,
                value=value,
                token=token,
                index=index,
                hint="use a value no greater than %d" % MAX_INT,
                docs=getdoc(FaultCode.INTEGER_OVERFLOW),
            )
        result = result * 10 + digit
    return Coercion(result)


_COERCERS = MappingProxyType({
    Kind.STRING: _coerce_string,
    Kind.CHAR: _coerce_char,
    Kind.BOOL: _coerce_bool,
    Kind.INT: _coerce_int,
})


def coerce(kind, value, /, *, name, token, index, lookahead=False):
    """
    Convert a raw token into a value of the given kind.

    Parameters
    - kind: Kind of the matched option.
    - value: raw text (attached after '=', or the look-ahead token, or "").
    - name: option name as the user spelled it (for messages).
    - token: the token that carried the option name.
    - index: 1-based position of that token.
    - lookahead: True when value is the following token rather than an
      attached one; only then may a boolean give the token back.

    Returns
    - Coercion(value, regress).

    Raises
    - TypeMismatchError, IntegerOverflowError.
    """
    if not isinstance(kind, Kind):
        raise TypeError("coerce() first argument must be a kind")
    return _COERCERS[kind](value, name=name, token=token, index=index, lookahead=lookahead)


__all__ = (
    "MAX_INT",
    "Kind",
    "Coercion",
    "coerce",
)
