"""
clopts faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain to keep copy consistent and searches predictable.
- ParseError / ParseWarning: base types that carry message + options and know
  how to render themselves in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Policy
- Every error is fatal to the parse. Faults are raised where they are detected
  and unwind to Parser.parse, the only place that surfaces them.
- In non-shell mode, errors are re-raised to the caller and warnings go through
  the warnings module; in shell mode, they are rendered via rich and errors end
  the process with EXIT_STATUS.
- Errors (and the parsed result) are written to standard output; warnings go to
  standard error so they never pollute the program's regular output.
"""
import copy
import inspect
import sys
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console()
stderr = Console(stderr=True)

# Process exit status used for any parse error in shell mode (the -1 of a C exit()).
EXIT_STATUS = 255


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - token shape (1111x)
      • MALFORMED_TOKEN, AMBIGUOUS_CLUSTER_VALUE, INVALID_CLUSTER_MEMBER,
        UNRECOGNIZED_OPTION, MISSING_VALUE
    - value coercion (1112x)
      • TYPE_MISMATCH, INTEGER_OVERFLOW
    - warnings (12xxx)
      • REPEATED_OPTION
    """
    # --- token shape errors (1111x) ---
    MALFORMED_TOKEN         = 11111
    AMBIGUOUS_CLUSTER_VALUE = 11112
    INVALID_CLUSTER_MEMBER  = 11113
    UNRECOGNIZED_OPTION     = 11114
    MISSING_VALUE           = 11115

    # --- value coercion errors (1112x) ---
    TYPE_MISMATCH           = 11121
    INTEGER_OVERFLOW        = 11122

    # --- warnings (12xxx) ---
    REPEATED_OPTION         = 12111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, /):
    """
    Build the rich renderable shared by errors and warnings.

    The header is "[ prog | code | title ]", followed by the message and a hint
    line. With fancy output the message and hint are wrapped in a Panel.
    """
    main = __import__("__main__")
    options = fault.options

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

    def styler(style):
        return styles[style] if options.get("colorful", False) else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    prog = text(getattr(main, "__prog__", options.get("prog", "clopts")), styler("prog-name"))

    header = Text.assemble(
        "[ ",
        prog,
        " | ",
        text(options["code"].normalize() if "code" in options else "", styler("code")),
        " | ",
        text(options.get("title", type(fault).__name__), styler("title")),
        " ]"
    )
    message = text(fault.message, styler("message"))
    hint = Text.assemble(text(" -> ", styler("hint-arrow")), text(options.get("hint"), styler("hint")))

    if options.get("fancy", False):
        return Panel(Group(message, hint), title=header, title_align="left")

    return Group(header, message, hint)


class ParseError(Exception):
    """
    Base class for every fatal parse fault.

    Carries a lowercased one-sentence message plus read-only options describing
    the context (token, index, input, kind, title, code, hint, docs, …).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "title": "bold #FF4DA6",
            "message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self, soft_wrap=True)
        sys.exit(EXIT_STATUS)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MalformedTokenError(ParseError): ...
class AmbiguousClusterValueError(ParseError): ...
class InvalidClusterMemberError(ParseError): ...
class UnrecognizedOptionError(ParseError): ...
class MissingValueError(ParseError): ...
class TypeMismatchError(ParseError): ...
class IntegerOverflowError(ParseError): ...


class ParseWarning(ABC, Warning):
    """
    Base class for non-fatal parse notices.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "title": "bold #FFC2E0",
            "message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        stderr.print(self, soft_wrap=True)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class RepeatedOptionWarning(ParseWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise errors are raised
      and warnings are emitted with warnings.warn.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    returns None when nothing is registered.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "ParseError",
    "MalformedTokenError",
    "AmbiguousClusterValueError",
    "InvalidClusterMemberError",
    "UnrecognizedOptionError",
    "MissingValueError",
    "TypeMismatchError",
    "IntegerOverflowError",
    "ParseWarning",
    "RepeatedOptionWarning",
    "FaultCode",
    "EXIT_STATUS",
    "trigger",
    "getdoc",
)
