"""
clopts token cursor and shape classification.

Shapes
- Named(token, name, value, attached)
  • "--name=value", "-n=value" → attached value (possibly empty).
  • "--name", "-n"             → value deferred to the next token.
- Cluster(token, names)
  • "-abc" → every character is its own boolean option.

Anything else is a fault:
- no leading dash at all → MalformedTokenError
- "-abc=..." (one dash, several characters, '=' after the first one)
  → AmbiguousClusterValueError

Cursor
- walks the token tuple one step at a time. A step consumes one or two tokens
  and may be followed by a single regression that gives back a look-ahead
  token; a regression can never reach the token that began the step.
"""
from typing import NamedTuple

from .faults import *
from .utils import ordinal


class Named(NamedTuple):
    token: str
    name: str
    value: str
    attached: bool


class Cluster(NamedTuple):
    token: str
    names: str


def classify(token, /, *, index=1):
    """
    Decide which grammar shape a token has.

    Parameters
    - token: raw command-line token.
    - index: 1-based position of the token (for messages).

    Returns
    - Named | Cluster

    Raises
    - MalformedTokenError, AmbiguousClusterValueError
    """
    stripped = token.lstrip("-")
    dashes = len(token) - len(stripped)
    equals = stripped.find("=")

    if not dashes:
        raise MalformedTokenError(
            "expected -[option] or --[option] at %s position, got %r" % (ordinal(index), token),
            title="malformed token",
            code=FaultCode.MALFORMED_TOKEN,
            token=token,
            index=index,
            hint="every argument must be an option (for example: --name=value or -n value)",
            docs=getdoc(FaultCode.MALFORMED_TOKEN),
        )

    if dashes == 1 and len(stripped) > 1 and (equals == -1 or equals > 1):
        if equals != -1:
            raise AmbiguousClusterValueError(
                "unrecognized option %r in %r at %s position" % (stripped[:equals], token, ordinal(index)),
                title="ambiguous cluster value",
                code=FaultCode.AMBIGUOUS_CLUSTER_VALUE,
                input=stripped[:equals],
                token=token,
                index=index,
                hint="single dashes are for one single-character option (e.g. -n 5) or a cluster "
                     "of single-character boolean options; did you mean --%s?" % stripped,
                docs=getdoc(FaultCode.AMBIGUOUS_CLUSTER_VALUE),
            )
        return Cluster(token, stripped)

    if equals != -1:
        return Named(token, stripped[:equals], stripped[equals + 1:], True)
    return Named(token, stripped, "", False)


class Cursor:
    """
    Position into an immutable token sequence.

    The cursor exposes the current token, a peek at the following one, and the
    three moves the parser needs: advance by one, advance by two, and regress
    by one right after a two-token advance.
    """

    def __init__(self, tokens, /):
        self._tokens = tuple(tokens)
        self._index = 0
        self._mark = 0

    @property
    def index(self):
        """0-based index of the current token."""
        return self._index

    @property
    def position(self):
        """1-based position of the current token, as shown to users."""
        return self._index + 1

    @property
    def current(self):
        return self._tokens[self._index]

    def peek(self, offset=1, default="", /):
        """
        Return the token offset steps ahead, or default past the end.
        """
        try:
            return self._tokens[self._index + offset]
        except IndexError:
            return default

    def advance(self, steps=1, /):
        """
        Consume one or two tokens.
        """
        if steps not in (1, 2):
            raise ValueError("cursor can only advance by one or two tokens")
        if self._index + steps > len(self._tokens):
            raise ValueError("cursor cannot advance past the end of the tokens")
        self._mark = self._index
        self._index += steps

    def regress(self):
        """
        Give back the last token of the previous step.
        """
        if self._index - 1 <= self._mark:
            raise RuntimeError("cursor cannot regress onto the token that began the current step")
        self._index -= 1

    def __bool__(self):
        return self._index < len(self._tokens)

    def __len__(self):
        return len(self._tokens) - self._index

    def __repr__(self):
        return "cursor(index=%d, tokens=%r)" % (self._index, self._tokens)


__all__ = (
    "Named",
    "Cluster",
    "Cursor",
    "classify",
)
