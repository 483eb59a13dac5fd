"""
clopts parser: turn argv-like tokens into a read-only Configuration.

What this module provides
- Parser: owns a Registry and the runtime flags (shell/colorful/fancy/prog),
  runs the dispatch loop and is the single place where faults surface.
- Configuration: the parsed result, a read-only mapping of field → value with
  attribute access.
- Match: how many tokens one dispatch step consumed.

Dispatch loop
- classify the current token (tokens.classify).
- clusters ("-qlp"): every character is dispatched as a boolean option with an
  empty value; the cluster consumes one token.
- named tokens: the value is the attached text, or the next token when no '='
  was given. A non-boolean option needs a non-empty value.
- after a two-token step, a boolean option may ask (through its Coercion) to
  give the look-ahead token back; the cursor then regresses by one.

Quick start
    from clopts import Parser, Option

    parser = Parser((
        Option("nthreads", "n", kind="int"),
        Option("quiet", "q", kind="bool"),
    ))
    config = parser.parse(["-n", "4", "-q"])
    assert config.nthreads == 4 and config.quiet is True
"""
import difflib
import os.path
import shlex
import sys
from collections.abc import Iterable, Mapping
from enum import IntEnum
from types import MappingProxyType

from .faults import *
from .options import Registry
from .tokens import Cluster, Cursor, classify
from .utils import *
from .values import Kind, coerce


class Match(IntEnum):
    """
    Outcome of matching one candidate name; the value is the number of tokens consumed.
    """
    NONE = 0
    ONE = 1
    TWO = 2


def _show(value, /):
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class Configuration(Mapping):
    """
    Read-only record of parsed option values.

    Values are addressable by field, either as attributes (config.nthreads) or
    as mapping keys (config["nthreads"]). Fields keep the registry's declaration
    order. A Configuration compares equal to a dict with the same items.
    """
    __slots__ = ("_values",)

    def __init__(self, values, /):
        object.__setattr__(self, "_values", MappingProxyType(dict(values)))

    def __getitem__(self, field):
        return self._values[field]

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._values[name]
        except KeyError:
            raise AttributeError(f"configuration has no field {name!r}") from None

    def __setattr__(self, name, value):
        raise AttributeError("configuration is read-only")

    def __delattr__(self, name):
        raise AttributeError("configuration is read-only")

    def __reduce__(self):
        return type(self), (dict(self._values),)

    def __rich_repr__(self):
        yield from self._values.items()

    def __repr__(self):
        return "configuration(%s)" % ", ".join("%s=%r" % item for item in self._values.items())

    def __str__(self):
        # {
        #     nthreads: 4,
        #     quiet: true
        # }
        body = ",\n".join("    %s: %s" % (field, _show(value)) for field, value in self._values.items())
        return "{\n%s\n}" % body if body else "{}"


def _progname():
    """
    Program name for diagnostics: basename(argv[0]), or the package name under `python -m`.
    """
    arg0 = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else ""
    if arg0 == "__main__.py":
        modspec = getattr(sys.modules.get("__main__"), "__spec__", None)
        if modspec is not None and modspec.parent:
            return modspec.parent
    return arg0 or "clopts"


def _tokenize(prompt, /):
    """
    Normalize a prompt into a tuple of tokens.

    - Unset: sys.argv[1:]
    - str: shell-style splitting (shlex.split)
    - Iterable[str]: taken as-is (no trimming, empty strings are kept and will
      be reported as malformed)
    """
    if prompt is Unset:
        return tuple(sys.argv[1:])
    if isinstance(prompt, str):
        return tuple(shlex.split(prompt))
    if isinstance(prompt, Iterable):
        tokens = tuple(prompt)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("parse() argument must be a string or an iterable of strings")
        return tokens
    raise TypeError("parse() argument must be a string or an iterable of strings")


class Parser(metaclass=Introspectable):
    """
    Command-line parser for a fixed set of options.

    Runtime flags
    - shell: when True, faults are rendered with rich and errors end the process
      with EXIT_STATUS; when False (default), errors are raised to the caller.
    - colorful: style rendered faults.
    - fancy: render faults inside a panel.
    - prog: program name shown in diagnostics (defaults to basename(argv[0]), or
      the package name when run with `python -m`).

    A Parser keeps no per-parse state, so one instance can parse many times.
    """

    __introspectable__ = (
        "prog",
        "registry",
        "shell",
        "colorful",
        "fancy",
    )

    def __init__(self, options, /, *, prog=Unset, shell=False, colorful=False, fancy=False):
        if not isinstance(prog, str | Unset):
            raise TypeError(f"{type(self).__typename__} 'prog' must be a string")
        self._registry = options if isinstance(options, Registry) else Registry(options)
        self._prog = coalesce(prog, _progname())
        self._shell = bool(shell)
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this parser's runtime flags merged in.
        """
        if (
                not hasattr(fault, "__trigger__") or
                not callable(fault.__trigger__) or
                not hasattr(fault, "__replace__") or
                not callable(fault.__replace__)
        ):
            raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
        trigger(fault, **options, prog=self._prog, shell=self._shell, fancy=self._fancy, colorful=self._colorful)

    def parse(self, prompt=Unset, /):
        """
        Parse a prompt into a Configuration.

        Parameters
        - prompt: Unset (read sys.argv[1:]), a shell-like str, or an iterable of str.

        Returns
        - Configuration with every registered field; absent options keep their default.

        Raises
        - ParseError subclasses (non-shell mode); in shell mode the fault is
          printed and the process exits instead.
        """
        tokens = _tokenize(prompt)
        try:
            namespace = self._parseargs(Cursor(tokens))
        except ParseError as fault:
            self.trigger(fault)
            raise  # trigger() never returns for errors
        return Configuration(self._registry.defaults() | namespace)

    def _parseargs(self, cursor):
        namespace = {}
        while cursor:
            token = cursor.current
            index = cursor.position
            shape = classify(token, index=index)

            if isinstance(shape, Cluster):
                self._resolve_cluster(shape, index, namespace)
                cursor.advance(Match.ONE)
                continue

            if shape.attached:
                value = shape.value
            else:
                value = cursor.peek()

            match, coercion = self._dispatch(
                shape.name, value,
                token=token, index=index, attached=shape.attached, namespace=namespace,
            )
            if match is Match.NONE:
                raise self._unrecognized(shape.name, token, index)

            cursor.advance(match)
            if coercion.regress:
                cursor.regress()
        return namespace

    def _resolve_cluster(self, cluster, index, namespace):
        """
        Set every single-character boolean option of a cluster to its value.
        """
        for name in cluster.names:
            match, _ = self._dispatch(
                name, "",
                token=cluster.token, index=index, attached=True, namespace=namespace, cluster=True,
            )
            if match is Match.NONE:
                raise self._unrecognized(name, cluster.token, index)

    def _dispatch(self, name, value, *, token, index, attached, namespace, cluster=False):
        """
        Match one candidate name against the registry and assign its value.

        Returns
        - (Match.NONE, None) when no option answers to name.
        - (Match.ONE, coercion) when the value was attached or absent.
        - (Match.TWO, coercion) when the value came from the next token.
        """
        option = self._registry.match(name)
        if option is None:
            return Match.NONE, None

        if cluster and option.kind is not Kind.BOOL:
            raise InvalidClusterMemberError(
                "non-boolean option %r in %r at %s position" % (name, token, ordinal(index)),
                title="invalid cluster member",
                code=FaultCode.INVALID_CLUSTER_MEMBER,
                input=name,
                option=option,
                token=token,
                index=index,
                hint="single dashes are for one single-character option (e.g. -n 5) or a cluster "
                     "of single-character boolean options; try separating non-boolean options out",
                docs=getdoc(FaultCode.INVALID_CLUSTER_MEMBER),
            )

        if option.kind is not Kind.BOOL and not value:
            raise MissingValueError(
                "missing value for %s option %r at %s position" % (option.kind.value, name, ordinal(index)),
                title="missing value",
                code=FaultCode.MISSING_VALUE,
                input=name,
                option=option,
                token=token,
                index=index,
                hint="add a value (for example: %s=<value> or %s <value>)" % (spell(name), spell(name)),
                docs=getdoc(FaultCode.MISSING_VALUE),
            )

        coercion = coerce(option.kind, value, name=name, token=token, index=index, lookahead=not attached)

        if option.field in namespace:
            self.trigger(RepeatedOptionWarning(
                "option %r at %s position was already provided; the last value wins" % (name, ordinal(index)),
                title="repeated option",
                code=FaultCode.REPEATED_OPTION,
                input=name,
                option=option,
                token=token,
                index=index,
                hint="keep a single %s" % spell(option.canonical),
                docs=getdoc(FaultCode.REPEATED_OPTION),
            ))
        namespace[option.field] = coercion.value

        if attached or not value:
            return Match.ONE, coercion
        return Match.TWO, coercion

    def _unrecognized(self, name, token, index):
        suggestions = difflib.get_close_matches(name, self._registry.names, 5)
        try:
            hint = "did you mean %r? known options: %s" % (
                spell(suggestions[0]),
                ", ".join(spell(option.canonical) for option in self._registry),
            )
        except IndexError:
            hint = "known options: %s" % ", ".join(spell(option.canonical) for option in self._registry)
        return UnrecognizedOptionError(
            "unrecognized option %r in %r at %s position" % (name, token, ordinal(index)),
            title="unrecognized option",
            code=FaultCode.UNRECOGNIZED_OPTION,
            input=name,
            token=token,
            index=index,
            suggestions=suggestions,
            hint=hint,
            docs=getdoc(FaultCode.UNRECOGNIZED_OPTION),
        )

    def __replace__(self, **overrides):
        options = {
            "prog": self._prog,
            "shell": self._shell,
            "colorful": self._colorful,
            "fancy": self._fancy,
        } | overrides
        return type(self)(self._registry, **options)


__all__ = (
    "Match",
    "Configuration",
    "Parser",
)
