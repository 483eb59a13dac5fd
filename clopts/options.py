r"""
clopts option descriptors and registry.

Overview
- Option[_T]: one named, typed option with a canonical name, optional aliases,
  a Kind, a default and the configuration field it fills.
- Registry: the fixed, ordered table of options a parser understands.

Metadata (sanitized on construction)
- names: one or more bare names (no leading dash), the first is canonical.
  Names must match r"\w[\w-]*", so "n", "nthreads", "input_file" and "image-file"
  are fine while "-n", "a=b" and "" are not. Duplicates are rejected.
- kind: Kind or its string value ("string", "char", "bool", "int").
- default: a valid value of kind; when omitted, the kind's zero value.
- field: identifier under which the value is stored; defaults to the canonical name.
  Mapping method names (keys, items, values, get) are reserved.
- descr: Unset | str (short help), non-empty when provided.

Registry invariants
- No two options share a name across their combined name sets.
- No two options share a field.
- Lookup walks options in declaration order and stops at the first match.

Quick example:
    >>> from clopts.options import Option, Registry
    >>> registry = Registry((
    ...     Option("nthreads", "n", kind="int"),
    ...     Option("quiet", "q", kind="bool"),
    ... ))
    >>> registry.match("n").canonical
    'nthreads'
"""
import re
from collections.abc import Mapping

from .utils import *
from .values import Kind


def _sanitize_names(cls, metadata, /):
    """
    Internal: validate option names and freeze them into a tuple.
    """
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    names = []
    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not name:
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif not re.fullmatch(r"\w[\w-]*", name):
            raise ValueError(f"{cls.__typename__} names must be bare option names, got {name!r}")
        elif name in names:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        names.append(name)

    metadata["names"] = tuple(names)


def _sanitize_value_metadata(cls, metadata, /):
    """
    Internal: normalize kind, default, field and descr.
    """
    kind = metadata["kind"]
    if isinstance(kind, str):
        try:
            kind = Kind(kind)
        except ValueError:
            raise ValueError(f"{cls.__typename__} 'kind' must be one of {', '.join(k.value for k in Kind)}") from None
    elif not isinstance(kind, Kind):
        raise TypeError(f"{cls.__typename__} 'kind' must be a kind or a string")
    metadata["kind"] = kind

    default = coalesce(metadata["default"], kind.zero)
    if not kind.accepts(default):
        raise ValueError(f"{cls.__typename__} default {default!r} is not a valid {kind.value} value")
    metadata["default"] = default

    field = coalesce(metadata["field"], metadata["names"][0])
    if not isinstance(field, str):
        raise TypeError(f"{cls.__typename__} 'field' must be a string")
    elif not field.isidentifier() or field.startswith("_"):
        raise ValueError(f"{cls.__typename__} 'field' must be a public identifier, got {field!r}")
    elif field in dir(Mapping):
        raise ValueError(f"{cls.__typename__} 'field' {field!r} is reserved by the configuration mapping")
    metadata["field"] = field

    if not isinstance(descr := metadata["descr"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


class Option[_T](metaclass=Introspectable):
    """
    Named, typed option specification.

    Option is an immutable descriptor: it never holds parsed state. The parser
    writes values into a fresh namespace per run, keyed by the option's field.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes.
    - canonical / aliases split names into the primary name and the rest.
    """

    __introspectable__ = (
        "names",
        "kind",
        "default",
        "field",
        "descr",
    )

    def __new__(
            cls,
            *names,
            kind=Kind.STRING,
            default=Unset,
            field=Unset,
            descr=Unset,
    ):
        """
        Construct an Option with the provided metadata.

        Parameters
        - names: one or more str; the first is canonical, the rest are aliases.
        - kind: Kind | str
        - default: value used when the option is absent from the command line.
        - field: configuration attribute name (canonical name when omitted).
        - descr: short description.
        """
        metadata = {
            "names": names,
            "kind": kind,
            "default": default,
            "field": field,
            "descr": descr,
        }
        _sanitize_names(cls, metadata)
        _sanitize_value_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def canonical(self):
        return self._names[0]

    @property
    def aliases(self):
        return self._names[1:]

    def matches(self, name, /):
        """
        Tell whether name is the canonical name or one of the aliases.
        """
        return name in self._names


class Registry(metaclass=Introspectable):
    """
    Ordered, fixed table of options.

    Adding an option to a program is a data change: append one more Option to
    the tuple the registry is built from.
    """

    __introspectable__ = (
        "options",
    )

    def __init__(self, options, /):
        options = tuple(options)
        names = {}
        fields = {}
        for option in options:
            if not isinstance(option, Option):
                raise TypeError(f"{type(self).__typename__} entries must be options, got {option!r}")
            for name in option.names:
                if (owner := names.setdefault(name, option)) is not option:
                    raise ValueError(
                        f"{type(self).__typename__} name {name!r} is already in use by option {owner.canonical!r}"
                    )
            if (owner := fields.setdefault(option.field, option)) is not option:
                raise ValueError(
                    f"{type(self).__typename__} field {option.field!r} is already in use by option {owner.canonical!r}"
                )
        self._options = options

    @property
    def names(self):
        """
        Every name the registry understands, in declaration order.
        """
        return tuple(name for option in self._options for name in option.names)

    def match(self, name, /):
        """
        Return the first option (in declaration order) answering to name, or None.
        """
        for option in self._options:
            if option.matches(name):
                return option
        return None

    def defaults(self):
        """
        Return a fresh {field: default} dict in declaration order.
        """
        return {option.field: option.default for option in self._options}

    def __iter__(self):
        return iter(self._options)

    def __len__(self):
        return len(self._options)


__all__ = (
    "Option",
    "Registry",
)
