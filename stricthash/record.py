"""
StrictHash, the schema-declared record/hash hybrid base type.

Concrete record types derive from StrictHash and declare their attributes in
a ``declare`` function in the class body::

    class Example(StrictHash):
        def declare(d):
            d.attributes(a=1, b="c")
            d.attribute("seen", factory=list)
            d.predicate("verbose", False)

Instances behave like an ordered mapping over exactly the declared names.
Reading, writing, constructing or merging with any other key fails with
UnknownKeyError; typos never pass silently.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, ClassVar, Iterator, Mapping, Optional

from .normalize import normalize_key
from .schema import DECLARE_HOOK, PREDICATE_PREFIX, Declarations, Schema


logger = logging.getLogger(__name__)


# Label used when rendering types created by StrictHash.define() without a name
ANONYMOUS_LABEL = "subclass"


# =============================================================================
# ACCESS ERRORS
# =============================================================================

class UnknownKeyError(KeyError):
    """Raised when a key that is not a declared attribute is read or written."""

    def __init__(self, keys: list[Any], owner: str):
        self.keys = keys
        self.owner = owner
        listed = ", ".join(repr(key) for key in keys)
        self.message = f"{owner} has no attribute(s) {listed}"
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class NoSuchPredicateError(AttributeError):
    """Raised when asking for the query accessor of a non-predicate attribute."""

    def __init__(self, name: str, owner: str):
        self.name = name
        self.owner = owner
        super().__init__(
            f"{owner}.{name} is not a predicate; "
            f"{PREDICATE_PREFIX}{name}() is only defined for predicates"
        )


# =============================================================================
# STRICT HASH
# =============================================================================

class StrictHash:
    """
    Base type for records with a fixed, ordered set of named attributes.

    The key set of every instance is exactly ``type(instance).schema``; it
    never grows or shrinks. Values are mutable in place.
    """

    __slots__ = ("_values",)

    schema: ClassVar[Schema]
    _anonymous: ClassVar[bool] = False

    def __init_subclass__(cls, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        parent = next(base for base in cls.__mro__[1:] if "schema" in vars(base))
        cls._anonymous = vars(cls).get("_anonymous", False)
        cls.schema = parent.schema.extend(cls.label())

        builder = Declarations(cls)
        hook = vars(cls).get(DECLARE_HOOK)
        if hook is not None:
            delattr(cls, DECLARE_HOOK)
            if isinstance(hook, staticmethod):
                hook = hook.__func__
            hook(builder)
        builder.close()

    @classmethod
    def define(cls, declare: Callable[[Declarations], Any], name: Optional[str] = None) -> type:
        """
        Create a subclass whose attributes are declared by ``declare(d)``.

        Without a ``name`` the new type is rendered as ``subclass``.
        """
        namespace = {
            DECLARE_HOOK: staticmethod(declare),
            "_anonymous": name is None,
        }
        defined = type(cls)(name or ANONYMOUS_LABEL, (cls,), namespace)
        logger.debug("Defined %s from %s: %s", defined.label(), cls.label(), defined.schema.names())
        return defined

    @classmethod
    def label(cls) -> str:
        """Name used for this type in reprs and error messages."""
        return ANONYMOUS_LABEL if cls._anonymous else cls.__qualname__

    def __init__(self, overrides: Optional[Mapping[Any, Any]] = None, /, **kwargs: Any):
        given = self._normalized(overrides, kwargs)
        object.__setattr__(self, "_values", type(self).schema.materialize(given))

    @classmethod
    def _normalized(cls, *sources: Optional[Mapping[Any, Any]]) -> dict[str, Any]:
        """Normalize the keys of each mapping, failing on any unknown key."""
        normalized: dict[str, Any] = {}
        unknown: list[Any] = []
        for source in sources:
            if source is None:
                continue
            for key, value in source.items():
                name = normalize_key(key)
                if name is None or name not in cls.schema:
                    unknown.append(key)
                    continue
                normalized[name] = value
        if unknown:
            raise UnknownKeyError(unknown, cls.label())
        return normalized

    def _resolve(self, key: Any) -> str:
        name = normalize_key(key)
        if name is None or name not in type(self).schema:
            raise UnknownKeyError([key], type(self).label())
        return name

    # -------------------------------------------------------------------------
    # Strict access
    # -------------------------------------------------------------------------

    def __getitem__(self, key: Any) -> Any:
        return self._values[self._resolve(key)]

    def __setitem__(self, key: Any, value: Any) -> None:
        self._values[self._resolve(key)] = value

    def get(self, key: Any) -> Any:
        """Return the value for ``key``. Unlike ``dict.get`` there is no fallback."""
        return self[key]

    def set(self, key: Any, value: Any) -> Any:
        self[key] = value
        return value

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails
        if name.startswith(PREDICATE_PREFIX) and name[len(PREDICATE_PREFIX):] in type(self).schema:
            raise NoSuchPredicateError(name[len(PREDICATE_PREFIX):], type(self).label())
        raise AttributeError(f"{type(self).label()!r} object has no attribute {name!r}")

    def __setattr__(self, name: str, value: Any) -> None:
        # _values is the storage slot, restored by copy and pickle
        if name != "_values" and name not in type(self).schema:
            raise AttributeError(
                f"cannot set {name!r}: not a declared attribute of {type(self).label()}"
            )
        object.__setattr__(self, name, value)

    def __contains__(self, key: object) -> bool:
        return normalize_key(key) in type(self).schema

    def has_key(self, key: Any) -> bool:
        return key in self

    include = has_key
    member = has_key

    # -------------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------------

    def keys(self) -> list[str]:
        return type(self).schema.names()

    def values(self) -> list[Any]:
        return [self._values[name] for name in type(self).schema.names()]

    def items(self) -> list[tuple[str, Any]]:
        return list(self)

    def to_dict(self) -> dict[str, Any]:
        """Independent snapshot of the current values, in declaration order."""
        return dict(self._values)

    to_h = to_dict
    to_hash = to_dict

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        for name in type(self).schema.names():
            yield name, self._values[name]

    def each(self, action: Optional[Callable[[str, Any], Any]] = None):
        """
        Apply ``action(name, value)`` to every attribute and return self.

        Without an action, return a fresh iterator of (name, value) pairs.
        """
        if action is None:
            return iter(self)
        for name, value in self:
            action(name, value)
        return self

    def __len__(self) -> int:
        return len(type(self).schema)

    def merge(self, other: Optional[Mapping[Any, Any]] = None, /, **kwargs: Any) -> StrictHash:
        """Return a new instance with ``other``/``kwargs`` overriding this one's values."""
        changes = self._normalized(other, kwargs)
        return type(self)({**self._values, **changes})

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._values == other._values

    __hash__ = None

    def __repr__(self) -> str:
        pairs = ", ".join(f"{name}: {value!r}" for name, value in self)
        return f"#<StrictHash {type(self).label()}: {{{pairs}}}>"

    def inspect(self) -> str:
        return repr(self)


StrictHash.schema = Schema(StrictHash.__qualname__)
StrictHash.schema.close()
