"""
Schema and Declaration Protocol for StrictHash.

A Schema is the ordered, closed set of attributes of one concrete record
type. It is filled in exactly once, while that type is being defined, through
a ``Declarations`` builder handed to the type's ``declare`` hook. When the
class statement ends the builder is closed and the schema is frozen in
practice: any later declaration raises ``DeclarationNotPermittedError``.

Default strategies:
    SharedDefault : one literal value, handed out verbatim to every instance
    FactoryDefault: a zero-argument callable, invoked fresh per instance
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Iterator, Mapping, Optional, Union

from .normalize import is_public_identifier, is_truthy


logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================

# Predicate attributes gain a query accessor named PREDICATE_PREFIX + name
PREDICATE_PREFIX = "is_"

# Name of the class-body function that receives the Declarations builder
DECLARE_HOOK = "declare"


class _Missing(Enum):
    MISSING = "MISSING"

    def __repr__(self) -> str:
        return "MISSING"


# Marks "no default supplied"; None is a legitimate literal default
MISSING = _Missing.MISSING


# =============================================================================
# DECLARATION ERRORS
# =============================================================================

class InvalidDeclarationError(ValueError):
    """Raised when an attribute declaration is malformed or conflicts."""

    def __init__(self, name: Any, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"cannot declare {name!r}: {reason}")


class DeclarationNotPermittedError(RuntimeError):
    """Raised when declaring against a type whose definition has ended."""

    def __init__(self, name: Any, owner: str):
        self.name = name
        self.owner = owner
        super().__init__(
            f"cannot declare {name!r} on {owner}: attributes may only be "
            f"declared while the type is being defined"
        )


# =============================================================================
# DEFAULT STRATEGIES
# =============================================================================

@dataclass(frozen=True)
class SharedDefault:
    """
    A literal default shared by every instance that does not override it.

    The value is never copied. Mutating a mutable shared default in place is
    visible through every instance still holding it.
    """
    value: Any

    def produce(self) -> Any:
        return self.value


@dataclass(frozen=True)
class FactoryDefault:
    """A default produced by calling ``factory()`` once per construction."""
    factory: Callable[[], Any]

    def produce(self) -> Any:
        return self.factory()


Default = Union[SharedDefault, FactoryDefault]


@dataclass(frozen=True)
class AttributeSpec:
    """One declared attribute: its name, default strategy, and predicate flag."""
    name: str
    default: Default
    is_predicate: bool = False

    @property
    def query_name(self) -> Optional[str]:
        """Name of the boolean query accessor, for predicates only."""
        if not self.is_predicate:
            return None
        return PREDICATE_PREFIX + self.name


# =============================================================================
# SCHEMA
# =============================================================================

class Schema:
    """
    Ordered collection of AttributeSpecs owned by one record type.

    Invariant: no two specs share a name. A schema accepts new specs only
    until ``close()`` is called.
    """

    def __init__(self, owner: str, specs: Iterable[AttributeSpec] = ()):
        self.owner = owner
        self._specs: dict[str, AttributeSpec] = {}
        self._closed = False
        for spec in specs:
            self._specs[spec.name] = spec

    def __iter__(self) -> Iterator[AttributeSpec]:
        return iter(self._specs.values())

    def __len__(self) -> int:
        return len(self._specs)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name in self._specs

    def __getitem__(self, name: str) -> AttributeSpec:
        return self._specs[name]

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<Schema {self.owner} ({state}): {self.names()}>"

    @property
    def closed(self) -> bool:
        return self._closed

    def names(self) -> list[str]:
        return list(self._specs)

    def predicates(self) -> list[str]:
        return [spec.name for spec in self if spec.is_predicate]

    def extend(self, owner: str) -> Schema:
        """Open a new schema for a subclass, starting from this one's specs."""
        return Schema(owner, self)

    def add(self, spec: AttributeSpec) -> None:
        if self._closed:
            raise DeclarationNotPermittedError(spec.name, self.owner)
        if spec.name in self._specs:
            raise InvalidDeclarationError(spec.name, f"already declared on {self.owner}")
        self._specs[spec.name] = spec

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            logger.debug("Closed schema for %s with %d attribute(s)", self.owner, len(self))

    def materialize(self, overrides: Mapping[str, Any]) -> dict[str, Any]:
        """
        Build the initial value map for a new instance.

        Overridden attributes take the override verbatim and their default is
        never produced, so factories of overridden attributes are not called.
        """
        return {
            spec.name: overrides[spec.name] if spec.name in overrides else spec.default.produce()
            for spec in self
        }


# =============================================================================
# DECLARATION BUILDER
# =============================================================================

class Declarations:
    """
    Builder used by a record type's ``declare`` hook.

    Every method returns the builder so calls chain::

        class Options(StrictHash):
            def declare(d):
                d.attribute("seen", factory=list).predicates(verbose=False)
    """

    def __init__(self, owner: type):
        self._owner = owner
        self._schema: Schema = owner.schema

    @property
    def closed(self) -> bool:
        return self._schema.closed

    def attribute(self, name: str, default: Any = MISSING, *, factory: Any = MISSING) -> Declarations:
        return self._declare(name, default, factory, is_predicate=False)

    def attributes(self, mapping: Optional[Mapping[str, Any]] = None, /, **defaults: Any) -> Declarations:
        for name, value in _pairs(mapping, defaults):
            self._declare(name, value, MISSING, is_predicate=False)
        return self

    def predicate(self, name: str, default: Any = MISSING, *, factory: Any = MISSING) -> Declarations:
        return self._declare(name, default, factory, is_predicate=True)

    def predicates(self, mapping: Optional[Mapping[str, Any]] = None, /, **defaults: Any) -> Declarations:
        for name, value in _pairs(mapping, defaults):
            self._declare(name, value, MISSING, is_predicate=True)
        return self

    def close(self) -> None:
        self._schema.close()

    def _declare(self, name: Any, default: Any, factory: Any, is_predicate: bool) -> Declarations:
        if self._schema.closed:
            raise DeclarationNotPermittedError(name, self._schema.owner)

        spec = AttributeSpec(
            name=self._check_name(name),
            default=self._pick_default(name, default, factory),
            is_predicate=is_predicate,
        )
        self._check_conflicts(spec)

        self._schema.add(spec)
        _install_accessors(self._owner, spec)
        logger.debug(
            "Declared %s %r on %s (%s)",
            "predicate" if is_predicate else "attribute",
            spec.name,
            self._schema.owner,
            type(spec.default).__name__,
        )
        return self

    def _check_name(self, name: Any) -> str:
        if not isinstance(name, str):
            raise _rejected(name, "attribute names must be declared as identifiers (str)")
        if not is_public_identifier(name):
            raise _rejected(name, "attribute names must be public, non-keyword identifiers")
        return str.__str__(name)

    def _pick_default(self, name: str, default: Any, factory: Any) -> Default:
        if default is MISSING and factory is MISSING:
            raise _rejected(name, "a default value or a factory is required")
        if default is not MISSING and factory is not MISSING:
            raise _rejected(name, "give either a default value or a factory, not both")
        if factory is not MISSING:
            if not callable(factory):
                raise _rejected(name, f"factory must be callable, got {type(factory).__name__}")
            return FactoryDefault(factory)
        return SharedDefault(default)

    def _check_conflicts(self, spec: AttributeSpec) -> None:
        if spec.name in self._schema:
            raise _rejected(spec.name, f"already declared on {self._schema.owner}")

        taken = [spec.name]
        if spec.query_name is not None:
            taken.append(spec.query_name)
        for member in taken:
            if member == DECLARE_HOOK or hasattr(self._owner, member):
                raise _rejected(
                    spec.name,
                    f"{member!r} conflicts with an existing member of {self._schema.owner}",
                )


def _pairs(mapping: Optional[Mapping[str, Any]], defaults: Mapping[str, Any]) -> list[tuple[Any, Any]]:
    pairs = list(mapping.items()) if mapping is not None else []
    pairs.extend(defaults.items())
    return pairs


def _rejected(name: Any, reason: str) -> InvalidDeclarationError:
    logger.debug("Rejected declaration of %r: %s", name, reason)
    return InvalidDeclarationError(name, reason)


def _install_accessors(owner: type, spec: AttributeSpec) -> None:
    """Attach ``<name>`` (and for predicates ``is_<name>()``) to the owner."""
    name = spec.name

    def getter(self):
        return self._values[name]

    def setter(self, value):
        self._values[name] = value

    setattr(owner, name, property(getter, setter, doc=f"The {name!r} attribute."))

    if spec.query_name is not None:
        def query(self) -> bool:
            return is_truthy(self._values[name])

        query.__name__ = spec.query_name
        query.__qualname__ = f"{owner.__qualname__}.{spec.query_name}"
        query.__doc__ = f"Whether {name!r} holds a value other than None or False."
        setattr(owner, spec.query_name, query)
