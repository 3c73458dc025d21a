"""
Schema node model.

A schema is a tree of immutable nodes. Nodes are frozen dataclasses, so two
nodes compare (and hash) equal exactly when they describe the same
structure; union deduplication relies on that.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Iterator, Mapping, Tuple, Union as TypingUnion


class JsonKind(Enum):
    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"
    UNKNOWN = "unknown"

    @staticmethod
    def of(value: Any) -> 'JsonKind':
        """Classify a decoded JSON value"""
        if value is None:
            return JsonKind.NULL
        # bool is a subclass of int
        if isinstance(value, bool):
            return JsonKind.BOOLEAN
        if isinstance(value, (int, float)):
            return JsonKind.NUMBER
        if isinstance(value, str):
            return JsonKind.STRING
        if isinstance(value, (list, tuple)):
            return JsonKind.ARRAY
        if isinstance(value, Mapping):
            return JsonKind.OBJECT
        return JsonKind.UNKNOWN


class PrimitiveKind(Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    UNKNOWN = "unknown"


class Container(Enum):
    ARRAY = "array"
    OBJECT = "object"


@dataclass(frozen=True)
class Primitive:
    kind: PrimitiveKind


@dataclass(frozen=True)
class Empty:
    """Degenerate node for an empty array or object"""
    container: Container


@dataclass(frozen=True)
class ArrayOf:
    element: 'SchemaNode'


@dataclass(frozen=True)
class ObjectShape:
    fields: Tuple[Tuple[str, 'SchemaNode'], ...]

    @staticmethod
    def from_items(items: Iterable[Tuple[str, 'SchemaNode']]) -> 'ObjectShape':
        return ObjectShape(tuple(items))

    def names(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.fields)

    def as_dict(self) -> dict:
        return dict(self.fields)

    def __iter__(self) -> Iterator[Tuple[str, 'SchemaNode']]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)


@dataclass(frozen=True)
class Union:
    alternatives: Tuple['SchemaNode', ...]


SchemaNode = TypingUnion[Primitive, Empty, ArrayOf, ObjectShape, Union]

STRING = Primitive(PrimitiveKind.STRING)
NUMBER = Primitive(PrimitiveKind.NUMBER)
BOOLEAN = Primitive(PrimitiveKind.BOOLEAN)
UNKNOWN = Primitive(PrimitiveKind.UNKNOWN)
EMPTY_ARRAY = Empty(Container.ARRAY)
EMPTY_OBJECT = Empty(Container.OBJECT)


def alternatives_of(node: SchemaNode) -> Tuple[SchemaNode, ...]:
    """The members of a union, or the node itself as a single alternative"""
    if isinstance(node, Union):
        return node.alternatives
    return (node,)


def make_union(nodes: Iterable[SchemaNode]) -> SchemaNode:
    """
    Build a flattened, deduplicated union preserving first-seen order.

    Collapses to the single member when only one distinct alternative is
    left, so callers never see a one-element union.
    """
    distinct = {}
    for node in nodes:
        for alternative in alternatives_of(node):
            distinct.setdefault(alternative, None)
    alternatives = tuple(distinct)
    if len(alternatives) == 1:
        return alternatives[0]
    return Union(alternatives)


def is_object_like(node: SchemaNode) -> bool:
    return isinstance(node, ObjectShape) or node == EMPTY_OBJECT


def is_array_like(node: SchemaNode) -> bool:
    return isinstance(node, ArrayOf) or node == EMPTY_ARRAY


def describe(node: SchemaNode) -> str:
    """Short one-line summary of a node, used in log messages"""
    if isinstance(node, Primitive):
        return node.kind.value
    if isinstance(node, Empty):
        return f"empty {node.container.value}"
    if isinstance(node, ArrayOf):
        return f"array of {describe(node.element)}"
    if isinstance(node, ObjectShape):
        return f"shape with {len(node)} field(s)"
    return "one of " + ", ".join(describe(a) for a in node.alternatives)
