"""
Schema inference from example JSON data.

`infer` walks a decoded JSON value once and returns a SchemaNode tree.
Arrays whose elements are objects are treated as lists of records: all
object elements are deep-merged into a single shape instead of becoming
separate union members (see `merge_object_shapes`).
"""

from typing import Any, Iterable, List, Sequence

from .schema import (
    ArrayOf,
    BOOLEAN,
    EMPTY_ARRAY,
    EMPTY_OBJECT,
    JsonKind,
    NUMBER,
    ObjectShape,
    STRING,
    SchemaNode,
    UNKNOWN,
    alternatives_of,
    is_array_like,
    is_object_like,
    make_union,
)

_PRIMITIVES = {
    JsonKind.STRING: STRING,
    JsonKind.NUMBER: NUMBER,
    JsonKind.BOOLEAN: BOOLEAN,
    JsonKind.NULL: UNKNOWN,
    JsonKind.UNKNOWN: UNKNOWN,
}

# Placeholder for where the merged object shape goes among array alternatives
_OBJECTS = object()


def infer(value: Any) -> SchemaNode:
    """Infer the schema of a decoded JSON value. Never raises for JSON data."""
    kind = JsonKind.of(value)
    if kind is JsonKind.ARRAY:
        return infer_array(value)
    if kind is JsonKind.OBJECT:
        return infer_object(value)
    return _PRIMITIVES[kind]


def infer_array(values: Sequence[Any]) -> SchemaNode:
    if not values:
        return EMPTY_ARRAY
    return array_of([infer(v) for v in values])


def infer_object(value) -> SchemaNode:
    if not value:
        return EMPTY_OBJECT
    return ObjectShape.from_items((str(key), infer(item)) for key, item in value.items())


def array_of(element_schemas: Iterable[SchemaNode]) -> SchemaNode:
    """
    Build the schema of an array from the schemas of its elements.

    Object-shaped elements are merged into one shape that takes the place
    of the first object element; every other distinct schema becomes a
    union alternative in first-seen order.
    """
    ordered = []
    objects = []
    for schema in element_schemas:
        for alternative in alternatives_of(schema):
            if is_object_like(alternative):
                if not objects:
                    ordered.append(_OBJECTS)
                objects.append(alternative)
            else:
                ordered.append(alternative)

    if not ordered:
        return EMPTY_ARRAY

    merged = merge_object_shapes(objects) if objects else None
    return ArrayOf(make_union(merged if node is _OBJECTS else node for node in ordered))


def merge_object_shapes(shapes: Sequence[SchemaNode]) -> SchemaNode:
    """
    Deep-merge object shapes left to right.

    Fields missing from some shapes are kept as-is (there is no optional
    marker). Conflicting fields are resolved by `merge_nodes`. Returns
    EMPTY_OBJECT when no shape contributes a field.
    """
    fields = {}
    for shape in shapes:
        if not isinstance(shape, ObjectShape):
            continue
        for name, node in shape:
            if name in fields:
                fields[name] = merge_nodes(fields[name], node)
            else:
                fields[name] = node

    if not fields:
        return EMPTY_OBJECT
    return ObjectShape.from_items(fields.items())


def merge_nodes(left: SchemaNode, right: SchemaNode) -> SchemaNode:
    """Merge two schemas seen for the same field of different records"""
    if is_array_like(left) and is_array_like(right):
        return concat_arrays(left, right)
    if is_object_like(left) and is_object_like(right):
        return merge_object_shapes([left, right])
    # Last write wins for scalars and mismatched kinds
    return right


def concat_arrays(left: SchemaNode, right: SchemaNode) -> SchemaNode:
    """Schema of the concatenation of two arrays, as if inferred from the joined elements"""
    elements: List[SchemaNode] = [node.element for node in (left, right) if isinstance(node, ArrayOf)]
    return array_of(elements)
