"""
Render SchemaNode trees as text.

The renderer is a structural recursion over the node types; the words it
emits come from a `Vocabulary`, so the same tree can be rendered for a
different validation library by passing another vocabulary.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Dict

from .schema import ArrayOf, Empty, ObjectShape, Primitive, PrimitiveKind, SchemaNode, Union

INDENT = "  "

_IDENTIFIER = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")


@dataclass(frozen=True)
class Vocabulary:
    primitives: Dict[PrimitiveKind, str] = field(default_factory=dict)
    empty: str = ""
    array: tuple = ("", "")
    shape: tuple = ("", "")
    union: tuple = ("", "")


PROP_TYPES = Vocabulary(
    primitives={
        PrimitiveKind.STRING: "PropType.string",
        PrimitiveKind.NUMBER: "PropType.number",
        PrimitiveKind.BOOLEAN: "PropType.bool",
        # No type is emitted for null; the annotation is left blank
        PrimitiveKind.UNKNOWN: "",
    },
    empty="",
    array=("PropType.arrayOf(", ")"),
    shape=("PropType.shape({", "})"),
    union=("PropType.oneOfType([", "])"),
)


def indent(depth: int) -> str:
    return INDENT * depth


def field_name(name: str) -> str:
    """Emit a field name bare when it is a valid identifier, quoted otherwise"""
    if _IDENTIFIER.fullmatch(name):
        return name
    return json.dumps(name, ensure_ascii=False)


def render(node: SchemaNode, depth: int = 0, vocabulary: Vocabulary = PROP_TYPES) -> str:
    """
    Render `node` as an expression whose nested lines are indented for `depth`.

    The first line carries no indentation of its own; the caller places it.
    """
    if isinstance(node, Primitive):
        return vocabulary.primitives[node.kind]

    if isinstance(node, Empty):
        return vocabulary.empty

    inner = indent(depth + 1)
    outer = indent(depth)

    if isinstance(node, ArrayOf):
        open_, close = vocabulary.array
        element = render(node.element, depth + 1, vocabulary)
        return f"{open_}\n{inner}{element}\n{outer}{close}"

    if isinstance(node, ObjectShape):
        open_, close = vocabulary.shape
        lines = [
            f"{inner}{field_name(name)}: {render(value, depth + 1, vocabulary)},"
            for name, value in node
        ]
        body = "\n".join(lines)
        return f"{open_}\n{body}\n{outer}{close}"

    if isinstance(node, Union):
        open_, close = vocabulary.union
        body = ",\n".join(f"{inner}{render(a, depth + 1, vocabulary)}" for a in node.alternatives)
        return f"{open_}\n{body}\n{outer}{close}"

    raise TypeError(f"Not a schema node: {node!r}")
