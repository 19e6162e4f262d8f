"""Name Transform — attribute names to wire parameter names and back.

Invariants:
    - to_wire_name is idempotent: snake_case input comes back unchanged
    - Digits stay attached to the preceding word (addressLine1 -> address_line1)
    - to_field_name never fails: unknown shapes are returned as-is
"""

import re

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")
_BRACKET_SEGMENT = re.compile(r"\[([^\]]*)\]")


def to_wire_name(name: str) -> str:
    """camelCase / snake_case attribute name -> snake_case wire name."""
    return _CAMEL_BOUNDARY.sub(r"_\1", name).lower()


def to_field_name(param: str) -> str:
    """Wire parameter -> dotted attribute path on the schemas.

    `legal_entity[address][city]` -> `legal_entity.address.city`
    `items[0][price]`             -> `items[0].price`
    """
    head, _, _ = param.partition("[")
    path = head
    for segment in _BRACKET_SEGMENT.findall(param[len(head):]):
        if segment.isdigit() or segment == "":
            path += f"[{segment}]"
        else:
            path += f".{segment}"
    return path
