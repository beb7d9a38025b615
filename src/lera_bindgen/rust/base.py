"""Base utility functions for Rust AST traversal.

These helpers wrap common tree-sitter operations used by the marker
classifier, the type and expression converters and the model extractor.
"""

from tree_sitter import Node

_DEFAULT_ENCODING = "utf-8"

# Node types that may sit between an item and its attributes
_COMMENT_NODE_TYPES = frozenset({"line_comment", "block_comment"})


def get_node_text(node: Node, source_code: str) -> str:
    """Get the text content of an AST node.

    Args:
        node: Tree-sitter node with start_byte and end_byte attributes
        source_code: Original source code string

    Returns:
        Text content of the node

    """
    source_bytes = source_code.encode(_DEFAULT_ENCODING)
    return source_bytes[node.start_byte : node.end_byte].decode(_DEFAULT_ENCODING)


def find_child_by_type(node: Node, child_type: str) -> Node | None:
    """Find the first direct child of a specific type.

    Args:
        node: Parent node to search in
        child_type: Type of child node to find

    Returns:
        First matching child node or None

    """
    for child in node.children:
        if child.type == child_type:
            return child
    return None


def find_children_by_type(node: Node, child_type: str) -> list[Node]:
    """Find all direct children of a specific type.

    Args:
        node: Parent node to search in
        child_type: Type of children to find

    Returns:
        List of matching child nodes

    """
    return [child for child in node.children if child.type == child_type]


def is_comment(node: Node) -> bool:
    """Check if a node is a line or block comment."""
    return node.type in _COMMENT_NODE_TYPES


def significant_named_children(node: Node) -> list[Node]:
    """Named children of a node with comments filtered out."""
    return [child for child in node.named_children if not is_comment(child)]


def preceding_attributes(node: Node) -> list[Node]:
    """Collect the outer attributes attached to an item.

    Attributes are the ``attribute_item`` siblings immediately before the
    item, possibly interleaved with comments.

    Args:
        node: Item node (struct, impl, function)

    Returns:
        Attribute items in source order

    """
    attributes: list[Node] = []
    sibling = node.prev_named_sibling
    while sibling is not None:
        if sibling.type == "attribute_item":
            attributes.append(sibling)
        elif not is_comment(sibling):
            break
        sibling = sibling.prev_named_sibling
    attributes.reverse()
    return attributes


def is_public(node: Node, source_code: str) -> bool:
    """Check if an item is declared with plain ``pub`` visibility.

    Restricted visibility such as ``pub(crate)`` does not count.
    """
    visibility = find_child_by_type(node, "visibility_modifier")
    if visibility is None:
        return False
    return get_node_text(visibility, source_code).strip() == "pub"


def is_async_function(node: Node, source_code: str) -> bool:
    """Check if a function item carries the ``async`` modifier."""
    modifiers = find_child_by_type(node, "function_modifiers")
    if modifiers is None:
        return False
    return "async" in get_node_text(modifiers, source_code).split()


def item_name(node: Node, source_code: str) -> str | None:
    """Name of a struct, function or other named item."""
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return None
    return get_node_text(name_node, source_code)
