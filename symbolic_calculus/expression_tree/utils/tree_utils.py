"""
Tree Utility Functions

Traversal, search, substitution and binarization helpers shared by the
differentiator, the simplifiers and structural equality. Every helper treats
its input as immutable and returns new nodes only where something changed.
"""

from collections import deque
from typing import List, Set

from ..core.node import Node, IntegerNode, VariableNode
from ..core.operators import NodeType, ASSOCIATIVE_KINDS, LEAF_KINDS


def get_all_nodes(node: Node, traversal_order: str = 'breadth_first') -> List[Node]:
    """
    Get all nodes in the tree using specified traversal order.

    Args:
        node: Root node of the tree
        traversal_order: 'breadth_first' (default) or 'depth_first'

    Returns:
        List of all nodes in the tree
    """
    if traversal_order == 'breadth_first':
        return _breadth_first_traversal(node)
    elif traversal_order == 'depth_first':
        return _depth_first_traversal(node)
    else:
        raise ValueError(f"Invalid traversal_order: {traversal_order}")


def _breadth_first_traversal(node: Node) -> List[Node]:
    nodes_to_visit = deque([node])
    all_nodes = []

    while nodes_to_visit:
        current_node = nodes_to_visit.popleft()
        all_nodes.append(current_node)
        nodes_to_visit.extend(current_node.children)

    return all_nodes


def _depth_first_traversal(node: Node) -> List[Node]:
    """Pre-order, iterative so deep chains do not hit the recursion limit"""
    stack = [node]
    all_nodes = []

    while stack:
        current_node = stack.pop()
        all_nodes.append(current_node)
        stack.extend(reversed(current_node.children))

    return all_nodes


def find_nodes_by_type(node: Node, kind: NodeType) -> List[Node]:
    """All nodes of the given kind, breadth first"""
    return [n for n in _breadth_first_traversal(node) if n.kind == kind]


def calculate_tree_depth(node: Node) -> int:
    """
    Calculate the maximum depth of the tree as stored.

    Returns:
        Maximum depth (leaf nodes have depth 1)
    """
    max_depth = 0
    stack = [(node, 1)]
    while stack:
        current_node, depth = stack.pop()
        max_depth = max(max_depth, depth)
        for child in current_node.children:
            stack.append((child, depth + 1))
    return max_depth


def binary_depth(node: Node) -> int:
    """
    Depth the tree will have once reduced to binary form.

    An n-ary Plus/Times becomes a right-leaning chain, so its i-th child sits
    min(i + 1, n - 1) levels below it.
    """
    max_depth = 0
    stack = [(node, 1)]
    while stack:
        current_node, depth = stack.pop()
        max_depth = max(max_depth, depth)
        children = current_node.children
        count = len(children)
        if current_node.kind in ASSOCIATIVE_KINDS and count != 2:
            if count == 1:
                stack.append((children[0], depth))
                continue
            for i, child in enumerate(children):
                stack.append((child, depth + min(i + 1, count - 1)))
        else:
            for child in children:
                stack.append((child, depth + 1))
    return max_depth


def contains_variable(node: Node, name: str) -> bool:
    """True if a variable called `name` occurs anywhere in the tree"""
    stack = [node]
    while stack:
        current_node = stack.pop()
        if isinstance(current_node, VariableNode) and current_node.name == name:
            return True
        stack.extend(current_node.children)
    return False


def get_variables(node: Node) -> Set[str]:
    """Names of all variables referenced in the tree"""
    return {n.name for n in _breadth_first_traversal(node) if isinstance(n, VariableNode)}


def substitute_variable(node: Node, name: str, replacement: Node) -> Node:
    """
    Replace every occurrence of variable `name` with `replacement`.

    Subtrees without the variable are shared with the input.
    """
    if isinstance(node, VariableNode):
        return replacement if node.name == name else node
    if node.is_leaf():
        return node

    new_children = tuple(substitute_variable(child, name, replacement) for child in node.children)
    if all(new is old for new, old in zip(new_children, node.children)):
        return node
    return node.with_children(new_children)


def reduce_to_binary(node: Node) -> Node:
    """
    Rewrite every n-ary Plus/Times into a right-associated binary chain.

    op(c0, c1, c2, c3) -> op(c0, op(c1, op(c2, c3))). Other kinds, Piecewise
    included, keep their shape and are only recursed into. A Plus/Times with a
    single child collapses to that child, an empty one to its identity
    literal. Idempotent.
    """
    # an empty Plus/Times has no children but still needs collapsing
    if node.kind in LEAF_KINDS:
        return node

    children = tuple(reduce_to_binary(child) for child in node.children)

    if node.kind in ASSOCIATIVE_KINDS and len(children) != 2:
        if not children:
            return IntegerNode(0 if node.kind == NodeType.PLUS else 1)
        if len(children) == 1:
            return children[0]
        chain = node.with_children(children[-2:])
        for child in reversed(children[:-2]):
            chain = node.with_children((child, chain))
        return chain

    if all(new is old for new, old in zip(children, node.children)):
        return node
    return node.with_children(children)
