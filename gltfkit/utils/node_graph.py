# GLTFKit Node Graph Utilities
# Hierarchy checks over the node.children relation.
#
# This module provides:
# - Detection of nodes claimed as a child by more than one parent
# - Cycle detection with an iterative three-colour depth-first search
#
# Public API:
# - find_shared_child(children) -> Optional[SharedChild]
# - find_cycle(children) -> Optional[list[int]]
#
# Notes:
# - `children` is a sequence indexed by node, each entry the node's child indices (or None).
# - Indices are assumed to be in range; the document validator checks bounds before calling in.
# - Iterative traversal, so deep hierarchies do not hit the recursion limit.

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

WHITE, GRAY, BLACK = 0, 1, 2


@dataclass(frozen=True)
class SharedChild:
    child: int
    first_parent: int
    second_parent: int


def find_shared_child(children: Sequence[Optional[Sequence[int]]]) -> Optional[SharedChild]:
    """
    Return the first node (in parent order) that appears in the children of two different nodes.
    Duplicates within a single children list are not reported here.
    """
    parent_of: Dict[int, int] = {}
    for parent, kids in enumerate(children):
        for child in kids or ():
            first = parent_of.setdefault(child, parent)
            if first != parent:
                return SharedChild(child=child, first_parent=first, second_parent=parent)
    return None


def find_cycle(children: Sequence[Optional[Sequence[int]]]) -> Optional[List[int]]:
    """
    Return one cycle of the children relation as a node path [n0, n1, ..., n0], or None.
    Roots are visited in index order, so the result is deterministic.
    """
    color = [WHITE] * len(children)
    for root in range(len(children)):
        if color[root] != WHITE:
            continue
        # Stack of (node, next child position); path mirrors the GRAY nodes in order.
        stack = [(root, 0)]
        path = [root]
        color[root] = GRAY
        while stack:
            node, pos = stack[-1]
            kids = children[node] or ()
            if pos >= len(kids):
                color[node] = BLACK
                stack.pop()
                path.pop()
                continue
            stack[-1] = (node, pos + 1)
            child = kids[pos]
            if color[child] == GRAY:
                return path[path.index(child):] + [child]
            if color[child] == WHITE:
                color[child] = GRAY
                stack.append((child, 0))
                path.append(child)
    return None


__all__ = ["SharedChild", "find_shared_child", "find_cycle"]
