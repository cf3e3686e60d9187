"""
Comment tree construction.

Turns the flat list of a post's comments into a forest of reply threads.
Runs on every post-detail read; nothing is cached or persisted.

Both passes are loops over the input, so thread depth is bounded only by
memory, never by the interpreter's recursion limit.
"""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol


class ThreadedComment(Protocol):
    """Anything with a comment id and an optional parent id."""

    comment_id: int | None
    parent_comment_id: int | None


@dataclass
class CommentNode:
    """A comment and its direct replies, in input order."""

    comment: Any
    replies: list["CommentNode"] = field(default_factory=list)


def build_comment_tree(comments: Sequence[ThreadedComment]) -> list[CommentNode]:
    """
    Build the reply forest for a post.

    Siblings keep the order they have in ``comments`` (the query orders by
    creation). A comment whose parent is not part of ``comments`` becomes a
    root instead of being dropped. That covers replies whose parent was
    deleted or not loaded, self-references, and parent cycles; a cycle is
    broken at the first member in input order.

    Args:
        comments: Flat comments of one post, in display order

    Returns:
        Root nodes in display order
    """
    nodes: dict[int, CommentNode] = {}
    for comment in comments:
        if comment.comment_id is not None:
            nodes[comment.comment_id] = CommentNode(comment=comment)

    # Pass 1: child lists
    children: dict[int, list[CommentNode]] = {}
    candidate_roots: list[CommentNode] = []
    for comment in comments:
        node = nodes.get(comment.comment_id) if comment.comment_id is not None else None
        if node is None:
            node = CommentNode(comment=comment)
            candidate_roots.append(node)
            continue
        parent_id = comment.parent_comment_id
        if parent_id is None or parent_id == comment.comment_id or parent_id not in nodes:
            candidate_roots.append(node)
        else:
            children.setdefault(parent_id, []).append(node)

    for parent_id, replies in children.items():
        nodes[parent_id].replies = replies

    # Pass 2: collect roots. Anything not reachable from them hangs off a
    # parent cycle; promote the first cycle member seen and its whole
    # component becomes reachable.
    roots = list(candidate_roots)
    reached = {id(node) for node in _walk(roots)}
    for comment in comments:
        if comment.comment_id is None:
            continue
        node = nodes[comment.comment_id]
        if id(node) in reached or not _on_parent_cycle(node, nodes):
            continue
        _detach(node, nodes)
        roots.append(node)
        reached.update(id(n) for n in _walk([node]))

    return roots


def _on_parent_cycle(node: CommentNode, nodes: dict[int, CommentNode]) -> bool:
    seen: set[int] = set()
    current = node
    while True:
        parent_id = current.comment.parent_comment_id
        parent = nodes.get(parent_id) if parent_id is not None else None
        if parent is None:
            return False
        if parent is node:
            return True
        if id(parent) in seen:
            return False
        seen.add(id(parent))
        current = parent


def _detach(node: CommentNode, nodes: dict[int, CommentNode]) -> None:
    parent_id = node.comment.parent_comment_id
    parent = nodes.get(parent_id) if parent_id is not None else None
    if parent is not None:
        parent.replies = [reply for reply in parent.replies if reply is not node]


def _walk(roots: Sequence[CommentNode]) -> Iterator[CommentNode]:
    """Depth-first pre-order traversal without recursion."""
    stack = list(reversed(roots))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.replies))


def iter_comment_tree(roots: Sequence[CommentNode]) -> Iterator[tuple[CommentNode, int]]:
    """
    Yield (node, depth) pairs in display order.

    Post detail serialization uses the depth to cap nesting.
    """
    stack: list[tuple[CommentNode, int]] = [(node, 0) for node in reversed(roots)]
    while stack:
        node, depth = stack.pop()
        yield node, depth
        stack.extend((reply, depth + 1) for reply in reversed(node.replies))
