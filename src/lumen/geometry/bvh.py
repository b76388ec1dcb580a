"""Bounding volume hierarchy over primitives.

The tree is built once per scene by recursive median split: at each level
the primitives are sorted by the minimum coordinate of their bounding box
along one axis (x, y, z in turn by depth) and divided at the middle index.
One primitive terminates the recursion with both children pointing at it;
two primitives are ordered along the axis without further splitting.

Traversal tests the node box first, then the left child, then the right
child with the far bound tightened to the left hit, so a near hit prunes
everything behind it.

Example:
    >>> bvh = build_bvh(primitives)
    >>> hit = bvh.hit(ray, 1e-4, float("inf"))
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Union

from lumen.core.ray import Ray
from lumen.geometry.aabb import AABB
from lumen.geometry.hit import Hit

if TYPE_CHECKING:
    from lumen.geometry import Primitive

logger = logging.getLogger(__name__)


class BVHNode:
    """Interior node of the hierarchy.

    Attributes:
        left: Left child, a node or a primitive.
        right: Right child, a node or a primitive.
        aabb: Box enclosing both children.
    """

    __slots__ = ("left", "right", "aabb")

    def __init__(self, left: BVHChild, right: BVHChild) -> None:
        self.left = left
        self.right = right
        self.aabb = AABB.containing(left.bounding_box(), right.bounding_box())

    def __repr__(self) -> str:
        return f"BVHNode(aabb={self.aabb!r})"

    def bounding_box(self) -> AABB:
        return self.aabb

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Hit | None:
        if not self.aabb.hit(ray, t_min, t_max):
            return None
        left = self.left.hit(ray, t_min, t_max)
        right = self.right.hit(ray, t_min, t_max if left is None else left.t)
        return right if right is not None else left

    def is_light(self) -> bool:
        return False

    def depth(self) -> int:
        """Number of node levels below and including this one."""
        left = self.left.depth() if isinstance(self.left, BVHNode) else 0
        right = self.right.depth() if isinstance(self.right, BVHNode) else 0
        return 1 + max(left, right)


BVHChild = Union[BVHNode, "Primitive"]


def _build(primitives: list[Primitive], axis: int) -> BVHNode:
    def key(primitive: Primitive) -> float:
        return primitive.bounding_box().minimum[axis]

    n = len(primitives)
    if n == 1:
        return BVHNode(primitives[0], primitives[0])
    if n == 2:
        a, b = primitives
        if key(b) < key(a):
            a, b = b, a
        return BVHNode(a, b)

    primitives.sort(key=key)
    mid = n // 2
    next_axis = (axis + 1) % 3
    return BVHNode(_build(primitives[:mid], next_axis), _build(primitives[mid:], next_axis))


def build_bvh(primitives: Sequence[Primitive]) -> BVHNode:
    """Build a hierarchy over ``primitives``.

    Args:
        primitives: The primitives to index. The sequence is not modified.

    Returns:
        The root node.

    Raises:
        ValueError: If ``primitives`` is empty.
    """
    if not primitives:
        raise ValueError("Cannot build a BVH over an empty primitive list")
    root = _build(list(primitives), 0)
    logger.debug("Built BVH over %d primitives, depth %d", len(primitives), root.depth())
    return root
