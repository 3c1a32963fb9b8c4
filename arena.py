from collections import namedtuple
from typing import List, Optional

from errors import AllocationFailure


class NodeRef(namedtuple("NodeRef", ["generation", "index"])):
    """Handle to a node: its arena index and the arena generation it lives in."""

    __slots__ = ()


class HuffmanNode:
    """Node of a Huffman tree stored inside a :class:`NodeArena`.

    Children are referenced by :class:`NodeRef` handles into the owning
    arena, never by object reference, so releasing the arena drops the whole
    tree at once.

    :ivar symbol: Byte value stored at a leaf; ``None`` for internal nodes.
    :type symbol: int | None
    :ivar weight: Weight of the subtree rooted at this node.
    :type weight: int
    :ivar left: Handle of the left child, if any.
    :type left: NodeRef | None
    :ivar right: Handle of the right child, if any.
    :type right: NodeRef | None
    """

    __slots__ = ("symbol", "weight", "left", "right")

    def __init__(self, symbol=None, weight=0, left=None, right=None):
        """Create a Huffman node.

        :param symbol: Byte value for leaf nodes; ``None`` for internal nodes.
        :type symbol: int | None
        :param int weight: Weight associated with this node.
        :param left: Handle of the left child, if any.
        :type left: NodeRef|None
        :param right: Handle of the right child, if any.
        :type right: NodeRef|None
        :returns: None
        :rtype: None
        """
        self.symbol = symbol
        self.weight = weight
        self.left = left
        self.right = right

    @property
    def is_leaf(self) -> bool:
        """Whether this node has no children.

        :returns: ``True`` for leaves, ``False`` for internal nodes.
        :rtype: bool
        """
        return self.left is None and self.right is None

    def __repr__(self):
        if self.is_leaf:
            return f"HuffmanNode(symbol={self.symbol!r}, weight={self.weight})"
        return (
            f"HuffmanNode(weight={self.weight}, "
            f"left={self.left.index}, right={self.right.index})"
        )


class NodeArena:
    """Contiguous store for every node of one encoding run.

    Nodes are addressed by :class:`NodeRef` handles pairing a stable index
    with the arena generation it was allocated in. There is no per-node
    deallocation: :meth:`release` discards all nodes in one step, and every
    handle issued before it stops resolving.

    :ivar capacity: Maximum number of live nodes, or ``None`` for no limit.
    :type capacity: int | None
    :ivar generation: Incremented on each :meth:`release`.
    :type generation: int
    :ivar allocations: Total number of nodes ever allocated.
    :type allocations: int
    :ivar releases: Total number of nodes ever released.
    :type releases: int
    """

    def __init__(self, capacity: Optional[int] = None):
        """Create an empty arena.

        :param capacity: Optional upper bound on live nodes.
        :type capacity: int | None
        :returns: None
        :rtype: None
        :raises ValueError: If ``capacity`` is negative.
        """
        if capacity is not None and capacity < 0:
            raise ValueError(f"Arena capacity must be non-negative: {capacity}")
        self.capacity = capacity
        self.generation = 0
        self.allocations = 0
        self.releases = 0
        self._nodes: List[HuffmanNode] = []

    def __len__(self):
        return len(self._nodes)

    @property
    def live(self) -> int:
        """Number of nodes allocated and not yet released."""
        return self.allocations - self.releases

    def allocate(self, symbol=None, weight=0, left=None, right=None) -> NodeRef:
        """Allocate a node and return its handle.

        :param symbol: Byte value for leaves, ``None`` for internal nodes.
        :type symbol: int | None
        :param int weight: Node weight.
        :param left: Handle of the left child.
        :type left: NodeRef | None
        :param right: Handle of the right child.
        :type right: NodeRef | None
        :returns: Handle of the new node in this arena.
        :rtype: NodeRef
        :raises AllocationFailure: If the arena is full.
        """
        if self.capacity is not None and len(self._nodes) >= self.capacity:
            raise AllocationFailure(
                f"Node arena exhausted (capacity {self.capacity})"
            )
        try:
            self._nodes.append(HuffmanNode(symbol, weight, left, right))
        except MemoryError as e:
            raise AllocationFailure("Cannot grow node arena") from e
        self.allocations += 1
        return NodeRef(self.generation, len(self._nodes) - 1)

    def get(self, ref: NodeRef) -> HuffmanNode:
        """Return the node behind ``ref``.

        :param ref: Handle returned by :meth:`allocate`.
        :type ref: NodeRef
        :returns: The node.
        :rtype: HuffmanNode
        :raises IndexError: If ``ref`` was issued before the last
            :meth:`release` or does not name an allocated node.
        """
        generation, index = ref
        if generation != self.generation:
            raise IndexError(
                f"Node {index} belongs to released arena generation "
                f"{generation} (current {self.generation})"
            )
        if index < 0 or index >= len(self._nodes):
            raise IndexError(
                f"Node index {index} is not live in arena "
                f"generation {self.generation}"
            )
        return self._nodes[index]

    def __getitem__(self, ref: NodeRef) -> HuffmanNode:
        return self.get(ref)

    def release(self) -> None:
        """Discard every node in the arena at once."""
        self.releases += len(self._nodes)
        self._nodes = []
        self.generation += 1
