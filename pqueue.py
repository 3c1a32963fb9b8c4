import heapq
from typing import List, Tuple

from arena import NodeArena, NodeRef


class MinPriorityQueue:
    """Min-heap of arena node handles ordered by node weight.

    Ties between equal weights are broken by insertion order: the node
    inserted first is extracted first. Callers that insert leaves in
    ascending symbol order therefore get ascending symbol order among
    equal-weight leaves, and leaves ahead of equal-weight internal nodes
    created later.

    :ivar arena: Arena holding the nodes referenced by the queue.
    :type arena: NodeArena
    """

    def __init__(self, arena: NodeArena):
        """Create an empty queue over ``arena``.

        :param arena: Arena holding the nodes to be queued.
        :type arena: NodeArena
        :returns: None
        :rtype: None
        """
        self.arena = arena
        self._heap: List[Tuple[int, int, NodeRef]] = []
        self._sequence = 0

    def insert(self, ref: NodeRef) -> None:
        """Insert the node behind ``ref``.

        :param ref: Arena handle of the node.
        :type ref: NodeRef
        :returns: None
        :rtype: None
        """
        weight = self.arena[ref].weight
        heapq.heappush(self._heap, (weight, self._sequence, ref))
        self._sequence += 1

    def extract_min(self) -> NodeRef:
        """Remove and return the handle of the lowest-weight node.

        :returns: Arena handle of the extracted node.
        :rtype: NodeRef
        :raises IndexError: If the queue is empty.
        """
        if not self._heap:
            raise IndexError("extract_min from an empty queue")
        return heapq.heappop(self._heap)[2]

    def size(self) -> int:
        """Number of queued nodes.

        :returns: Queue length.
        :rtype: int
        """
        return len(self._heap)

    def __len__(self):
        return len(self._heap)
