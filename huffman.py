from collections import Counter
from typing import Callable, Dict, Iterable, Optional

from arena import NodeArena, NodeRef
from errors import EmptyInputError, MissingCodeError
from pqueue import MinPriorityQueue

FALLBACK_CODE = "1"  #: Code of the only symbol when the tree is a single leaf


def count_frequencies(data: Iterable[int]) -> Dict[int, int]:
    """Count occurrences of each distinct byte in ``data``.

    :param data: Byte sequence to analyse.
    :type data: Iterable[int]
    :returns: Mapping from byte value to occurrence count. Empty for empty input.
    :rtype: Dict[int, int]
    """
    return dict(Counter(data))


def build_tree(frequencies: Dict[int, int], arena: NodeArena) -> NodeRef:
    """Build a Huffman tree in ``arena`` from a symbol frequency table.

    Leaves are queued in ascending symbol order; each step merges the two
    lightest nodes, the first extracted becoming the left child.

    :param frequencies: Mapping from symbol to observed frequency.
    :type frequencies: Dict[int, int]
    :param arena: Arena receiving every node of the tree.
    :type arena: NodeArena
    :returns: Arena handle of the root node.
    :rtype: NodeRef
    :raises EmptyInputError: If ``frequencies`` is empty.
    :raises ValueError: If a count is below 1.
    :raises AllocationFailure: If the arena cannot hold the tree.
    """
    if not frequencies:
        raise EmptyInputError()
    for symbol, count in frequencies.items():
        if count < 1:
            raise ValueError(f"Frequency of symbol {symbol} must be >= 1: {count}")

    queue = MinPriorityQueue(arena)
    for symbol in sorted(frequencies):
        queue.insert(arena.allocate(symbol=symbol, weight=frequencies[symbol]))

    while queue.size() > 1:
        left = queue.extract_min()
        right = queue.extract_min()
        weight = arena[left].weight + arena[right].weight
        queue.insert(arena.allocate(weight=weight, left=left, right=right))

    return queue.extract_min()


def build_code_table(arena: NodeArena, root: NodeRef) -> Dict[int, str]:
    """Extract the code of every leaf below ``root``.

    :param arena: Arena holding the tree.
    :type arena: NodeArena
    :param root: Arena handle of the root node.
    :type root: NodeRef
    :returns: Mapping from symbol to its code as a string of ``'0'``/``'1'``.
    :rtype: Dict[int, str]
    """
    table: Dict[int, str] = {}
    _assign_codes(arena, root, "", table)
    return table


def _assign_codes(arena: NodeArena, ref: NodeRef, prefix: str, table: Dict[int, str]):
    """Populate ``table`` by a depth-first walk from ``ref``.

    :param arena: Arena holding the tree.
    :type arena: NodeArena
    :param ref: Handle of the current node.
    :type ref: NodeRef
    :param prefix: Path from the root to the current node.
    :type prefix: str
    :param table: Table being filled in.
    :type table: Dict[int, str]
    :returns: None
    :rtype: None
    """
    node = arena[ref]
    if node.is_leaf:
        table[node.symbol] = prefix or FALLBACK_CODE
        return
    _assign_codes(arena, node.left, prefix + "0", table)
    _assign_codes(arena, node.right, prefix + "1", table)


def encode_with_table(
    data: bytes,
    table: Dict[int, str],
    on_progress: Optional[Callable[[int, int], None]] = None,
    step: int = 0,
) -> str:
    """Substitute every byte of ``data`` with its code.

    :param data: Bytes to encode.
    :type data: bytes
    :param table: Code table covering every byte of ``data``.
    :type table: Dict[int, str]
    :param on_progress: Optional callback ``on_progress(done, total)``
                        called every ``step`` bytes and once at the end.
    :type on_progress: Optional[Callable[[int, int], None]]
    :param step: Bytes between progress reports; ``0`` reports only at the end.
    :type step: int
    :returns: Concatenated codes.
    :rtype: str
    :raises MissingCodeError: If a byte has no table entry.
    """
    total = len(data)
    parts = []
    for pos, symbol in enumerate(data):
        try:
            parts.append(table[symbol])
        except KeyError:
            raise MissingCodeError(symbol) from None
        if on_progress is not None and step and (pos + 1) % step == 0:
            on_progress(pos + 1, total)

    if on_progress is not None:
        on_progress(total, total)
    return "".join(parts)


def decode_bits(bits: str, table: Dict[int, str]) -> bytes:
    """Decode a bit-string produced with ``table`` back into bytes.

    :param bits: String of ``'0'``/``'1'`` characters.
    :type bits: str
    :param table: Code table used for encoding.
    :type table: Dict[int, str]
    :returns: Decoded bytes.
    :rtype: bytes
    :raises ValueError: If ``bits`` holds a character other than ``'0'`` or
        ``'1'``, contains an invalid code, or ends in the middle of a code.
    """
    reverse = {code: symbol for symbol, code in table.items()}
    max_len = max((len(code) for code in reverse), default=0)

    out = bytearray()
    current = ""
    for pos, bit in enumerate(bits):
        if bit not in "01":
            raise ValueError(f"Invalid bit {bit!r} at position {pos}")
        current += bit
        symbol = reverse.get(current)
        if symbol is not None:
            out.append(symbol)
            current = ""
        elif len(current) >= max_len:
            raise ValueError(f"Invalid Huffman code ending at position {pos}")

    if current:
        raise ValueError("Bit-string ends in the middle of a code")
    return bytes(out)
