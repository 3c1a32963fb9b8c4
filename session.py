from enum import Enum
from typing import Callable, Dict, Optional

from arena import NodeArena
from errors import AllocationFailure, EmptyInputError
from huffman import build_code_table, build_tree, count_frequencies, encode_with_table


class SessionState(Enum):
    IDLE = "idle"
    COUNTING_FREQUENCIES = "counting_frequencies"
    BUILDING_TREE = "building_tree"
    EXTRACTING_CODES = "extracting_codes"
    ENCODING = "encoding"
    DONE = "done"
    FAILED = "failed"


class EncoderSession:
    """Runs the Huffman pipeline over one input at a time.

    The session owns the frequency map, the node arena and the code table
    of its current run. Every node of a run lives in a single arena that is
    released in one step once codes are extracted, on failure, or on
    :meth:`reset`. A session is not thread-safe.

    :ivar PROGRESS_STEPS: Number of progress reports emitted while encoding.
    :type PROGRESS_STEPS: int
    :ivar arena: Arena holding the tree of the current run.
    :type arena: NodeArena
    :ivar state: Current pipeline state.
    :type state: SessionState
    :ivar frequencies: Frequency map of the last run.
    :type frequencies: Dict[int, int]
    :ivar code_table: Code table of the last run.
    :type code_table: Dict[int, str]
    :ivar node_count: Number of tree nodes built by the last run.
    :type node_count: int
    """

    PROGRESS_STEPS = 100

    def __init__(self, arena_factory: Optional[Callable[[], NodeArena]] = None):
        """Create an idle session.

        :param arena_factory: Callable returning the arena used for tree
                              nodes. Defaults to an unbounded :class:`NodeArena`.
        :type arena_factory: Optional[Callable[[], NodeArena]]
        :returns: None
        :rtype: None
        """
        self.arena = (arena_factory or NodeArena)()
        self.state = SessionState.IDLE
        self.frequencies: Dict[int, int] = {}
        self.code_table: Dict[int, str] = {}
        self.node_count = 0

    def encode(
        self,
        data: bytes,
        on_progress: Optional[Callable[[int, int], None]] = None,
    ) -> str:
        """Build a Huffman code for ``data`` and return the encoded bits.

        A session that already ran is reset first.

        :param data: Byte sequence to encode.
        :type data: bytes
        :param on_progress: Optional callback ``on_progress(done, total)``
                            reporting bytes substituted so far.
        :type on_progress: Optional[Callable[[int, int], None]]
        :returns: String of ``'0'``/``'1'`` characters, one per bit.
        :rtype: str
        :raises TypeError: If ``data`` is not a byte sequence.
        :raises EmptyInputError: If ``data`` is empty.
        :raises AllocationFailure: If memory for the run cannot be obtained.
        :raises MissingCodeError: If a byte ends up without a code.
        """
        if isinstance(data, (str, int)):
            raise TypeError(
                f"Expected a byte sequence, got {type(data).__name__}"
            )
        if self.state is not SessionState.IDLE:
            self.reset()

        try:
            data = bytes(data)

            self.state = SessionState.COUNTING_FREQUENCIES
            self.frequencies = count_frequencies(data)
            if not self.frequencies:
                raise EmptyInputError()

            self.state = SessionState.BUILDING_TREE
            root = build_tree(self.frequencies, self.arena)
            self.node_count = len(self.arena)

            self.state = SessionState.EXTRACTING_CODES
            self.code_table = build_code_table(self.arena, root)
            self.arena.release()

            self.state = SessionState.ENCODING
            step = max(1, len(data) // self.PROGRESS_STEPS)
            encoded = encode_with_table(
                data, self.code_table, on_progress=on_progress, step=step
            )
        except MemoryError as e:
            self._fail()
            if isinstance(e, AllocationFailure):
                raise
            raise AllocationFailure(
                "Out of memory while building the Huffman code"
            ) from e
        except Exception:
            self._fail()
            raise

        self.state = SessionState.DONE
        return encoded

    def reset(self) -> None:
        """Return to idle, discarding the run's map, tree and table together."""
        self.arena.release()
        self.frequencies = {}
        self.code_table = {}
        self.node_count = 0
        self.state = SessionState.IDLE

    def _fail(self) -> None:
        """Release the run's nodes and mark the session as failed.

        :returns: None
        :rtype: None
        """
        self.arena.release()
        self.state = SessionState.FAILED


def create_session(
    arena_factory: Optional[Callable[[], NodeArena]] = None,
) -> EncoderSession:
    """Create a new idle :class:`EncoderSession`."""
    return EncoderSession(arena_factory)


def encode(
    session: EncoderSession,
    data: bytes,
    on_progress: Optional[Callable[[int, int], None]] = None,
) -> str:
    """Encode ``data`` with ``session``. See :meth:`EncoderSession.encode`."""
    return session.encode(data, on_progress=on_progress)


def reset_or_destroy(session: EncoderSession) -> None:
    """Release all memory owned by ``session`` and return it to idle."""
    session.reset()
