class HuffmanError(Exception):
    """Base class for every error raised by the Huffman encoder core."""


class EmptyInputError(HuffmanError, ValueError):
    """Raised when the input sequence is empty.

    An empty input has no symbols, so no tree can be built for it.
    """

    def __init__(self, message: str = "Cannot build a Huffman code for empty input"):
        super().__init__(message)


class AllocationFailure(HuffmanError, MemoryError):
    """Raised when the node arena, code table or output cannot grow."""


class MissingCodeError(HuffmanError, KeyError):
    """Raised when a byte has no entry in the code table during encoding.

    :ivar symbol: The byte value that had no code.
    :type symbol: int
    """

    def __init__(self, symbol: int):
        """Create the error for ``symbol``.

        :param symbol: Byte value missing from the code table.
        :type symbol: int
        :returns: None
        :rtype: None
        """
        super().__init__(symbol)
        self.symbol = symbol

    def __str__(self):
        return f"No Huffman code for byte 0x{self.symbol:02x}"
