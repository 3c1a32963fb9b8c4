import argparse
import sys

from typing import Dict, List, Optional
from errors import HuffmanError
from huffman import decode_bits
from session import create_session


def get_parser():
    """Create and configure the CLI argument parser.

    :returns: Configured argument parser.
    :rtype: argparse.ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="huffenc",
        description="Huffman encoder printing one '0'/'1' character per bit",
    )
    subparsers = parser.add_subparsers(
        title="subcommands", dest="cmd", required=True
    )

    encode = subparsers.add_parser(
        "encode", aliases=["e"], help="Encode text or a file into a bit-string"
    )
    encode.add_argument(
        "text", nargs="?", help="Text to encode (UTF-8)"
    )
    encode.add_argument(
        "-i", "--input", help="Read the bytes to encode from this file"
    )
    encode.add_argument(
        "-o", "--output", help="Write the bit-string to this file"
    )
    encode.add_argument(
        "-t", "--table", action="store_true",
        help="Print the code table to stderr",
    )
    encode.add_argument(
        "-s", "--stats", action="store_true",
        help="Print size statistics to stderr",
    )
    encode.add_argument(
        "-p", "--progress", action="store_true",
        help="Show encoding progress on stderr",
    )

    decode = subparsers.add_parser(
        "decode", aliases=["d"],
        help="Decode a bit-string using the code built from reference data",
    )
    decode.add_argument("bits", nargs="?", help="Bit-string to decode")
    decode.add_argument(
        "-i", "--input", help="Read the bit-string from this file"
    )
    reference = decode.add_mutually_exclusive_group(required=True)
    reference.add_argument(
        "-r", "--reference",
        help="Original text the code table was built from",
    )
    reference.add_argument(
        "-R", "--reference-file",
        help="File holding the original data the code table was built from",
    )
    decode.add_argument(
        "-o", "--output", help="Write the decoded bytes to this file"
    )

    return parser


def _print_progress(line: str) -> None:
    """Render and flush a single progress line in-place (carriage return).

    :param line: The textual progress line to display.
    :type line: str
    :returns: None
    :rtype: None
    """
    sys.stderr.write("\r" + line)
    sys.stderr.flush()


def _error(message: str) -> None:
    """Print a one-line ``[!]`` diagnostic to stderr.

    :param message: Text of the diagnostic.
    :type message: str
    :returns: None
    :rtype: None
    """
    print(f"[!] {message}", file=sys.stderr)


def _fmt_pct(done: int, total: int) -> str:
    """Format a completion percentage string like ``12.34%``.

    :param done: Units completed.
    :type done: int
    :param total: Total units to complete.
    :type total: int
    :returns: Percentage.
    :rtype: str
    """
    if total <= 0:
        return "0%"
    pct = 100.0 * (done / float(total))
    return f"{pct:6.2f}%"


def _fmt_bits(n: int) -> str:
    """Format a bit count as bits plus the byte size it would pack into.

    :param n: Number of bits.
    :type n: int
    :returns: Human-readable string.
    :rtype: str
    """
    return f"{n} bits ({(n + 7) // 8} B packed)"


def _fmt_symbol(symbol: int) -> str:
    """Render a byte value for the code table listing.

    :param symbol: Byte value.
    :type symbol: int
    :returns: Printable character in quotes, or a hex escape.
    :rtype: str
    """
    if 0x20 <= symbol < 0x7F:
        return repr(chr(symbol))
    return f"0x{symbol:02x}"


class EncodeProgress:
    """Callable progress reporter for the encoding pass.

    :ivar label: Text shown before the percentage.
    :type label: str
    """

    def __init__(self, label: str) -> None:
        self.label = label
        self._last_reported = -1

    @property
    def started(self) -> bool:
        """Whether a progress line has been drawn.

        :returns: ``True`` once the first line is rendered.
        :rtype: bool
        """
        return self._last_reported != -1

    def __call__(self, done: int, total: int) -> None:
        """Update the progress display.

        :param done: Bytes substituted so far.
        :type done: int
        :param total: Total bytes to substitute.
        :type total: int
        :returns: None
        :rtype: None
        """
        if total <= 0:
            return
        percent_bucket = int((done * 100) / total)
        if percent_bucket == self._last_reported:
            return
        self._last_reported = percent_bucket
        _print_progress(f"{self.label}  {_fmt_pct(done, total)}")


def _read_source(text: Optional[str], path: Optional[str]) -> bytes:
    """Return the bytes named by either ``text`` or ``path``.

    :param text: Inline text, encoded as UTF-8.
    :type text: str | None
    :param path: File to read instead of ``text``.
    :type path: str | None
    :returns: Input bytes.
    :rtype: bytes
    :raises ValueError: If neither or both sources are given.
    """
    if path is not None and text is not None:
        raise ValueError("Give either text or --input, not both")
    if path is not None:
        with open(path, "rb") as f:
            return f.read()
    if text is None:
        raise ValueError("Please provide text for encoding")
    return text.encode("utf-8")


def _read_reference(reference: Optional[str], reference_path: Optional[str]) -> bytes:
    """Return the reference data from ``--reference`` or ``--reference-file``.

    :param reference: Reference text, encoded as UTF-8.
    :type reference: str | None
    :param reference_path: File holding the reference data.
    :type reference_path: str | None
    :returns: Reference bytes.
    :rtype: bytes
    :raises ValueError: If neither or both are given.
    """
    if reference is not None and reference_path is not None:
        raise ValueError("Give either --reference or --reference-file, not both")
    if reference_path is not None:
        with open(reference_path, "rb") as f:
            return f.read()
    if reference is None:
        raise ValueError("Please provide the reference data")
    return reference.encode("utf-8")


def format_code_table(table: Dict[int, str], frequencies: Dict[int, int]) -> List[str]:
    """Render one line per symbol: symbol, count and code.

    Lines are ordered by code length, then symbol value.

    :param table: Code table.
    :type table: Dict[int, str]
    :param frequencies: Occurrence count of every symbol in ``table``.
    :type frequencies: Dict[int, int]
    :returns: Formatted lines.
    :rtype: List[str]
    """
    lines = []
    for symbol in sorted(table, key=lambda s: (len(table[s]), s)):
        lines.append(
            f"{_fmt_symbol(symbol):>6}  {frequencies.get(symbol, 0):>8}  "
            f"{table[symbol]}"
        )
    return lines


def run_encode(
    text: Optional[str],
    input_path: Optional[str],
    output_path: Optional[str],
    show_table: bool = False,
    show_stats: bool = False,
    show_progress: bool = False,
) -> str:
    """Encode the given source and write the bit-string.

    :param text: Inline text to encode.
    :type text: str | None
    :param input_path: File to encode instead of ``text``.
    :type input_path: str | None
    :param output_path: Destination file; stdout when ``None``.
    :type output_path: str | None
    :param show_table: Whether to print the code table to stderr.
    :type show_table: bool
    :param show_stats: Whether to print size statistics to stderr.
    :type show_stats: bool
    :param show_progress: Whether to show progress on stderr.
    :type show_progress: bool
    :returns: The encoded bit-string.
    :rtype: str
    """
    data = _read_source(text, input_path)
    session = create_session()
    on_prog = EncodeProgress("Encoding") if show_progress else None
    try:
        try:
            bits = session.encode(data, on_progress=on_prog)
        finally:
            if on_prog is not None and on_prog.started:
                sys.stderr.write("\n")
                sys.stderr.flush()

        if show_table:
            for line in format_code_table(session.code_table, session.frequencies):
                print(line, file=sys.stderr)
        if show_stats:
            print("Size before encoding: ", _fmt_bits(len(data) * 8),
                  file=sys.stderr)
            print("Size after encoding: ", _fmt_bits(len(bits)),
                  file=sys.stderr)
            print(f"Average code length: {len(bits) / len(data):.3f} bits",
                  file=sys.stderr)
    finally:
        session.reset()

    if output_path is None:
        print(bits)
    else:
        with open(output_path, "w", encoding="ascii") as out:
            out.write(bits + "\n")
    return bits


def run_decode(
    bits: Optional[str],
    input_path: Optional[str],
    reference: Optional[str],
    output_path: Optional[str],
    reference_path: Optional[str] = None,
) -> bytes:
    """Decode a bit-string with the code table rebuilt from reference data.

    :param bits: Inline bit-string.
    :type bits: str | None
    :param input_path: File holding the bit-string instead of ``bits``.
    :type input_path: str | None
    :param reference: Reference text the table is built from.
    :type reference: str | None
    :param output_path: Destination file; stdout when ``None``.
    :type output_path: str | None
    :param reference_path: File holding the reference data instead of
                           ``reference``.
    :type reference_path: str | None
    :returns: Decoded bytes.
    :rtype: bytes
    :raises ValueError: If the bit-string is missing or invalid.
    """
    if input_path is not None and bits is not None:
        raise ValueError("Give either bits or --input, not both")
    if input_path is not None:
        with open(input_path, "r", encoding="ascii") as f:
            bits = f.read()
    if bits is None:
        raise ValueError("Please provide bits for decoding")

    session = create_session()
    try:
        session.encode(_read_reference(reference, reference_path))
        data = decode_bits(bits.strip(), session.code_table)
    finally:
        session.reset()

    if output_path is None:
        sys.stdout.buffer.write(data)
        sys.stdout.flush()
    else:
        with open(output_path, "wb") as out:
            out.write(data)
    return data


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI tool.

    :param argv: Arguments to parse; ``sys.argv[1:]`` when ``None``.
    :type argv: List[str] | None
    :returns: Process exit status.
    :rtype: int
    """
    parser = get_parser()
    args = parser.parse_args(argv)

    try:
        if args.cmd in ["encode", "e"]:
            run_encode(
                args.text, args.input, args.output,
                show_table=args.table,
                show_stats=args.stats,
                show_progress=args.progress,
            )
        elif args.cmd in ["decode", "d"]:
            run_decode(
                args.bits, args.input, args.reference, args.output,
                reference_path=args.reference_file,
            )
    except (HuffmanError, ValueError, OSError) as e:
        _error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
