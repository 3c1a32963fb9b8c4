import pytest


def test_fmt_pct(m):
    assert m._fmt_pct(0, 0) == "0%"
    assert m._fmt_pct(50, 100).strip().endswith("%")
    assert m._fmt_pct(10, 10).strip().startswith("100")


def test_fmt_bits_rounds_up_to_bytes(m):
    assert m._fmt_bits(22) == "22 bits (3 B packed)"
    assert m._fmt_bits(0) == "0 bits (0 B packed)"


def test_format_code_table_orders_by_length_then_symbol(m):
    table = {ord("a"): "1", ord("c"): "01", ord("b"): "00", 10: "000"}
    freqs = {ord("a"): 10, ord("b"): 3, ord("c"): 3}
    lines = m.format_code_table(table, freqs)
    assert lines[0].split() == ["'a'", "10", "1"]
    assert lines[1].split() == ["'b'", "3", "00"]
    assert lines[2].split() == ["'c'", "3", "01"]
    assert lines[3].split() == ["0x0a", "0", "000"]


def test_encode_progress_calls_bucketed(no_progress, m):
    p = m.EncodeProgress("Encoding")
    p(0, 100)
    p(0, 100)
    p(10, 100)
    p(10, 100)
    p(19, 100)
    p(19, 100)
    p(5, 0)
    assert len(no_progress) == 3
    assert all(line.startswith("Encoding") for line in no_progress)


def test_read_source_requires_exactly_one_source(tmp_path, m):
    f = tmp_path / "in.bin"
    f.write_bytes(b"\x00\x01")
    assert m._read_source(None, str(f)) == b"\x00\x01"
    assert m._read_source("hé", None) == "hé".encode("utf-8")
    with pytest.raises(ValueError):
        m._read_source(None, None)
    with pytest.raises(ValueError):
        m._read_source("x", str(f))


def test_read_reference_file_or_text(tmp_path, m):
    f = tmp_path / "ref.txt"
    f.write_bytes(b"abc")
    assert m._read_reference(None, str(f)) == b"abc"
    assert m._read_reference("abc", None) == b"abc"
    assert m._read_reference("@abc", None) == b"@abc"
    with pytest.raises(ValueError):
        m._read_reference(None, None)
    with pytest.raises(ValueError):
        m._read_reference("abc", str(f))


def test_cli_parser_accepts_subcommands(m):
    parser = m.get_parser()
    ns = parser.parse_args(["encode", "hello", "-t", "-s"])
    assert ns.cmd in ("encode", "e")
    assert ns.text == "hello" and ns.table and ns.stats
    ns2 = parser.parse_args(["d", "0101", "-r", "ab"])
    assert ns2.cmd in ("decode", "d")
    assert ns2.reference == "ab" and ns2.reference_file is None
    ns3 = parser.parse_args(["decode", "0101", "-R", "ref.txt"])
    assert ns3.reference is None and ns3.reference_file == "ref.txt"
    with pytest.raises(SystemExit):
        parser.parse_args(["decode", "0101"])
    with pytest.raises(SystemExit):
        parser.parse_args(["decode", "0101", "-r", "ab", "-R", "ref.txt"])


def test_error_prints_one_line_diagnostic(capsys, m):
    m._error("Node arena exhausted")
    out, err = capsys.readouterr()
    assert out == ""
    assert err == "[!] Node arena exhausted\n"
