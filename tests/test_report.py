import io
import math

import pytest

from huffpuff import huffman as huff
from huffpuff import report


def _table(data):
    return huff.FrequencyTable.from_bytes(data)


def test_uniform_bytes_have_full_entropy():
    stats = report.compute_statistics(_table(bytes(range(256)) * 4))
    assert stats.total_bytes == 1024
    assert stats.used_symbols == 256
    assert stats.unused_symbols == 0
    assert stats.entropy == pytest.approx(8.0)
    assert stats.redundancy == pytest.approx(0.0)
    assert stats.ideal_ratio == pytest.approx(1.0)
    assert stats.ideal_size == 1024


def test_single_symbol_has_zero_entropy():
    stats = report.compute_statistics(_table(b"z" * 50))
    assert stats.entropy == 0.0
    assert stats.redundancy_percent == pytest.approx(100.0)
    assert math.isinf(stats.ideal_ratio)
    assert stats.ideal_size == 0


def test_two_equal_symbols_have_one_bit_of_entropy():
    stats = report.compute_statistics(_table(b"ab" * 10))
    assert stats.entropy == pytest.approx(1.0)
    assert stats.unused_symbols == 254
    assert stats.ideal_size == 2


def test_most_frequent_breaks_ties_by_byte_value():
    assert report.most_frequent(_table(b"AAAAAABBBCC"), 3) == [65, 66, 67]
    assert report.most_frequent(_table(b"cba"), 2) == [97, 98]
    assert report.most_frequent(huff.FrequencyTable()) == [0, 1, 2, 3, 4]


def test_average_code_length():
    table = _table(b"AAAAAABBBCC")
    codes = huff.generate_huffman_codes(huff.build_huffman_tree(table))
    assert report.average_code_length(table, codes) == pytest.approx(18 / 11)
    assert report.average_code_length(huff.FrequencyTable(), codes) == 0.0


def test_format_codes_lists_used_bytes_only():
    table = _table(b"AAAAAABBBCC\n")
    codes = huff.generate_huffman_codes(huff.build_huffman_tree(table))
    lines = report.format_codes(table, codes).splitlines()
    assert len(lines) == 4
    assert lines[0].startswith("    0A: (     1) ")
    assert f"'A' 41: (     6) {codes[65]}" in lines


def test_format_statistics_shows_control_characters():
    text = report.format_statistics(_table(b"\n\n\nab"))
    assert "1:  0Ah, 60.00%,  '^J'" in text
    assert "Number of different bytes not used = 253" in text


def test_plot_histogram_writes_png(tmp_path):
    table = _table(b"hello histogram")
    codes = huff.generate_huffman_codes(huff.build_huffman_tree(table))
    path = report.plot_histogram(table, tmp_path / "counts.png")
    assert path.read_bytes().startswith(b"\x89PNG")
    path = report.plot_histogram(table, tmp_path / "codes.png", codes)
    assert path.exists()


def test_console_reporter_output():
    out = io.StringIO()
    reporter = report.ConsoleReporter(out=out)
    table = _table(b"AAAAAABBBCC")
    tree = huff.build_huffman_tree(table)
    reporter.counted(table)
    reporter.tree_built(tree)
    reporter.codes_assigned(table, huff.generate_huffman_codes(tree))
    reporter.finished(11, 2051)
    text = out.getvalue()
    assert "Byte count: 11 bytes total." in text
    assert "256 leaves, 255 merge nodes" in text
    assert "Average code length = 1.64 bits/byte" in text
    assert "Calculated Huffman codes" not in text
    assert "Wrote 2051 bytes." in text


def test_console_reporter_names_output_when_decompressing():
    out = io.StringIO()
    reporter = report.ConsoleReporter(out=out, decompressing=True)
    assert not reporter.wants_codes
    reporter.finished(2051, 11)
    text = out.getvalue()
    assert "Have processed: 11 total bytes of output." in text
    assert "Read 2051 compressed bytes." in text
    assert "bytes of input" not in text


def test_console_reporter_wants_codes_when_listing_or_plotting(tmp_path):
    assert report.ConsoleReporter(show_codes=True).wants_codes
    assert report.ConsoleReporter(plot_path=tmp_path / "h.png").wants_codes
    assert not report.ConsoleReporter().wants_codes
