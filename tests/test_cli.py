from huffpuff.cli import huff_main, puff_main


def _make_input(tmp_path, data=b"abracadabra " * 100):
    src = tmp_path / "input.txt"
    src.write_bytes(data)
    return src


def test_compress_then_decompress_quietly(tmp_path, capsys):
    src = _make_input(tmp_path)
    packed = tmp_path / "input.huf"
    restored = tmp_path / "restored.txt"

    assert huff_main(["-q", str(src), str(packed)]) == 0
    assert puff_main(["-q", str(packed), str(restored)]) == 0
    assert restored.read_bytes() == src.read_bytes()
    assert capsys.readouterr().out == ""


def test_compress_prints_report(tmp_path, capsys):
    src = _make_input(tmp_path)
    assert huff_main([str(src), str(tmp_path / "out.huf"), "--codes"]) == 0
    out = capsys.readouterr().out
    assert "Five most frequent bytes:" in out
    assert "Entropy" in out
    assert "Calculated Huffman codes for bytes with nonzero counts..." in out
    assert "'a' 61:" in out
    assert "total bytes of input." in out


def test_compress_saves_histogram(tmp_path):
    src = _make_input(tmp_path)
    chart = tmp_path / "hist.png"
    assert huff_main([str(src), str(tmp_path / "out.huf"), "--plot", str(chart)]) == 0
    assert chart.exists()
    assert chart.stat().st_size > 0


def test_decompress_prints_report(tmp_path, capsys):
    src = _make_input(tmp_path)
    packed = tmp_path / "input.huf"
    huff_main(["-q", str(src), str(packed)])
    assert puff_main([str(packed), str(tmp_path / "out.txt")]) == 0
    assert "Entropy" in capsys.readouterr().out


def test_wrong_argument_count_is_usage_error(tmp_path, capsys):
    assert huff_main([]) == 1
    assert "usage: huff" in capsys.readouterr().err
    assert puff_main(["only-one"]) == 1
    assert "usage: puff" in capsys.readouterr().err


def test_missing_input_exits_1(tmp_path, capsys):
    assert huff_main(["-q", str(tmp_path / "missing"), str(tmp_path / "out")]) == 1
    assert "Can't open" in capsys.readouterr().err
    assert puff_main(["-q", str(tmp_path / "missing"), str(tmp_path / "out")]) == 1


def test_corrupt_archive_exits_1(tmp_path, capsys):
    bad = tmp_path / "bad.huf"
    bad.write_bytes(b"\x00" * 10)
    assert puff_main(["-q", str(bad), str(tmp_path / "out")]) == 1
    assert "Error:" in capsys.readouterr().err


def test_decompress_lists_codes(tmp_path, capsys):
    src = _make_input(tmp_path)
    packed = tmp_path / "input.huf"
    huff_main(["-q", str(src), str(packed)])
    assert puff_main(["--codes", str(packed), str(tmp_path / "out.txt")]) == 0
    out = capsys.readouterr().out
    assert "Calculated Huffman codes for bytes with nonzero counts..." in out
    assert "'a' 61:" in out
    assert "total bytes of output." in out
