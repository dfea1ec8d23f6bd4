from __future__ import annotations

import io
from pathlib import Path
from typing import Dict, Optional

from . import huffman as huff
from .bitfile import BitReader, BitWriter, HEADER_SIZE
from .errors import FileOpenError

K = 1024
PROGRESS_INTERVAL = 8 * K # symbols between progress callbacks


class Observer:
    """
    Checkpoint hooks for the compression pipelines. Every method is a no-op here;
    report.ConsoleReporter prints them.

    Decompression only derives codes, and calls codes_assigned, when wants_codes is set.
    """

    wants_codes = False

    def counted(self, table: huff.FrequencyTable) -> None:
        pass

    def tree_built(self, tree: huff.CodeTree) -> None:
        pass

    def codes_assigned(self, table: huff.FrequencyTable, codes: Dict[int, str]) -> None:
        pass

    def progress(self, done: int, total: int) -> None:
        pass

    def finished(self, input_size: int, output_size: int) -> None:
        pass


def _progress_callback(observer: Observer, total: int):
    def report(done: int) -> None:
        if done % PROGRESS_INTERVAL == 0:
            observer.progress(done, total)
    return report


def compress_bytes(data: bytes, observer: Optional[Observer] = None) -> bytes:
    """Return the header followed by the packed Huffman codes of data."""
    observer = observer or Observer()

    table = huff.FrequencyTable.from_bytes(data)
    observer.counted(table)

    tree = huff.build_huffman_tree(table)
    observer.tree_built(tree)

    codes = huff.generate_huffman_codes(tree)
    observer.codes_assigned(table, codes)

    out = io.BytesIO()
    writer = BitWriter(out)
    writer.write_header(list(table))

    # Encode in slices so progress can be reported without a per-byte callback
    for start in range(0, len(data), PROGRESS_INTERVAL):
        chunk = data[start:start + PROGRESS_INTERVAL]
        huff.huffman_encode(chunk, codes, writer)
        observer.progress(start + len(chunk), len(data))
    writer.close()

    compressed = out.getvalue()
    observer.finished(len(data), len(compressed))
    return compressed


def read_frequency_table(reader: BitReader) -> huff.FrequencyTable:
    table = huff.FrequencyTable()
    for symbol, count in enumerate(reader.read_header()):
        table.set_count(symbol, count)
    return table


def decompress_stream(stream, observer: Optional[Observer] = None) -> bytes:
    observer = observer or Observer()

    reader = BitReader(stream)
    table = read_frequency_table(reader)
    observer.counted(table)

    tree = huff.build_huffman_tree(table)
    observer.tree_built(tree)

    if observer.wants_codes:
        observer.codes_assigned(table, huff.generate_huffman_codes(tree))

    total = table.total_count()
    decoded = huff.huffman_decode(reader, tree, total, progress=_progress_callback(observer, total))
    if len(decoded) % PROGRESS_INTERVAL: # whole intervals were reported while decoding
        observer.progress(len(decoded), total)
    observer.finished(HEADER_SIZE + (reader.bits_read + 7) // 8, len(decoded))
    return decoded


def decompress_bytes(blob: bytes, observer: Optional[Observer] = None) -> bytes:
    return decompress_stream(io.BytesIO(blob), observer)


def _read_input(path) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise FileOpenError(path, "input") from exc


def _write_output(path, data: bytes) -> None:
    try:
        with open(path, "wb") as f:
            f.write(data)
    except OSError as exc:
        raise FileOpenError(path, "output") from exc


def compress_file(in_path, out_path, observer: Optional[Observer] = None) -> int:
    """Compress in_path into out_path. Returns the compressed size in bytes."""
    data = _read_input(in_path)
    compressed = compress_bytes(data, observer)
    _write_output(out_path, compressed)
    return len(compressed)


def decompress_file(in_path, out_path, observer: Optional[Observer] = None) -> int:
    """Decompress in_path into out_path. Returns the number of bytes restored."""
    try:
        infile = open(in_path, "rb")
    except OSError as exc:
        raise FileOpenError(in_path, "input") from exc
    with infile:
        decoded = decompress_stream(infile, observer)
    _write_output(out_path, decoded)
    return len(decoded)
