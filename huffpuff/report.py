from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, TextIO

import matplotlib.pyplot as plt

from . import huffman as huff
from .archive import Observer

K = 1024


@dataclass
class Statistics:
    total_bytes: int
    used_symbols: int
    unused_symbols: int
    entropy: float             # bits of information per byte
    redundancy: float          # bits of excess per byte
    redundancy_percent: float
    ideal_ratio: float         # 8 / entropy, inf when the input is a single repeated byte
    ideal_size: int            # compressed size with all redundancy removed and no header


def compute_statistics(table: huff.FrequencyTable) -> Statistics:
    total = table.total_count()
    entropy = 0.0
    used = 0
    for p in table.probabilities():
        if p > 0:
            entropy -= p * math.log2(p)
            used += 1
    entropy = abs(entropy) # -0.0 for a single symbol

    return Statistics(
        total_bytes=total,
        used_symbols=used,
        unused_symbols=huff.ALPHABET_SIZE - used,
        entropy=entropy,
        redundancy=8.0 - entropy,
        redundancy_percent=(1.0 - entropy / 8.0) * 100.0,
        ideal_ratio=8.0 / entropy if entropy > 0 else math.inf,
        ideal_size=int(total * entropy / 8.0),
    )


def most_frequent(table: huff.FrequencyTable, n: int = 5) -> List[int]:
    # stable on ties: the lower byte value comes first
    return sorted(range(huff.ALPHABET_SIZE), key=lambda s: -table.count(s))[:n]


def average_code_length(table: huff.FrequencyTable, codes: Dict[int, str]) -> float:
    total = table.total_count()
    if total == 0:
        return 0.0
    return sum(table.count(s) * len(codes[s]) for s in range(huff.ALPHABET_SIZE)) / total


def _printable(symbol: int) -> str:
    if symbol < 0x20 or symbol == 0x7F:
        return f"'^{chr((symbol + 0x40) & 0x7F)}'"
    if symbol < 0x7F:
        return f"'{chr(symbol)}'"
    return ""


def format_statistics(table: huff.FrequencyTable) -> str:
    stats = compute_statistics(table)
    probs = table.probabilities()
    lines = ["Five most frequent bytes:"]
    for rank, symbol in enumerate(most_frequent(table), start=1):
        lines.append(f"{rank}:  {symbol:02X}h, {probs[symbol] * 100:5.2f}%,  {_printable(symbol)}")
    lines.append(f"Number of different bytes not used = {stats.unused_symbols}")
    lines.append("")
    lines.append(f"Entropy           = {stats.entropy:4.2f}  (Average bits/byte of information)")
    lines.append(f"Redundancy        = {stats.redundancy:4.2f}  (Average bits/byte of excess)")
    lines.append(f"Redundancy        = {stats.redundancy_percent:4.1f}% (Percentage of file which is redundant)")
    lines.append(f"Compression Ratio = {stats.ideal_ratio:4.2f}  (If all redundancy removed)")
    lines.append("File Sizes (Assuming 100% compression efficiency and no overhead):")
    lines.append(f"  Before = {stats.total_bytes}")
    lines.append(f"  After  = {stats.ideal_size}")
    return "\n".join(lines)


def format_codes(table: huff.FrequencyTable, codes: Dict[int, str]) -> str:
    """One line per byte value with a nonzero count: glyph, hex value, count, code."""
    lines = []
    for symbol in range(huff.ALPHABET_SIZE):
        count = table.count(symbol)
        if count == 0:
            continue
        glyph = f"'{chr(symbol)}' " if 0x20 < symbol < 0x7F else "    "
        lines.append(f"{glyph}{symbol:02X}: ({count:6d}) {codes[symbol]}")
    return "\n".join(lines)


def plot_histogram(table: huff.FrequencyTable, path, codes: Optional[Dict[int, str]] = None) -> Path:
    path = Path(path)
    symbols = list(range(huff.ALPHABET_SIZE))

    if codes is None:
        fig, ax_counts = plt.subplots()
    else:
        fig, (ax_counts, ax_lengths) = plt.subplots(2, 1, sharex=True)
        ax_lengths.bar(symbols, [len(codes[s]) for s in symbols], width=1.0)
        ax_lengths.set_xlabel("Byte Value")
        ax_lengths.set_ylabel("Code Length (bits)")

    ax_counts.bar(symbols, list(table), width=1.0)
    ax_counts.set_ylabel("Occurrences")
    ax_counts.set_title(f"Byte Histogram ({table.total_count()} bytes)")
    if codes is None:
        ax_counts.set_xlabel("Byte Value")

    fig.tight_layout()
    fig.savefig(path, dpi=200)
    plt.close(fig)
    return path


class ConsoleReporter(Observer):
    """Prints the analysis, the code table and progress as the pipeline runs."""

    def __init__(self, out: Optional[TextIO] = None, show_codes: bool = False, plot_path=None,
                 decompressing: bool = False):
        self.out = out or sys.stdout
        self.show_codes = show_codes
        self.plot_path = plot_path
        self.decompressing = decompressing

    @property
    def wants_codes(self) -> bool:
        return self.show_codes or self.plot_path is not None

    def _print(self, *args, **kwargs) -> None:
        print(*args, file=self.out, **kwargs)

    def counted(self, table):
        self._print(f"Byte count: {table.total_count()} bytes total.")
        self._print()
        self._print(format_statistics(table))

    def tree_built(self, tree):
        self._print()
        self._print(f"Constructed the Huffman code tree: {tree.leaf_count} leaves, "
                    f"{tree.internal_count} merge nodes.")

    def codes_assigned(self, table, codes):
        self._print(f"Average code length = {average_code_length(table, codes):4.2f} bits/byte")
        if self.show_codes:
            self._print()
            self._print("Calculated Huffman codes for bytes with nonzero counts...")
            self._print()
            self._print(format_codes(table, codes))
        if self.plot_path is not None:
            saved = plot_histogram(table, self.plot_path, codes)
            self._print(f"Histogram saved to {saved}")

    def progress(self, done, total):
        self._print(f"\rHave processed: {done // K}K", end="")

    def finished(self, input_size, output_size):
        if self.decompressing:
            self._print(f"\rHave processed: {output_size} total bytes of output.")
            self._print(f"Read {input_size} compressed bytes.")
        else:
            self._print(f"\rHave processed: {input_size} total bytes of input.")
            self._print(f"Wrote {output_size} bytes.")
