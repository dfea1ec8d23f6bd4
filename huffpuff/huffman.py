from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .errors import TruncatedStreamError

ALPHABET_SIZE = 256


class FrequencyTable: # occurrence counts for all 256 byte values
    def __init__(self):
        self._counts = [0] * ALPHABET_SIZE

    @classmethod
    def from_bytes(cls, data: bytes) -> "FrequencyTable":
        table = cls()
        for byte in data:
            table._counts[byte] += 1
        return table

    @staticmethod
    def _check_symbol(symbol: int) -> None:
        if not 0 <= symbol < ALPHABET_SIZE:
            raise ValueError(f"symbol must be in 0..{ALPHABET_SIZE - 1}, got {symbol}")

    def increment(self, symbol: int) -> None:
        self._check_symbol(symbol)
        self._counts[symbol] += 1

    def set_count(self, symbol: int, count: int) -> None:
        self._check_symbol(symbol)
        if count < 0:
            raise ValueError(f"count for symbol {symbol} must be non-negative, got {count}")
        self._counts[symbol] = count

    def count(self, symbol: int) -> int:
        self._check_symbol(symbol)
        return self._counts[symbol]

    def total_count(self) -> int:
        return sum(self._counts)

    def probabilities(self) -> List[float]:
        total = self.total_count()
        if total == 0:
            return [0.0] * ALPHABET_SIZE
        return [c / total for c in self._counts]

    def __iter__(self) -> Iterator[int]:
        return iter(self._counts)

    def __len__(self) -> int:
        return ALPHABET_SIZE

    def __eq__(self, other) -> bool:
        if not isinstance(other, FrequencyTable):
            return NotImplemented
        return self._counts == other._counts

    def __repr__(self) -> str:
        used = sum(1 for c in self._counts if c)
        return f"FrequencyTable(total={self.total_count()}, used={used})"


class HuffmanNode: # node stored in a CodeTree arena
    def __init__(self, weight: int, symbol: Optional[int] = None):
        self.symbol = symbol    # byte value for leaves, None for merge nodes
        self.weight = weight
        self.probability = 0.0  # diagnostic only
        self.parent: Optional[int] = None # arena index of the merge node above
        self.less: Optional[int] = None   # child with the smaller weight
        self.more: Optional[int] = None   # child with the larger weight

    def is_leaf(self) -> bool:
        return self.less is None

    def __repr__(self) -> str:
        if self.is_leaf():
            return f"HuffmanNode(symbol={self.symbol}, weight={self.weight})"
        return f"HuffmanNode(weight={self.weight}, less={self.less}, more={self.more})"


class CodeTree:
    """
    Arena holding every node of one Huffman tree.

    Indices 0..leaf_count-1 are the leaves (the index is the symbol), merge
    nodes follow in the order they were created and the last one is the root.
    """

    def __init__(self, nodes: List[HuffmanNode], leaf_count: int):
        self.nodes = nodes
        self.leaf_count = leaf_count
        self.root = len(nodes) - 1

    def __getitem__(self, index: int) -> HuffmanNode:
        return self.nodes[index]

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def root_node(self) -> HuffmanNode:
        return self.nodes[self.root]

    @property
    def internal_count(self) -> int:
        return len(self.nodes) - self.leaf_count

    def leaf(self, symbol: int) -> HuffmanNode:
        return self.nodes[symbol]


def find_smallest(nodes: List[HuffmanNode], actives: List[Optional[int]]) -> Tuple[int, int]:
    """
    Scan the active slots left to right for the smallest and second smallest weights.

    A weight equal to the current smallest never displaces it, so ties go to the
    lower slot. Returns the two slot indices (smallest, next smallest).
    """
    smallest = next_smallest = -1
    smallest_weight = next_weight = None
    for slot, node_index in enumerate(actives):
        if node_index is None: # already merged
            continue
        weight = nodes[node_index].weight
        if smallest_weight is None or weight < smallest_weight:
            next_smallest, next_weight = smallest, smallest_weight # old smallest demoted
            smallest, smallest_weight = slot, weight
        elif next_weight is None or weight < next_weight:
            next_smallest, next_weight = slot, weight
    return smallest, next_smallest


def build_huffman_tree(weights: Iterable[int]) -> CodeTree: # weights: FrequencyTable or a sequence of counts
    nodes = [HuffmanNode(weight, symbol) for symbol, weight in enumerate(weights)]
    if not nodes:
        raise ValueError("cannot build a Huffman tree over an empty alphabet")
    for node in nodes:
        if node.weight < 0:
            raise ValueError(f"negative weight {node.weight} for symbol {node.symbol}")

    leaf_count = len(nodes)
    actives: List[Optional[int]] = list(range(leaf_count)) # slot -> arena index of unmerged subtree

    # Merge the two lightest subtrees until a single root is left
    for _ in range(leaf_count - 1):
        smallest, next_smallest = find_smallest(nodes, actives)
        a = actives[smallest]
        b = actives[next_smallest]

        merged = HuffmanNode(nodes[a].weight + nodes[b].weight)
        if nodes[a].weight != nodes[b].weight:
            merged.less, merged.more = a, b
        elif smallest < next_smallest:
            merged.less, merged.more = a, b
        else:
            merged.less, merged.more = b, a

        merged_index = len(nodes)
        nodes.append(merged)
        nodes[a].parent = merged_index
        nodes[b].parent = merged_index

        low, high = min(smallest, next_smallest), max(smallest, next_smallest)
        actives[low] = merged_index
        actives[high] = None

    tree = CodeTree(nodes, leaf_count)
    total = tree.root_node.weight
    if total:
        for node in nodes:
            node.probability = node.weight / total
    return tree


def generate_huffman_codes(tree: CodeTree) -> Dict[int, str]:
    """Walk from every leaf up to the root and return the mapping symbol -> code."""
    codes = {}
    nodes = tree.nodes
    for symbol in range(tree.leaf_count):
        bits = []
        current = symbol
        while nodes[current].parent is not None:
            parent = nodes[current].parent
            bits.append('1' if nodes[parent].more == current else '0')
            current = parent
        codes[symbol] = ''.join(reversed(bits)) # collected leaf to root
    return codes


def huffman_encode(data: bytes, code_map: Dict[int, str], sink) -> int: # sink: anything with put_bit(int)
    """Emit the code of every byte in data to sink. Returns the number of bits written."""
    written = 0
    for byte in data:
        for ch in code_map[byte]:
            sink.put_bit(1 if ch == '1' else 0)
        written += len(code_map[byte])
    return written


def huffman_encode_bits(data: bytes, code_map: Dict[int, str]) -> str:
    return ''.join(code_map[byte] for byte in data)


class TreeWalker:
    """Tree-walking decoder state: one bit moves one level down, a leaf ends a symbol."""

    def __init__(self, tree: CodeTree):
        self.tree = tree
        self.current = tree.root

    def process_bit(self, bit: int) -> None:
        node = self.tree.nodes[self.current]
        self.current = node.more if bit else node.less

    def code_finished(self) -> Optional[int]:
        """Return the decoded symbol and reset to the root, or None while mid-code."""
        node = self.tree.nodes[self.current]
        if not node.is_leaf():
            return None
        self.current = self.tree.root
        return node.symbol

    def reset(self) -> None:
        self.current = self.tree.root


def huffman_decode(bits: Iterable[int], tree: CodeTree, count: int, progress=None) -> bytes:
    """
    Decode exactly count symbols from bits by walking tree.

    Bits left over after the last symbol are padding and are not consumed.
    Raises TruncatedStreamError when bits run out first.
    """
    if count is None:
        raise ValueError("the number of symbols to decode must be known")
    if count < 0:
        raise ValueError(f"symbol count must be non-negative, got {count}")

    decoded = bytearray()
    if count == 0:
        return bytes(decoded)

    root = tree.root_node
    if root.is_leaf(): # single-symbol alphabet, the code is empty
        return bytes([root.symbol]) * count

    walker = TreeWalker(tree)
    bit_source = iter(bits)
    while len(decoded) < count:
        try:
            bit = next(bit_source)
        except StopIteration:
            raise TruncatedStreamError(
                f"bitstream ended after {len(decoded)} of {count} symbols"
            ) from None
        walker.process_bit(bit)
        symbol = walker.code_finished()
        if symbol is not None:
            decoded.append(symbol)
            if progress is not None:
                progress(len(decoded))

    return bytes(decoded)
