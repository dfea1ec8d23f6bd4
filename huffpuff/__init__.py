__version__ = "2.1.0"

from .archive import compress_bytes, decompress_bytes, compress_file, decompress_file
from .errors import (
    HuffmanError,
    UsageError,
    FileOpenError,
    TruncatedHeaderError,
    TruncatedStreamError,
)
from .huffman import (
    FrequencyTable,
    CodeTree,
    build_huffman_tree,
    generate_huffman_codes,
    huffman_encode,
    huffman_decode,
)

__all__ = [
    "compress_bytes",
    "decompress_bytes",
    "compress_file",
    "decompress_file",
    "HuffmanError",
    "UsageError",
    "FileOpenError",
    "TruncatedHeaderError",
    "TruncatedStreamError",
    "FrequencyTable",
    "CodeTree",
    "build_huffman_tree",
    "generate_huffman_codes",
    "huffman_encode",
    "huffman_decode",
]
