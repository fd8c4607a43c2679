"""
Вывод таблицы кодов и оценки сжатия.
"""

import sys
from typing import Optional, TextIO

from huffman import HuffmanResult


def _format_symbol(symbol: str) -> str:
    if symbol.isprintable() and symbol != ' ':
        return symbol
    return repr(symbol)


def display_codes(result: HuffmanResult, out: Optional[TextIO] = None):
    if out is None:
        out = sys.stdout
    rows = result.assigned_codes()

    if not rows:
        print("No symbols to encode", file=out)
        return

    print(f"{'Symbol':<10} {'Frequency':>10}  {'Code'}", file=out)
    print("-" * 40, file=out)

    for symbol, freq, code in rows:
        print(f"{_format_symbol(symbol):<10} {freq:>10}  {code}", file=out)

    print("-" * 40, file=out)


def report_efficiency(result: HuffmanResult, out: Optional[TextIO] = None):
    if out is None:
        out = sys.stdout
    print(f"Huffman encoding: {result.compressed_bits} bits", file=out)
    print(f"Fixed-width encoding: {result.baseline_bits} bits", file=out)
    print(f"Ratio: {result.ratio * 100:.1f}%", file=out)
