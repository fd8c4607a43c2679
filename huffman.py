"""
Реализует кодирование Хаффмана для текстовых сообщений.
Частоты символов -> лес листьев в min-куче -> попарное слияние двух
минимальных узлов -> обход дерева и назначение кодов.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from heap import MinHeap


ALPHABET_SIZE = 256
FIXED_WIDTH_BITS = 8


class UnsupportedSymbolError(ValueError):
    def __init__(self, symbol: str, position: int):
        super().__init__(
            f"Unsupported symbol {symbol!r} (code {ord(symbol)}) at position {position}"
        )
        self.symbol = symbol
        self.position = position


class UnassignedCodeError(KeyError):
    def __init__(self, symbol: str):
        super().__init__(symbol)
        self.symbol = symbol

    def __str__(self):
        return f"No code assigned for symbol {self.symbol!r}"


class HuffmanNode:
    def __init__(self, symbol: Optional[str], frequency: int, leaf: bool = True):
        if frequency < 0:
            raise ValueError(f"Negative frequency: {frequency}")
        if leaf and symbol is None:
            raise ValueError("Leaf node requires a symbol")

        self._is_leaf = leaf
        self._symbol = symbol if leaf else None
        self._frequency = frequency
        self._left: Optional['HuffmanNode'] = None
        self._right: Optional['HuffmanNode'] = None

    @classmethod
    def leaf(cls, symbol: str, frequency: int) -> 'HuffmanNode':
        return cls(symbol, frequency)

    @classmethod
    def internal(cls, frequency: int,
                 left: Optional['HuffmanNode'] = None,
                 right: Optional['HuffmanNode'] = None) -> 'HuffmanNode':
        node = cls(None, frequency, leaf=False)
        if left is not None:
            node.set_left(left)
        if right is not None:
            node.set_right(right)
        return node

    def set_left(self, node: 'HuffmanNode'):
        self._check_attach(self._left, 'left')
        self._left = node

    def set_right(self, node: 'HuffmanNode'):
        self._check_attach(self._right, 'right')
        self._right = node

    def _check_attach(self, current: Optional['HuffmanNode'], side: str):
        if self._is_leaf:
            raise ValueError("Cannot attach a child to a leaf node")
        if current is not None:
            raise ValueError(f"The {side} child is already attached")

    @property
    def is_leaf(self) -> bool:
        return self._is_leaf

    @property
    def symbol(self) -> Optional[str]:
        return self._symbol

    @property
    def frequency(self) -> int:
        return self._frequency

    @property
    def left(self) -> Optional['HuffmanNode']:
        return self._left

    @property
    def right(self) -> Optional['HuffmanNode']:
        return self._right

    def __repr__(self):
        if self._is_leaf:
            return f"Leaf({self._symbol!r}, {self._frequency})"
        return f"Internal({self._frequency})"


def count_frequency(message: Optional[str]) -> List[int]:
    frequencies = [0] * ALPHABET_SIZE

    if message is None:
        return frequencies

    for position, char in enumerate(message):
        code = ord(char)
        if code >= ALPHABET_SIZE:
            raise UnsupportedSymbolError(char, position)
        frequencies[code] += 1

    return frequencies


def build_forest(frequencies: List[int]) -> MinHeap:
    heap = MinHeap(key=lambda node: node.frequency)

    for code, freq in enumerate(frequencies):
        if freq > 0:
            heap.insert(HuffmanNode.leaf(chr(code), freq))

    return heap


def build_tree(heap: MinHeap) -> HuffmanNode:
    if heap.size() == 0:
        raise ValueError("Cannot build a tree from an empty forest")

    while heap.size() > 1:
        t1 = heap.remove_min()
        t2 = heap.remove_min()

        combined = HuffmanNode.internal(t1.frequency + t2.frequency)
        combined.set_left(t1)
        combined.set_right(t2)
        heap.insert(combined)

    return heap.get_min()


def create_encoding_table(root: Optional[HuffmanNode]) -> List[Optional[str]]:
    codes: List[Optional[str]] = [None] * ALPHABET_SIZE

    if root is None:
        return codes

    # единственный лист получает код "0": пустая строка не является кодом
    if root.is_leaf:
        codes[ord(root.symbol)] = '0'
        return codes

    path: List[str] = []

    def traverse(node: HuffmanNode):
        if node.is_leaf:
            codes[ord(node.symbol)] = ''.join(path)
            return

        path.append('0')
        traverse(node.left)
        path[-1] = '1'
        traverse(node.right)
        path.pop()

    traverse(root)
    return codes


def _lookup(char: str, codes: List[Optional[str]]) -> str:
    code_point = ord(char)
    code = codes[code_point] if code_point < len(codes) else None
    if code is None:
        raise UnassignedCodeError(char)
    return code


def compute_compression_length(message: Optional[str], codes: List[Optional[str]]) -> int:
    if not message:
        return 0
    return sum(len(_lookup(char, codes)) for char in message)


def fixed_width_length(message: Optional[str]) -> int:
    return len(message) * FIXED_WIDTH_BITS if message else 0


def encode_message(message: Optional[str], codes: List[Optional[str]]) -> str:
    if not message:
        return ''
    return ''.join(_lookup(char, codes) for char in message)


def decode_bits(bits: str, root: Optional[HuffmanNode]) -> str:
    if not bits:
        return ''

    if root is None:
        raise ValueError("Cannot decode bits without a tree")

    output = []

    if root.is_leaf:
        for pos, bit in enumerate(bits):
            if bit != '0':
                raise ValueError(f"Invalid bit {bit!r} at position {pos}")
            output.append(root.symbol)
        return ''.join(output)

    node = root
    for pos, bit in enumerate(bits):
        if bit == '0':
            node = node.left
        elif bit == '1':
            node = node.right
        else:
            raise ValueError(f"Invalid bit {bit!r} at position {pos}")

        if node.is_leaf:
            output.append(node.symbol)
            node = root

    if node is not root:
        raise ValueError("Bit string ends in the middle of a code")

    return ''.join(output)


@dataclass
class HuffmanResult:
    message: str
    frequencies: List[int]
    root: Optional[HuffmanNode]
    codes: List[Optional[str]]
    compressed_bits: int
    baseline_bits: int

    @property
    def ratio(self) -> float:
        if self.baseline_bits == 0:
            return 0.0
        return self.compressed_bits / self.baseline_bits

    def assigned_codes(self) -> List[Tuple[str, int, str]]:
        return [(chr(code_point), self.frequencies[code_point], code)
                for code_point, code in enumerate(self.codes)
                if code is not None]


class HuffmanEncoder:
    @staticmethod
    def build(message: Optional[str]) -> HuffmanResult:
        message = message or ''
        frequencies = count_frequency(message)

        if not message:
            return HuffmanResult(
                message='',
                frequencies=frequencies,
                root=None,
                codes=create_encoding_table(None),
                compressed_bits=0,
                baseline_bits=0
            )

        heap = build_forest(frequencies)
        root = build_tree(heap)
        codes = create_encoding_table(root)

        return HuffmanResult(
            message=message,
            frequencies=frequencies,
            root=root,
            codes=codes,
            compressed_bits=compute_compression_length(message, codes),
            baseline_bits=fixed_width_length(message)
        )

    @staticmethod
    def encode(message: Optional[str]) -> Tuple[HuffmanResult, str]:
        result = HuffmanEncoder.build(message)
        return result, encode_message(result.message, result.codes)

    @staticmethod
    def decode(result: HuffmanResult, bits: str) -> str:
        return decode_bits(bits, result.root)
