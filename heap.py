"""
Двоичная min-куча для построения дерева Хаффмана.
Элементы сравниваются по ключу, при равенстве ключей раньше выходит
элемент, добавленный раньше.
"""

import heapq
import itertools
from typing import Any, Callable, Generic, List, Optional, Tuple, TypeVar


T = TypeVar('T')


class HeapUnderflowError(IndexError):
    pass


class MinHeap(Generic[T]):
    def __init__(self, key: Optional[Callable[[T], Any]] = None):
        self._key = key if key is not None else (lambda item: item)
        self._entries: List[Tuple[Any, int, T]] = []
        self._counter = itertools.count()

    def insert(self, item: T):
        # (ключ, порядковый номер, элемент): номер делает порядок полным
        heapq.heappush(self._entries, (self._key(item), next(self._counter), item))

    def remove_min(self) -> T:
        if not self._entries:
            raise HeapUnderflowError("remove_min from empty heap")
        return heapq.heappop(self._entries)[2]

    def peek_min(self) -> T:
        if not self._entries:
            raise HeapUnderflowError("peek_min on empty heap")
        return self._entries[0][2]

    get_min = peek_min

    def size(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)
