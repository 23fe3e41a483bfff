"""
Chained hash table for schemes.

- 128 buckets, DJB2 hash (acc * 33 + code point, seeded at 5381)
- Separate chaining; new keys are prepended to their bucket
- No resizing: the bucket count is fixed for the table's lifetime,
  so long chains are the expected cost of very large registries
"""

from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Tuple

DEFAULT_BUCKETS = 128

_INT64_MASK = (1 << 64) - 1
_INT64_SIGN = 1 << 63


def djb2(key: str) -> int:
    """DJB2 hash wrapped to a signed 64-bit integer."""
    acc = 5381
    for char in key:
        acc = (acc * 33 + ord(char)) & _INT64_MASK
    return acc - (1 << 64) if acc & _INT64_SIGN else acc


@dataclass
class _Entry:
    key: str
    value: Any
    next: Optional['_Entry'] = None


class SchemeTable:
    """
    Fixed-size chained hash table keyed by scheme name.

    Usage:
        table = SchemeTable()
        table.insert("فَاعِل", scheme)
        table.search("فَاعِل")   # scheme
        table.collisions()       # nodes chained behind bucket heads
    """

    def __init__(self, bucket_count: int = DEFAULT_BUCKETS):
        if bucket_count < 1:
            raise ValueError("bucket_count must be positive")
        self.bucket_count = bucket_count
        self._buckets: List[Optional[_Entry]] = [None] * bucket_count
        self._size = 0

    def _index(self, key: str) -> int:
        return abs(djb2(key)) % self.bucket_count

    def insert(self, key: str, value: Any) -> bool:
        """Store value under key. Returns False when an existing entry was overwritten."""
        index = self._index(key)
        entry = self._buckets[index]
        while entry is not None:
            if entry.key == key:
                entry.value = value
                return False
            entry = entry.next
        self._buckets[index] = _Entry(key, value, self._buckets[index])
        self._size += 1
        return True

    def search(self, key: str) -> Optional[Any]:
        entry = self._buckets[self._index(key)]
        while entry is not None:
            if entry.key == key:
                return entry.value
            entry = entry.next
        return None

    def contains(self, key: str) -> bool:
        return self.search(key) is not None

    def delete(self, key: str) -> bool:
        index = self._index(key)
        prev = None
        entry = self._buckets[index]
        while entry is not None:
            if entry.key == key:
                if prev is None:
                    self._buckets[index] = entry.next
                else:
                    prev.next = entry.next
                self._size -= 1
                return True
            prev, entry = entry, entry.next
        return False

    def items(self) -> Iterator[Tuple[str, Any]]:
        """Entries in bucket order (not insertion order)."""
        for head in self._buckets:
            entry = head
            while entry is not None:
                yield entry.key, entry.value
                entry = entry.next

    def _chain_lengths(self) -> List[int]:
        lengths = []
        for head in self._buckets:
            length = 0
            entry = head
            while entry is not None:
                length += 1
                entry = entry.next
            lengths.append(length)
        return lengths

    def count(self) -> int:
        return self._size

    def __len__(self) -> int:
        return self._size

    def load_factor(self) -> float:
        return self._size / self.bucket_count

    def collisions(self) -> int:
        """Number of entries stored behind the head of their bucket."""
        return sum(max(0, n - 1) for n in self._chain_lengths())

    def longest_chain(self) -> int:
        return max(self._chain_lengths())

    def used_buckets(self) -> int:
        return sum(1 for n in self._chain_lengths() if n)
