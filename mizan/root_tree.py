"""
AVL tree of roots.

Nodes live in an arena (a Python list) and refer to their children by
index. Rotations only relink indices, so a RootNode payload object is
never aliased by two tree positions. Deleted slots go on a free list
and are reused by later inserts.

Each RootNode keeps the derivations made from its root together with
their frequencies.
"""

import threading
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from .root_types import Category, Root

NIL = -1


@dataclass
class DerivedWord:
    """A surface word produced from a root, with how often it was produced."""
    surface: str
    frequency: int = 1
    scheme: Optional[str] = None


@dataclass
class RootNode:
    """
    Registry payload for one root.

    Category and hamza flag are copied from the Root at insertion and
    never recomputed.
    """
    root: Root
    derived: List[DerivedWord] = field(default_factory=list)
    total_derivations: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def spelling(self) -> str:
        return self.root.spelling

    @property
    def category(self) -> Category:
        return self.root.category

    @property
    def has_hamza(self) -> bool:
        return self.root.has_hamza

    def record(self, surface: str, scheme: Optional[str] = None) -> DerivedWord:
        """Add a derivation or bump its frequency if already present."""
        with self.lock:
            self.total_derivations += 1
            for word in self.derived:
                if word.surface == surface:
                    word.frequency += 1
                    return word
            word = DerivedWord(surface, 1, scheme)
            self.derived.append(word)
            return word

    def find_derived(self, surface: str) -> Optional[DerivedWord]:
        with self.lock:
            for word in self.derived:
                if word.surface == surface:
                    return word
        return None

    def derived_by_frequency(self) -> List[DerivedWord]:
        """Snapshot of derivations, most frequent first."""
        with self.lock:
            words = [DerivedWord(w.surface, w.frequency, w.scheme) for w in self.derived]
        return sorted(words, key=lambda w: -w.frequency)

    def most_frequent(self) -> Optional[DerivedWord]:
        words = self.derived_by_frequency()
        return words[0] if words else None


class _Slot:
    __slots__ = ('key', 'node', 'left', 'right', 'height')

    def __init__(self, key: str, node: RootNode):
        self.key = key
        self.node = node
        self.left = NIL
        self.right = NIL
        self.height = 1


class RootTree:
    """
    Self-balancing binary search tree keyed by root spelling.

    Usage:
        tree = RootTree()
        tree.insert("كتب", RootNode(classify_root("كتب")))
        tree.search("كتب")
        tree.inorder()   # keys in lexicographic order
    """

    def __init__(self):
        self._slots: List[Optional[_Slot]] = []
        self._free: List[int] = []
        self._root = NIL
        self._size = 0

    # ------------------------------------------------------------------
    # Arena helpers
    # ------------------------------------------------------------------

    def _alloc(self, key: str, node: RootNode) -> int:
        slot = _Slot(key, node)
        if self._free:
            index = self._free.pop()
            self._slots[index] = slot
        else:
            index = len(self._slots)
            self._slots.append(slot)
        return index

    def _release(self, index: int) -> None:
        self._slots[index] = None
        self._free.append(index)

    def _height(self, index: int) -> int:
        return self._slots[index].height if index != NIL else 0

    def _update_height(self, index: int) -> None:
        slot = self._slots[index]
        slot.height = 1 + max(self._height(slot.left), self._height(slot.right))

    def _balance(self, index: int) -> int:
        if index == NIL:
            return 0
        slot = self._slots[index]
        return self._height(slot.left) - self._height(slot.right)

    def _rotate_right(self, y: int) -> int:
        slots = self._slots
        x = slots[y].left
        slots[y].left = slots[x].right
        slots[x].right = y
        self._update_height(y)
        self._update_height(x)
        return x

    def _rotate_left(self, x: int) -> int:
        slots = self._slots
        y = slots[x].right
        slots[x].right = slots[y].left
        slots[y].left = x
        self._update_height(x)
        self._update_height(y)
        return y

    def _rebalance(self, index: int) -> int:
        self._update_height(index)
        slot = self._slots[index]
        balance = self._balance(index)

        if balance > 1:
            if self._balance(slot.left) < 0:
                slot.left = self._rotate_left(slot.left)
            return self._rotate_right(index)

        if balance < -1:
            if self._balance(slot.right) > 0:
                slot.right = self._rotate_right(slot.right)
            return self._rotate_left(index)

        return index

    # ------------------------------------------------------------------
    # Insert / delete
    # ------------------------------------------------------------------

    def _insert(self, index: int, key: str, node: RootNode) -> Tuple[int, bool]:
        if index == NIL:
            return self._alloc(key, node), True

        slot = self._slots[index]
        if key < slot.key:
            slot.left, added = self._insert(slot.left, key, node)
        elif key > slot.key:
            slot.right, added = self._insert(slot.right, key, node)
        else:
            return index, False

        if not added:
            return index, False
        return self._rebalance(index), True

    def insert(self, key: str, node: RootNode) -> bool:
        """Insert node under key. Returns False if key is already present."""
        self._root, added = self._insert(self._root, key, node)
        if added:
            self._size += 1
        return added

    def _min_index(self, index: int) -> int:
        while self._slots[index].left != NIL:
            index = self._slots[index].left
        return index

    def _delete(self, index: int, key: str) -> Tuple[int, bool]:
        if index == NIL:
            return NIL, False

        slot = self._slots[index]
        if key < slot.key:
            slot.left, removed = self._delete(slot.left, key)
        elif key > slot.key:
            slot.right, removed = self._delete(slot.right, key)
        else:
            removed = True
            if slot.left == NIL or slot.right == NIL:
                child = slot.left if slot.left != NIL else slot.right
                self._release(index)
                return child, True
            # Two children: take over the in-order successor's payload
            successor = self._slots[self._min_index(slot.right)]
            slot.key, slot.node = successor.key, successor.node
            slot.right, _ = self._delete(slot.right, successor.key)

        if not removed:
            return index, False
        return self._rebalance(index), True

    def delete(self, key: str) -> bool:
        self._root, removed = self._delete(self._root, key)
        if removed:
            self._size -= 1
        return removed

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def search(self, key: str) -> Optional[RootNode]:
        index = self._root
        while index != NIL:
            slot = self._slots[index]
            if key == slot.key:
                return slot.node
            index = slot.left if key < slot.key else slot.right
        return None

    def contains(self, key: str) -> bool:
        return self.search(key) is not None

    def _walk(self, visit: Callable[[_Slot], None]) -> None:
        stack = []
        index = self._root
        while stack or index != NIL:
            while index != NIL:
                stack.append(index)
                index = self._slots[index].left
            index = stack.pop()
            slot = self._slots[index]
            visit(slot)
            index = slot.right

    def inorder(self) -> List[str]:
        """Keys in ascending order."""
        keys: List[str] = []
        self._walk(lambda slot: keys.append(slot.key))
        return keys

    def all_nodes(self) -> List[RootNode]:
        nodes: List[RootNode] = []
        self._walk(lambda slot: nodes.append(slot.node))
        return nodes

    def count(self) -> int:
        return self._size

    def __len__(self) -> int:
        return self._size

    def height(self) -> int:
        return self._height(self._root)

    def is_balanced(self) -> bool:
        """Check the AVL property and stored heights for every node."""

        def check(index: int) -> int:
            if index == NIL:
                return 0
            slot = self._slots[index]
            left = check(slot.left)
            right = check(slot.right)
            if left < 0 or right < 0 or abs(left - right) > 1:
                return -1
            if slot.height != 1 + max(left, right):
                return -1
            return 1 + max(left, right)

        return check(self._root) >= 0
