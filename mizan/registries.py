"""
Root and scheme registries.

- RootRegistry: AVL tree of classified roots behind a read/write lock
- SchemeRegistry: DJB2 hash table of schemes, plus insertion order
- Registries: the pair, owned by one MorphologyEngine

Structural changes (insert, delete) take the exclusive side of the lock;
lookups and traversals take the shared side. Derivation counters are
guarded per root by RootNode.lock.
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import List, Optional

from .errors import InvalidRootError
from .root_tree import RootNode, RootTree
from .root_types import classify_root
from .scheme_table import DEFAULT_BUCKETS, SchemeTable
from .schemes import Scheme, validate_rule

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """Many readers or one writer. Writers wait for active readers to drain."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False

    @contextmanager
    def read(self):
        with self._cond:
            while self._writer:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self):
        with self._cond:
            while self._writer or self._readers:
                self._cond.wait()
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class RootRegistry:
    """Known roots, ordered by spelling."""

    def __init__(self):
        self._tree = RootTree()
        self._lock = ReadWriteLock()

    @staticmethod
    def _key(text: str) -> str:
        root = classify_root(text)
        return root.spelling if root.is_valid else (text or '').strip()

    def insert(self, text: str) -> bool:
        """
        Classify and store a root.

        Returns:
            False if a root with the same spelling is already registered

        Raises:
            InvalidRootError: if the text is not a valid triliteral root
        """
        root = classify_root(text)
        if not root.is_valid:
            raise InvalidRootError(root.error)

        with self._lock.write():
            added = self._tree.insert(root.spelling, RootNode(root))
        if added:
            logger.info(f"Registered root {root.spelling} ({root.category.name_en})")
        return added

    def get_or_insert(self, text: str) -> RootNode:
        """
        The node for a root, registering the root first if needed.

        Lookup and insertion happen under one write lock, so the node
        returned is never lost to a concurrent delete in between.

        Raises:
            InvalidRootError: if the text is not a valid triliteral root
        """
        root = classify_root(text)
        if not root.is_valid:
            raise InvalidRootError(root.error)

        with self._lock.write():
            node = self._tree.search(root.spelling)
            if node is None:
                node = RootNode(root)
                self._tree.insert(root.spelling, node)
                logger.info(f"Registered root {root.spelling} ({root.category.name_en})")
        return node

    def search(self, text: str) -> Optional[RootNode]:
        key = self._key(text)
        with self._lock.read():
            return self._tree.search(key)

    def contains(self, text: str) -> bool:
        return self.search(text) is not None

    def delete(self, text: str) -> bool:
        key = self._key(text)
        with self._lock.write():
            removed = self._tree.delete(key)
        if removed:
            logger.info(f"Removed root {key}")
        return removed

    def inorder(self) -> List[str]:
        with self._lock.read():
            return self._tree.inorder()

    def all_nodes(self) -> List[RootNode]:
        with self._lock.read():
            return self._tree.all_nodes()

    def count(self) -> int:
        with self._lock.read():
            return self._tree.count()

    def height(self) -> int:
        with self._lock.read():
            return self._tree.height()

    def is_balanced(self) -> bool:
        with self._lock.read():
            return self._tree.is_balanced()


class SchemeRegistry:
    """Known schemes, by name, remembering the order they were added in."""

    def __init__(self, bucket_count: int = DEFAULT_BUCKETS):
        self._table = SchemeTable(bucket_count)
        self._order: List[str] = []
        self._lock = ReadWriteLock()

    def add(self, name: str, rule: str, identifier: Optional[str] = None) -> bool:
        """Store a new scheme; returns False and changes nothing if the name is taken."""
        validate_rule(rule)
        with self._lock.write():
            if self._table.contains(name):
                return False
            self._table.insert(name, Scheme(name, rule, identifier))
            self._order.append(name)
        logger.info(f"Registered scheme {name} = {rule}")
        return True

    def replace(self, name: str, rule: str) -> bool:
        """Give an existing scheme a new rule; returns False if the name is unknown."""
        validate_rule(rule)
        with self._lock.write():
            current = self._table.search(name)
            if current is None:
                return False
            self._table.insert(name, Scheme(name, rule, current.identifier))
        logger.info(f"Updated scheme {name} = {rule}")
        return True

    def search(self, name: str) -> Optional[Scheme]:
        with self._lock.read():
            return self._table.search(name)

    def contains(self, name: str) -> bool:
        return self.search(name) is not None

    def delete(self, name: str) -> bool:
        with self._lock.write():
            removed = self._table.delete(name)
            if removed:
                self._order.remove(name)
        if removed:
            logger.info(f"Removed scheme {name}")
        return removed

    def names(self) -> List[str]:
        with self._lock.read():
            return list(self._order)

    def all_schemes(self) -> List[Scheme]:
        """Schemes in insertion order."""
        with self._lock.read():
            return [self._table.search(name) for name in self._order]

    def count(self) -> int:
        with self._lock.read():
            return self._table.count()

    def load_factor(self) -> float:
        with self._lock.read():
            return self._table.load_factor()

    def collisions(self) -> int:
        with self._lock.read():
            return self._table.collisions()

    def longest_chain(self) -> int:
        with self._lock.read():
            return self._table.longest_chain()


@dataclass
class Registries:
    """The state a MorphologyEngine works on."""
    roots: RootRegistry = field(default_factory=RootRegistry)
    schemes: SchemeRegistry = field(default_factory=SchemeRegistry)
