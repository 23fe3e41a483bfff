"""
Morphology engine: every operation on the root and scheme registries.

The engine owns a Registries object (passed in or created) and a
Transformer. Expected outcomes such as "already exists" or "not found"
come back as OperationResult statuses; InvalidRootError and
InvalidTemplateError raised by the registries are caught here and
turned into statuses as well.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

from .config import Config
from .errors import InvalidRootError, InvalidTemplateError
from .importer import ImportReport, import_roots, import_schemes
from .letters import normalize_for_comparison, strip_diacritics
from .registries import Registries, RootRegistry, SchemeRegistry
from .root_tree import DerivedWord, RootNode
from .root_types import Category, Root, classify_root, explain_root
from .schemes import Scheme, substitute
from .transformer import Transformer

logger = logging.getLogger(__name__)


class Status(Enum):
    """Outcome of a registry operation."""
    ADDED = "added"
    ALREADY_EXISTS = "already_exists"
    UPDATED = "updated"
    REMOVED = "removed"
    NOT_FOUND = "not_found"
    INVALID_ROOT = "invalid_root"
    INVALID_RULE = "invalid_rule"


@dataclass
class OperationResult:
    status: Status
    subject: str
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status in (Status.ADDED, Status.UPDATED, Status.REMOVED)


@dataclass
class GeneratedWord:
    """Result of deriving one word. surface is None when success is False."""
    surface: Optional[str]
    root: str
    scheme: Optional[str]
    success: bool
    message: str
    category: Optional[Category] = None


@dataclass
class Decomposition:
    """A (root, scheme) pair that produces a given word."""
    word: str
    root: str
    scheme: str
    rule: str
    category: Category
    added_elements: List[str] = field(default_factory=list)


@dataclass
class SchemeUsage:
    """A stored derivation made with a particular scheme."""
    root: str
    surface: str
    frequency: int


@dataclass
class Statistics:
    total_roots: int
    total_schemes: int
    total_derivations: int
    total_frequency: int
    average_derivations: float
    tree_height: int
    load_factor: float
    collisions: int
    longest_chain: int


class MorphologyEngine:
    """
    Entry point for classification, derivation and decomposition.

    Usage:
        engine = MorphologyEngine()
        engine.register_root("قول")
        engine.register_scheme("فَاعِل", "1َا2ِ3")

        word = engine.derive_word("قول", "فَاعِل")
        print(word.surface)                # قَائِل

        found = engine.decompose("قَائِل")
        print(found.root, found.scheme)    # قول فَاعِل
    """

    def __init__(self, registries: Optional[Registries] = None,
                 config: Optional[Config] = None):
        self.config = config or Config()
        self.registries = registries or Registries(
            roots=RootRegistry(),
            schemes=SchemeRegistry(self.config.bucket_count),
        )
        self.transformer = Transformer()

    @property
    def roots(self) -> RootRegistry:
        return self.registries.roots

    @property
    def schemes(self) -> SchemeRegistry:
        return self.registries.schemes

    @classmethod
    def with_defaults(cls, config: Optional[Config] = None) -> 'MorphologyEngine':
        """Engine preloaded with the default schemes and sample roots."""
        from .data import DEFAULT_SCHEMES, SAMPLE_ROOTS

        engine = cls(config=config)
        for name, rule in DEFAULT_SCHEMES:
            engine.register_scheme(name, rule)
        for root in SAMPLE_ROOTS:
            engine.register_root(root)
        return engine

    # ------------------------------------------------------------------
    # Roots
    # ------------------------------------------------------------------

    def classify(self, text: str) -> Root:
        return classify_root(text)

    def explain(self, text: str) -> str:
        return explain_root(classify_root(text))

    def register_root(self, text: str) -> OperationResult:
        try:
            added = self.roots.insert(text)
        except InvalidRootError as e:
            logger.warning(f"Invalid root {text!r}: {e.reason}")
            return OperationResult(Status.INVALID_ROOT, text, e.reason)
        if not added:
            return OperationResult(Status.ALREADY_EXISTS, text, f"Root {text} is already registered")
        return OperationResult(Status.ADDED, text)

    def remove_root(self, text: str) -> OperationResult:
        if self.roots.delete(text):
            return OperationResult(Status.REMOVED, text)
        return OperationResult(Status.NOT_FOUND, text, f"Root {text} is not registered")

    def find_root(self, text: str) -> Optional[RootNode]:
        return self.roots.search(text)

    def _filtered_roots(self, prefix: Optional[str]) -> List[str]:
        keys = self.roots.inorder()
        if prefix:
            prefix = strip_diacritics(prefix.strip())
            keys = [k for k in keys if k.startswith(prefix)]
        return keys

    def list_roots(self, prefix: Optional[str] = None, offset: int = 0,
                   limit: Optional[int] = None) -> List[str]:
        """
        Registered roots in lexicographic order.

        Args:
            prefix: Keep only roots starting with this text
            offset: Number of matching roots to skip (negative counts as 0)
            limit: Maximum number returned; None or < 1 means the
                configured page size
        """
        if limit is None or limit < 1:
            limit = self.config.default_page_size
        offset = max(0, offset)
        return self._filtered_roots(prefix)[offset:offset + limit]

    def count_roots(self, prefix: Optional[str] = None) -> int:
        if not prefix:
            return self.roots.count()
        return len(self._filtered_roots(prefix))

    def derivatives(self, text: str) -> List[DerivedWord]:
        """Stored derivations of a root, most frequent first."""
        node = self.roots.search(text)
        return node.derived_by_frequency() if node else []

    # ------------------------------------------------------------------
    # Schemes
    # ------------------------------------------------------------------

    def register_scheme(self, name: str, rule: str) -> OperationResult:
        try:
            added = self.schemes.add(name, rule)
        except InvalidTemplateError as e:
            logger.warning(f"Invalid rule for scheme {name!r}: {e.reason}")
            return OperationResult(Status.INVALID_RULE, name, e.reason)
        if not added:
            return OperationResult(Status.ALREADY_EXISTS, name, f"Scheme {name} already exists")
        return OperationResult(Status.ADDED, name)

    def update_scheme(self, name: str, rule: str) -> OperationResult:
        try:
            updated = self.schemes.replace(name, rule)
        except InvalidTemplateError as e:
            logger.warning(f"Invalid rule for scheme {name!r}: {e.reason}")
            return OperationResult(Status.INVALID_RULE, name, e.reason)
        if not updated:
            return OperationResult(Status.NOT_FOUND, name, f"Scheme {name} does not exist")
        return OperationResult(Status.UPDATED, name)

    def remove_scheme(self, name: str) -> OperationResult:
        if self.schemes.delete(name):
            return OperationResult(Status.REMOVED, name)
        return OperationResult(Status.NOT_FOUND, name, f"Scheme {name} does not exist")

    def find_scheme(self, name: str) -> Optional[Scheme]:
        return self.schemes.search(name)

    def list_schemes(self) -> List[Scheme]:
        return self.schemes.all_schemes()

    # ------------------------------------------------------------------
    # Derivation
    # ------------------------------------------------------------------

    def _produce(self, root: Root, scheme: Scheme) -> Optional[str]:
        """Substitute and transform without touching the registries."""
        sub = substitute(scheme.rule, root.spelling)
        if not sub.ok:
            return None
        return self.transformer.transform(sub.surface, root, scheme.identifier, scheme.rule)

    def derive_word(self, root_text: str, scheme_name: str) -> GeneratedWord:
        """
        Derive a word and record it on the root.

        A valid root that is not registered yet is registered first when
        config.register_on_derive is set.
        """
        root = classify_root(root_text)
        if not root.is_valid:
            return GeneratedWord(None, root_text, scheme_name, False,
                                 f"Invalid root '{root_text}': {root.error}")

        node = self.roots.search(root.spelling)
        if node is None:
            if not self.config.register_on_derive:
                return GeneratedWord(None, root_text, scheme_name, False,
                                     f"Root '{root_text}' is not registered")
            node = self.roots.get_or_insert(root.spelling)

        scheme = self.schemes.search(scheme_name)
        if scheme is None:
            return GeneratedWord(None, root_text, scheme_name, False,
                                 f"Scheme '{scheme_name}' does not exist")

        sub = substitute(scheme.rule, root.spelling)
        if not sub.ok:
            return GeneratedWord(None, root_text, scheme_name, False, sub.error)

        surface = self.transformer.transform(sub.surface, node.root, scheme.identifier, scheme.rule)
        if surface != sub.surface:
            logger.info(f"Transformed {sub.surface} -> {surface} ({node.category.name_ar})")
        node.record(surface, scheme_name)

        message = f"Generated {surface}"
        if node.category != Category.REGULAR:
            message += f" ({node.category.name_ar})"
        return GeneratedWord(surface, root.spelling, scheme_name, True, message, node.category)

    def derive_family(self, root_text: str) -> List[GeneratedWord]:
        """One derivation per registered scheme, in the order schemes were added."""
        root = classify_root(root_text)
        if not root.is_valid:
            return [GeneratedWord(None, root_text, None, False,
                                  f"Invalid root '{root_text}': {root.error}")]
        family = [self.derive_word(root.spelling, name) for name in self.schemes.names()]
        logger.info(f"Derived {len(family)} words for {root.spelling}")
        return family

    def derive_by_scheme(self, scheme_name: str) -> List[GeneratedWord]:
        """
        Apply one scheme to every registered root, in root order.

        Each success is recorded like derive_word; failures are left out.
        An unknown scheme yields an empty list.
        """
        if self.schemes.search(scheme_name) is None:
            logger.warning(f"Scheme {scheme_name!r} does not exist")
            return []
        words = [self.derive_word(key, scheme_name) for key in self.roots.inorder()]
        words = [w for w in words if w.success]
        logger.info(f"Derived {len(words)} words with {scheme_name}")
        return words

    # ------------------------------------------------------------------
    # Decomposition
    # ------------------------------------------------------------------

    @staticmethod
    def _matches(candidate: str, target: str) -> bool:
        # An undiacritized target matches any vocalization
        if strip_diacritics(target) == target:
            return strip_diacritics(candidate) == target
        return normalize_for_comparison(candidate) == target

    def decompose_all(self, word: str) -> List[Decomposition]:
        """Every registered (root, scheme) pair whose derivation equals word."""
        target = normalize_for_comparison(word or '')
        if not target:
            return []

        schemes = self.schemes.all_schemes()
        results = []
        for node in self.roots.all_nodes():
            for scheme in schemes:
                surface = self._produce(node.root, scheme)
                if surface is not None and self._matches(surface, target):
                    results.append(Decomposition(
                        word=word,
                        root=node.spelling,
                        scheme=scheme.name,
                        rule=scheme.rule,
                        category=node.category,
                        added_elements=scheme.added_elements,
                    ))
        logger.debug(f"Found {len(results)} decomposition(s) for {word}")
        return results

    def decompose(self, word: str) -> Optional[Decomposition]:
        """First decomposition in root order, then scheme order."""
        results = self.decompose_all(word)
        return results[0] if results else None

    def validate_word(self, word: str, root_text: str) -> Optional[str]:
        """Name of the first scheme that derives word from root_text, if any."""
        node = self.roots.search(root_text)
        if node is None:
            return None
        target = normalize_for_comparison(word or '')
        for scheme in self.schemes.all_schemes():
            surface = self._produce(node.root, scheme)
            if surface is not None and self._matches(surface, target):
                return scheme.name
        return None

    def search_by_scheme(self, scheme_name: str) -> List[SchemeUsage]:
        """Stored derivations that were made with scheme_name."""
        usages = []
        for node in self.roots.all_nodes():
            for derived in node.derived_by_frequency():
                if derived.scheme == scheme_name:
                    usages.append(SchemeUsage(node.spelling, derived.surface, derived.frequency))
        return usages

    # ------------------------------------------------------------------
    # Bulk import / statistics
    # ------------------------------------------------------------------

    def import_roots(self, lines: Iterable[str]) -> ImportReport:
        return import_roots(self, lines)

    def import_schemes(self, lines: Iterable[str]) -> ImportReport:
        return import_schemes(self, lines)

    def statistics(self) -> Statistics:
        nodes = self.roots.all_nodes()
        total_derivations = sum(len(n.derived_by_frequency()) for n in nodes)
        total_frequency = sum(n.total_derivations for n in nodes)
        return Statistics(
            total_roots=len(nodes),
            total_schemes=self.schemes.count(),
            total_derivations=total_derivations,
            total_frequency=total_frequency,
            average_derivations=total_derivations / len(nodes) if nodes else 0.0,
            tree_height=self.roots.height(),
            load_factor=self.schemes.load_factor(),
            collisions=self.schemes.collisions(),
            longest_chain=self.schemes.longest_chain(),
        )
