#!/usr/bin/env python3
"""
Arabic Root Classification

Root Categories (أنواع الجذور):
1. سالم (Regular) - All letters are strong consonants
2. مهموز (Glottal) - Contains hamza, no structural weakness
3. مضعّف (Geminate) - Second and third radicals identical
4. مثال (Assimilated) - First radical is و or ي
5. أجوف (Hollow) - Second radical is و or ي
6. ناقص (Defective) - Third radical is و or ي
7. لفيف (Doubly Weak) - Two or more radicals are و or ي

Detection order matters: a geminate root wins even when its doubled
letter is a semivowel, and the hamza flag is recorded for every
category but only becomes the category when nothing else applies.
"""

import logging
from enum import Enum
from dataclasses import dataclass
from typing import Tuple, Optional

from .letters import (
    ALEF, ALEF_MAQSURA, YA,
    extract_consonants, is_hamza, is_weak,
)

logger = logging.getLogger(__name__)


class Category(Enum):
    """Structural category of a triliteral root."""
    REGULAR = ("سالم", "Regular")
    GLOTTAL = ("مهموز", "Glottal")
    GEMINATE = ("مضعّف", "Geminate")
    ASSIMILATED = ("مثال", "Assimilated")
    HOLLOW = ("أجوف", "Hollow")
    DEFECTIVE = ("ناقص", "Defective")
    DOUBLY_WEAK = ("لفيف", "Doubly Weak")

    def __init__(self, name_ar: str, name_en: str):
        self.name_ar = name_ar
        self.name_en = name_en


CATEGORY_DESCRIPTIONS = {
    Category.REGULAR: "All three radicals are strong consonants",
    Category.GLOTTAL: "Contains a hamza and no weak radical",
    Category.GEMINATE: "Second and third radicals are identical",
    Category.ASSIMILATED: "First radical is a semivowel (و or ي)",
    Category.HOLLOW: "Second radical is a semivowel (و or ي)",
    Category.DEFECTIVE: "Third radical is a semivowel (و or ي)",
    Category.DOUBLY_WEAK: "Two or more radicals are semivowels",
}


@dataclass(frozen=True)
class Root:
    """A classified root. Invalid roots carry an error instead of letters."""
    text: str
    letters: Tuple[str, ...] = ()
    category: Optional[Category] = None
    has_hamza: bool = False
    error: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.error is None

    @property
    def spelling(self) -> str:
        return ''.join(self.letters)

    @property
    def weak_positions(self) -> Tuple[int, ...]:
        """0-indexed positions of semivowel radicals."""
        return tuple(i for i, c in enumerate(self.letters) if is_weak(c))

    @property
    def is_connected(self) -> bool:
        """Doubly weak with the second and third radicals both weak (لفيف مقرون)."""
        return len(self.letters) == 3 and is_weak(self.letters[1]) and is_weak(self.letters[2])


def normalize_root(text: str) -> str:
    """Trim and turn a terminal alef maqsura into ya."""
    text = text.strip()
    if text.endswith(ALEF_MAQSURA):
        text = text[:-1] + YA
    return text


def detect_category(letters: Tuple[str, ...]) -> Category:
    """
    Category of three validated radicals.

    Order: geminate, doubly weak, assimilated, hollow, defective,
    glottal, regular.
    """
    c1, c2, c3 = letters
    if c2 == c3:
        return Category.GEMINATE
    if sum(1 for c in letters if is_weak(c)) >= 2:
        return Category.DOUBLY_WEAK
    if is_weak(c1):
        return Category.ASSIMILATED
    if is_weak(c2):
        return Category.HOLLOW
    if is_weak(c3):
        return Category.DEFECTIVE
    if any(is_hamza(c) for c in letters):
        return Category.GLOTTAL
    return Category.REGULAR


def classify_root(text: str) -> Root:
    """
    Classify an Arabic root.

    Args:
        text: The root string (e.g., "كتب", "ك-ت-ب", "قَوَلَ")

    Returns:
        Root with letters, category and hamza flag, or with an error
        message when the text is not a valid triliteral root.
    """
    text = normalize_root(text or '')
    letters = extract_consonants(text)

    if ALEF in letters:
        logger.debug(f"Rejected root with bare alef: {text!r}")
        return Root(
            text=text,
            error="Bare alef (ا) is not a valid radical; use a hamza form such as أ or إ",
        )

    if len(letters) != 3:
        logger.debug(f"Rejected root {text!r}: {len(letters)} letters")
        return Root(
            text=text,
            error=f"A root needs exactly 3 Arabic letters, found {len(letters)}",
        )

    letters = tuple(letters)
    return Root(
        text=text,
        letters=letters,
        category=detect_category(letters),
        has_hamza=any(is_hamza(c) for c in letters),
    )


def explain_root(root: Root) -> str:
    """One-sentence explanation of why a root falls in its category."""
    if not root.is_valid:
        return root.error

    c1, c2, c3 = root.letters
    category = root.category
    if category == Category.GEMINATE:
        text = f"The second and third radicals are identical ({c2})"
    elif category == Category.DOUBLY_WEAK:
        weak = '، '.join(root.letters[i] for i in root.weak_positions)
        kind = "connected" if root.is_connected else "separated"
        text = f"Two radicals are semivowels ({weak}), {kind}"
    elif category == Category.ASSIMILATED:
        text = f"The first radical is the semivowel {c1}"
    elif category == Category.HOLLOW:
        text = f"The second radical is the semivowel {c2}"
    elif category == Category.DEFECTIVE:
        text = f"The third radical is the semivowel {c3}"
    elif category == Category.GLOTTAL:
        text = "One radical is a hamza and none is weak"
    else:
        text = "All three radicals are strong consonants"

    if root.has_hamza and category != Category.GLOTTAL:
        text += "; it also contains a hamza"
    return f"{category.name_ar} ({category.name_en}): {text}."
