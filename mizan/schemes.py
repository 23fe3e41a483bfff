"""
Schemes (أوزان) and template substitution.

A scheme is a named rule such as "1َا2ِ3" where the markers 1, 2, 3 stand
for the three radicals. Substituting a root gives the raw surface word
that the transformer then adjusts.

The grammatical shape of a scheme (present, past, nominal, participles)
is sniffed once from its identifier and from its rule rendered with ف/ع/ل.
"""

import logging
from enum import Flag, auto
from dataclasses import dataclass
from typing import Optional, List

from .errors import InvalidTemplateError
from .letters import (
    MARKERS, SHADDA,
    extract_consonants, is_diacritic, render_pattern, strip_diacritics,
)

logger = logging.getLogger(__name__)


class SchemeShape(Flag):
    """Grammatical shape of a scheme, as far as the rewrite rules care."""
    NONE = 0
    PRESENT = auto()             # مضارع
    PAST = auto()                # ماضٍ
    NOMINAL = auto()             # اسم
    PASSIVE_PARTICIPLE = auto()  # مفعول
    ACTIVE_PARTICIPLE = auto()   # فاعل
    INSTRUMENT = auto()          # مفعال
    LONG_I = auto()              # تفعيل
    LONG_U = auto()              # فعول


# Substrings that mark a nominal pattern anywhere in the scheme
NOMINAL_PATTERNS = ('فاعل', 'مفعل', 'مفعال', 'مفعول', 'مفاعل', 'مفعّل')

# Prefixes of present-tense verb patterns
PRESENT_PREFIXES = ('يفع', 'يفاع', 'يتفع', 'ينفع', 'يفتع', 'يستف', 'يفعّ')

# Prefixes of past-tense verb patterns (forms I-X)
PAST_PREFIXES = ('فعل', 'فعّل', 'فاعل', 'أفعل', 'تفعّل', 'تفاعل', 'انفعل', 'افتعل', 'استفعل')

# Latin identifiers accepted alongside Arabic ones
LATIN_MARKERS = {
    'PRESENT': SchemeShape.PRESENT,
    'PASSE': SchemeShape.PAST,
    'MADI': SchemeShape.PAST,
    'FAIL': SchemeShape.NOMINAL | SchemeShape.ACTIVE_PARTICIPLE,
    'MAFAL': SchemeShape.NOMINAL,
    'MAFOUL': SchemeShape.NOMINAL | SchemeShape.PASSIVE_PARTICIPLE,
    'MIFAAL': SchemeShape.NOMINAL | SchemeShape.INSTRUMENT,
}


def _sniff_text(text: str) -> SchemeShape:
    # Shadda stays so that فعّل and مفعّل remain distinguishable
    plain = ''.join(c for c in text if c == SHADDA or not is_diacritic(c))
    bare = strip_diacritics(text)
    shape = SchemeShape.NONE

    if any(p in plain or p in bare for p in NOMINAL_PATTERNS):
        shape |= SchemeShape.NOMINAL
    if 'مفعول' in bare:
        shape |= SchemeShape.PASSIVE_PARTICIPLE
    if 'فاعل' in bare:
        shape |= SchemeShape.ACTIVE_PARTICIPLE
    if 'مفعال' in bare:
        shape |= SchemeShape.INSTRUMENT
    if 'تفعيل' in bare:
        shape |= SchemeShape.LONG_I
    if 'فعول' in bare:
        shape |= SchemeShape.LONG_U
    if any(plain.startswith(p) or bare.startswith(p) for p in PRESENT_PREFIXES):
        shape |= SchemeShape.PRESENT
    if any(plain.startswith(p) or bare.startswith(p) for p in PAST_PREFIXES):
        shape |= SchemeShape.PAST

    upper = text.upper()
    for marker, flags in LATIN_MARKERS.items():
        if marker in upper:
            shape |= flags
    return shape


def sniff_shape(identifier: str, rule: Optional[str] = None) -> SchemeShape:
    """
    Classify the grammatical shape of a scheme.

    Args:
        identifier: Scheme name or id (e.g., "مَفْعُول", "MAFOUL")
        rule: Optional rule string; it is rendered with ف/ع/ل and sniffed too

    Returns:
        Union of every SchemeShape that matches
    """
    shape = _sniff_text(identifier or '')
    if rule:
        shape |= _sniff_text(render_pattern(rule))
    return shape


def validate_rule(rule: str) -> None:
    """Raise InvalidTemplateError unless the rule has all three markers."""
    if not rule or not rule.strip():
        raise InvalidTemplateError("Rule is empty")
    missing = [m for m in MARKERS if m not in rule]
    if missing:
        raise InvalidTemplateError(
            f"Rule {rule!r} must contain the markers 1, 2 and 3 (missing {', '.join(missing)})"
        )


@dataclass(frozen=True)
class Scheme:
    """
    A named derivation template.

    Usage:
        scheme = Scheme("فَاعِل", "1َا2ِ3")
        scheme.shape          # NOMINAL | PAST | ACTIVE_PARTICIPLE
        scheme.added_elements # ['َ', 'ا', 'ِ']
    """
    name: str
    rule: str
    identifier: Optional[str] = None

    def __post_init__(self):
        if self.identifier is None:
            object.__setattr__(self, 'identifier', self.name)

    @property
    def shape(self) -> SchemeShape:
        return sniff_shape(self.identifier, self.rule)

    @property
    def pattern(self) -> str:
        """The rule written with ف/ع/ل."""
        return render_pattern(self.rule)

    @property
    def added_elements(self) -> List[str]:
        """Characters the scheme adds around the radicals."""
        return [c for c in self.rule if c not in MARKERS]


@dataclass
class Substitution:
    """Result of placing a root into a rule."""
    surface: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.surface is not None


def substitute(rule: str, root_text: str) -> Substitution:
    """
    Replace markers 1, 2, 3 in rule with the letters of root_text.

    Every other character of the rule is copied unchanged.
    """
    letters = extract_consonants(root_text or '')
    if len(letters) != 3:
        return Substitution(error=f"Root must have exactly 3 letters, found {len(letters)}")
    if not rule:
        return Substitution(error="Rule is empty")

    mapping = dict(zip(MARKERS, letters))
    surface = ''.join(mapping.get(c, c) for c in rule)
    if not surface.strip():
        return Substitution(error="Substitution produced an empty word")

    logger.debug(f"Substituted {''.join(letters)} into {rule}: {surface}")
    return Substitution(surface=surface)
