"""
Arabic letters, diacritics and the token model.

Contents:
- Letter and diacritic constants (harakat, shadda, sukun, tanwin)
- Hamza forms and weak letters (و، ي)
- Diacritic stripping and consonant extraction
- Comparison normalization used by decomposition
- Token model: a word as a list of (letter, marks) pairs
"""

import unicodedata
from dataclasses import dataclass, field
from typing import List, Optional

# Diacritics (تشكيل)
FATHATAN = 'ً'
DAMMATAN = 'ٌ'
KASRATAN = 'ٍ'
FATHA = 'َ'
DAMMA = 'ُ'
KASRA = 'ِ'
SHADDA = 'ّ'
SUKUN = 'ْ'
SUPERSCRIPT_ALEF = 'ٰ'

SHORT_VOWELS = {FATHA, DAMMA, KASRA}

# Letters
HAMZA = 'ء'
ALEF_MADDA = 'آ'
ALEF_HAMZA_ABOVE = 'أ'
ALEF_HAMZA_BELOW = 'إ'
WAW_HAMZA = 'ؤ'
YA_HAMZA = 'ئ'
ALEF = 'ا'
WAW = 'و'
YA = 'ي'
ALEF_MAQSURA = 'ى'
TATWEEL = 'ـ'

HAMZA_FORMS = {HAMZA, ALEF_HAMZA_ABOVE, ALEF_HAMZA_BELOW, WAW_HAMZA, YA_HAMZA, ALEF_MADDA}

# Seated forms reset to bare hamza before re-seating (madda excluded)
SEATED_HAMZA = {ALEF_HAMZA_ABOVE, ALEF_HAMZA_BELOW, WAW_HAMZA, YA_HAMZA}

WEAK_LETTERS = {WAW, YA}
LONG_VOWEL_LETTERS = {ALEF, WAW, YA}

# Pattern letters used to render a rule as a readable scheme (فعل)
PATTERN_LETTERS = {'1': 'ف', '2': 'ع', '3': 'ل'}
MARKERS = ('1', '2', '3')

CONSONANT_FIRST = 0x0621
CONSONANT_LAST = 0x064A


def is_diacritic(char: str) -> bool:
    """Check if character is a tashkeel mark."""
    return 'ً' <= char <= 'ٟ' or char == SUPERSCRIPT_ALEF


def is_consonant(char: str) -> bool:
    """Check if character is in the Arabic letter block (tatweel excluded)."""
    return CONSONANT_FIRST <= ord(char) <= CONSONANT_LAST and char != TATWEEL


def is_hamza(char: str) -> bool:
    """Check if character is any form of hamza."""
    return char in HAMZA_FORMS


def is_weak(char: str) -> bool:
    """Check if character is a semivowel (و or ي)."""
    return char in WEAK_LETTERS


def strip_diacritics(text: str) -> str:
    """Remove all tashkeel marks from text."""
    return ''.join(c for c in text if not is_diacritic(c))


def extract_consonants(text: str) -> List[str]:
    """Return the Arabic letters of text, ignoring marks, separators and tatweel."""
    return [c for c in strip_diacritics(text) if is_consonant(c)]


def normalize_for_comparison(text: str) -> str:
    """
    Normalize a surface word for equality checks.

    NFC composition (which also puts stacked marks such as vowel and
    shadda in canonical order), tatweel removed, whitespace trimmed.
    """
    return unicodedata.normalize('NFC', text.strip().replace(TATWEEL, ''))


@dataclass
class Token:
    """A base letter with the marks attached to it."""
    letter: str
    marks: List[str] = field(default_factory=list)

    @property
    def vowel(self) -> Optional[str]:
        """The short vowel carried by this token, if any."""
        for mark in self.marks:
            if mark in SHORT_VOWELS:
                return mark
        return None

    @property
    def first_mark(self) -> Optional[str]:
        return self.marks[0] if self.marks else None

    @property
    def last_mark(self) -> Optional[str]:
        return self.marks[-1] if self.marks else None

    @property
    def bare(self) -> bool:
        return not self.marks

    def copy(self) -> 'Token':
        return Token(self.letter, list(self.marks))


def tokenize(text: str) -> List[Token]:
    """
    Split text into tokens.

    Every non-diacritic character opens a new token; diacritics attach to
    the token before them. Marks leading the text get a token with an
    empty letter.
    """
    tokens: List[Token] = []
    for char in text:
        if is_diacritic(char):
            if not tokens:
                tokens.append(Token(''))
            tokens[-1].marks.append(char)
        else:
            tokens.append(Token(char))
    return tokens


def render(tokens: List[Token]) -> str:
    """Join tokens back into a string."""
    return ''.join(t.letter + ''.join(t.marks) for t in tokens)


def render_pattern(rule: str) -> str:
    """Render a rule with ف/ع/ل in place of the positional markers."""
    return ''.join(PATTERN_LETTERS.get(c, c) for c in rule)
