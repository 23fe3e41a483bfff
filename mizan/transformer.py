#!/usr/bin/env python3
"""
Morphophonemic Transformation Engine

Adjusts a word produced by plain template substitution so that it
follows the spelling rules of its root category:
- مضعّف (Geminate): the doubled radical is fused with a shadda
- مثال (Assimilated): the initial و/ي drops in present and imperative
- أجوف (Hollow): the middle و/ي becomes a long alef or a seated hamza
- ناقص (Defective): the final و/ي becomes ا/ى or tanwin kasra
- لفيف (Doubly Weak): the rules above, in radical order
- مهموز (Glottal): hamza is re-seated from the neighbouring vowels

Rules work on a token list (letter + marks) so that "the vowel before"
and "the last occurrence" are structural checks. Within each category
the first matching rule wins. A word that matches no rule is returned
unchanged.
"""

import logging
from typing import Callable, Dict, List, Optional

from .letters import (
    ALEF, ALEF_HAMZA_ABOVE, ALEF_HAMZA_BELOW, ALEF_MADDA, ALEF_MAQSURA,
    DAMMA, FATHA, HAMZA, KASRA, KASRATAN, LONG_VOWEL_LETTERS, SEATED_HAMZA,
    SHADDA, SHORT_VOWELS, SUKUN, WAW, WAW_HAMZA, YA, YA_HAMZA,
    Token, is_weak, render, tokenize,
)
from .root_types import Category, Root
from .schemes import SchemeShape, sniff_shape

logger = logging.getLogger(__name__)

MIM = 'م'

Rule = Callable[[List[Token], Root, SchemeShape], List[Token]]


def _char_before(tokens: List[Token], i: int) -> Optional[str]:
    """The character written immediately before token i."""
    if i <= 0:
        return None
    prev = tokens[i - 1]
    return prev.last_mark or prev.letter


def _char_after(tokens: List[Token], i: int) -> Optional[str]:
    """The character written immediately after the letter of token i."""
    token = tokens[i]
    if token.marks:
        return token.first_mark
    if i + 1 < len(tokens):
        return tokens[i + 1].letter
    return None


def _set_vowel(token: Token, vowel: Optional[str]) -> None:
    """Replace the short vowel or sukun ending token's marks."""
    marks = [m for m in token.marks if m not in SHORT_VOWELS and m != SUKUN]
    if vowel:
        marks.append(vowel)
    token.marks = marks


def _find_radical(tokens: List[Token], root: Root, position: int) -> Optional[int]:
    """
    Index of the token holding radical `position`.

    Radicals are matched left to right so that a prefix letter equal to
    a radical (the ي of يفعل) is not taken for it. A radical that an
    earlier rule removed is skipped.
    """
    start = 0
    for p in range(position + 1):
        letter = root.letters[p]
        index = next((j for j in range(start, len(tokens)) if tokens[j].letter == letter), None)
        if p == position:
            return index
        if index is not None:
            start = index + 1
    return None


def _find_last(tokens: List[Token], letter: str) -> Optional[int]:
    for j in range(len(tokens) - 1, -1, -1):
        if tokens[j].letter == letter:
            return j
    return None


class Transformer:
    """
    Category-driven rewrite of substituted words.

    Usage:
        transformer = Transformer()
        root = classify_root("قول")
        transformer.transform("قَوَل", root, "فَعَل")   # "قَال"
    """

    def __init__(self):
        self._handlers: Dict[Category, Rule] = {
            Category.REGULAR: self._regular,
            Category.GLOTTAL: self._glottal,
            Category.GEMINATE: self._geminate,
            Category.ASSIMILATED: self._assimilated,
            Category.HOLLOW: self._hollow,
            Category.DEFECTIVE: self._defective,
            Category.DOUBLY_WEAK: self._doubly_weak,
        }

    def transform(self, surface: str, root: Root, identifier: str,
                  rule: Optional[str] = None) -> str:
        """
        Apply the rules of root's category to surface.

        Args:
            surface: Word produced by template substitution
            root: Valid classified root
            identifier: Scheme name or id, used to sniff its shape
            rule: Scheme rule, sniffed as well when given

        Returns:
            The adjusted word (equal to surface when no rule applies)
        """
        if not surface or not root.is_valid:
            return surface

        surface = surface.replace(ALEF_MAQSURA, YA)
        category = root.category

        if category == Category.REGULAR and not root.has_hamza:
            return surface

        shape = sniff_shape(identifier, rule)
        tokens = self._handlers[category](tokenize(surface), root, shape)

        if root.has_hamza and category != Category.GLOTTAL:
            tokens = self._seat_hamza(tokens)

        result = render(tokens)
        if result != surface:
            logger.debug(f"{category.name_en}: {surface} -> {result}")
        return result

    def apply_glottal(self, surface: str) -> str:
        """Run only the hamza seating pass over a word."""
        return render(self._seat_hamza(tokenize(surface)))

    # ------------------------------------------------------------------
    # Regular / Glottal
    # ------------------------------------------------------------------

    def _regular(self, tokens: List[Token], root: Root, shape: SchemeShape) -> List[Token]:
        return tokens

    def _glottal(self, tokens: List[Token], root: Root, shape: SchemeShape) -> List[Token]:
        return self._seat_hamza(tokens)

    def _contract_madda(self, tokens: List[Token]) -> List[Token]:
        """أَأْ، أَأَ، أَا، أْا، أا -> آ"""
        out: List[Token] = []
        i = 0
        while i < len(tokens):
            token = tokens[i]
            nxt = tokens[i + 1] if i + 1 < len(tokens) else None
            if nxt is not None and token.letter == ALEF_HAMZA_ABOVE:
                if nxt.letter == ALEF and token.marks in ([], [FATHA], [SUKUN]):
                    out.append(Token(ALEF_MADDA, list(nxt.marks)))
                    i += 2
                    continue
                if (nxt.letter == ALEF_HAMZA_ABOVE and token.marks == [FATHA]
                        and nxt.marks in ([SUKUN], [FATHA])):
                    out.append(Token(ALEF_MADDA))
                    i += 2
                    continue
            out.append(token)
            i += 1
        return out

    def _seat_hamza(self, tokens: List[Token]) -> List[Token]:
        """
        Choose the carrier of every hamza from its neighbours.

        Order:
        1. Word-final after ا/و/ي: bare ء
        2. Word-initial: إ before kasra, else أ
        3. Kasra before or after: ئ
        4. Damma before or after: ؤ
        5. Fatha before or after: أ

        Madda contraction runs before and after seating, so a bare ء
        seated as أ next to ا is contracted in the same pass.
        """
        tokens = self._contract_madda([t.copy() for t in tokens])
        for token in tokens:
            if token.letter in SEATED_HAMZA:
                token.letter = HAMZA

        last = len(tokens) - 1
        for i, token in enumerate(tokens):
            if token.letter != HAMZA:
                continue
            before = _char_before(tokens, i)
            after = _char_after(tokens, i)

            if i == last and token.bare and before in LONG_VOWEL_LETTERS:
                continue
            if i == 0:
                token.letter = ALEF_HAMZA_BELOW if after == KASRA else ALEF_HAMZA_ABOVE
            elif KASRA in (before, after):
                token.letter = YA_HAMZA
            elif DAMMA in (before, after):
                token.letter = WAW_HAMZA
            elif FATHA in (before, after):
                token.letter = ALEF_HAMZA_ABOVE
        return self._contract_madda(tokens)

    # ------------------------------------------------------------------
    # Geminate
    # ------------------------------------------------------------------

    def _geminate(self, tokens: List[Token], root: Root, shape: SchemeShape) -> List[Token]:
        doubled = root.letters[1]
        for i in range(len(tokens) - 1):
            first, second = tokens[i], tokens[i + 1]
            if first.letter != doubled or second.letter != doubled:
                continue

            if first.vowel and not second.bare:
                # مَدَدَ -> مَدَّ, اِمْدِدْ -> اِمْدِّ
                fused = Token(doubled, [first.vowel, SHADDA])
            else:
                # مَشْدْدُ -> مَشْدّ, مَدَد -> مَدّ
                fused = Token(doubled, [SHADDA])
            logger.debug(f"Geminate: fused {doubled} at {i}")
            return tokens[:i] + [fused] + tokens[i + 2:]

        logger.debug("Geminate: doubled letters not adjacent, unchanged")
        return tokens

    # ------------------------------------------------------------------
    # Assimilated
    # ------------------------------------------------------------------

    def _assimilated(self, tokens: List[Token], root: Root, shape: SchemeShape) -> List[Token]:
        c1 = root.letters[0]

        # مِوْزَان -> مِيزَان
        if shape & SchemeShape.INSTRUMENT and c1 == WAW:
            for i in range(len(tokens) - 1):
                if (tokens[i].letter == MIM and tokens[i].last_mark == KASRA
                        and tokens[i + 1].letter == WAW):
                    logger.debug("Assimilated: instrument noun, و -> ي")
                    return tokens[:i + 1] + [Token(YA)] + tokens[i + 2:]

        if shape & (SchemeShape.NOMINAL | SchemeShape.PAST):
            return tokens

        if len(tokens) < 2:
            return tokens

        # يَوْعِدُ -> يَعِدُ
        if tokens[0].letter == YA and tokens[1].letter == c1 and tokens[1].first_mark == SUKUN:
            logger.debug(f"Assimilated: dropped {c1} after present prefix")
            return tokens[:1] + tokens[2:]

        # اِوْعِدْ -> عِدْ
        if tokens[0].letter == ALEF and tokens[1].letter == c1 and tokens[1].first_mark == SUKUN:
            logger.debug(f"Assimilated: dropped ا{c1} of imperative")
            return tokens[2:]

        # وْعِدْ -> عِدْ
        if tokens[0].letter == c1 and tokens[0].first_mark == SUKUN:
            logger.debug(f"Assimilated: dropped initial {c1}")
            return tokens[1:]

        return tokens

    # ------------------------------------------------------------------
    # Hollow
    # ------------------------------------------------------------------

    def _hollow(self, tokens: List[Token], root: Root, shape: SchemeShape,
                connected: bool = False) -> List[Token]:
        c2, c3 = root.letters[1], root.letters[2]
        i = _find_radical(tokens, root, 1)
        if i is None:
            return tokens

        token = tokens[i]
        before = _char_before(tokens, i)

        # Long vowel already in place: قُول، قِيل
        if (before == DAMMA and c2 == WAW) or (before == KASRA and c2 in (WAW, YA)):
            return tokens

        # Present tense keeps the semivowel: يَقُولُ
        if shape & SchemeShape.PRESENT:
            return tokens

        prev = tokens[i - 1] if i > 0 else None

        # قَاوِل -> قَائِل
        if (not connected and prev is not None and prev.letter == ALEF and prev.bare
                and token.first_mark == KASRA):
            logger.debug(f"Hollow: {c2} after alef -> ئ")
            token.letter = YA_HAMZA
            return tokens

        # قَوَل -> قَال
        if before == FATHA and not connected and not is_weak(c3):
            logger.debug(f"Hollow: fatha + {c2} -> alef")
            tokens[i] = Token(ALEF)
            return tokens

        if shape & SchemeShape.PASSIVE_PARTICIPLE and before == SUKUN:
            nxt = tokens[i + 1] if i + 1 < len(tokens) else None
            # مَبْيُوع -> مَبِيع
            if (c2 == YA and token.first_mark == DAMMA and nxt is not None
                    and nxt.letter == WAW and nxt.bare):
                logger.debug("Hollow: passive participle ْيُو -> ِي")
                _set_vowel(prev, KASRA)
                return tokens[:i] + [Token(YA)] + tokens[i + 2:]
            # مَقْوُول -> مَقُول
            logger.debug(f"Hollow: passive participle, dropped {c2}")
            _set_vowel(prev, token.vowel)
            return tokens[:i] + tokens[i + 1:]

        return tokens

    # ------------------------------------------------------------------
    # Defective
    # ------------------------------------------------------------------

    def _defective(self, tokens: List[Token], root: Root, shape: SchemeShape) -> List[Token]:
        tokens = self._defective_rules(tokens, root, shape)
        if tokens and tokens[-1].last_mark == DAMMA:
            tokens[-1].marks.pop()
        return tokens

    def _defective_rules(self, tokens: List[Token], root: Root,
                         shape: SchemeShape) -> List[Token]:
        c3 = root.letters[2]

        # رَمِيي -> رَمِيّ
        if (len(tokens) >= 2 and tokens[-1].letter == c3 and tokens[-2].letter == c3
                and tokens[-1].bare and tokens[-2].bare):
            logger.debug(f"Defective: final {c3}{c3} -> {c3} + shadda")
            return tokens[:-2] + [Token(c3, [SHADDA])]

        # تَفْعِيل / فَعُول keep their long vowel
        if (c3 == YA and shape & SchemeShape.LONG_I) or (c3 == WAW and shape & SchemeShape.LONG_U):
            return tokens

        k = _find_last(tokens, c3)
        if k is None:
            return tokens

        token = tokens[k]
        prev = tokens[k - 1] if k > 0 else None
        before = _char_before(tokens, k)
        is_final = k == len(tokens) - 1

        # اِرْمِيْ -> اِرْمٍ
        if token.first_mark == SUKUN and prev is not None:
            logger.debug(f"Defective: {c3} + sukun -> tanwin kasra")
            _set_vowel(prev, KASRATAN)
            return tokens[:k] + tokens[k + 1:]

        # رَامِي -> رَامٍ
        if shape & SchemeShape.ACTIVE_PARTICIPLE and is_final and prev is not None:
            logger.debug(f"Defective: active participle, final {c3} -> tanwin kasra")
            _set_vowel(prev, KASRATAN)
            return tokens[:k]

        # دَعَوَ -> دَعَا, رَمَيَ -> رَمَى
        if before == FATHA:
            if c3 == WAW:
                final = ALEF
            else:
                final = YA if shape & SchemeShape.PRESENT else ALEF_MAQSURA
            logger.debug(f"Defective: fatha + {c3} -> {final}")
            tokens[k] = Token(final)
            return tokens

        if is_final and token.bare and c3 == YA and before != KASRA:
            final = YA if shape & SchemeShape.PRESENT else ALEF_MAQSURA
            logger.debug(f"Defective: final bare ي -> {final}")
            tokens[k] = Token(final)
            return tokens

        # kasra + و -> ي
        if before == KASRA and c3 == WAW:
            logger.debug("Defective: kasra + و -> ي")
            token.letter = YA
            return tokens

        return tokens

    # ------------------------------------------------------------------
    # Doubly weak
    # ------------------------------------------------------------------

    def _doubly_weak(self, tokens: List[Token], root: Root, shape: SchemeShape) -> List[Token]:
        weak = root.weak_positions
        connected = root.is_connected
        if 0 in weak:
            tokens = self._assimilated(tokens, root, shape)
        if 1 in weak:
            tokens = self._hollow(tokens, root, shape, connected=connected)
        if 2 in weak:
            tokens = self._defective(tokens, root, shape)
        return tokens


_default = Transformer()


def transform(surface: str, root: Root, identifier: str, rule: Optional[str] = None) -> str:
    """Transform with a shared Transformer instance."""
    return _default.transform(surface, root, identifier, rule)
