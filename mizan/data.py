"""
Default Morphological Data

Seed content for a fresh engine:
- Common derivation schemes (past, present, imperative, participles,
  instrument and verbal nouns)
- Sample roots covering every root category
"""

from typing import List, Tuple

# =============================================================================
# SCHEMES
# =============================================================================

# (name, rule); 1, 2, 3 stand for the radicals
DEFAULT_SCHEMES: List[Tuple[str, str]] = [
    # Verbs
    ('فَعَلَ', '1َ2َ3َ'),            # past, form I
    ('يَفْعِلُ', 'يَ1ْ2ِ3ُ'),          # present, form I
    ('يَفْعُلُ', 'يَ1ْ2ُ3ُ'),          # present, form I
    ('اِفْعِلْ', 'اِ1ْ2ِ3ْ'),          # imperative
    ('أَفْعَلَ', 'أَ1ْ2َ3َ'),          # past, form IV
    ('اِسْتَفْعَلَ', 'اِسْتَ1ْ2َ3َ'),   # past, form X

    # Nouns and participles
    ('فَاعِل', '1َا2ِ3'),             # active participle
    ('مَفْعُول', 'مَ1ْ2ُو3'),          # passive participle
    ('مَفْعَل', 'مَ1ْ2َ3'),            # noun of place
    ('مِفْعَال', 'مِ1ْ2َا3'),          # instrument
    ('فَعِيل', '1َ2ِي3'),             # adjective
    ('تَفْعِيل', 'تَ1ْ2ِي3'),          # verbal noun, form II
]

# =============================================================================
# ROOTS
# =============================================================================

SAMPLE_ROOTS: List[str] = [
    # سالم
    'كتب', 'درس', 'علم',
    # مهموز
    'أكل', 'سأل', 'قرأ',
    # مضعّف
    'مدد', 'شدد',
    # مثال
    'وعد', 'وزن',
    # أجوف
    'قول', 'بيع',
    # ناقص
    'دعو', 'رمي',
    # لفيف
    'وقي', 'روي',
]
