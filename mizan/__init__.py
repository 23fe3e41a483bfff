"""
Mizan (الميزان الصرفي) - Arabic Root and Scheme Morphology

Rule-based engine for triliteral Arabic roots:
- Root classification into seven categories (سالم، مهموز، مضعّف، مثال، أجوف، ناقص، لفيف)
- Word derivation from schemes such as فَاعِل or مَفْعُول
- Category-specific spelling adjustment of derived words
- Decomposition of a word back into (root, scheme)
- AVL registry of roots and a hashed registry of schemes
"""

from .engine import (
    Decomposition,
    GeneratedWord,
    MorphologyEngine,
    OperationResult,
    Statistics,
    Status,
)
from .errors import InvalidRootError, InvalidTemplateError, MizanError
from .registries import Registries
from .root_types import Category, Root, classify_root, explain_root
from .schemes import Scheme, SchemeShape, sniff_shape, substitute
from .transformer import Transformer, transform

__version__ = "0.1.0"
__all__ = [
    'MorphologyEngine',
    'Registries',
    'Status',
    'OperationResult',
    'GeneratedWord',
    'Decomposition',
    'Statistics',
    'Category',
    'Root',
    'classify_root',
    'explain_root',
    'Scheme',
    'SchemeShape',
    'sniff_shape',
    'substitute',
    'Transformer',
    'transform',
    'MizanError',
    'InvalidRootError',
    'InvalidTemplateError',
]
