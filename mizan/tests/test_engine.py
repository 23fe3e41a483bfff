#!/usr/bin/env python3
"""
Tests for MorphologyEngine operations.
"""

import threading
import unicodedata

import pytest

from mizan import Category, InvalidRootError, MorphologyEngine, Status
from mizan.config import Config
from mizan.data import DEFAULT_SCHEMES, SAMPLE_ROOTS


def same(a: str, b: str) -> bool:
    return unicodedata.normalize("NFC", a) == unicodedata.normalize("NFC", b)


# ----------------------------------------------------------------------
# Roots
# ----------------------------------------------------------------------

def test_register_root_outcomes(engine):
    assert engine.register_root("كتب").status == Status.ADDED
    assert engine.register_root("كتب").status == Status.ALREADY_EXISTS
    assert engine.register_root("كَتَبَ").status == Status.ALREADY_EXISTS

    result = engine.register_root("اكل")
    assert result.status == Status.INVALID_ROOT
    assert not result.ok
    assert result.reason

    assert engine.register_root("كتبن").status == Status.INVALID_ROOT
    assert engine.roots.count() == 1


def test_reregistering_keeps_cache(engine):
    engine.register_root("قول")
    engine.register_scheme("فَعَل", "1َ2َ3")
    engine.derive_word("قول", "فَعَل")
    node = engine.find_root("قول")

    engine.register_root("قول")
    again = engine.find_root("قول")
    assert again is node
    assert again.category == Category.HOLLOW
    assert len(again.derived) == 1


def test_remove_root(engine):
    engine.register_root("كتب")
    assert engine.remove_root("كتب").status == Status.REMOVED
    assert engine.remove_root("كتب").status == Status.NOT_FOUND
    assert engine.find_root("كتب") is None


def test_list_roots(engine):
    for root in ["كتب", "درس", "علم", "قول", "قرأ"]:
        engine.register_root(root)

    assert engine.list_roots() == ["درس", "علم", "قرأ", "قول", "كتب"]
    assert engine.list_roots("ق") == ["قرأ", "قول"]
    assert engine.list_roots(offset=1, limit=2) == ["علم", "قرأ"]
    assert engine.list_roots("ق", offset=1) == ["قول"]
    assert engine.list_roots(offset=10) == []
    assert engine.count_roots() == 5
    assert engine.count_roots("ق") == 2


def test_list_roots_default_page_size():
    engine = MorphologyEngine(config=Config(default_page_size=3))
    for root in SAMPLE_ROOTS:
        engine.register_root(root)
    assert len(engine.list_roots()) == 3
    assert len(engine.list_roots(limit=0)) == 3
    assert len(engine.list_roots(limit=100)) == len(SAMPLE_ROOTS)


# ----------------------------------------------------------------------
# Schemes
# ----------------------------------------------------------------------

def test_scheme_outcomes(engine):
    assert engine.register_scheme("فَاعِل", "1َا2ِ3").status == Status.ADDED
    assert engine.register_scheme("فَاعِل", "1َ2َ3").status == Status.ALREADY_EXISTS
    assert engine.find_scheme("فَاعِل").rule == "1َا2ِ3"

    result = engine.register_scheme("broken", "1َ2َ")
    assert result.status == Status.INVALID_RULE
    assert "3" in result.reason
    assert engine.find_scheme("broken") is None


def test_update_scheme(engine):
    assert engine.update_scheme("فَاعِل", "1َا2ِ3").status == Status.NOT_FOUND

    engine.register_scheme("فَاعِل", "1َا2ِ3")
    assert engine.update_scheme("فَاعِل", "12").status == Status.INVALID_RULE
    assert engine.update_scheme("فَاعِل", "1ُا2ِ3").status == Status.UPDATED
    assert engine.find_scheme("فَاعِل").rule == "1ُا2ِ3"
    assert engine.schemes.count() == 1


def test_remove_scheme_keeps_order(engine):
    for name, rule in DEFAULT_SCHEMES[:4]:
        engine.register_scheme(name, rule)
    removed = DEFAULT_SCHEMES[1][0]

    assert engine.remove_scheme(removed).status == Status.REMOVED
    assert engine.remove_scheme(removed).status == Status.NOT_FOUND
    assert [s.name for s in engine.list_schemes()] == [
        DEFAULT_SCHEMES[0][0], DEFAULT_SCHEMES[2][0], DEFAULT_SCHEMES[3][0],
    ]


# ----------------------------------------------------------------------
# Derivation
# ----------------------------------------------------------------------

def test_derivation_scenarios(engine):
    engine.register_scheme("فَعِل", "1َ2ِ3")
    engine.register_scheme("فَعَل", "1َ2َ3")

    test_cases = [
        ("درب", "فَعِل", "دَرِب", Category.REGULAR),
        ("قول", "فَعَل", "قَال", Category.HOLLOW),
        ("رمي", "فَعَل", "رَمَى", Category.DEFECTIVE),
        ("مدد", "فَعَل", "مَدّ", Category.GEMINATE),
    ]
    for root, scheme, expected, category in test_cases:
        engine.register_root(root)
        word = engine.derive_word(root, scheme)
        assert word.success, word.message
        assert same(word.surface, expected), f"{root}: {word.surface}"
        assert word.category == category


def test_default_schemes(seeded_engine):
    test_cases = [
        ("كتب", "فَاعِل", "كَاتِب"),
        ("كتب", "مَفْعُول", "مَكْتُوب"),
        ("قول", "فَاعِل", "قَائِل"),
        ("قول", "مَفْعُول", "مَقُول"),
        ("بيع", "مَفْعُول", "مَبِيع"),
        ("وعد", "يَفْعِلُ", "يَعِدُ"),
        ("وزن", "مِفْعَال", "مِيزَان"),
        ("رمي", "فَاعِل", "رَامٍ"),
        ("رمي", "يَفْعِلُ", "يَرْمِي"),
        ("دعو", "فَعَلَ", "دَعَا"),
        ("سأل", "فَاعِل", "سَائِل"),
        ("قرأ", "مَفْعُول", "مَقْرُوء"),
        ("أكل", "أَفْعَلَ", "آكَلَ"),
        ("روي", "فَاعِل", "رَاوٍ"),
        ("وقي", "يَفْعِلُ", "يَقِي"),
        ("مدد", "اِفْعِلْ", "اِمْدِّ"),
    ]
    for root, scheme, expected in test_cases:
        word = seeded_engine.derive_word(root, scheme)
        assert word.success, word.message
        assert same(word.surface, expected), f"{root} + {scheme}: {word.surface}"


def test_frequency_is_monotonic(engine):
    engine.register_root("كتب")
    engine.register_scheme("فَاعِل", "1َا2ِ3")

    engine.derive_word("كتب", "فَاعِل")
    engine.derive_word("كتب", "فَاعِل")

    node = engine.find_root("كتب")
    assert len(node.derived) == 1
    assert node.derived[0].surface == "كَاتِب"
    assert node.derived[0].frequency == 2
    assert node.total_derivations == 2


def test_derive_failures(engine):
    engine.register_scheme("فَاعِل", "1َا2ِ3")

    word = engine.derive_word("اكل", "فَاعِل")
    assert not word.success
    assert word.surface is None

    engine.register_root("كتب")
    word = engine.derive_word("كتب", "مَفْعُول")
    assert not word.success
    assert "مَفْعُول" in word.message


def test_derive_registers_unknown_root(engine):
    engine.register_scheme("فَاعِل", "1َا2ِ3")
    word = engine.derive_word("نصر", "فَاعِل")
    assert word.success
    assert engine.find_root("نصر") is not None


def test_derive_requires_registered_root_when_configured():
    engine = MorphologyEngine(config=Config(register_on_derive=False))
    engine.register_scheme("فَاعِل", "1َا2ِ3")
    word = engine.derive_word("نصر", "فَاعِل")
    assert not word.success
    assert engine.find_root("نصر") is None


def test_derive_family(seeded_engine):
    family = seeded_engine.derive_family("كتب")
    assert [w.scheme for w in family] == [name for name, _ in DEFAULT_SCHEMES]
    assert all(w.success for w in family)

    bad = seeded_engine.derive_family("اكل")
    assert len(bad) == 1
    assert not bad[0].success


def test_concurrent_derivations(engine):
    engine.register_root("كتب")
    engine.register_scheme("فَاعِل", "1َا2ِ3")

    def work():
        for _ in range(50):
            engine.derive_word("كتب", "فَاعِل")

    threads = [threading.Thread(target=work) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    node = engine.find_root("كتب")
    assert len(node.derived) == 1
    assert node.derived[0].frequency == 400


# ----------------------------------------------------------------------
# Decomposition
# ----------------------------------------------------------------------

def test_round_trip(seeded_engine):
    for root in SAMPLE_ROOTS:
        for scheme, _ in DEFAULT_SCHEMES:
            word = seeded_engine.derive_word(root, scheme)
            assert word.success
            pairs = {(d.root, d.scheme) for d in seeded_engine.decompose_all(word.surface)}
            assert (root, scheme) in pairs, f"{word.surface} from {root} + {scheme}"


def test_decompose(seeded_engine):
    found = seeded_engine.decompose("قَائِل")
    assert found.root == "قول"
    assert found.scheme == "فَاعِل"
    assert found.category == Category.HOLLOW
    assert found.added_elements == ["َ", "ا", "ِ"]


def test_decompose_without_diacritics(seeded_engine):
    found = seeded_engine.decompose("مكتوب")
    assert found.root == "كتب"
    assert found.scheme == "مَفْعُول"


def test_decompose_does_not_record(seeded_engine):
    seeded_engine.decompose_all("كَاتِب")
    assert seeded_engine.find_root("كتب").derived == []


def test_decompose_unknown(seeded_engine):
    assert seeded_engine.decompose("سيارة") is None
    assert seeded_engine.decompose_all("") == []


def test_validate_word(seeded_engine):
    assert seeded_engine.validate_word("قَائِل", "قول") == "فَاعِل"
    assert seeded_engine.validate_word("قَائِل", "كتب") is None
    assert seeded_engine.validate_word("قَائِل", "نصر") is None


# ----------------------------------------------------------------------
# Queries
# ----------------------------------------------------------------------

def test_derivatives_and_scheme_search(seeded_engine):
    seeded_engine.derive_word("كتب", "فَاعِل")
    seeded_engine.derive_word("كتب", "مَفْعُول")
    seeded_engine.derive_word("كتب", "مَفْعُول")
    seeded_engine.derive_word("درس", "فَاعِل")

    derivatives = seeded_engine.derivatives("كتب")
    assert [d.surface for d in derivatives] == ["مَكْتُوب", "كَاتِب"]
    assert seeded_engine.derivatives("نصر") == []

    usage = seeded_engine.search_by_scheme("فَاعِل")
    assert sorted(u.surface for u in usage) == sorted(["كَاتِب", "دَارِس"])


def test_statistics(seeded_engine):
    seeded_engine.derive_word("كتب", "فَاعِل")
    seeded_engine.derive_word("كتب", "فَاعِل")
    seeded_engine.derive_word("قول", "فَاعِل")

    stats = seeded_engine.statistics()
    assert stats.total_roots == len(SAMPLE_ROOTS)
    assert stats.total_schemes == len(DEFAULT_SCHEMES)
    assert stats.total_derivations == 2
    assert stats.total_frequency == 3
    assert stats.average_derivations == 2 / len(SAMPLE_ROOTS)
    assert stats.load_factor == len(DEFAULT_SCHEMES) / 128
    assert seeded_engine.roots.is_balanced()


def test_explain(engine):
    assert "ناقص" in engine.explain("رمي")


def test_engines_do_not_share_state():
    first = MorphologyEngine()
    second = MorphologyEngine()
    first.register_root("كتب")
    assert second.find_root("كتب") is None


def test_bare_and_seated_hamza_roots_agree(engine):
    engine.register_scheme("فَاعِل", "1َا2ِ3")
    bare = engine.derive_word("ءكل", "فَاعِل")
    seated = engine.derive_word("أكل", "فَاعِل")
    assert bare.success and seated.success
    assert same(bare.surface, "آكِل")
    assert same(bare.surface, seated.surface)


# ----------------------------------------------------------------------
# One scheme over every root
# ----------------------------------------------------------------------

def test_derive_by_scheme(seeded_engine):
    words = seeded_engine.derive_by_scheme("فَاعِل")
    assert [w.root for w in words] == seeded_engine.list_roots(limit=100)
    assert all(w.success and w.scheme == "فَاعِل" for w in words)

    by_root = {w.root: w.surface for w in words}
    assert same(by_root["قول"], "قَائِل")
    assert same(by_root["رمي"], "رَامٍ")
    assert seeded_engine.find_root("كتب").total_derivations == 1


def test_derive_by_scheme_unknown_or_empty(engine):
    assert engine.derive_by_scheme("فَاعِل") == []
    engine.register_scheme("فَاعِل", "1َا2ِ3")
    assert engine.derive_by_scheme("فَاعِل") == []
    engine.register_root("كتب")
    assert [w.surface for w in engine.derive_by_scheme("فَاعِل")] == ["كَاتِب"]


# ----------------------------------------------------------------------
# Concurrent registration and removal
# ----------------------------------------------------------------------

def test_get_or_insert(engine):
    node = engine.roots.get_or_insert("نصر")
    assert engine.roots.get_or_insert("نَصَرَ") is node
    assert engine.roots.count() == 1
    with pytest.raises(InvalidRootError):
        engine.roots.get_or_insert("اكل")


def test_derive_while_root_is_removed(engine):
    engine.register_scheme("فَاعِل", "1َا2ِ3")
    errors = []

    def derive():
        try:
            for _ in range(200):
                word = engine.derive_word("نصر", "فَاعِل")
                assert word.success, word.message
        except Exception as e:
            errors.append(e)

    def remove():
        for _ in range(200):
            engine.remove_root("نصر")

    threads = [threading.Thread(target=derive) for _ in range(4)]
    threads += [threading.Thread(target=remove) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
