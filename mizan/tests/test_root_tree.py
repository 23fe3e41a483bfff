#!/usr/bin/env python3
"""
Tests for the AVL root tree and its node payloads.
"""

import random
import threading

from mizan.root_tree import DerivedWord, RootNode, RootTree
from mizan.root_types import classify_root

LETTERS = "بتثجحخدذرزسشصضطظعغفقكلمنهوي"


def node(text: str) -> RootNode:
    return RootNode(classify_root(text))


def random_roots(rng: random.Random, n: int):
    return ["".join(rng.choice(LETTERS) for _ in range(3)) for _ in range(n)]


def test_insert_search_and_order():
    tree = RootTree()
    for key in ["كتب", "درس", "علم", "قول", "رمي"]:
        assert tree.insert(key, node(key))

    assert tree.count() == 5
    assert tree.inorder() == sorted(["كتب", "درس", "علم", "قول", "رمي"])
    assert tree.search("قول").category.name == "HOLLOW"
    assert tree.search("نصر") is None
    assert tree.contains("علم")


def test_duplicate_insert_keeps_first_node():
    tree = RootTree()
    first = node("كتب")
    tree.insert("كتب", first)
    assert not tree.insert("كتب", node("كتب"))
    assert tree.search("كتب") is first
    assert len(tree) == 1


def test_sequential_inserts_stay_balanced():
    tree = RootTree()
    keys = sorted(set(random_roots(random.Random(1), 300)))
    for key in keys:
        tree.insert(key, node(key))
        assert tree.is_balanced()
    # 1.44 * log2(n) bound for AVL trees
    assert tree.height() <= 13
    assert tree.inorder() == keys


def test_random_inserts_and_deletes_stay_balanced():
    rng = random.Random(42)
    tree = RootTree()
    present = set()

    for step in range(1500):
        key = "".join(rng.choice(LETTERS) for _ in range(3))
        if present and rng.random() < 0.4:
            victim = rng.choice(sorted(present))
            assert tree.delete(victim)
            present.discard(victim)
        else:
            assert tree.insert(key, node(key)) == (key not in present)
            present.add(key)
        assert tree.is_balanced(), f"unbalanced after step {step}"

    assert tree.inorder() == sorted(present)
    assert tree.count() == len(present)


def test_delete_node_with_two_children():
    tree = RootTree()
    for key in ["د", "ب", "ه", "أ", "ج", "و", "ح"]:
        tree.insert(key, node("كتب"))
    payload = tree.search("ح")

    assert tree.delete("د")
    assert not tree.contains("د")
    assert tree.search("ح") is payload
    assert tree.inorder() == sorted(["ب", "ه", "أ", "ج", "و", "ح"])
    assert tree.is_balanced()


def test_delete_missing_key():
    tree = RootTree()
    tree.insert("كتب", node("كتب"))
    assert not tree.delete("درس")
    assert tree.count() == 1


def test_freed_slots_are_reused():
    tree = RootTree()
    for key in ["كتب", "درس", "علم"]:
        tree.insert(key, node(key))
    size = len(tree._slots)
    tree.delete("درس")
    tree.insert("نصر", node("نصر"))
    assert len(tree._slots) == size


def test_all_nodes_follow_key_order():
    tree = RootTree()
    for key in ["كتب", "درس", "علم"]:
        tree.insert(key, node(key))
    assert [n.spelling for n in tree.all_nodes()] == tree.inorder()


def test_record_derivation_frequency():
    payload = node("كتب")
    payload.record("كَاتِب", "فَاعِل")
    payload.record("كَاتِب", "فَاعِل")
    payload.record("مَكْتُوب", "مَفْعُول")

    assert payload.total_derivations == 3
    assert len(payload.derived) == 2
    assert payload.find_derived("كَاتِب") == DerivedWord("كَاتِب", 2, "فَاعِل")
    assert payload.most_frequent().surface == "كَاتِب"
    assert [w.surface for w in payload.derived_by_frequency()] == ["كَاتِب", "مَكْتُوب"]


def test_concurrent_records_on_one_node():
    payload = node("كتب")

    def work():
        for _ in range(200):
            payload.record("كَاتِب")

    threads = [threading.Thread(target=work) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(payload.derived) == 1
    assert payload.derived[0].frequency == 1600
    assert payload.total_derivations == 1600
