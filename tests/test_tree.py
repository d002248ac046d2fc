"""

    Greynir: Natural language processing for Icelandic

    Copyright (C) 2023 Miðeind ehf.

       This program is free software: you can redistribute it and/or modify
       it under the terms of the GNU General Public License as published by
       the Free Software Foundation, either version 3 of the License, or
       (at your option) any later version.
       This program is distributed in the hope that it will be useful,
       but WITHOUT ANY WARRANTY; without even the implied warranty of
       MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
       GNU General Public License for more details.

    You should have received a copy of the GNU General Public License
    along with this program.  If not, see http://www.gnu.org/licenses/.


    Tests for the tree data structure in tree.py and the
    tokenizer in ptbtokenizer.py

"""

import io
import os
import sys

import pytest

# Shenanigans to enable Pytest to discover modules in the
# main workspace directory (the parent of /tests)
basepath, _ = os.path.split(os.path.realpath(__file__))
mainpath = os.path.join(basepath, "..")
if mainpath not in sys.path:
    sys.path.insert(0, mainpath)

from tree import (  # noqa
    Tree,
    TreeFactory,
    SimpleTreeFactory,
    LabelFactory,
    CoreLabel,
    StringLabel,
    HasIndex,
    HasWord,
    RootStrippingNormalizer,
    UnsupportedOperation,
)
from treereader import read_trees  # noqa
from ptbtokenizer import PennTreebankTokenizer, tokenize_string  # noqa


def tree_from_value(value):
    """Build a tree from a nested tuple of the form
    (label, child, child, ...), where leaves are plain strings"""
    tf = TreeFactory()
    if isinstance(value, str):
        return tf.new_leaf(value)
    label, *children = value
    return tf.new_tree_node(label, [tree_from_value(c) for c in children])


SAMPLE = "(S (NP (NNP John)) (VP (VBZ runs) (ADVP (RB fast))) (. .))"


def test_penn_string():
    for s in (
        SAMPLE,
        "((S (NP (NN dog))))",
        "(A)",
        "(X (Y z) w)",
    ):
        t = read_trees(s)[0]
        assert t.penn_string() == s
        assert str(t) == s
    assert repr(read_trees("(A b)")[0]) == "<Tree (A b)>"


def test_tree_structure():
    t = read_trees(SAMPLE)[0]
    assert t.num_children() == 3
    first = t.first_child()
    assert first is not None and first.value == "NP"
    assert isinstance(t.children, tuple)
    assert t.words() == ["John", "runs", "fast", "."]
    assert t.tagged_words() == [
        ("John", "NNP"),
        ("runs", "VBZ"),
        ("fast", "RB"),
        (".", "."),
    ]
    assert t.text == "John runs fast."
    assert t.depth() == 4
    # S, NP, NNP, John, VP, VBZ, runs, ADVP, RB, fast, ., .
    assert t.size() == 12
    assert not t.is_preterminal()
    assert first.children[0].is_preterminal()
    # A leaf directly under a phrase has no tag
    assert read_trees("(X a (Y b))")[0].tagged_words() == [("a", None), ("b", "Y")]


def test_leaf_invariants():
    tf = TreeFactory()
    leaf = tf.new_leaf("dog")
    assert leaf.is_leaf
    assert leaf.children == ()
    assert list(leaf.leaves()) == [leaf]
    assert leaf.depth() == 0
    with pytest.raises(ValueError):
        leaf.add_child(tf.new_leaf("cat"))


def test_labels():
    tf = TreeFactory()
    # An empty label is distinct from an absent one
    empty = tf.new_tree_node("")
    assert empty.value == "" and empty.label is not None
    anon = tf.new_tree_node(None)
    assert anon.value is None and anon.label is None
    assert isinstance(tf.new_leaf("x").label, CoreLabel)
    assert isinstance(CoreLabel("x"), HasIndex)
    assert isinstance(CoreLabel("x"), HasWord)
    assert not isinstance(StringLabel("x"), HasIndex)
    assert not isinstance(StringLabel("x"), HasWord)
    assert isinstance(SimpleTreeFactory().new_leaf("x").label, StringLabel)
    assert isinstance(LabelFactory(StringLabel).new_label("NP-SBJ"), StringLabel)
    # Labels are never rebuilt from encoded strings
    for lf in (LabelFactory(), LabelFactory(StringLabel)):
        with pytest.raises(UnsupportedOperation):
            lf.new_label_from_string("dog/NN")
    for lbl in (CoreLabel("x"), StringLabel("x")):
        with pytest.raises(UnsupportedOperation):
            lbl.set_from_string("dog/NN")
        assert lbl.value == "x"
    c = CoreLabel("dog")
    c.set_index(3)
    c.set_word("dog")
    c.set_tag("NN")
    c2 = c.copy()
    assert (c2.value, c2.word, c2.tag, c2.index) == ("dog", "dog", "NN", 3)
    assert str(c2) == "dog"


def test_index_leaves():
    t = tree_from_value(("S", ("NP", "the", "dog"), ("VP", "barks")))
    assert t.penn_string() == "(S (NP the dog) (VP barks))"
    assert t.index_leaves() == 4
    assert [leaf.label.index for leaf in t.leaves()] == [1, 2, 3]
    assert t.index_leaves(start=10) == 13
    assert [leaf.label.index for leaf in t.leaves()] == [10, 11, 12]
    # Without overwriting, existing indices are kept
    leaf = next(t.leaves())
    leaf.label.set_index(None)
    t.index_leaves(start=1, overwrite=False)
    assert [leaf.label.index for leaf in t.leaves()] == [1, 11, 12]


def test_to_dict():
    t = read_trees("(S (NP (NN dog)) (VP (VB runs)))")[0]
    assert t.to_dict() == {
        "label": "S",
        "children": [
            {"label": "NP", "children": [{"label": "NN", "children": [{"word": "dog", "index": 1}]}]},
            {"label": "VP", "children": [{"label": "VB", "children": [{"word": "runs", "index": 2}]}]},
        ],
    }
    t = read_trees("(A b)", tree_factory=SimpleTreeFactory())[0]
    assert t.to_dict() == {"label": "A", "children": [{"word": "b"}]}


def test_pretty():
    t = read_trees("(S (NP (NN dog)) (VP (VB runs) (NP (NNS cats))))")[0]
    assert t.pretty() == "\n".join(
        [
            "(S",
            "  (NP",
            "    (NN dog))",
            "  (VP",
            "    (VB runs)",
            "    (NP",
            "      (NNS cats))))",
        ]
    )
    assert read_trees("(NN dog)")[0].pretty() == "(NN dog)"


def test_root_stripping():
    tn = RootStrippingNormalizer(root_labels=("ROOT",))
    tf = TreeFactory()
    t = read_trees("(ROOT (ROOT (S (X y))))")[0]
    assert tn.normalize_whole_tree(t, tf).value == "S"
    t = read_trees("(TOP (S (X y)))")[0]
    assert tn.normalize_whole_tree(t, tf).value == "TOP"
    t = read_trees("( (S (X y)) (S (Z w)) )")[0]
    assert tn.normalize_whole_tree(t, tf) is t


def test_tokenizer():
    assert tokenize_string("(S (NP dog)))") == ["(", "S", "(", "NP", "dog", ")", ")", ")"]
    assert tokenize_string("  (NN\tÞórir)\n") == ["(", "NN", "Þórir", ")"]
    assert tokenize_string("") == []
    tok = PennTreebankTokenizer(io.StringIO("(A\n b)\n\n(C)"))
    assert tok.has_next()
    assert tok.peek() == "("
    assert tok.peek() == "("
    assert tok.next() == "("
    assert tok.next() == "A"
    assert list(tok) == ["b", ")", "(", "C", ")"]
    assert not tok.has_next()
    with pytest.raises(StopIteration):
        tok.next()
    with pytest.raises(StopIteration):
        tok.peek()


def test_tokenizer_close():
    stream = io.StringIO("(A b)")
    tok = PennTreebankTokenizer(stream)
    assert tok.next() == "("
    tok.close()
    assert stream.closed
    assert not tok.has_next()
    # Closing twice is harmless
    tok.close()
    # Streams without a close() method are fine too
    tok = PennTreebankTokenizer(["(A b)"])
    assert list(tok) == ["(", "A", "b", ")"]
    tok.close()
