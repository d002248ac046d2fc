"""

    Greynir: Natural language processing for Icelandic

    Tree module

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


    This module implements a data structure for labeled constituency trees
    in the Penn Treebank style, as constructed by the PennTreeReader class
    in treereader.py.

    A tree is a Tree object with an optional Label and an ordered list of
    children. Leaves are Tree objects built from terminal tokens; their
    labels may support position tagging (HasIndex) and word tagging
    (HasWord), in which case the reader fills in the leaf's 1-based
    position within the sentence and its word text.

    The module also contains the default tree factories and tree
    normalizers that the reader uses when none are explicitly given.

"""

from __future__ import annotations

from typing import (
    Iterator,
    List,
    Optional,
    Sequence,
    Tuple,
    Type,
    Union,
)
from typing_extensions import Protocol, TypedDict, runtime_checkable

from tokenizer import correct_spaces


class UnsupportedOperation(NotImplementedError):

    """Raised when an operation that a label or factory does not support
    is attempted, such as rebuilding a label from an encoded string"""

    pass


@runtime_checkable
class HasIndex(Protocol):

    """A label that can carry the position of its word within a sentence"""

    def set_index(self, index: int) -> None:
        ...


@runtime_checkable
class HasWord(Protocol):

    """A label that can carry the text of a word"""

    def set_word(self, word: Optional[str]) -> None:
        ...


class Label:

    """A plain label, having only a string value"""

    def __init__(self, value: Optional[str] = None) -> None:
        self._value = value

    @property
    def value(self) -> Optional[str]:
        return self._value

    def set_value(self, value: Optional[str]) -> None:
        self._value = value

    def set_from_string(self, label_str: str) -> None:
        """Labels are only built token by token, never from an
        encoded string representation"""
        raise UnsupportedOperation(
            "Cannot set a {0} from a string".format(self.__class__.__name__)
        )

    def copy(self) -> "Label":
        return self.__class__(self._value)

    def __str__(self) -> str:
        return self._value or ""

    def __repr__(self) -> str:
        return "{0}({1!r})".format(self.__class__.__name__, self._value)


class StringLabel(Label):

    """A label that is just a string. It does not support position or
    word tagging, so leaves labeled with it are left untouched by the
    leaf indexing pass."""

    pass


class CoreLabel(Label):

    """A label carrying a value along with the word-level annotations
    used by the tree reader and its consumers: word, tag, the 1-based
    index of the word within its sentence, the sentence index and the
    document id."""

    def __init__(self, value: Optional[str] = None) -> None:
        super().__init__(value)
        self.word: Optional[str] = None
        self.tag: Optional[str] = None
        self.index: Optional[int] = None
        self.sent_index: Optional[int] = None
        self.doc_id: Optional[str] = None
        self.copy_count = 0

    def set_index(self, index: int) -> None:
        self.index = index

    def set_word(self, word: Optional[str]) -> None:
        self.word = word

    def set_tag(self, tag: Optional[str]) -> None:
        self.tag = tag

    def copy(self) -> "CoreLabel":
        c = CoreLabel(self._value)
        c.word = self.word
        c.tag = self.tag
        c.index = self.index
        c.sent_index = self.sent_index
        c.doc_id = self.doc_id
        c.copy_count = self.copy_count
        return c

    def __repr__(self) -> str:
        return "CoreLabel(value={0!r}, word={1!r}, tag={2!r}, index={3!r})".format(
            self._value, self.word, self.tag, self.index
        )


class LabelFactory:

    """Creates labels of a given class"""

    def __init__(self, label_class: Type[Label] = CoreLabel) -> None:
        self._label_class = label_class

    def new_label(self, value: Optional[str]) -> Label:
        return self._label_class(value)

    def new_label_from_string(self, encoded: str) -> Label:
        raise UnsupportedOperation(
            "Labels cannot be built from an encoded string"
        )


class TreeDict(TypedDict, total=False):

    """A dictionary representing a node in a Tree, for
    JSON export to clients"""

    # Label value; None for an anonymous root
    label: Optional[str]
    # Leaf text, only present for leaves
    word: str
    # 1-based leaf position, if the leaf label carries one
    index: int
    # Child nodes
    children: List["TreeDict"]


class Tree:

    """A node in a labeled constituency tree. Leaves are built from
    terminal tokens and never have children; internal nodes have a
    label (which may be None for an anonymous root, or an empty string)
    and zero or more children, in left to right order."""

    def __init__(self, label: Optional[Label], is_leaf: bool = False) -> None:
        self._label = label
        self._children: List[Tree] = []
        self._is_leaf = is_leaf

    @property
    def label(self) -> Optional[Label]:
        return self._label

    @property
    def value(self) -> Optional[str]:
        """The string value of this node's label, or None if it has none"""
        return None if self._label is None else self._label.value

    @property
    def is_leaf(self) -> bool:
        return self._is_leaf

    @property
    def children(self) -> Tuple[Tree, ...]:
        return tuple(self._children)

    def add_child(self, child: Tree) -> None:
        """Append a child to the end of this node's child list"""
        if self._is_leaf:
            raise ValueError("A leaf cannot have children")
        self._children.append(child)

    def num_children(self) -> int:
        return len(self._children)

    def first_child(self) -> Optional[Tree]:
        return self._children[0] if self._children else None

    def is_preterminal(self) -> bool:
        """Return True if this node has exactly one child, which is a leaf"""
        return len(self._children) == 1 and self._children[0].is_leaf

    def leaves(self) -> Iterator[Tree]:
        """Generate the leaves of this tree, from left to right"""
        if self._is_leaf:
            yield self
            return
        # Iterative traversal, to avoid recursion limits on deep trees
        stack: List[Tree] = [self]
        while stack:
            node = stack.pop()
            if node._is_leaf:
                yield node
            else:
                stack.extend(reversed(node._children))

    def words(self) -> List[str]:
        return [leaf.value or "" for leaf in self.leaves()]

    def tagged_words(self) -> List[Tuple[str, Optional[str]]]:
        """Return a list of (word, tag) tuples, where the tag is the
        label of the preterminal node above each leaf"""
        result: List[Tuple[str, Optional[str]]] = []
        stack: List[Tree] = [self]
        while stack:
            node = stack.pop()
            if node._is_leaf:
                # Leaf directly under a non-preterminal: no tag
                result.append((node.value or "", None))
            elif node.is_preterminal():
                result.append((node._children[0].value or "", node.value))
            else:
                stack.extend(reversed(node._children))
        return result

    @property
    def text(self) -> str:
        """The leaf words of this tree, joined with correct spacing"""
        return correct_spaces(" ".join(self.words()))

    def depth(self) -> int:
        """Return the depth of this tree; a leaf has depth 0"""
        result = 0
        stack: List[Tuple[Tree, int]] = [(self, 0)]
        while stack:
            node, d = stack.pop()
            if d > result:
                result = d
            if not node._is_leaf:
                stack.extend((c, d + 1) for c in node._children)
        return result

    def size(self) -> int:
        """Return the number of nodes in this tree, including leaves"""
        count = 0
        stack: List[Tree] = [self]
        while stack:
            node = stack.pop()
            count += 1
            stack.extend(node._children)
        return count

    def index_leaves(self, start: int = 1, overwrite: bool = True) -> int:
        """Assign sequential positions to the leaves of this tree, left
        to right, starting at start. Only leaves whose labels support
        position tagging are touched; if overwrite is False, leaves that
        already have an index keep it. Returns the next unused index."""
        index = start
        for leaf in self.leaves():
            label = leaf._label
            if isinstance(label, HasIndex):
                if overwrite or getattr(label, "index", None) is None:
                    label.set_index(index)
            index += 1
        return index

    def penn_string(self) -> str:
        """Return a bracketed representation of this tree, on one line"""
        parts: List[str] = []
        # The stack holds nodes still to be rendered and
        # literal strings (spaces and closing brackets)
        stack: List[Union[Tree, str]] = [self]
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                parts.append(item)
                continue
            if item._is_leaf:
                parts.append(item.value or "")
                continue
            parts.append("(")
            value = item.value
            if value is not None:
                parts.append(value)
            stack.append(")")
            for ix in range(len(item._children) - 1, -1, -1):
                stack.append(item._children[ix])
                if ix > 0 or value is not None:
                    stack.append(" ")
        return "".join(parts)

    def pretty(self, indent: int = 2) -> str:
        """Return a multi-line, indented representation of this tree.
        Preterminals and childless nodes are shown on a single line."""
        lines: List[str] = []
        ind = " " * indent
        # A None node closes the bracket of the node on the last line
        stack: List[Tuple[Optional[Tree], int]] = [(self, 0)]
        while stack:
            node, d = stack.pop()
            if node is None:
                lines[-1] += ")"
            elif node._is_leaf or not node._children or node.is_preterminal():
                lines.append(ind * d + node.penn_string())
            else:
                lines.append(ind * d + "(" + (node.value or ""))
                stack.append((None, d))
                stack.extend((c, d + 1) for c in reversed(node._children))
        return "\n".join(lines)

    def pprint(self, indent: int = 2) -> None:
        print(self.pretty(indent))

    def _dict_node(self) -> TreeDict:
        if self._is_leaf:
            d = TreeDict(word=self.value or "")
            index = getattr(self._label, "index", None)
            if index is not None:
                d["index"] = index
            return d
        return TreeDict(label=self.value, children=[])

    def to_dict(self) -> TreeDict:
        """Return a dictionary representation of this tree, for JSON export"""
        root = self._dict_node()
        stack: List[Tuple[Tree, TreeDict]] = [(self, root)]
        while stack:
            node, d = stack.pop()
            for child in node._children:
                cd = child._dict_node()
                d["children"].append(cd)
                if not child._is_leaf:
                    stack.append((child, cd))
        return root

    def __str__(self) -> str:
        return self.penn_string()

    def __repr__(self) -> str:
        return "<Tree {0}>".format(self.penn_string())


class TreeFactory:

    """Creates tree nodes and leaves. By default, all labels are
    CoreLabel instances, which support position and word tagging."""

    def __init__(
        self,
        label_factory: Optional[LabelFactory] = None,
        leaf_label_factory: Optional[LabelFactory] = None,
    ) -> None:
        self._label_factory = label_factory or LabelFactory()
        self._leaf_label_factory = leaf_label_factory or self._label_factory

    def new_tree_node(
        self, label: Optional[str], children: Optional[Sequence[Tree]] = None
    ) -> Tree:
        """Create an internal node. A None label creates an anonymous
        node, with no label at all."""
        node = Tree(None if label is None else self._label_factory.new_label(label))
        for child in children or ():
            node.add_child(child)
        return node

    def new_leaf(self, text: str) -> Tree:
        return Tree(self._leaf_label_factory.new_label(text), is_leaf=True)


class SimpleTreeFactory(TreeFactory):

    """A tree factory whose labels are plain strings, without
    position or word annotations"""

    def __init__(self) -> None:
        super().__init__(LabelFactory(StringLabel))


class TreeNormalizer:

    """The identity tree normalizer. Subclasses override one or more
    of the methods to rewrite labels or whole trees."""

    def normalize_nonterminal(self, label: Optional[str]) -> Optional[str]:
        return label

    def normalize_terminal(self, token: str) -> str:
        return token

    def normalize_whole_tree(self, tree: Tree, tf: TreeFactory) -> Tree:
        return tree


class RootStrippingNormalizer(TreeNormalizer):

    """A normalizer that removes wrapper nodes around a tree. A wrapper
    is an anonymous node, or a node whose label is one of the given
    root labels, having exactly one child which is not a leaf."""

    def __init__(self, root_labels: Sequence[str] = ("ROOT", "TOP")) -> None:
        self._root_labels = frozenset(root_labels)

    def _is_wrapper(self, tree: Tree) -> bool:
        if tree.num_children() != 1:
            return False
        child = tree.first_child()
        assert child is not None
        if child.is_leaf:
            return False
        return tree.value is None or tree.value in self._root_labels

    def normalize_whole_tree(self, tree: Tree, tf: TreeFactory) -> Tree:
        while self._is_wrapper(tree):
            child = tree.first_child()
            assert child is not None
            tree = child
        return tree

