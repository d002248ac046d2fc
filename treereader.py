"""

    Greynir: Natural language processing for Icelandic

    Penn Treebank reader module

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


    This module implements the PennTreeReader class, which reads trees
    in the Lisp-style bracketed format of the Penn Treebank from a token
    stream, one tree at a time.

    The reader is a push-down automaton with an explicit stack of open
    nodes. It supports an unnamed outer bracket around a tree (an
    anonymous ROOT node), skips empty brackets, and silently replaces
    \\* with * and \\/ with / in labels and terminals.

    Malformed regions of the input (an unmatched closing bracket, or a
    token outside of any bracket) are dropped and reading resumes with
    the next tree. If the token stream ends while a tree is still open,
    UnexpectedEndOfInput is raised.

"""

from typing import Iterable, Iterator, List, Optional, Tuple

import io
import logging
from contextlib import closing
from enum import IntEnum

from tree import Tree, TreeFactory, TreeNormalizer, HasIndex, HasWord
from ptbtokenizer import PennTreebankTokenizer, LEFT_PAREN, RIGHT_PAREN


# Prefix of the header tokens that are still present
# in the Brown corpus files of Treebank 3
HEADER_PREFIX = "*x*x*x"
# Number of header tokens to skip past
HEADER_COUNT = 4

DEFAULT_ENCODING = "utf-8"


class UnexpectedEndOfInput(EOFError):

    """The token stream ended before the current tree was complete"""

    pass


class AttemptResult(IntEnum):
    """Result types for a single attempt at reading a tree from
    the token stream"""

    # A complete tree was read
    COMPLETE = 0
    # Extra closing bracket, or a token outside of any bracket:
    # nothing was produced, but reading may continue
    MALFORMED = 1
    # The token stream ended while a tree was open
    TRUNCATED = 2
    # The token stream ended before anything was opened
    EMPTY = 3


def unescape(s: str) -> str:
    """Replace \\* with * and \\/ with /"""
    return s.replace("\\*", "*").replace("\\/", "/")


class PennTreeReader:

    """Reads Penn Treebank-style trees from a token stream.
    If no tokenizer is given, a PennTreebankTokenizer is created
    for the text stream. If no tree factory is given, trees are
    built with CoreLabel labels; if no normalizer is given,
    labels and trees are left as they are."""

    def __init__(
        self,
        stream: Optional[Iterable[str]],
        tree_factory: Optional[TreeFactory] = None,
        tree_normalizer: Optional[TreeNormalizer] = None,
        tokenizer: Optional[PennTreebankTokenizer] = None,
        verbose: bool = False,
    ) -> None:
        if tokenizer is None:
            if stream is None:
                raise ValueError("Either a stream or a tokenizer is required")
            tokenizer = PennTreebankTokenizer(stream)
        self._stream = stream
        self._tokenizer: Optional[PennTreebankTokenizer] = tokenizer
        self._tf = tree_factory or TreeFactory()
        self._tn = tree_normalizer
        self._warn = logging.warning if verbose else logging.debug

        # Parsing state, reset at the start of each attempt
        self._current: Optional[Tree] = None
        self._stack: List[Tree] = []

        self._skip_header()

    @classmethod
    def from_string(cls, text: str, **kwargs) -> "PennTreeReader":
        """Create a reader for trees contained in a string"""
        return cls(io.StringIO(text), **kwargs)

    def _skip_header(self) -> None:
        """Skip past the odd headers present in some legacy corpus files"""
        tok = self._tokenizer
        assert tok is not None
        if not tok.has_next() or not tok.peek().startswith(HEADER_PREFIX):
            return
        found = 0
        while found < HEADER_COUNT and tok.has_next():
            if tok.next().startswith(HEADER_PREFIX):
                found += 1
        logging.info("Skipped past {0} corpus header tokens".format(found))

    def read_tree(self) -> Optional[Tree]:
        """Read a single tree from the token stream. Returns None at
        the end of the stream. Malformed trees are skipped. Raises
        UnexpectedEndOfInput if the stream ends inside a tree."""
        tok = self._tokenizer
        if tok is None:
            raise ValueError("Reading from a closed PennTreeReader")

        t: Optional[Tree] = None
        while t is None and tok.has_next():
            # Set up the automaton
            self._current = None
            self._stack = []

            t, result = self._read_tree_from_stream(tok)

            if result == AttemptResult.TRUNCATED:
                raise UnexpectedEndOfInput(
                    "End of token stream encountered before parsing could complete"
                )
            if result == AttemptResult.MALFORMED:
                continue
            if result == AttemptResult.EMPTY:
                break

            assert t is not None
            if self._tn is not None:
                t = self._tn.normalize_whole_tree(t, self._tf)
            t.index_leaves()

        return t

    def _read_tree_from_stream(
        self, tok: PennTreebankTokenizer
    ) -> Tuple[Optional[Tree], AttemptResult]:
        """Run the push-down automaton until a complete tree has
        been read, or until an error occurs"""
        tn = self._tn
        tf = self._tf
        stack = self._stack
        word_index = 1

        while tok.has_next():
            token = tok.next()

            if token == LEFT_PAREN:
                if not tok.has_next():
                    return None, AttemptResult.TRUNCATED
                # An opening bracket directly followed by another one
                # has no label, as in the outermost level of the English PTB
                label: Optional[str] = (
                    None if tok.peek() == LEFT_PAREN else tok.next()
                )
                if label == RIGHT_PAREN:
                    # Skip past empty trees
                    continue
                if tn is not None:
                    label = tn.normalize_nonterminal(label)
                if label is not None:
                    label = unescape(label)

                # Children are added below
                new_tree = tf.new_tree_node(label)

                if self._current is None:
                    stack.append(new_tree)
                else:
                    self._current.add_child(new_tree)
                    stack.append(self._current)
                self._current = new_tree

            elif token == RIGHT_PAREN:
                if not stack:
                    self._warn(
                        "PennTreeReader: extra non-matching right parenthesis ignored"
                    )
                    return None, AttemptResult.MALFORMED
                self._current = stack.pop()
                if not stack:
                    return self._current, AttemptResult.COMPLETE

            else:
                if self._current is None:
                    self._warn(
                        "PennTreeReader: extra token not in a tree ignored: "
                        "'{0}'".format(token)
                    )
                    return None, AttemptResult.MALFORMED

                terminal = token if tn is None else tn.normalize_terminal(token)
                leaf = tf.new_leaf(unescape(terminal))
                label_obj = leaf.label
                if isinstance(label_obj, HasIndex):
                    label_obj.set_index(word_index)
                if isinstance(label_obj, HasWord):
                    label_obj.set_word(leaf.value)
                word_index += 1

                self._current.add_child(leaf)

        if self._current is not None or stack:
            self._warn(
                "PennTreeReader: incomplete tree (extra left parentheses in input)"
            )
            return None, AttemptResult.TRUNCATED
        return None, AttemptResult.EMPTY

    def __iter__(self) -> Iterator[Tree]:
        while True:
            t = self.read_tree()
            if t is None:
                return
            yield t

    def close(self) -> None:
        """Release the token stream and the underlying text stream"""
        tok, self._tokenizer = self._tokenizer, None
        if tok is None:
            # Already closed
            return
        self._current = None
        self._stack = []
        tok.close()
        close = getattr(self._stream, "close", None)
        self._stream = None
        if close is not None:
            close()

    def __enter__(self) -> "PennTreeReader":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()


def read_trees(text: str, **kwargs) -> List[Tree]:
    """Read all trees from a string and return them in a list"""
    with PennTreeReader.from_string(text, **kwargs) as rdr:
        return list(rdr)


def load_trees(
    path: str, encoding: str = DEFAULT_ENCODING, **kwargs
) -> Iterator[Tree]:
    """Generate the trees in a treebank file"""
    with open(path, "r", encoding=encoding) as f:
        with closing(PennTreeReader(f, **kwargs)) as rdr:
            yield from rdr
