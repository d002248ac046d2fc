"""

    Greynir: Natural language processing for Icelandic

    Penn Treebank tokenizer module

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


    This module contains a lazy tokenizer for text in Penn Treebank
    bracketed format. Opening and closing parentheses are always
    separate tokens; every other maximal run of non-whitespace characters
    is a word token. The input stream is read one line at a time, so
    arbitrarily large treebank files can be processed.

"""

from typing import Iterable, Iterator, List, Optional

import re


LEFT_PAREN = "("
RIGHT_PAREN = ")"

_TOKEN_RE = re.compile(r"[()]|[^\s()]+")


class PennTreebankTokenizer:

    """Splits a text stream into bracket and word tokens, with a
    single token of lookahead"""

    def __init__(self, stream: Iterable[str]) -> None:
        self._stream: Optional[Iterable[str]] = stream
        self._tokens: Optional[Iterator[str]] = self._generate(stream)
        self._lookahead: Optional[str] = None

    @staticmethod
    def _generate(stream: Iterable[str]) -> Iterator[str]:
        for line in stream:
            yield from _TOKEN_RE.findall(line)

    def _fill(self) -> bool:
        """Make sure the lookahead slot is filled, if possible"""
        if self._lookahead is not None:
            return True
        if self._tokens is None:
            return False
        self._lookahead = next(self._tokens, None)
        if self._lookahead is None:
            # Exhausted: drop the generator
            self._tokens = None
            return False
        return True

    def has_next(self) -> bool:
        return self._fill()

    def peek(self) -> str:
        """Return the next token without consuming it"""
        if not self._fill():
            raise StopIteration
        assert self._lookahead is not None
        return self._lookahead

    def next(self) -> str:
        """Consume and return the next token"""
        if not self._fill():
            raise StopIteration
        tok = self._lookahead
        assert tok is not None
        self._lookahead = None
        return tok

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        return self.next()

    def close(self) -> None:
        """Release the underlying stream, if it can be closed"""
        self._tokens = None
        self._lookahead = None
        stream, self._stream = self._stream, None
        close = getattr(stream, "close", None)
        if close is not None:
            close()


def tokenize_string(text: str) -> List[str]:
    """Return the Penn Treebank tokens of a string, as a list"""
    return _TOKEN_RE.findall(text)
