"""

    Greynir: Natural language processing for Icelandic

    IndexedWord module

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


    This module implements the IndexedWord class, a word label whose
    identity is its position in a corpus: the document id, the sentence
    index and the word index (plus a copy count, for words that have
    been duplicated). Equality, hashing and ordering use only these
    fields, never the text of the word.

    IndexedWord supports position and word tagging, so a PennTreeReader
    constructed with a TreeFactory that uses IndexedWordFactory for its
    leaves produces leaves that know their own positions.

"""

from typing import Any, Optional, Tuple

from functools import total_ordering

from tree import CoreLabel, Label, LabelFactory, UnsupportedOperation


@total_ordering
class IndexedWord(Label):

    """A word label identified by (doc_id, sent_index, index, copy_count)"""

    NO_WORD: "IndexedWord"

    def __init__(
        self,
        doc_id: Optional[str] = None,
        sent_index: Optional[int] = None,
        index: Optional[int] = None,
        *,
        label: Optional[CoreLabel] = None,
    ) -> None:
        # All annotations are delegated to a wrapped CoreLabel
        if label is None:
            label = CoreLabel()
            label.doc_id = doc_id
            label.sent_index = sent_index
            label.index = index
        self._label = label

    @classmethod
    def from_value(cls, value: Optional[str]) -> "IndexedWord":
        """Create an IndexedWord whose value and word are the given string"""
        label = CoreLabel(value)
        label.word = value
        return cls(label=label)

    @property
    def backing_label(self) -> CoreLabel:
        return self._label

    @property
    def value(self) -> Optional[str]:
        return self._label.value

    def set_value(self, value: Optional[str]) -> None:
        self._label.set_value(value)

    @property
    def word(self) -> Optional[str]:
        return self._label.word

    def set_word(self, word: Optional[str]) -> None:
        self._label.word = word

    @property
    def tag(self) -> Optional[str]:
        return self._label.tag

    def set_tag(self, tag: Optional[str]) -> None:
        self._label.tag = tag

    @property
    def index(self) -> Optional[int]:
        return self._label.index

    def set_index(self, index: int) -> None:
        self._label.index = index

    @property
    def sent_index(self) -> Optional[int]:
        return self._label.sent_index

    def set_sent_index(self, sent_index: int) -> None:
        self._label.sent_index = sent_index

    @property
    def doc_id(self) -> Optional[str]:
        return self._label.doc_id

    def set_doc_id(self, doc_id: Optional[str]) -> None:
        self._label.doc_id = doc_id

    @property
    def copy_count(self) -> int:
        return self._label.copy_count

    def set_copy_count(self, count: int) -> None:
        self._label.copy_count = count

    def make_copy(self, count: int) -> "IndexedWord":
        """Return a copy of this word with the given copy count"""
        label = self._label.copy()
        label.copy_count = count
        return IndexedWord(label=label)

    def copy(self) -> "IndexedWord":
        return IndexedWord(label=self._label.copy())

    def to_primes(self) -> str:
        """Return one apostrophe for each copy, as in dependency graphs"""
        return "'" * self.copy_count

    def set_from_string(self, label_str: str) -> None:
        raise UnsupportedOperation("Cannot set an IndexedWord from a string")

    def _key(self) -> Tuple[Any, Any, Any, int]:
        return (self.doc_id, self.sent_index, self.index, self.copy_count)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, IndexedWord):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash((self.doc_id, self.sent_index, self.index))

    def __lt__(self, other: "IndexedWord") -> bool:
        """Order by passage position: NO_WORD first, then by document,
        sentence, word index and copy count"""
        if not isinstance(other, IndexedWord):
            return NotImplemented
        if self == IndexedWord.NO_WORD:
            return other != IndexedWord.NO_WORD
        if other == IndexedWord.NO_WORD:
            return False
        return (
            self.doc_id or "",
            self.sent_index or 0,
            self.index or 0,
            self.copy_count,
        ) < (
            other.doc_id or "",
            other.sent_index or 0,
            other.index or 0,
            other.copy_count,
        )

    def __str__(self) -> str:
        """Return the value-tag representation of this word"""
        value = self.value or ""
        if self.tag:
            return "{0}/{1}".format(value, self.tag)
        return value

    def __repr__(self) -> str:
        return "IndexedWord(doc_id={0!r}, sent_index={1!r}, index={2!r}, value={3!r})".format(
            self.doc_id, self.sent_index, self.index, self.value
        )


# The identifier that points to no word
IndexedWord.NO_WORD = IndexedWord(None, -1, -1)


class IndexedWordFactory(LabelFactory):

    """A label factory producing IndexedWord labels, optionally
    stamped with a document id and sentence index"""

    def __init__(
        self, doc_id: Optional[str] = None, sent_index: Optional[int] = None
    ) -> None:
        super().__init__(IndexedWord)
        self.doc_id = doc_id
        self.sent_index = sent_index

    def new_label(self, value: Optional[str]) -> Label:
        w = IndexedWord.from_value(value)
        w.set_doc_id(self.doc_id)
        if self.sent_index is not None:
            w.set_sent_index(self.sent_index)
        return w

    def new_label_from_string(self, encoded: str) -> Label:
        raise UnsupportedOperation(
            "IndexedWord labels cannot be built from an encoded string"
        )
