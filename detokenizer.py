"""

    Greynir: Natural language processing for Icelandic

    Detokenizer module

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


    This module contains a dictionary-driven detokenizer, which decides
    for each token in a sequence whether it should be merged with its
    left or right neighbor, and reassembles the tokens into readable text.

    The dictionary maps token strings to operations. Tokens that are not
    in the dictionary are separated from their neighbors by a space.

"""

from typing import Dict, List, Mapping, Optional, Sequence, Set

import re
from enum import Enum


class DetokenizationOperation(Enum):
    """The ways in which a token can be attached to its neighbors"""

    # Attach the token to the token on its left
    MERGE_TO_LEFT = "MERGE_TO_LEFT"
    # Attach the token to the token on its right
    MERGE_TO_RIGHT = "MERGE_TO_RIGHT"
    # Attach the token to both neighbors
    MERGE_BOTH = "MERGE_BOTH"
    # Leave the token as it is
    NO_OPERATION = "NO_OPERATION"
    # Alternate between MERGE_TO_RIGHT and MERGE_TO_LEFT, as for quotes
    RIGHT_LEFT_MATCHING = "RIGHT_LEFT_MATCHING"
    # MERGE_BOTH, but only between two word tokens, as for hyphens
    MERGE_BOTH_IF_SURROUNDED_BY_WORDS = "MERGE_BOTH_IF_SURROUNDED_BY_WORDS"


_Op = DetokenizationOperation

DEFAULT_RULES: Mapping[str, DetokenizationOperation] = {
    # Punctuation
    ".": _Op.MERGE_TO_LEFT,
    "...": _Op.MERGE_TO_LEFT,
    ",": _Op.MERGE_TO_LEFT,
    "!": _Op.MERGE_TO_LEFT,
    "?": _Op.MERGE_TO_LEFT,
    ";": _Op.MERGE_TO_LEFT,
    "(": _Op.MERGE_TO_RIGHT,
    ")": _Op.MERGE_TO_LEFT,
    "[": _Op.MERGE_TO_RIGHT,
    "]": _Op.MERGE_TO_LEFT,
    '"': _Op.RIGHT_LEFT_MATCHING,
    "-": _Op.MERGE_BOTH_IF_SURROUNDED_BY_WORDS,
    # Contractions
    "'t": _Op.MERGE_TO_LEFT,
    "'m": _Op.MERGE_TO_LEFT,
    "'s": _Op.MERGE_TO_LEFT,
    "'re": _Op.MERGE_TO_LEFT,
    "'ve": _Op.MERGE_TO_LEFT,
    "'d": _Op.MERGE_TO_LEFT,
    "'ll": _Op.MERGE_TO_LEFT,
    # Currencies
    "$": _Op.MERGE_TO_RIGHT,
    "€": _Op.MERGE_TO_LEFT,
}

_WORD_RE = re.compile(r"^\w+$")

# Operations that are passed through as they are
_DIRECT_OPS = frozenset(
    (_Op.MERGE_TO_LEFT, _Op.MERGE_TO_RIGHT, _Op.MERGE_BOTH, _Op.NO_OPERATION)
)


class DictionaryDetokenizer:

    """Detokenizes token sequences according to a dictionary of
    token-specific operations"""

    def __init__(
        self, rules: Optional[Mapping[str, DetokenizationOperation]] = None
    ) -> None:
        self._rules: Dict[str, DetokenizationOperation] = dict(
            DEFAULT_RULES if rules is None else rules
        )

    @property
    def rules(self) -> Mapping[str, DetokenizationOperation]:
        return self._rules

    def operations(self, tokens: Sequence[str]) -> List[DetokenizationOperation]:
        """Return the detokenization operation for each token"""
        ops: List[DetokenizationOperation] = []
        # Matching tokens (such as quotes) that have been opened
        matching: Set[str] = set()
        last = len(tokens) - 1

        for i, tok in enumerate(tokens):
            op = self._rules.get(tok)
            if op is None:
                ops.append(_Op.NO_OPERATION)
            elif op in _DIRECT_OPS:
                ops.append(op)
            elif op == _Op.MERGE_BOTH_IF_SURROUNDED_BY_WORDS:
                if (
                    0 < i < last
                    and _WORD_RE.match(tokens[i - 1])
                    and _WORD_RE.match(tokens[i + 1])
                ):
                    ops.append(_Op.MERGE_BOTH)
                else:
                    ops.append(_Op.NO_OPERATION)
            elif op == _Op.RIGHT_LEFT_MATCHING:
                if tok in matching:
                    # Second occurrence: closes the pair
                    ops.append(_Op.MERGE_TO_LEFT)
                    matching.remove(tok)
                else:
                    ops.append(_Op.MERGE_TO_RIGHT)
                    matching.add(tok)
            else:
                raise ValueError("Unknown detokenization operation: {0}".format(op))

        return ops

    def detokenize(
        self, tokens: Sequence[str], split_marker: Optional[str] = None
    ) -> str:
        """Join the tokens into a string, inserting spaces where
        appropriate. If a split marker is given, it is inserted
        wherever two tokens were merged."""
        ops = self.operations(tokens)
        result: List[str] = []
        last = len(tokens) - 1
        for i, tok in enumerate(tokens):
            result.append(tok)
            if i == last:
                break
            if ops[i + 1] in (_Op.MERGE_TO_LEFT, _Op.MERGE_BOTH) or ops[i] in (
                _Op.MERGE_TO_RIGHT,
                _Op.MERGE_BOTH,
            ):
                # No space between this token and the next one
                if split_marker is not None:
                    result.append(split_marker)
            else:
                result.append(" ")

        return "".join(result)


def operation_from_name(name: str) -> DetokenizationOperation:
    """Look up an operation by its (case insensitive) name"""
    try:
        return DetokenizationOperation[name.strip().upper()]
    except KeyError:
        raise ValueError("Unknown detokenization operation '{0}'".format(name))
