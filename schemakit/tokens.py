"""A small SQL tokenizer and a cursor-style parser over its tokens."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum


class TokenKind(Enum):
    """The kinds of token produced by :func:`tokenize`."""

    QUOTED = "quoted"
    UNQUOTED = "unquoted"
    SPACE = "space"
    PUNCTUATION = "punctuation"


@dataclass(frozen=True)
class Token:
    """A single token; ``text`` is exactly the source text it covers."""

    kind: TokenKind
    text: str

    def is_space(self) -> bool:
        return self.kind is TokenKind.SPACE

    def is_quoted(self) -> bool:
        return self.kind is TokenKind.QUOTED

    def is_unquoted(self) -> bool:
        return self.kind is TokenKind.UNQUOTED

    def is_punctuation(self) -> bool:
        return self.kind is TokenKind.PUNCTUATION

    def __str__(self) -> str:
        return self.text


_TOKEN_RE = re.compile(
    r"""
      (?P<space>\s+)
    | (?P<word>\w+)
    | (?P<quoted>
          `(?:[^`]|``)*`?
        | \[(?:[^\]]|\]\])*\]?
        | '(?:[^'\\]|''|\\.)*'?
        | "(?:[^"\\]|""|\\.)*"?
      )
    | (?P<punct>.)
    """,
    re.VERBOSE | re.DOTALL,
)

_GROUP_KINDS = {
    "space": TokenKind.SPACE,
    "word": TokenKind.UNQUOTED,
    "quoted": TokenKind.QUOTED,
    "punct": TokenKind.PUNCTUATION,
}


def tokenize(string: str) -> Iterator[Token]:
    """Split ``string`` into tokens; concatenating their texts gives it back."""
    for match in _TOKEN_RE.finditer(string):
        yield Token(_GROUP_KINDS[match.lastgroup], match.group())


class Parser:
    """Walks the tokens of a string, skipping whitespace."""

    def __init__(self, string: str) -> None:
        self._tokens = tokenize(string)
        self._curr: Token | None = None
        self._last: Token | None = None

    def curr(self) -> Token | None:
        """The current token, advancing to the first one if needed."""
        if self._curr is not None:
            return self._curr
        return self.next()

    def last(self) -> Token | None:
        """The token that was current before the last advance."""
        return self._last

    def next(self) -> Token | None:
        """Advance to the next non-space token and return it."""
        if self._curr is not None:
            self._last, self._curr = self._curr, None
        tok = next(self._tokens, None)
        if tok is not None and tok.is_space():
            tok = next(self._tokens, None)
        if tok is not None:
            self._curr = tok
        return self._curr

    def next_if_unquoted(self, word: str) -> bool:
        """Advance past the current token if it is the given bare word, ignoring case."""
        tok = self.curr()
        if tok is not None and tok.is_unquoted() and tok.text.lower() == word.lower():
            self.next()
            return True
        return False

    def next_if_quoted_any(self) -> Token | None:
        """Consume and return the current token if it is quoted."""
        tok = self.curr()
        if tok is not None and tok.is_quoted():
            self.next()
            return self.last()
        return None

    def next_if_unquoted_any(self) -> Token | None:
        """Consume and return the current token if it is a bare word."""
        tok = self.curr()
        if tok is not None and tok.is_unquoted():
            self.next()
            return self.last()
        return None

    def next_if_punctuation(self, word: str) -> bool:
        """Advance past the current token if it is exactly the given punctuation."""
        tok = self.curr()
        if tok is not None and tok.is_punctuation() and tok.text == word:
            self.next()
            return True
        return False

    def curr_is_unquoted(self) -> bool:
        tok = self.curr()
        return tok is not None and tok.is_unquoted()

    def curr_as_str(self) -> str:
        """Text of the current token; raises ValueError when input is exhausted."""
        tok = self.curr()
        if tok is None:
            raise ValueError("no current token")
        return tok.text