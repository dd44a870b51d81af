#!/usr/bin/env python3
"""
Token identity for the word model.

Tokens are compared case-insensitively. A ``Token`` stores its normalized
(lower-cased) text, so two tokens built from "The" and "THE" are the same
dictionary key.
"""

from typing import Optional

# Sentence boundary sentinels. They are ordinary dictionary entries.
START_TOKEN = "{{start}}"
END_TOKEN = "{{end}}"


def is_blank(text: Optional[str]) -> bool:
    """True for None, empty, or whitespace-only text."""
    return not text or text.isspace()


def normalize(text: Optional[str]) -> str:
    """
    Normalize raw token text.

    Blank input becomes the empty string, everything else is lower-cased.

    Example:
        >>> normalize("The")
        'the'
        >>> normalize("   ")
        ''
    """
    if is_blank(text):
        return ""
    return text.lower()


class Token(str):
    """
    Case-insensitive string identity.

    The stored value is always normalized, so hashing agrees with the
    normalized plain string:

        >>> Token("Cat") == "cat"
        True
        >>> hash(Token("Cat")) == hash("cat")
        True
    """

    __slots__ = ()

    def __new__(cls, text: Optional[str]):
        return super().__new__(cls, normalize(text))

    def __eq__(self, other):
        if isinstance(other, str):
            return str.__eq__(self, normalize(other))
        return NotImplemented

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = str.__hash__

    @property
    def is_sentinel(self) -> bool:
        return self in (START_TOKEN, END_TOKEN)

    def __repr__(self):
        return f"Token({str.__repr__(self)})"
