#!/usr/bin/env python3
"""
Corpus utilities for wordpredict.

Default tokenizer: turns raw text into sentences of lower-case word tokens.
Punctuation is canonicalized, ordinals and digits are spelled out, and
common apostrophe-less contractions are expanded.
"""

import json
import re
from pathlib import Path
from typing import Iterable, Iterator, List, Union

# Characters that end a sentence
SENTENCE_BREAKS = "!?"

# Characters removed outright (joining the pieces around them)
DROPPED_CHARS = "'`"

# Characters replaced by a space
SPACE_CHARS = '"\t,;:-\\/[](){}<>+=$&@#%^*~\n'

ORDINALS = {
    "1st": "first", "2nd": "second", "3rd": "third", "4th": "fourth",
    "5th": "fifth", "6th": "sixth", "7th": "seventh", "8th": "eighth",
    "9th": "ninth", "10th": "tenth", "11th": "eleventh", "12th": "twelfth",
    "13th": "thirteenth", "14th": "fourteenth", "15th": "fifteenth",
}

DIGITS = {
    "0": "zero", "1": "one", "2": "two", "3": "three", "4": "four",
    "5": "five", "6": "six", "7": "seven", "8": "eight", "9": "nine",
}

# Contractions after apostrophes have been dropped. "were" is left alone:
# it is far more often the verb than "we're".
CONTRACTIONS = {
    "arent": "are not", "cant": "cannot", "couldnt": "could not",
    "didnt": "did not", "doesnt": "does not", "dont": "do not",
    "hadnt": "had not", "hasnt": "has not", "havent": "have not",
    "im": "i am", "ive": "i have", "isnt": "is not", "lets": "let us",
    "mightnt": "might not", "mustnt": "must not", "shant": "shall not",
    "shouldnt": "should not", "theyre": "they are", "theyve": "they have",
    "weve": "we have", "werent": "were not", "whatre": "what are",
    "whatve": "what have", "whore": "who are", "whove": "who have",
    "wont": "will not", "wouldnt": "would not", "youre": "you are",
    "youve": "you have",
}

_ORDINAL_RE = re.compile(r"\b(" + "|".join(sorted(ORDINALS, key=len, reverse=True)) + r")\b")
_CONTRACTION_RE = re.compile(r"\b(" + "|".join(CONTRACTIONS) + r")\b")
_WHITESPACE_RE = re.compile(r"\s+")

_TRANSLATION = str.maketrans(
    {**{c: "." for c in SENTENCE_BREAKS},
     **{c: None for c in DROPPED_CHARS},
     **{c: " " for c in SPACE_CHARS},
     "\r": None}
)


def normalize_text(text: str) -> str:
    """
    Canonicalize raw text.

    Example:
        >>> normalize_text("I'm 2nd! Don't stop")
        'i am second. do not stop'
    """
    text = text.translate(_TRANSLATION).lower()
    text = _ORDINAL_RE.sub(lambda m: ORDINALS[m.group(1)], text)
    text = "".join(DIGITS[c] + " " if c in DIGITS else c for c in text)
    text = _CONTRACTION_RE.sub(lambda m: CONTRACTIONS[m.group(1)], text)

    # Anything left that is not a letter, a space or a sentence break goes
    text = "".join(c for c in text if c.isalpha() or c in " .")
    return _WHITESPACE_RE.sub(" ", text).strip()


def tokenize_text(text: str) -> List[List[str]]:
    """
    Split raw text into sentences of word tokens.

    Example:
        >>> tokenize_text("The cat sat. The dog ran!")
        [['the', 'cat', 'sat'], ['the', 'dog', 'ran']]
    """
    sentences = []
    for chunk in normalize_text(text).split("."):
        words = chunk.split()
        if words:
            sentences.append(words)
    return sentences


def tokenize_documents(documents: Iterable[str]) -> List[List[str]]:
    """Tokenize several documents into one list of sentences."""
    sentences: List[List[str]] = []
    for doc in documents:
        sentences.extend(tokenize_text(doc))
    return sentences


def load_text_file(path: Union[str, Path], encoding: str = 'utf-8') -> str:
    """
    Load text from a file.

    Args:
        path: Path to text file
        encoding: Text encoding (default: 'utf-8')

    Returns:
        File contents as string
    """
    with open(path, 'r', encoding=encoding) as f:
        return f.read()


def tokenize_file(path: Union[str, Path], encoding: str = 'utf-8') -> List[List[str]]:
    """
    Tokenize a text file.

    Raises:
        FileNotFoundError: If ``path`` does not exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Cannot tokenize missing file: {path}")
    return tokenize_text(load_text_file(path, encoding=encoding))


def iter_jsonl(
    path: Union[str, Path],
    text_field: str = 'text',
    encoding: str = 'utf-8'
) -> Iterator[str]:
    """
    Iterate over text documents in a JSONL file.

    Args:
        path: Path to JSONL file
        text_field: Field name containing text (default: 'text')
        encoding: Text encoding (default: 'utf-8')

    Yields:
        Text content from each line
    """
    with open(path, 'r', encoding=encoding) as f:
        for line in f:
            if line.strip():
                obj = json.loads(line)
                if text_field in obj:
                    yield obj[text_field]
