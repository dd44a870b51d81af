#!/usr/bin/env python3
"""
Persistence for VocabularyModel.

Models are written as an XML document (default) or as JSON:

    <TrainedDataSet>
      <TotalWordsProcessed>12</TotalWordsProcessed>
      <Word>
        <Value>the</Value>
        <DictionarySize>2</DictionarySize>
        <NextWordDictionary>
          <KeyValuePair><Key>cat</Key><Value>1</Value></KeyValuePair>
        </NextWordDictionary>
        <PreviousWordsDictionary>
          <KeyValuePair><Key>{{start}}</Key><Value>2</Value></KeyValuePair>
        </PreviousWordsDictionary>
      </Word>
    </TrainedDataSet>

Both formats are validated through the same pydantic schema. Loading never
fails: a missing or malformed file gives an empty model.
"""

import logging
import time
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from wordpredict.errors import MalformedPersistedState
from wordpredict.tokens import Token, is_blank
from wordpredict.vocabulary import VocabularyModel

logger = logging.getLogger(__name__)

# Default models directory
DEFAULT_MODELS_DIR = Path.home() / ".wordpredict" / "models"

FORMATS = ("xml", "json")


class XmlElementNames:
    ROOT = "TrainedDataSet"
    TOTAL_WORDS_PROCESSED = "TotalWordsProcessed"
    WORD = "Word"
    VALUE = "Value"
    DICTIONARY_SIZE = "DictionarySize"
    NEXT_WORD_DICTIONARY = "NextWordDictionary"
    PREVIOUS_WORDS_DICTIONARY = "PreviousWordsDictionary"
    KEY_VALUE_PAIR = "KeyValuePair"
    KEY = "Key"


# Pydantic models for document validation
class CountRecord(BaseModel):
    """A (key, count) pair: successor token or space-joined context."""
    key: str = ""
    value: int = 0


class WordRecord(BaseModel):
    """One persisted vocabulary entry."""
    value: str
    dictionary_size: int = 0  # Absolute frequency at save time
    next_words: List[CountRecord] = Field(default_factory=list)
    previous_words: List[CountRecord] = Field(default_factory=list)


class ModelDocument(BaseModel):
    """Whole persisted model."""
    total_words_processed: int
    words: List[WordRecord] = Field(default_factory=list)


def _join_context(context) -> str:
    return " ".join(context)


def _split_context(key: str) -> List[str]:
    # The empty key is the empty context of the start sentinel
    if key == "":
        return []
    return key.split(" ")


class ModelStore:
    """
    Saves and loads VocabularyModel instances.

    Usage:
        >>> store = ModelStore()
        >>> store.save(model, "model.xml")
        True
        >>> restored = store.load("model.xml")
    """

    def __init__(self, file_format: Optional[str] = None, models_dir: Optional[Path] = None):
        """
        Args:
            file_format: "xml" or "json"; None picks by file suffix
            models_dir: Where bare model names are looked up on load
        """
        if file_format is not None and file_format not in FORMATS:
            raise ValueError(f"Unknown format '{file_format}'. Available: {list(FORMATS)}")
        self.file_format = file_format
        self.models_dir = Path(models_dir) if models_dir is not None else DEFAULT_MODELS_DIR

    def _format_for(self, path: Path) -> str:
        if self.file_format is not None:
            return self.file_format
        return "json" if path.suffix.lower() == ".json" else "xml"

    def resolve_path(self, path: Union[str, Path]) -> Path:
        """Relative paths that do not exist are looked up in ``models_dir``."""
        path = Path(path)
        if not path.is_absolute() and not path.exists():
            default_path = self.models_dir / path
            if default_path.exists():
                return default_path
        return path

    # ------------------------------------------------------------------
    # Model <-> document
    # ------------------------------------------------------------------

    @staticmethod
    def to_document(model: VocabularyModel) -> ModelDocument:
        """Snapshot ``model`` as a document, most frequent entries first."""
        model.order_descending_by_frequency()

        words = [
            WordRecord(
                value=str(entry.value),
                dictionary_size=entry.absolute_frequency,
                next_words=[
                    CountRecord(key=str(successor.value), value=count)
                    for successor, count in entry.successors.items()
                ],
                previous_words=[
                    CountRecord(key=_join_context(context), value=count)
                    for context, count in entry.contexts.items()
                ],
            )
            for entry in model
        ]
        return ModelDocument(total_words_processed=model.total_sample_size, words=words)

    @staticmethod
    def from_document(document: ModelDocument) -> VocabularyModel:
        """
        Build a model from a document.

        Every entry is created first, then successors and contexts are
        filled in. Records naming a token that has no entry of its own are
        skipped, as are non-positive counts. Keys are case-insensitive; only
        the first record for a word, successor or context is used.
        """
        model = VocabularyModel()

        records = []
        seen_words = set()
        for record in document.words:
            if is_blank(record.value):
                continue
            value = Token(record.value)
            if value in seen_words:
                logger.warning("Skipping duplicate word record '%s'", record.value)
                continue
            seen_words.add(value)
            records.append(record)

        for record in records:
            model.add_entry(record.value)

        for record in records:
            entry = model.find(record.value)

            for pair in record.next_words:
                successor = model.get(pair.key)
                if successor is None or pair.value < 1:
                    logger.warning(
                        "Skipping successor '%s' of '%s' (count %d)",
                        pair.key, record.value, pair.value,
                    )
                    continue
                if entry.successors.contains(successor):
                    logger.warning(
                        "Skipping duplicate successor '%s' of '%s'", pair.key, record.value
                    )
                    continue
                entry.add_successor(successor, pair.value)

            for pair in record.previous_words:
                context = _split_context(pair.key)
                if pair.value < 1 or any(Token(token) not in model for token in context):
                    logger.warning(
                        "Skipping context '%s' of '%s' (count %d)",
                        pair.key, record.value, pair.value,
                    )
                    continue
                if entry.context_count(context):
                    logger.warning(
                        "Skipping duplicate context '%s' of '%s'", pair.key, record.value
                    )
                    continue
                entry.add_preceding_context(context, pair.value)

        if model.total_sample_size != document.total_words_processed:
            logger.warning(
                "Document reports %d words processed, rebuilt model has %d",
                document.total_words_processed, model.total_sample_size,
            )

        return model

    # ------------------------------------------------------------------
    # XML
    # ------------------------------------------------------------------

    @staticmethod
    def _pairs_to_xml(parent: ET.Element, tag: str, pairs: List[CountRecord]) -> None:
        node = ET.SubElement(parent, tag)
        for pair in pairs:
            kvp = ET.SubElement(node, XmlElementNames.KEY_VALUE_PAIR)
            ET.SubElement(kvp, XmlElementNames.KEY).text = pair.key
            ET.SubElement(kvp, XmlElementNames.VALUE).text = str(pair.value)

    def to_xml(self, document: ModelDocument) -> ET.ElementTree:
        root = ET.Element(XmlElementNames.ROOT)
        ET.SubElement(root, XmlElementNames.TOTAL_WORDS_PROCESSED).text = str(
            document.total_words_processed
        )

        for record in document.words:
            word = ET.SubElement(root, XmlElementNames.WORD)
            ET.SubElement(word, XmlElementNames.VALUE).text = record.value
            ET.SubElement(word, XmlElementNames.DICTIONARY_SIZE).text = str(record.dictionary_size)
            self._pairs_to_xml(word, XmlElementNames.NEXT_WORD_DICTIONARY, record.next_words)
            self._pairs_to_xml(word, XmlElementNames.PREVIOUS_WORDS_DICTIONARY, record.previous_words)

        tree = ET.ElementTree(root)
        ET.indent(tree)
        return tree

    @staticmethod
    def _pairs_from_xml(word: ET.Element, tag: str) -> List[Dict]:
        node = word.find(tag)
        if node is None:
            return []

        pairs = []
        for kvp in node.findall(XmlElementNames.KEY_VALUE_PAIR):
            key = kvp.find(XmlElementNames.KEY)
            value = kvp.find(XmlElementNames.VALUE)
            if key is None or value is None:
                continue
            pairs.append({"key": key.text or "", "value": (value.text or "0").strip()})
        return pairs

    def from_xml(self, data: Union[str, bytes]) -> ModelDocument:
        """
        Parse an XML document.

        Raises:
            MalformedPersistedState: If the XML is unreadable or lacks the
                root, word count or word sections
        """
        try:
            root = ET.fromstring(data)
        except ET.ParseError as e:
            raise MalformedPersistedState(f"Unreadable XML: {e}") from e

        if root.tag != XmlElementNames.ROOT:
            raise MalformedPersistedState(f"Missing <{XmlElementNames.ROOT}> root")

        total_node = root.find(XmlElementNames.TOTAL_WORDS_PROCESSED)
        if total_node is None:
            raise MalformedPersistedState(
                f"Missing <{XmlElementNames.TOTAL_WORDS_PROCESSED}>"
            )

        word_nodes = root.findall(XmlElementNames.WORD)
        if not word_nodes:
            raise MalformedPersistedState(f"No <{XmlElementNames.WORD}> records")

        words = []
        for word in word_nodes:
            value = word.find(XmlElementNames.VALUE)
            size = word.find(XmlElementNames.DICTIONARY_SIZE)
            if value is None or size is None or is_blank(value.text):
                continue
            words.append({
                "value": value.text,
                "dictionary_size": (size.text or "0").strip(),
                "next_words": self._pairs_from_xml(word, XmlElementNames.NEXT_WORD_DICTIONARY),
                "previous_words": self._pairs_from_xml(word, XmlElementNames.PREVIOUS_WORDS_DICTIONARY),
            })

        return self._validate({
            "total_words_processed": (total_node.text or "0").strip(),
            "words": words,
        })

    # ------------------------------------------------------------------
    # JSON
    # ------------------------------------------------------------------

    def from_json(self, data: Union[str, bytes]) -> ModelDocument:
        """
        Parse a JSON document.

        Raises:
            MalformedPersistedState: If the JSON is invalid or fails validation
        """
        try:
            document = ModelDocument.model_validate_json(data)
        except ValidationError as e:
            raise MalformedPersistedState(f"Invalid model document: {e}") from e

        if not document.words:
            raise MalformedPersistedState("No word records")
        return document

    @staticmethod
    def _validate(data: Dict) -> ModelDocument:
        try:
            return ModelDocument.model_validate(data)
        except ValidationError as e:
            raise MalformedPersistedState(f"Invalid model document: {e}") from e

    # ------------------------------------------------------------------
    # Save / load
    # ------------------------------------------------------------------

    def save(self, model: VocabularyModel, path: Union[str, Path], verbose: bool = False) -> bool:
        """
        Write ``model`` to ``path``.

        Returns:
            True if the file was written; False for an empty model (nothing
            is written) or when the file cannot be written
        """
        if model is None or model.unique_word_count < 1:
            logger.warning("Refusing to save an empty model to %s", path)
            return False

        path = Path(path)
        fmt = self._format_for(path)
        start = time.time()

        document = self.to_document(model)
        try:
            if fmt == "json":
                path.write_text(document.model_dump_json(indent=2), encoding="utf-8")
            else:
                self.to_xml(document).write(path, encoding="utf-8", xml_declaration=True)
        except OSError as e:
            logger.error("Could not save model to %s: %s", path, e)
            return False

        if verbose:
            elapsed = time.time() - start
            print(f"Saved {len(document.words):,} words to {path} ({fmt}) in {elapsed:.2f}s")
        return path.exists()

    def load(self, path: Union[str, Path], verbose: bool = False) -> VocabularyModel:
        """
        Read a model from ``path``.

        A missing, unreadable or malformed file yields an empty model.
        """
        path = self.resolve_path(path)
        if not path.exists():
            logger.info("No model at %s, starting empty", path)
            return VocabularyModel()

        start = time.time()
        try:
            data = path.read_bytes()
            if self._format_for(path) == "json":
                document = self.from_json(data)
            else:
                document = self.from_xml(data)
        except (OSError, MalformedPersistedState) as e:
            logger.warning("Could not load model from %s: %s", path, e)
            return VocabularyModel()

        model = self.from_document(document)

        if verbose:
            elapsed = time.time() - start
            print(f"Loaded {model.unique_word_count:,} words from {path} in {elapsed:.2f}s")
        return model
