# preprocess.py
# Turns raw page text into index terms and outbound link targets.
# Documents and queries go through the same lower-case / stop / stem pipeline.

import re

import nltk
from nltk.corpus import stopwords
from nltk.stem import PorterStemmer

from search_config import STOPWORD_LANGUAGE

# A token is a [[link span]], a word with one interior apostrophe, or a word.
# Words are letters and digits only (\w minus the underscore).
TOKEN_RE = re.compile(r"(?P<link>\[\[[^\[\]]*\]\])|(?P<word>[^\W_]+(?:'[^\W_]+)?)")
WORD_RE = re.compile(r"[^\W_]+(?:'[^\W_]+)?")
SPLIT_RE = re.compile(r"[\W_]+")
PIPE_RE = re.compile(r"\s*\|\s*")
COLON_RE = re.compile(r"\s*:\s*")


def load_stop_words(language=STOPWORD_LANGUAGE):
    """Stop word set from the NLTK corpus, downloading it on first use."""
    try:
        nltk.data.find("corpora/stopwords")
    except LookupError:
        nltk.download("stopwords", quiet=True)
    return frozenset(stopwords.words(language))


# --- LINK CLASSIFICATION ---
# Each returns (link target or None, pieces of text that become terms).

def pipe_link(content):
    # [[target|display|more]]: only the display segments become terms
    parts = PIPE_RE.split(content)
    return parts[0], parts[1:]


def namespaced_link(content):
    # [[Category:Target]]: the second segment is the link, everything is text
    parts = COLON_RE.split(content)
    target = parts[1] if len(parts) > 1 else None
    return target, [content]


def plain_link(content):
    return content, [content]


def classify_link(span):
    """Strip the brackets off a [[...]] span and pick the link rule for it."""
    content = span[2:-2]
    head, pipe, _ = content.partition("|")
    if pipe and ":" not in head:
        return pipe_link(content)
    if ":" in content:
        return namespaced_link(content)
    return plain_link(content)


class TextProcessor:
    """Stemming and stop word filtering, shared by the indexer and the searcher."""

    def __init__(self, stop_words=None, stemmer=None):
        self.stop_words = load_stop_words() if stop_words is None else frozenset(stop_words)
        self.stemmer = stemmer or PorterStemmer()

    def is_stop_word(self, word):
        return word in self.stop_words

    def stem(self, word):
        return self.stemmer.stem(word)

    def analyze(self, text):
        """Lowercase, split on non-word characters, remove stopwords, stem."""
        return [
            self.stem(piece)
            for piece in SPLIT_RE.split(text.lower())
            if piece and not self.is_stop_word(piece)
        ]

    def normalize_word(self, token):
        """Single word token -> term, or None for a stop word."""
        word = token.lower()
        if self.is_stop_word(word):
            return None
        return self.stem(word)

    def tokenize_document(self, text, title=""):
        """
        Scan page text once, left to right.
        Returns (terms, links): the term list for the page (title terms
        appended at the end) and the set of raw link targets it mentions.
        """
        terms = []
        links = set()
        for match in TOKEN_RE.finditer(text):
            if match.lastgroup == "link":
                target, pieces = classify_link(match.group())
                if target:
                    links.add(target)
                for piece in pieces:
                    terms.extend(self.analyze(piece))
            else:
                term = self.normalize_word(match.group())
                if term is not None:
                    terms.append(term)
        terms.extend(self.analyze(title))
        return terms, links

    def tokenize_query(self, query):
        """Query text -> terms. Link markup is not parsed in queries."""
        terms = []
        for token in WORD_RE.findall(query):
            term = self.normalize_word(token)
            if term is not None:
                terms.append(term)
        return terms
