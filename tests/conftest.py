import pytest
from nltk.stem import PorterStemmer

from preprocess import TextProcessor

STOP_WORDS = {"a", "an", "and", "are", "is", "of", "on", "see", "the"}

SAMPLE_CORPUS = """<?xml version="1.0" encoding="UTF-8"?>
<corpus>
  <page>
    <title> Cats </title>
    <id> 1 </id>
    <text>Cats are small animals. See [[Dogs]] and [[Category:Animals]]. [[Cats]]</text>
  </page>
  <page>
    <title>Dogs</title>
    <id>2</id>
    <text>Dogs chase cats. A dog is loyal. [[Cats|feline friends]]</text>
  </page>
  <page>
    <title>Animals</title>
    <id>3</id>
    <text>Animals include many creatures.</text>
  </page>
</corpus>
"""


@pytest.fixture
def processor():
    return TextProcessor(stop_words=STOP_WORDS, stemmer=PorterStemmer())


@pytest.fixture
def corpus_file(tmp_path):
    path = tmp_path / "corpus.xml"
    path.write_text(SAMPLE_CORPUS, encoding="utf-8")
    return str(path)


@pytest.fixture
def index_paths(tmp_path):
    return [str(tmp_path / name) for name in ("titles.txt", "docs.txt", "words.txt")]
