# indexer.py
# Build the search index for a corpus of linked pages:
#   titles  (doc_id -> title)
#   docs    (doc_id -> most frequent term count, pagerank)
#   words   (term -> {doc_id: count})
# Usage: python indexer.py corpus.xml titles.txt docs.txt words.txt

import logging
import sys
from collections import Counter, defaultdict
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Set

from lxml import etree

from search_config import DAMPING, DELTA, ID_TAG, LOG_FORMAT, PAGE_TAG, TEXT_TAG, TITLE_TAG
from index_io import Index, write_index
from pagerank import ConvergenceError, pagerank
from preprocess import TextProcessor

logger = logging.getLogger("indexer")

USAGE = "Usage: python indexer.py <corpusFile> <titleOut> <docStatsOut> <wordOut>"


class CorpusError(ValueError):
    pass


@dataclass(frozen=True)
class Document:
    doc_id: int
    title: str
    text: str


# --- CORPUS ---
def _child_text(page, tag):
    node = page.find(tag)
    return None if node is None else "".join(node.itertext())


def read_corpus(path):
    """Parse the <page> records (id, title, text) out of an XML corpus file."""
    with open(path, "rb") as fh:
        try:
            root = etree.parse(fh).getroot()
        except etree.XMLSyntaxError as e:
            # a truncated or broken corpus must not be indexed
            raise CorpusError(f"malformed corpus: {e}") from None

    documents = []
    for n, page in enumerate(root.findall(PAGE_TAG), start=1):
        raw_id = _child_text(page, ID_TAG)
        title = _child_text(page, TITLE_TAG)
        if raw_id is None or title is None:
            raise CorpusError(f"page {n} is missing its {ID_TAG} or {TITLE_TAG}")
        try:
            doc_id = int(raw_id.strip())
        except ValueError:
            raise CorpusError(f"page {n} has a non-numeric id: {raw_id.strip()!r}") from None
        documents.append(Document(doc_id, title.strip(), _child_text(page, TEXT_TAG) or ""))
    logger.info("Read %d pages from %s", len(documents), path)
    return documents


# --- TERM FREQUENCIES ---
def count_terms(terms_by_doc):
    """
    One Counter per page. Returns (postings, max_freqs) where
    postings[term][doc_id] is the number of times term occurs in the page
    and max_freqs[doc_id] is the largest of those counts for the page.
    """
    postings = defaultdict(dict)
    max_freqs = {}
    for doc_id, terms in terms_by_doc.items():
        counts = Counter(terms)
        max_freqs[doc_id] = max(counts.values(), default=0)
        for term, count in counts.items():
            postings[term][doc_id] = count
    return dict(postings), max_freqs


# --- LINK GRAPH ---
def resolve_links(raw_links, titles):
    """
    Map link targets (titles) to doc ids. Targets outside the corpus and
    links to the page itself are dropped. A page left without any link is
    treated as linking to every other page.
    """
    by_title = {}
    for doc_id in sorted(titles):
        by_title.setdefault(titles[doc_id], doc_id)

    everyone = frozenset(titles)
    graph = {}
    for doc_id in sorted(titles):
        targets = {by_title[t] for t in raw_links.get(doc_id, ()) if t in by_title}
        targets.discard(doc_id)
        graph[doc_id] = frozenset(targets) if targets else everyone - {doc_id}
    return graph


# --- INDEX BUILDING ---
# Each stage only offers the next step, so ranking can't run before the
# link graph and the term counts exist. Every step hands its result to a
# new stage and leaves the working lists it consumed behind.

@dataclass(frozen=True)
class CountedCorpus:
    titles: Dict[int, str]
    links: Dict[int, FrozenSet[int]]
    postings: Dict[str, Dict[int, int]]
    max_freqs: Dict[int, int]

    def rank(self, damping=DAMPING, delta=DELTA):
        ranks = pagerank(self.links, damping=damping, delta=delta)
        return Index(titles=self.titles, max_freqs=self.max_freqs, ranks=ranks, postings=self.postings)


@dataclass(frozen=True)
class LinkedCorpus:
    titles: Dict[int, str]
    terms: Dict[int, List[str]]
    links: Dict[int, FrozenSet[int]]

    def count_terms(self):
        postings, max_freqs = count_terms(self.terms)
        logger.info("Vocabulary size = %d", len(postings))
        return CountedCorpus(self.titles, self.links, postings, max_freqs)


@dataclass(frozen=True)
class ExtractedCorpus:
    titles: Dict[int, str]
    terms: Dict[int, List[str]]
    links: Dict[int, Set[str]]

    def resolve_links(self):
        graph = resolve_links(self.links, self.titles)
        logger.info("Resolved %d links", sum(len(targets) for targets in graph.values()))
        return LinkedCorpus(self.titles, self.terms, graph)


class IndexBuilder:
    def __init__(self, processor=None):
        self.processor = processor or TextProcessor()

    def extract(self, documents):
        titles, terms, links = {}, {}, {}
        for doc in documents:
            if doc.doc_id in titles:
                raise CorpusError(f"duplicate page id {doc.doc_id}")
            titles[doc.doc_id] = doc.title
            terms[doc.doc_id], links[doc.doc_id] = self.processor.tokenize_document(doc.text, doc.title)
        logger.info("Tokenized %d pages", len(titles))
        return ExtractedCorpus(titles, terms, links)


def build_index(documents, processor=None, damping=DAMPING, delta=DELTA):
    return (
        IndexBuilder(processor)
        .extract(documents)
        .resolve_links()
        .count_terms()
        .rank(damping=damping, delta=delta)
    )


# --- MAIN ---
def main(argv=None):
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 4:
        print(USAGE)
        return 1

    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    corpus, title_out, docs_out, words_out = args
    try:
        index = build_index(read_corpus(corpus))
    except FileNotFoundError:
        print("One (or more) of the files were not found")
        return 1
    except (CorpusError, ConvergenceError) as e:
        print(f"Error: {e}")
        return 1
    except OSError:
        print("Error: IO Exception")
        return 1

    # a missing output directory is an I/O failure, not a missing input
    try:
        write_index(index, title_out, docs_out, words_out)
    except OSError:
        print("Error: IO Exception")
        return 1

    logger.info("N = %d", len(index))
    return 0


if __name__ == "__main__":
    sys.exit(main())
