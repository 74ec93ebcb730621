import heapq
import logging
import math
import sys
from collections import defaultdict

from search_config import LOG_FORMAT, NO_RESULTS, PROMPT, QUIT_COMMAND, TOP_K
from index_io import read_index
from preprocess import TextProcessor

logger = logging.getLogger("searcher")

USAGE = "Usage: python searcher.py [--pagerank] <titleIndex> <documentIndex> <wordIndex>"


# --- RANKING FUNCTIONS ---

def inverse_document_frequency(term, index):
    """log(N / df). Only called for terms that occur in at least one page."""
    return math.log(len(index.titles) / len(index.postings[term]))


def score_documents(query_terms, index, use_pagerank=False):
    """
    Sum over query terms of (tf / max_tf) * idf, optionally times the
    page's pagerank. Terms missing from the index are skipped.
    Returns {doc_id: score} for every page that matched some term.
    """
    scores = defaultdict(float)
    for term in query_terms:
        docs = index.postings.get(term)
        if not docs:
            continue
        idf = inverse_document_frequency(term, index)
        for doc_id, freq in docs.items():
            authority = index.ranks[doc_id] if use_pagerank else 1.0
            scores[doc_id] += (freq / index.max_freqs[doc_id]) * idf * authority
    return dict(scores)


def top_documents(scores, k=TOP_K):
    # highest score first, lower doc id wins a tie
    return heapq.nsmallest(k, scores.items(), key=lambda item: (-item[1], item[0]))


def search(query, index, processor, use_pagerank=False, k=TOP_K):
    """
    Returns up to k (doc_id, title, score) tuples, best first,
    or None when no query term occurs anywhere in the index.
    """
    scores = score_documents(processor.tokenize_query(query), index, use_pagerank)
    if not scores:
        return None
    return [(doc_id, index.titles[doc_id], score) for doc_id, score in top_documents(scores, k)]


def format_results(results):
    if results is None:
        return [NO_RESULTS]
    return [f"\t{rank} {title}" for rank, (_, title, _) in enumerate(results, start=1)]


# --- REPL ---

def repl(index, processor, use_pagerank=False, stdin=None, stdout=None):
    """Prompt, read a line, print results; stop at end of input or :quit."""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    while True:
        stdout.write(PROMPT)
        stdout.flush()
        line = stdin.readline()
        if not line:
            break
        query = line.rstrip("\r\n")
        if query == QUIT_COMMAND:
            break
        logger.debug("query: %r", query)
        for out in format_results(search(query, index, processor, use_pagerank)):
            stdout.write(out + "\n")


def parse_args(args):
    """Returns (use_pagerank, [titles, docs, words]) or None if malformed."""
    if len(args) == 4 and args[0] == "--pagerank":
        return True, args[1:]
    if len(args) == 3 and "--pagerank" not in args:
        return False, args
    return None


# --- MAIN ---
def main(argv=None):
    parsed = parse_args(sys.argv[1:] if argv is None else argv)
    if parsed is None:
        print(USAGE)
        return 1
    use_pagerank, (title_index, doc_index, word_index) = parsed

    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    try:
        index = read_index(title_index, doc_index, word_index)
    except FileNotFoundError:
        print("One (or more) of the files were not found")
        return 1
    except (ValueError, TypeError):
        print("Error: malformed index file")
        return 1
    except OSError:
        print("Error: IO Exception")
        return 1

    repl(index, TextProcessor(), use_pagerank)
    return 0


if __name__ == "__main__":
    sys.exit(main())
