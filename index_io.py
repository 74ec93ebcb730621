# index_io.py
# Reads and writes the three index files. Every file is JSON Lines,
# one JSON array per record, sorted so repeated runs give identical bytes:
#   titles: [doc_id, title]
#   docs:   [doc_id, max_freq, pagerank]
#   words:  [term, [[doc_id, freq], ...]]

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Dict

logger = logging.getLogger("index_io")


@dataclass(frozen=True)
class Index:
    titles: Dict[int, str] = field(default_factory=dict)
    max_freqs: Dict[int, int] = field(default_factory=dict)
    ranks: Dict[int, float] = field(default_factory=dict)
    postings: Dict[str, Dict[int, int]] = field(default_factory=dict)

    def __len__(self):
        return len(self.titles)


def _dump(record):
    return json.dumps(record, ensure_ascii=False) + "\n"


def _records(path):
    with open(path, "r", encoding="utf-8") as fh:
        for lineno, line in enumerate(fh, start=1):
            if not line.strip():
                continue
            try:
                yield json.loads(line)
            except ValueError as e:
                raise ValueError(f"{path}:{lineno}: malformed index line") from e


# --- WRITERS ---
def write_titles(fh, titles):
    for doc_id in sorted(titles):
        fh.write(_dump([doc_id, titles[doc_id]]))


def write_documents(fh, max_freqs, ranks):
    for doc_id in sorted(max_freqs):
        fh.write(_dump([doc_id, max_freqs[doc_id], ranks[doc_id]]))


def write_words(fh, postings):
    for term in sorted(postings):
        docs = postings[term]
        fh.write(_dump([term, [[doc_id, docs[doc_id]] for doc_id in sorted(docs)]]))


def write_index(index, title_path, docs_path, words_path):
    """
    Write all three files or none of them. Each file goes to a temporary
    sibling first and is moved into place once all three were written.
    Existing outputs are set aside as *.bak while the new files move in,
    and are put back if any move fails.
    """
    jobs = [
        (title_path, lambda fh: write_titles(fh, index.titles)),
        (docs_path, lambda fh: write_documents(fh, index.max_freqs, index.ranks)),
        (words_path, lambda fh: write_words(fh, index.postings)),
    ]
    pending = []
    moved = []  # (path, backup or None)
    try:
        for path, writer in jobs:
            tmp = path + ".tmp"
            pending.append(tmp)
            with open(tmp, "w", encoding="utf-8", newline="\n") as fh:
                writer(fh)
        for (path, _), tmp in zip(jobs, pending):
            backup = None
            if os.path.exists(path):
                backup = path + ".bak"
                os.replace(path, backup)
            moved.append((path, backup))
            os.replace(tmp, path)
    except OSError:
        for path, backup in reversed(moved):
            if os.path.exists(path):
                os.remove(path)
            if backup is not None:
                os.replace(backup, path)
        for tmp in pending:
            if os.path.exists(tmp):
                os.remove(tmp)
        raise
    for _, backup in moved:
        if backup is not None:
            os.remove(backup)
    logger.info("Index written to %s, %s, %s", title_path, docs_path, words_path)


# --- READERS ---
def read_titles(path):
    titles = {}
    for doc_id, title in _records(path):
        titles[int(doc_id)] = title
    return titles


def read_documents(path):
    max_freqs, ranks = {}, {}
    for doc_id, max_freq, rank in _records(path):
        max_freqs[int(doc_id)] = max_freq
        ranks[int(doc_id)] = rank
    return max_freqs, ranks


def read_words(path):
    postings = {}
    for term, docs in _records(path):
        postings[term] = {int(doc_id): freq for doc_id, freq in docs}
    return postings


def read_index(title_path, docs_path, words_path):
    titles = read_titles(title_path)
    max_freqs, ranks = read_documents(docs_path)
    postings = read_words(words_path)
    logger.info("Index loaded: %d documents, %d terms", len(titles), len(postings))
    return Index(titles=titles, max_freqs=max_freqs, ranks=ranks, postings=postings)
