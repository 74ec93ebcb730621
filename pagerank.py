# pagerank.py
# Authority scores over the resolved link graph (power iteration).

import logging

import numpy as np

from search_config import DAMPING, DELTA, MAX_ITERATIONS

logger = logging.getLogger("pagerank")


class ConvergenceError(RuntimeError):
    pass


def transition_matrix(doc_ids, links, damping=DAMPING):
    """
    Dense weights W[j, k]: the share of k's rank handed to j.
    W[j, k] = damping/n + (1 - damping)/outdegree(k) if k links to j,
    damping/n otherwise. Every column sums to 1.
    """
    n = len(doc_ids)
    position = {doc_id: i for i, doc_id in enumerate(doc_ids)}
    weights = np.full((n, n), damping / n)

    for k, doc_id in enumerate(doc_ids):
        targets = [position[t] for t in links.get(doc_id, ()) if t in position]
        if not targets:
            # only reachable for a one-page corpus; spread the column evenly
            weights[:, k] += (1.0 - damping) / n
            continue
        weights[targets, k] += (1.0 - damping) / len(targets)
    return weights


def euclidean_distance(r, r_prime):
    return float(np.linalg.norm(r_prime - r))


def pagerank(links, damping=DAMPING, delta=DELTA, max_iter=MAX_ITERATIONS):
    """
    links: {doc_id: set of doc_ids it points to}, with no empty sets
    except in a one-page corpus.
    Returns {doc_id: rank}; ranks are non-negative and sum to 1.
    """
    doc_ids = sorted(links)
    n = len(doc_ids)
    if n == 0:
        return {}

    weights = transition_matrix(doc_ids, links, damping)
    r = np.zeros(n)
    r_prime = np.full(n, 1.0 / n)
    iterations = 0
    while euclidean_distance(r, r_prime) > delta:
        if iterations >= max_iter:
            raise ConvergenceError(f"PageRank did not converge in {max_iter} iterations")
        # every entry of the new vector reads only the previous one
        r = r_prime
        r_prime = weights @ r
        iterations += 1
        logger.debug("iteration %d: distance %.6g", iterations, euclidean_distance(r, r_prime))

    logger.info("PageRank converged after %d iterations over %d documents", iterations, n)
    return {doc_id: float(rank) for doc_id, rank in zip(doc_ids, r_prime)}
