"""
Configuration settings for the indexer and the query engine.
"""

# PageRank settings
DAMPING = 0.15           # probability of jumping to a random page
DELTA = 0.001            # euclidean distance at which ranks count as converged
MAX_ITERATIONS = 1000    # give up instead of spinning forever

# Query settings
TOP_K = 10
PROMPT = "search> "
QUIT_COMMAND = ":quit"
NO_RESULTS = "No Results"

# Preprocessing
STOPWORD_LANGUAGE = "english"

# Corpus markup
PAGE_TAG = "page"
ID_TAG = "id"
TITLE_TAG = "title"
TEXT_TAG = "text"

# Logging goes to stderr so stdout stays clean for the REPL
LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
