import sys

import indexer
import searcher

USAGE = """Usage:
  python main.py index <corpusFile> <titleOut> <docStatsOut> <wordOut>
  python main.py query [--pagerank] <titleIndex> <docStatsIndex> <wordIndex>"""

COMMANDS = {
    "index": indexer.main,
    "query": searcher.main,
}


def main(argv=None):
    args = sys.argv[1:] if argv is None else argv
    if not args or args[0] not in COMMANDS:
        print(USAGE)
        return 1
    return COMMANDS[args[0]](args[1:])


if __name__ == "__main__":
    sys.exit(main())
