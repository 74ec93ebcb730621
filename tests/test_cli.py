import io
import os

import pytest

import indexer
import main
import searcher


@pytest.fixture
def offline_processor(monkeypatch, processor):
    monkeypatch.setattr(indexer, "TextProcessor", lambda: processor)
    monkeypatch.setattr(searcher, "TextProcessor", lambda: processor)
    return processor


def test_index_wrong_arity_prints_usage(capsys):
    assert indexer.main(["corpus.xml", "t", "d"]) == 1
    assert capsys.readouterr().out.startswith("Usage:")


def test_index_missing_corpus(tmp_path, index_paths, capsys):
    assert indexer.main([str(tmp_path / "nope.xml"), *index_paths]) == 1

    assert "One (or more) of the files were not found" in capsys.readouterr().out
    assert not any(os.path.exists(p) for p in index_paths)


def test_index_bad_corpus(tmp_path, index_paths, capsys, offline_processor):
    corpus = tmp_path / "bad.xml"
    corpus.write_text("<corpus><page><id>1</id><text>x</text></page></corpus>", encoding="utf-8")

    assert indexer.main([str(corpus), *index_paths]) == 1
    assert capsys.readouterr().out.startswith("Error:")


def test_query_wrong_arguments(capsys):
    assert searcher.main(["--pagerank", "t", "d"]) == 1
    assert capsys.readouterr().out.startswith("Usage:")


def test_query_missing_index(tmp_path, capsys):
    assert searcher.main([str(tmp_path / "t"), str(tmp_path / "d"), str(tmp_path / "w")]) == 1
    assert "One (or more) of the files were not found" in capsys.readouterr().out


def test_index_then_query(corpus_file, index_paths, monkeypatch, capsys, offline_processor):
    assert indexer.main([corpus_file, *index_paths]) == 0
    capsys.readouterr()

    monkeypatch.setattr("sys.stdin", io.StringIO("cats\ncreatures\nzebra\n:quit\n"))
    assert searcher.main(index_paths) == 0

    out = capsys.readouterr().out
    assert "search> \t1 Cats\n\t2 Dogs\n" in out
    assert "search> \t1 Animals\n" in out
    assert "search> No Results\n" in out


def test_query_with_pagerank(corpus_file, index_paths, monkeypatch, capsys, offline_processor):
    assert main.main(["index", corpus_file, *index_paths]) == 0
    monkeypatch.setattr("sys.stdin", io.StringIO("animals\n"))

    assert main.main(["query", "--pagerank", *index_paths]) == 0
    assert "\t1 " in capsys.readouterr().out


def test_main_unknown_command(capsys):
    assert main.main(["serve"]) == 1
    assert capsys.readouterr().out.startswith("Usage:")


def test_index_truncated_corpus_writes_nothing(tmp_path, index_paths, capsys, offline_processor):
    corpus = tmp_path / "cut.xml"
    corpus.write_text("<corpus><page><id>1</id><title>A</title><text>alpha [[A", encoding="utf-8")

    assert indexer.main([str(corpus), *index_paths]) == 1
    assert capsys.readouterr().out.startswith("Error:")
    assert not any(os.path.exists(p) for p in index_paths)


def test_index_unwritable_output(tmp_path, corpus_file, capsys, offline_processor):
    outputs = [str(tmp_path / "missing" / name) for name in ("t", "d", "w")]

    assert indexer.main([corpus_file, *outputs]) == 1
    assert "Error: IO Exception" in capsys.readouterr().out
    assert sorted(os.listdir(tmp_path)) == ["corpus.xml"]


def test_query_malformed_index(corpus_file, index_paths, capsys, offline_processor):
    assert indexer.main([corpus_file, *index_paths]) == 0
    with open(index_paths[2], "w", encoding="utf-8") as fh:
        fh.write("garbage\n")
    capsys.readouterr()

    assert searcher.main(index_paths) == 1
    assert "Error: malformed index file" in capsys.readouterr().out
