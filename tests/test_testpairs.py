from dirtsim.dirtutils import canonical_pair_key
from dirtsim.testpairs import *


def test_normalize_predicate(stem):
    assert normalize_predicate("X controls Y", stem) == "X control Y"
    assert normalize_predicate("X  Provides FROM Y ", stem) == "X provid from Y"
    assert normalize_predicate("X Y", stem) == "X Y"


def test_parse_tab_line(stem):
    assert parse_pair_line("X control Y\tX treats Y\t1\n", stem) == \
        ("X control Y", "X treat Y")
    assert parse_pair_line("X control Y\t\n", stem) is None


def test_parse_space_line(stem):
    line = "X provides from Y X controls Y 0.35 1"
    assert parse_pair_line(line, stem) == ("X provid from Y", "X control Y")
    assert parse_pair_line("X control Y X treat", stem) is None
    assert parse_pair_line("   ", stem) is None


def test_label_from_name():
    assert label_from_name("/data/positive-preds.txt", NEGATIVE) == POSITIVE
    assert label_from_name("/data/Negative.txt", POSITIVE) == NEGATIVE
    assert label_from_name("/data/pairs.txt", POSITIVE) == POSITIVE


def test_table_keeps_duplicates_and_orientation(pair_files):
    pos, neg = pair_files(["X control Y\tX treat Y",
                           "X treat Y\tX control Y",
                           "X control Y\tX treat Y",
                           "broken line"],
                          ["X control Y\tX kill Y"])
    pairs = PairTable().load(pos, neg)

    key = canonical_pair_key("X control Y", "X treat Y")
    assert pairs.entries(key) == [("X control Y", "X treat Y", 1),
                                  ("X treat Y", "X control Y", 1),
                                  ("X control Y", "X treat Y", 1)]
    assert len(pairs) == 4
    assert pairs.skipped() == 1
    assert pairs.pair_keys() == {key, canonical_pair_key("X kill Y",
                                                         "X control Y")}
    assert pairs.predicates() == {"X control Y", "X treat Y", "X kill Y"}
    assert canonical_pair_key("X kill Y", "X control Y") in pairs
    assert pairs.entries(canonical_pair_key("X a Y", "X b Y")) == []


def test_label_follows_file_role(write_lines):
    pos = write_lines("gold_a.txt", ["X control Y\tX treat Y"])
    neg = write_lines("gold_b.txt", ["X control Y\tX kill Y"])
    pairs = PairTable().load(pos, neg)
    labels = sorted(label for entries in pairs.table().values()
                    for _, _, label in entries)
    assert labels == [NEGATIVE, POSITIVE]
