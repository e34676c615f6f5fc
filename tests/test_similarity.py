import pytest

from conftest import run_inline

from dirtsim.dirtutils import canonical_pair_key, partition_of
from dirtsim.similarity import MRFinalSimilarity, similarity

CONTROL = "X control Y"
TREAT = "X treat Y"
KILL = "X kill Y"
PREVENT = "X prevent Y"

POSITIVE = ["%s\t%s" % (CONTROL, TREAT),
            "%s\t%s" % (TREAT, CONTROL),
            "%s\t%s" % (CONTROL, TREAT),
            "%s\t%s" % (PREVENT, KILL)]
NEGATIVE = ["%s\t%s" % (CONTROL, KILL),
            "%s X treat Y" % KILL]


def test_similarity_formula():
    assert similarity(3.75, 5.0, 2.5) == pytest.approx(0.5)
    assert similarity(3.75, 0.0, 0.0) == 0.0


def stage5_inputs(write_side, pair_files, partitions):
    contrib = write_side("contrib", [
        (canonical_pair_key(CONTROL, TREAT), 3.75),
        (canonical_pair_key("X a Y", "X b Y"), 1.0),
    ])
    buckets = write_side("buckets", [(None, b) for b in range(partitions)])
    denoms = write_side("denoms", [(CONTROL, 5.0), (TREAT, 2.5), (KILL, 1.0)])
    pos, neg = pair_files(POSITIVE, NEGATIVE)
    args = ["--positive", pos, "--negative", neg, "--denominators", denoms,
            "--partitions", str(partitions)]
    return args, [contrib, buckets]


EXPECTED = sorted([
    "%s\t%s\t0.500000\t1" % (CONTROL, TREAT),
    "%s\t%s\t0.500000\t1" % (TREAT, CONTROL),
    "%s\t%s\t0.500000\t1" % (CONTROL, TREAT),
    "%s\t%s\t0.000000\t1" % (PREVENT, KILL),
    "%s\t%s\t0.000000\t0" % (CONTROL, KILL),
    "%s\t%s\t0.000000\t0" % (KILL, TREAT),
])


@pytest.mark.parametrize("partitions", [1, 2, 5])
def test_every_test_line_is_reported_once(write_side, pair_files, partitions):
    args, inputs = stage5_inputs(write_side, pair_files, partitions)
    out = run_inline(MRFinalSimilarity, args, inputs, reducers=partitions)
    assert sorted(line.rstrip("\n") for _, line in out) == EXPECTED


def test_partition_reducers_split_the_work(write_side, pair_files):
    partitions = 3
    args, _ = stage5_inputs(write_side, pair_files, partitions)
    job = MRFinalSimilarity(args)
    job.mapper_init()
    job.reducer_init()

    key = canonical_pair_key(CONTROL, TREAT)
    mapped = list(job.mapper(key, 2.0)) + list(job.mapper(key, 1.75)) + \
        list(job.mapper(canonical_pair_key("X a Y", "X b Y"), 1.0))
    assert [part for part, _ in mapped] == [partition_of(key, partitions)] * 2

    lines = []
    for part in range(partitions):
        values = [val for p, val in mapped if p == part] + [None]
        combined = list(job.combiner(part, values))
        lines.extend(line for _, line in
                     job.reducer(part, [val for _, val in combined]))
    assert sorted(lines) == EXPECTED


def test_bucket_markers_out_of_range_are_ignored(write_side, pair_files):
    args, _ = stage5_inputs(write_side, pair_files, 2)
    job = MRFinalSimilarity(args)
    job.mapper_init()
    assert list(job.mapper(None, 0)) == [(0, None)]
    assert list(job.mapper(None, 7)) == []
