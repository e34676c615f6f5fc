#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Author: dirtsim contributors
#

"""
Stage 5: final similarity of every test pair occurrence.

Contributions are grouped by partition_of(pair key), so that one reducer
call sees a whole partition and can also emit, with similarity 0.0, the
test pairs of that partition that got no contribution at all. The driver
feeds one marker record (null key, partition number) per partition, which
guarantees that every partition is reduced exactly once.

Output lines (pred1, pred2, similarity, label), in the test files' own
orientation and multiplicity:
X control Y	X treat Y	0.412345	1
"""

from mrjob.job import MRJob
from mrjob.protocol import JSONProtocol, RawValueProtocol
from mrjob.step import MRStep

from dirtsim.dirtutils import *
from dirtsim.testpairs import PairTable


def similarity(numerator, denom1, denom2):
    denom = denom1 + denom2
    if denom > 0.0:
        return numerator / denom
    return 0.0


class MRFinalSimilarity(MRJob):

    INPUT_PROTOCOL = JSONProtocol
    OUTPUT_PROTOCOL = RawValueProtocol

    def configure_args(self):
        super(MRFinalSimilarity, self).configure_args()
        self.add_file_arg("--positive", help="Positive test pair file.")
        self.add_file_arg("--negative", help="Negative test pair file.")
        self.add_file_arg("--denominators",
                          help="Side file of predicate denominators.")
        self.add_passthru_arg("--partitions", type=int, default=1,
                              help="Number of pair key partitions.")

    def mapper_init(self):
        self.pairs = PairTable().load(self.options.positive,
                                      self.options.negative)

    def mapper(self, key, value):
        partitions = self.options.partitions
        if key is None:
            if isinstance(value, int) and 0 <= value < partitions:
                yield value, None
            return
        if not isinstance(value, (int, float)):
            self.increment_counter("stage5", "malformed_record")
            return
        if key not in self.pairs:
            self.increment_counter("stage5", "unknown_pair")
            return
        yield partition_of(key, partitions), [key, value]

    #
    # Pre-sum contributions per pair key within a partition.
    #
    def combiner(self, part, values):
        sums = {}
        marked = False
        for val in values:
            if val is None:
                marked = True
            else:
                sums[val[0]] = sums.get(val[0], 0.0) + val[1]
        for key, total in sums.items():
            yield part, [key, total]
        if marked:
            yield part, None

    def reducer_init(self):
        self.pairs = PairTable().load(self.options.positive,
                                      self.options.negative)
        self.denoms = dict(read_records(self.options.denominators))

    def reducer(self, part, values):
        sums = {}
        for val in values:
            if val is not None:
                sums[val[0]] = sums.get(val[0], 0.0) + val[1]

        for key, numerator in sums.items():
            for line in self.report(key, numerator):
                yield None, line

        # Pairs of this partition without any shared feature.
        partitions = self.options.partitions
        for key in self.pairs.table():
            if key in sums or partition_of(key, partitions) != part:
                continue
            self.increment_counter("stage5", "no_contribution")
            for line in self.report(key, None):
                yield None, line

    #
    # One line per stored occurrence of the pair, each with its own
    # orientation and label.
    #
    def report(self, key, numerator):
        for p1, p2, label in self.pairs.entries(key):
            sim = 0.0
            if numerator is not None:
                sim = similarity(numerator, self.denoms.get(p1, 0.0),
                                 self.denoms.get(p2, 0.0))
            yield SIMFORMAT % (p1, p2, sim, label)

    def steps(self):
        return [MRStep(mapper_init=self.mapper_init,
                       mapper=self.mapper,
                       combiner=self.combiner,
                       reducer_init=self.reducer_init,
                       reducer=self.reducer)]


if __name__ == "__main__":
    MRFinalSimilarity.run()
