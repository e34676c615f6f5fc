#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Author: dirtsim contributors
#

"""
Stage 3: normalization denominator of each test predicate, the sum of its
strictly positive MI values.

Output records:
"X control Y"   17.42...
"""

from mrjob.job import MRJob
from mrjob.protocol import JSONProtocol
from mrjob.step import MRStep

from dirtsim.testpairs import PairTable


class MRComputeDenominator(MRJob):

    INPUT_PROTOCOL = JSONProtocol

    def configure_args(self):
        super(MRComputeDenominator, self).configure_args()
        self.add_file_arg("--positive", help="Positive test pair file.")
        self.add_file_arg("--negative", help="Negative test pair file.")

    def mapper_init(self):
        self.test_preds = PairTable().load(self.options.positive,
                                           self.options.negative).predicates()

    def mapper(self, key, mi):
        if not isinstance(key, list) or len(key) != 3 or \
               not isinstance(mi, (int, float)):
            self.increment_counter("stage3", "malformed_record")
            return
        pred = key[0]
        if mi > 0.0 and pred in self.test_preds:
            yield pred, mi

    def sum_mi(self, pred, mis):
        yield pred, sum(mis)

    def steps(self):
        return [MRStep(mapper_init=self.mapper_init,
                       mapper=self.mapper,
                       combiner=self.sum_mi,
                       reducer=self.sum_mi)]


if __name__ == "__main__":
    MRComputeDenominator.run()
