#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Author: dirtsim contributors
#

"""
Stage 4: shared-feature contributions of test pairs.

Step 1 groups positive MI records by feature (slot, word) and, for every
two distinct predicates sharing the feature whose pair is under test,
emits mi(p1,f) + mi(p2,f). Step 2 sums those per pair:

"X control Y\tX treat Y"   5.81...
"""

from itertools import combinations

from mrjob.job import MRJob
from mrjob.protocol import JSONProtocol
from mrjob.step import MRStep

from dirtsim.dirtutils import *
from dirtsim.testpairs import PairTable


#
# Contributions of one feature's predicate list, restricted to allowed keys.
# A predicate listed twice is only paired with the others once.
#
def feature_contributions(pred_mis, allowed):
    seen = set()
    uniq = []
    for pred, mi in pred_mis:
        if pred not in seen:
            seen.add(pred)
            uniq.append((pred, mi))
    for (p1, mi1), (p2, mi2) in combinations(uniq, 2):
        key = canonical_pair_key(p1, p2)
        if key in allowed:
            yield key, mi1 + mi2


class MRIntersectionContrib(MRJob):

    INPUT_PROTOCOL = JSONProtocol

    def configure_args(self):
        super(MRIntersectionContrib, self).configure_args()
        self.add_file_arg("--positive", help="Positive test pair file.")
        self.add_file_arg("--negative", help="Negative test pair file.")

    def mapper(self, key, mi):
        if not isinstance(key, list) or len(key) != 3 or \
               not isinstance(mi, (int, float)):
            self.increment_counter("stage4", "malformed_record")
            return
        pred, slot, word = key
        if mi > 0.0:
            yield [slot, word], [pred, mi]

    def reducer_init(self):
        self.pair_keys = PairTable().load(self.options.positive,
                                          self.options.negative).pair_keys()

    def reducer(self, feature, values):
        pred_mis = [(pred, mi) for pred, mi in values if mi > 0.0]
        if len(pred_mis) < 2:
            return
        for key, contrib in feature_contributions(pred_mis, self.pair_keys):
            yield key, contrib

    def sum_contributions(self, key, contribs):
        yield key, sum(contribs)

    def steps(self):
        return [MRStep(mapper=self.mapper,
                       reducer_init=self.reducer_init,
                       reducer=self.reducer),
                MRStep(combiner=self.sum_contributions,
                       reducer=self.sum_contributions)]


if __name__ == "__main__":
    MRIntersectionContrib.run()
