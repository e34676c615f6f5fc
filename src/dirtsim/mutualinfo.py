#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Author: dirtsim contributors
#

"""
Stage 2: pointwise mutual information of each (pred, slot, word) triple.

The PS and SLOT totals are small once PS is restricted to the test
predicates, so they are loaded into every task from the totals side file.
Only PSW and SW go through the shuffle, grouped by the feature (slot, word):

["X", "drug"]   ["S", 20]
["X", "drug"]   ["P", "X control Y", 10, 50]

Output records:
["X control Y", "X", "drug"]   2.302585...
"""

from math import log

from mrjob.job import MRJob
from mrjob.protocol import JSONProtocol
from mrjob.step import MRStep

from dirtsim.dirtutils import *
from dirtsim.testpairs import PairTable


#
# mi = ln((C(p,s,w) * C(s)) / (C(p,s) * C(s,w))), None unless every count is
# strictly positive.
#
def pmi(cpsw, cps, csw, cslot):
    if cpsw <= 0 or cps <= 0 or csw <= 0 or cslot <= 0:
        return None
    return log(float(cpsw * cslot) / (cps * csw))


#
# Read the PS (restricted to preds, when given) and SLOT totals from stage 1
# style records.
#
def load_totals(records, preds=None):
    ps_cnt = {} # (pred, slot) -> count
    slot_cnt = {} # slot -> count
    for key, cnt in records:
        if not isinstance(key, list) or not key:
            continue
        if key[0] == SLOT and len(key) == FAMILIES[SLOT]:
            slot_cnt[key[1]] = cnt
        elif key[0] == PS and len(key) == FAMILIES[PS]:
            if preds is None or key[1] in preds:
                ps_cnt[(key[1], key[2])] = cnt
    return ps_cnt, slot_cnt


class MRComputeMI(MRJob):

    INPUT_PROTOCOL = JSONProtocol

    def configure_args(self):
        super(MRComputeMI, self).configure_args()
        self.add_file_arg("--positive", help="Positive test pair file.")
        self.add_file_arg("--negative", help="Negative test pair file.")
        self.add_file_arg("--totals",
                          help="Side file of SLOT and PS totals from stage 1.")

    def mapper_init(self):
        self.test_preds = PairTable().load(self.options.positive,
                                           self.options.negative).predicates()
        self.ps_cnt, _ = load_totals(read_records(self.options.totals),
                                     self.test_preds)

    def mapper(self, key, cnt):
        if not isinstance(key, list) or not key or not isinstance(cnt, int):
            self.increment_counter("stage2", "malformed_record")
            return

        if key[0] == SW and len(key) == FAMILIES[SW]:
            _, slot, word = key
            yield [slot, word], [TAG_SW, cnt]

        elif key[0] == PSW and len(key) == FAMILIES[PSW]:
            _, pred, slot, word = key
            if pred not in self.test_preds or cnt <= 0:
                return
            cps = self.ps_cnt.get((pred, slot), 0)
            if cps <= 0:
                self.increment_counter("stage2", "missing_ps_total")
                return
            yield [slot, word], [TAG_PRED, pred, cnt, cps]

    def reducer_init(self):
        _, self.slot_cnt = load_totals(read_records(self.options.totals))

    def reducer(self, feature, values):
        slot, word = feature
        csw = None
        triples = [] # (pred, cpsw, cps)
        for val in values:
            if val[0] == TAG_SW:
                csw = val[1]
            elif val[0] == TAG_PRED and len(val) == 4:
                triples.append(tuple(val[1:]))

        if csw is None:
            self.increment_counter("stage2", "missing_sw_total")
            return
        cslot = self.slot_cnt.get(slot, 0)

        for pred, cpsw, cps in triples:
            mi = pmi(cpsw, cps, csw, cslot)
            if mi is not None:
                yield [pred, slot, word], mi

    def steps(self):
        return [MRStep(mapper_init=self.mapper_init,
                       mapper=self.mapper,
                       reducer_init=self.reducer_init,
                       reducer=self.reducer)]


if __name__ == "__main__":
    MRComputeMI.run()
