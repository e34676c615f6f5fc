#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Author: dirtsim contributors
#

"""
Stage 1: extract predicate instances from biarcs lines and count them at
four granularities in a single pass.

Output records (JSON key, count):
["PSW", "X control Y", "X", "drug"]   10
["PS", "X control Y", "X"]            10
["SW", "X", "drug"]                   10
["SLOT", "X"]                         10
"""

from mrjob.job import MRJob
from mrjob.step import MRStep

from dirtsim.biarcs import parse_line, line_to_predicate
from dirtsim.dirtutils import *


#
# The four keyed increments of one slot filler.
#
def slot_records(pred, slot, word, cnt):
    yield [PSW, pred, slot, word], cnt
    yield [PS, pred, slot], cnt
    yield [SW, slot, word], cnt
    yield [SLOT, slot], cnt


class MRExtractCounts(MRJob):

    def mapper_init(self):
        self.stem = make_stemmer()

    def mapper(self, _, line):
        parsed = parse_line(line)
        if parsed is None:
            if line.strip():
                self.increment_counter("stage1", "malformed_line")
            return
        if parsed.count <= 0:
            return

        inst = line_to_predicate(parsed, self.stem)
        if inst is None:
            self.increment_counter("stage1", "no_predicate")
            return

        self.increment_counter("stage1", "predicate_instance")
        if inst.x_word:
            for rec in slot_records(inst.template, SLOTX, inst.x_word,
                                    parsed.count):
                yield rec
        if inst.y_word:
            for rec in slot_records(inst.template, SLOTY, inst.y_word,
                                    parsed.count):
                yield rec

    #
    # Associative sum, used both as combiner and reducer.
    #
    def sum_counts(self, key, counts):
        yield key, sum(counts)

    def steps(self):
        return [MRStep(mapper_init=self.mapper_init,
                       mapper=self.mapper,
                       combiner=self.sum_counts,
                       reducer=self.sum_counts)]


if __name__ == "__main__":
    MRExtractCounts.run()
