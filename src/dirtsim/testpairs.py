#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Author: dirtsim contributors
#

"""
Test pair module. Reads the positive and negative predicate pair files and
exposes the three views the stages need: the set of test predicates, the
set of canonical pair keys, and the full pair table keyed by canonical key
(duplicates and orientation preserved).
"""

import codecs
import os
import sys

from dirtsim.dirtutils import *

POSITIVE = 1
NEGATIVE = 0


#
# Label implied by a file name, or default when the name says nothing.
#
def label_from_name(path, default):
    name = os.path.basename(path).lower()
    if "positive" in name:
        return POSITIVE
    if "negative" in name:
        return NEGATIVE
    return default


#
# Re-template a raw predicate the way the extractor builds templates:
# stem the verb (second token), keep X/Y, lower-case the rest.
#
def normalize_predicate(pred, stem):
    toks = pred.split()
    if len(toks) < 3:
        return " ".join(toks)
    out = [SLOTX, stem(toks[1])]
    for tok in toks[2:]:
        out.append(SLOTY if tok == SLOTY else tok.lower())
    return " ".join(out)


#
# Parse one pair line. Either tab-separated (first two columns are the
# predicates) or space-separated "X ... Y X ... Y [score] [label]", where
# the second Y closes the second predicate. Returns (p1, p2) or None.
#
def parse_pair_line(line, stem):
    line = line.strip()
    if not line:
        return None

    if "\t" in line:
        cols = line.split("\t")
        if len(cols) < 2 or not cols[0].strip() or not cols[1].strip():
            return None
        return normalize_predicate(cols[0], stem), \
               normalize_predicate(cols[1], stem)

    toks = line.split()
    ys = [i for i, tok in enumerate(toks) if tok == SLOTY]
    if len(ys) < 2:
        return None
    y1, y2 = ys[0], ys[1]
    return normalize_predicate(" ".join(toks[:y1+1]), stem), \
           normalize_predicate(" ".join(toks[y1+1:y2+1]), stem)


class PairTable(object):

    def __init__(self, stem=None):
        self._stem = stem or make_stemmer()
        self._pairs = {} # canonical key -> [(p1, p2, label), ...]
        self._preds = set()
        self._numpairs = 0
        self._skipped = 0


    #
    # Read the positive and negative files. The label comes from the file
    # name when it mentions positive/negative, else from its role.
    #
    def load(self, positive, negative):
        for path, role in ((positive, POSITIVE), (negative, NEGATIVE)):
            if path:
                self.load_file(path, label_from_name(path, role))
        return self


    def load_file(self, path, label):
        f = codecs.open(path, "r", ENCODING)
        for line in f:
            pair = parse_pair_line(line, self._stem)
            if pair is None:
                if line.strip():
                    self._skipped += 1
                continue
            self.add(pair[0], pair[1], label)
        f.close()


    def add(self, p1, p2, label):
        key = canonical_pair_key(p1, p2)
        self._pairs.setdefault(key, []).append((p1, p2, label))
        self._preds.add(p1)
        self._preds.add(p2)
        self._numpairs += 1


    #
    # Views used as broadcast tables.
    #
    def predicates(self):
        return self._preds

    def pair_keys(self):
        return set(self._pairs)

    def entries(self, key):
        return self._pairs.get(key, [])

    def table(self):
        return self._pairs

    def __contains__(self, key):
        return key in self._pairs

    def __len__(self):
        return self._numpairs

    def skipped(self):
        return self._skipped


    def describe(self, outstream=sys.stderr):
        print("# test pairs: %d (%d distinct, %d predicates, %d skipped)"
              % (self._numpairs, len(self._pairs), len(self._preds),
                 self._skipped), file=outstream)
