#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Author: dirtsim contributors
#
# Evaluates a final similarity report against the labels it carries.
#
# Report example line:
# X control Y	X treat Y	0.412345	1
#
# Prints the coverage of test predicates (share of distinct predicates with
# a non-zero similarity in at least one pair) and of pairs, precision, recall
# and F1 at a fixed threshold, the best-F1 threshold, and the ROC AUC of the
# similarity as a ranker of positive over negative pairs.
#

import codecs
import os
import sys

import numpy as np
from scipy import stats

from dirtsim.dirtutils import *


class SimilarityEvaluator(object):

    def __init__(self):
        self._scores = []
        self._labels = []
        self._skipped = 0
        self._covered = {} # predicate -> seen with a non-zero similarity


    #
    # Read every part file of a final output directory.
    #
    def load_dir(self, outdir):
        for name in sorted(os.listdir(outdir)):
            if name.startswith("_") or name.startswith("."):
                continue
            self.load_file(os.path.join(outdir, name))
        return self


    def load_file(self, path):
        f = codecs.open(path, "r", ENCODING)
        for line in f:
            self.add_line(line)
        f.close()
        return self


    def add_line(self, line):
        cols = line.rstrip("\r\n").split("\t")
        if len(cols) < 4:
            if line.strip():
                self._skipped += 1
            return
        try:
            score = float(cols[2])
            label = int(cols[3])
        except ValueError:
            self._skipped += 1
            return
        self._scores.append(score)
        self._labels.append(label)
        for pred in cols[:2]:
            self._covered[pred] = self._covered.get(pred, False) or score > 0.0


    def scores(self):
        return np.array(self._scores, dtype=float)

    def labels(self):
        return np.array(self._labels, dtype=int)

    def __len__(self):
        return len(self._scores)


    #
    # Share of pairs with a non-zero similarity.
    #
    def coverage(self):
        if not self._scores:
            return 0.0
        return float(np.mean(self.scores() > 0.0))


    #
    # Share of test predicates taking part in at least one pair with a
    # non-zero similarity.
    #
    def predicate_coverage(self):
        if not self._covered:
            return 0.0
        return sum(self._covered.values()) / float(len(self._covered))


    #
    # Precision, recall and F1 when pairs scoring >= threshold are predicted
    # positive.
    #
    def prf(self, threshold):
        pred = self.scores() >= threshold
        gold = self.labels() == 1
        tp = float(np.sum(pred & gold))
        fp = float(np.sum(pred & ~gold))
        fn = float(np.sum(~pred & gold))
        prec = tp / (tp + fp) if tp + fp > 0 else 0.0
        rec = tp / (tp + fn) if tp + fn > 0 else 0.0
        f1 = 2 * prec * rec / (prec + rec) if prec + rec > 0 else 0.0
        return prec, rec, f1


    #
    # Sweep every distinct score as a threshold. Returns (threshold,
    # precision, recall, f1) with the highest F1, ties to the higher
    # threshold.
    #
    def best_threshold(self):
        scores = self.scores()
        if len(scores) == 0:
            return 0.0, 0.0, 0.0, 0.0
        gold = self.labels() == 1
        order = np.argsort(-scores, kind="mergesort")
        sscores = scores[order]
        tp = np.cumsum(gold[order])
        predicted = np.arange(1, len(scores)+1)
        # Only the last position of a run of equal scores is a real cut.
        cuts = np.append(sscores[1:] != sscores[:-1], True)
        tp, predicted, sscores = tp[cuts], predicted[cuts], sscores[cuts]

        npos = gold.sum()
        prec = tp / predicted.astype(float)
        rec = tp / float(npos) if npos > 0 else np.zeros(len(tp))
        with np.errstate(divide="ignore", invalid="ignore"):
            f1 = np.where(prec + rec > 0, 2 * prec * rec / (prec + rec), 0.0)
        best = int(np.argmax(f1))
        return float(sscores[best]), float(prec[best]), float(rec[best]), \
               float(f1[best])


    #
    # ROC AUC, i.e. the normalized Mann-Whitney U of positive over negative
    # scores (ties count one half). None without both classes.
    #
    def auc(self):
        scores = self.scores()
        gold = self.labels() == 1
        npos = int(gold.sum())
        nneg = len(scores) - npos
        if npos == 0 or nneg == 0:
            return None
        ranks = stats.rankdata(scores)
        u = ranks[gold].sum() - npos * (npos + 1) / 2.0
        return float(u / (npos * nneg))


    def report(self, threshold=None, outstream=sys.stdout):
        labels = self.labels()
        print("# pairs: %d (%d positive, %d negative, %d skipped)"
              % (len(self), int(np.sum(labels == 1)),
                 int(np.sum(labels == 0)), self._skipped), file=outstream)
        print("predicate coverage\t%.4f\t(%d predicates)"
              % (self.predicate_coverage(), len(self._covered)),
              file=outstream)
        print("pair coverage\t%.4f" % self.coverage(), file=outstream)
        if threshold is not None:
            print("P/R/F1@%g\t%.4f\t%.4f\t%.4f"
                  % ((threshold,) + self.prf(threshold)), file=outstream)
        thr, prec, rec, f1 = self.best_threshold()
        print("best F1\t%.4f\t(threshold %.6f, P %.4f, R %.4f)"
              % (f1, thr, prec, rec), file=outstream)
        auc = self.auc()
        print("AUC\t%s" % ("n/a" if auc is None else "%.4f" % auc),
              file=outstream)


if __name__ == "__main__":

    from optparse import OptionParser

    parser = OptionParser(usage="%prog [options] FINAL_OUTPUT [...]")
    parser.add_option("--threshold", dest="threshold", default=None, help='Also report precision, recall and F1 at this similarity threshold.')
    (opts, args) = parser.parse_args()

    evaluator = SimilarityEvaluator()
    for path in args:
        if os.path.isdir(path):
            evaluator.load_dir(path)
        else:
            evaluator.load_file(path)
    thr = float(opts.threshold) if opts.threshold is not None else None
    evaluator.report(threshold=thr)
