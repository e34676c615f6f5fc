#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Author: dirtsim contributors
#
# Runs the five DIRT stages, one after the other, each on the complete
# output of the previous one:
#
#   1. biarcs          -> step1_counts  (PSW/PS/SW/SLOT counts)
#   2. step1_counts    -> step2_mi      (MI per pred, slot, word)
#   3. step2_mi        -> step3_denom   (denominator per test predicate)
#   4. step2_mi        -> step4_pairs   (shared-feature contribution per pair)
#   5. step4_pairs     -> step5_final   (similarity and label per test line)
#
# Stage directories are created by the runner under the work dir, which
# must be an hdfs:// or s3:// URI on cluster runners. Small tables are
# passed to the tasks as local side files, written under <work-dir>/side
# (or --side-dir) between stages:
#
#   totals        SLOT totals and PS totals of the test predicates
#   denominators  stage 3 output
#   buckets       one marker per stage 5 partition
#
# Exit codes: 0 success, 1 usage error, 2-6 failure of stage 1-5.
#

import os
import sys
import tempfile
import time

from mrjob.parse import is_uri
from mrjob.step import StepFailedException

from dirtsim.counts import MRExtractCounts
from dirtsim.denominator import MRComputeDenominator
from dirtsim.dirtutils import *
from dirtsim.intersection import MRIntersectionContrib
from dirtsim.mutualinfo import MRComputeMI, load_totals
from dirtsim.similarity import MRFinalSimilarity
from dirtsim.testpairs import PairTable

USAGE = "%prog [options] --positive FILE --negative FILE --work-dir DIR " \
        "INPUT [INPUT ...]"

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_STAGE1 = 2

# Runners whose output directories are not on the local filesystem.
CLUSTER_RUNNERS = ("hadoop", "emr", "dataproc")


class DirtPipeline(object):

    def __init__(self, runner="local", mrjob_args=None, verbose=True,
                 side_dir=None):
        self._runner = runner
        self._mrjob_args = list(mrjob_args or [])
        self._verbose = verbose
        self._side_dir = side_dir
        self.final_dir = None


    def log(self, msg):
        if self._verbose:
            print(msg, file=sys.stderr)


    #
    # Split comma-separated input lists, dropping empty entries.
    #
    @staticmethod
    def expand_inputs(input_paths):
        paths = []
        for arg in input_paths:
            for path in arg.split(","):
                path = path.strip()
                if path:
                    paths.append(path)
        return paths


    #
    # Stage directories live wherever the runner writes (local, HDFS, S3).
    #
    @staticmethod
    def stage_dirs(work_dir):
        if is_uri(work_dir):
            return [work_dir.rstrip("/") + "/" + d for d in STAGEDIRS]
        return [os.path.join(work_dir, d) for d in STAGEDIRS]


    #
    # Side files are always local: they are uploaded to the tasks by mrjob.
    #
    def side_dir_for(self, work_dir):
        if self._side_dir:
            return self._side_dir
        if is_uri(work_dir):
            return tempfile.mkdtemp(prefix="dirtsim-side-")
        return os.path.join(work_dir, SIDEDIR)


    #
    # Delete stale stage directories through the runner's filesystem, so
    # that HDFS and S3 work dirs are cleaned the same way as local ones.
    #
    def remove_outdirs(self, outdirs):
        job = MRExtractCounts(["-r", self._runner] + self._mrjob_args)
        with job.make_runner() as runner:
            for d in outdirs:
                if runner.fs.exists(d):
                    self.log("Removing stale %s" % d)
                    runner.fs.rm(d)


    #
    # Run one mrjob job to completion, writing to outdir. keep, if given,
    # consumes the parsed output while the runner is still open.
    #
    def run_job(self, job_class, args, inputs, outdir, reducers, keep=None):
        argv = ["-r", self._runner, "--output-dir", outdir,
                "--jobconf", "mapreduce.job.reduces=%d" % reducers] + \
               self._mrjob_args + list(args) + list(inputs)
        job = job_class(argv)
        result = None
        with job.make_runner() as runner:
            runner.run()
            if keep is not None:
                result = keep(job.parse_output(runner.cat_output()))
        return result


    #
    # Full pipeline. Returns an exit code. An evaluator, if given, receives
    # every final report line as stage 5 output is read back.
    #
    def run(self, input_paths, work_dir, positive, negative, parallelism,
            evaluator=None):
        inputs = self.expand_inputs(input_paths)
        if not inputs:
            print("ERROR: empty input", file=sys.stderr)
            return EXIT_USAGE
        try:
            reducers = int(parallelism)
        except (TypeError, ValueError):
            print("ERROR: reducers must be an integer, but got: %s"
                  % parallelism, file=sys.stderr)
            return EXIT_USAGE
        if reducers < 1:
            print("ERROR: reducers must be positive", file=sys.stderr)
            return EXIT_USAGE
        if self._runner in CLUSTER_RUNNERS and not is_uri(work_dir):
            print("ERROR: runner %s needs a work dir URI (hdfs:// or s3://), "
                  "but got: %s" % (self._runner, work_dir), file=sys.stderr)
            return EXIT_USAGE

        t0 = time.time()
        outdirs = self.stage_dirs(work_dir)
        try:
            self.remove_outdirs(outdirs)
            sidedir = self.side_dir_for(work_dir)
            if not os.path.isdir(sidedir):
                os.makedirs(sidedir)
        except (IOError, OSError) as e:
            print("ERROR: cannot prepare %s: %s" % (work_dir, e),
                  file=sys.stderr)
            return EXIT_STAGE1
        totals_file = os.path.join(sidedir, "totals")
        denoms_file = os.path.join(sidedir, "denominators")
        buckets_file = os.path.join(sidedir, "buckets")

        try:
            pairs = PairTable().load(positive, negative)
        except (IOError, OSError) as e:
            print("ERROR: cannot read test pairs: %s" % e, file=sys.stderr)
            return EXIT_STAGE1
        if self._verbose:
            pairs.describe()
        write_records(buckets_file, [(None, b) for b in range(reducers)])
        testargs = ["--positive", positive, "--negative", negative]
        out1, out2, out3, out4, out5 = outdirs

        def keep_totals(records):
            ps_cnt, slot_cnt = load_totals(records, pairs.predicates())
            write_records(totals_file,
                          [([SLOT, s], c) for s, c in sorted(slot_cnt.items())] +
                          [([PS, p, s], c) for (p, s), c in
                           sorted(ps_cnt.items())])
            return len(ps_cnt)

        def keep_denoms(records):
            denoms = list(records)
            write_records(denoms_file, denoms)
            return len(denoms)

        def keep_final(records):
            lines = 0
            for _, line in records:
                evaluator.add_line(line)
                lines += 1
            return lines

        stages = [
            ("extract and aggregate counts", MRExtractCounts, [],
             inputs, out1, keep_totals),
            ("mutual information", MRComputeMI,
             testargs + ["--totals", totals_file], [out1], out2, None),
            ("denominators", MRComputeDenominator, testargs,
             [out2], out3, keep_denoms),
            ("intersection contributions", MRIntersectionContrib, testargs,
             [out2], out4, None),
            ("final similarity", MRFinalSimilarity,
             testargs + ["--denominators", denoms_file,
                         "--partitions", str(reducers)],
             [out4, buckets_file], out5,
             keep_final if evaluator is not None else None),
        ]

        for num, (name, job_class, args, stage_inputs, outdir, keep) in \
                enumerate(stages, 1):
            self.log("Running stage %d: %s..." % (num, name))
            t1 = time.time()
            try:
                kept = self.run_job(job_class, args, stage_inputs, outdir,
                                    reducers, keep)
            except (StepFailedException, IOError, OSError) as e:
                print("ERROR: stage %d (%s) failed: %s" % (num, name, e),
                      file=sys.stderr)
                return EXIT_STAGE1 + num - 1
            if kept is not None:
                self.log("# records kept: %d" % kept)
            self.log("Done in %s sec." % (time.time()-t1))

        self.final_dir = out5
        self.log("DONE. Final output at: %s (%s sec.)"
                 % (out5, time.time()-t0))
        return EXIT_OK


if __name__ == "__main__":

    from optparse import OptionParser

    parser = OptionParser(usage=USAGE)
    parser.add_option("--positive", dest="positive", default="", help='Positive test pair file.')
    parser.add_option("--negative", dest="negative", default="", help='Negative test pair file.')
    parser.add_option("--work-dir", dest="workdir", default="dirt-work", help='Working directory; its stage sub-directories are deleted first. Default=\'dirt-work\'.')
    parser.add_option("--reducers", dest="reducers", default="1", help='Number of reduce tasks per stage, also the number of final partitions. Default=1.')
    parser.add_option("--runner", dest="runner", default="local", help='mrjob runner: inline, local, hadoop or emr. Default=\'local\'.')
    parser.add_option("--mrjob-arg", dest="mrjobargs", action="append", default=[], help='Extra argument handed to every mrjob job (repeatable), e.g. --mrjob-arg=--conf-path=mrjob.conf.')
    parser.add_option("--evaluate", dest="evaluate", action="store_true", default=False, help='Print an evaluation of the final report against its labels.')
    parser.add_option("--side-dir", dest="sidedir", default=None, help='Local directory for side files. Default: <work-dir>/side, or a temporary directory when the work dir is a URI.')
    parser.add_option("--quiet", dest="quiet", action="store_true", default=False, help='Do not report progress on stderr.')
    (opts, args) = parser.parse_args()

    if not (args and opts.positive and opts.negative):
        parser.print_usage(sys.stderr)
        sys.exit(EXIT_USAGE)

    evaluator = None
    if opts.evaluate:
        from dirtsim.evaluation import SimilarityEvaluator
        evaluator = SimilarityEvaluator()

    pipeline = DirtPipeline(runner=opts.runner, mrjob_args=opts.mrjobargs,
                            verbose=not opts.quiet, side_dir=opts.sidedir)
    code = pipeline.run(args, opts.workdir, opts.positive, opts.negative,
                        opts.reducers, evaluator=evaluator)
    if code == EXIT_OK and evaluator is not None:
        evaluator.report()
    sys.exit(code)
