import glob
import os

import dirtsim


def test_modules_carry_source_header():
    pkgdir = os.path.dirname(dirtsim.__file__)
    for path in glob.glob(os.path.join(pkgdir, "*.py")):
        if os.path.basename(path) == "__init__.py":
            continue
        with open(path, encoding="utf-8") as f:
            head = [f.readline() for _ in range(4)]
        assert head[0] == "#!/usr/bin/env python\n", path
        assert head[1] == "# -*- coding: utf-8 -*-\n", path
        assert head[3].startswith("# Author:"), path


def test_stage_modules_have_docstrings():
    from dirtsim import (biarcs, counts, denominator, intersection,
                         mutualinfo, similarity, testpairs, dirtutils)
    for mod in (biarcs, counts, denominator, intersection, mutualinfo,
                similarity, testpairs, dirtutils):
        assert mod.__doc__ and mod.__doc__.strip(), mod.__name__
