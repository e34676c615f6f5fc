import pytest

from conftest import run_inline

from dirtsim.dirtutils import canonical_pair_key
from dirtsim.intersection import MRIntersectionContrib, feature_contributions

CONTROL = "X control Y"
TREAT = "X treat Y"
PREVENT = "X prevent Y"
KILL = "X kill Y"


def test_feature_contributions_only_for_allowed_pairs():
    allowed = set([canonical_pair_key(CONTROL, TREAT)])
    out = list(feature_contributions([(TREAT, 1.0), (CONTROL, 2.0),
                                      (PREVENT, 3.0)], allowed))
    assert out == [(canonical_pair_key(CONTROL, TREAT), 3.0)]


def test_feature_contributions_skip_self_pairs():
    allowed = set([canonical_pair_key(CONTROL, CONTROL),
                   canonical_pair_key(CONTROL, TREAT)])
    out = list(feature_contributions([(CONTROL, 2.0), (CONTROL, 2.0),
                                      (TREAT, 1.0)], allowed))
    assert out == [(canonical_pair_key(CONTROL, TREAT), 3.0)]


def test_contributions_are_summed_per_pair(write_side, pair_files):
    mi = write_side("mi", [
        ([CONTROL, "X", "drug"], 2.0),
        ([TREAT, "X", "drug"], 1.0),
        ([PREVENT, "X", "drug"], 3.0),
        ([CONTROL, "Y", "pain"], 0.5),
        ([TREAT, "Y", "pain"], 0.25),
        ([CONTROL, "Y", "fever"], -1.0),
        ([TREAT, "Y", "fever"], 1.0),
        ([KILL, "Y", "germ"], 4.0),
    ])
    pos, neg = pair_files(["%s\t%s" % (TREAT, CONTROL),
                           "%s\t%s" % (CONTROL, TREAT)],
                          ["%s\t%s" % (KILL, CONTROL)])
    out = run_inline(MRIntersectionContrib,
                     ["--positive", pos, "--negative", neg], [mi],
                     reducers=3)

    # drug: 2.0 + 1.0, pain: 0.5 + 0.25; fever has a negative side, and
    # PREVENT is in no test pair. KILL shares nothing with CONTROL.
    assert out == [(canonical_pair_key(CONTROL, TREAT), pytest.approx(3.75))]
