#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Author: dirtsim contributors
#

"""
DIRT utility constants, dictionaries, etc.
"""

import re
import zlib

from mrjob.protocol import JSONProtocol
from nltk.stem.porter import PorterStemmer

# Encoding - make common to all modules
ENCODING = "utf-8"

# Argument slots of a predicate template.
SLOTX = "X"
SLOTY = "Y"

# Count record families produced by the extraction stage.
PSW = "PSW" # (pred, slot, word)
PS = "PS" # (pred, slot)
SW = "SW" # (slot, word)
SLOT = "SLOT" # (slot)
FAMILIES = {PSW: 4, PS: 3, SW: 3, SLOT: 2} # family -> key length

# Stage 2 value tags, for the (slot, word) join.
TAG_SW = "S"
TAG_PRED = "P"

# Separator of the two predicates in a canonical pair key.
PAIRSEP = "\t"

# Stop-list of auxiliary, copula and modal verbs.
AUXILIARIES = frozenset(["be", "am", "is", "are", "was", "were", "been",
                         "being", "do", "does", "did", "have", "has", "had",
                         "will", "would", "can", "could", "may", "might",
                         "must", "shall", "should"])

# Dependency labels and POS prefixes used in predicate extraction.
ROOTLAB = "ROOT"
SUBJLABS = ("nsubj", "nsubjpass")
OBJLAB = "dobj"
PREPLAB = "prep"
POBJLABS = ("pobj", "pcomp", "dobj")
PREPPOS = ("IN", "TO")

# Cleaning of templates and argument words.
CLEAN_WORD = re.compile(r"^[A-Za-z](?:[A-Za-z]|['-](?=[A-Za-z]))+$")
TEMPLATE_JUNK = re.compile(r"[^A-Za-zXY_ ]+")
TEMPLATE_ALPHA = re.compile(r"[A-Za-z]{2,}")
SPACES = re.compile(r"\s+")
DIGITS = re.compile(r"^\d+$")

# ** USER MODIFIED ** Porter variant used for verbs, arguments and test pairs.
STEMMER_MODE = PorterStemmer.ORIGINAL_ALGORITHM

# Working sub-directories of the pipeline, in stage order.
STAGEDIRS = ("step1_counts", "step2_mi", "step3_denom", "step4_pairs",
             "step5_final")
SIDEDIR = "side"

# Line format of inter-stage and side files.
RECORDS = JSONProtocol()

# Final report line: pred1, pred2, similarity, label
SIMFORMAT = "%s\t%s\t%.6f\t%d"

#
# FUNCTIONS
#

#
# Build a stem(word) -> str function. Words are lower-cased first.
#
def make_stemmer(mode=None):
    stemmer = PorterStemmer(mode=mode or STEMMER_MODE)

    def stem(word):
        return stemmer.stem(word.lower())
    return stem

#
# Auxiliaries are checked both on the surface form and on the stem, since
# Porter leaves some inflected forms ("was" -> "wa") outside the list.
#
def is_auxiliary(word, stem):
    if not word:
        return False
    low = word.lower()
    return low in AUXILIARIES or stem(low) in AUXILIARIES

def is_clean_word(word):
    if not word:
        return False
    return CLEAN_WORD.match(word.strip()) is not None

#
# Strip a template down to letters, slot markers and spaces. Returns "" when
# nothing meaningful is left.
#
def clean_template(template):
    if not template:
        return ""
    tpl = TEMPLATE_JUNK.sub(" ", template)
    tpl = SPACES.sub(" ", tpl).strip()
    if not TEMPLATE_ALPHA.search(tpl):
        return ""
    return tpl

#
# Order-independent key of a predicate pair.
#
def canonical_pair_key(a, b):
    if a <= b:
        return a + PAIRSEP + b
    return b + PAIRSEP + a

#
# Deterministic partition of a canonical key. Must not depend on the
# interpreter's hash seed: every task computes it independently.
#
def partition_of(key, partitions):
    if partitions <= 1:
        return 0
    return zlib.crc32(key.encode(ENCODING)) % partitions

#
# Side files share the inter-stage line format: JSON key, tab, JSON value.
#
def read_records(path):
    with open(path, "rb") as f:
        for line in f:
            line = line.rstrip(b"\r\n")
            if line:
                yield RECORDS.read(line)

def write_records(path, records):
    with open(path, "wb") as f:
        for key, value in records:
            f.write(RECORDS.write(key, value) + b"\n")
