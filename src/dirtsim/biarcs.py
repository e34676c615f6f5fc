#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Author: dirtsim contributors
#

"""
Reading of syntactic n-gram "biarcs" lines and extraction of predicate
templates from them.

Biarcs file example line:
control	control/VB/ROOT/0 drug/NN/nsubj/1 pain/NN/dobj/1	10	2005,10

Token format (the word itself may contain '/'):
word/POS/depLabel/headIndex

Extracted predicate instance:
("X control Y", "drug", "pain")
"""

from collections import namedtuple

from dirtsim.dirtutils import *

Token = namedtuple("Token", "idx word pos dep head")
ParsedLine = namedtuple("ParsedLine", "tokens count headword")
PredicateInstance = namedtuple("PredicateInstance", "template x_word y_word")


#
# Parse a single word/POS/dep/head token. idx is 1-based.
#
def parse_token(field, idx):
    parts = field.rsplit("/", 3)
    if len(parts) != 4:
        return None
    word, pos, dep, head = parts
    try:
        head = int(head)
    except ValueError:
        return None
    return Token(idx, word, pos, dep, head)


#
# Parse a biarcs line into its tokens and count. The first pure-digit field
# is the count, everything after it (year counts) is ignored. Returns None
# for anything malformed.
#
def parse_line(line):
    if not line or not line.strip():
        return None

    headword = None
    cols = line.rstrip("\r\n").split("\t")
    if len(cols) >= 3 and DIGITS.match(cols[2].strip()):
        headword = cols[0].strip()
        fields = cols[1].split() + [cols[2].strip()]
    else:
        fields = line.split()

    cntidx = -1
    for i, field in enumerate(fields):
        if DIGITS.match(field):
            cntidx = i
            break
    if cntidx < 0:
        return None

    tokens = []
    for i in range(cntidx):
        tok = parse_token(fields[i], len(tokens)+1)
        if tok is None:
            return None
        tokens.append(tok)
    if not tokens:
        return None
    return ParsedLine(tuple(tokens), int(fields[cntidx]), headword)


#
# Yield parsed lines from a stream, silently skipping malformed ones.
#
def read_biarcs(instream):
    for line in instream:
        parsed = parse_line(line)
        if parsed is not None:
            yield parsed


def is_verb_pos(pos):
    return pos.startswith("VB")

def is_noun_pos(pos):
    return pos.startswith("NN") or pos == "PRP"


#
# Root token: a ROOT verb attached to 0 if any, else any ROOT attached to 0.
#
def find_root(tokens):
    fallback = None
    for tok in tokens:
        if tok.dep == ROOTLAB and tok.head == 0:
            if is_verb_pos(tok.pos):
                return tok
            if fallback is None:
                fallback = tok
    return fallback


#
# First nominal child of head, trying dependency labels in order.
#
def find_noun_child(tokens, head, labels):
    for lab in labels:
        for tok in tokens:
            if tok.head == head and tok.dep == lab and is_noun_pos(tok.pos):
                return tok
    return None


#
# Build the predicate instance rooted at root, or None. Y is a direct object
# if present, else the object of a preposition attached to the root, in
# which case the preposition becomes part of the template.
#
def extract_predicate(tokens, root, stem):
    if root is None:
        return None

    x = find_noun_child(tokens, root.idx, SUBJLABS)
    if x is None:
        return None

    prep = None
    y = find_noun_child(tokens, root.idx, (OBJLAB,))
    if y is None:
        for tok in tokens:
            if tok.head != root.idx or tok.dep != PREPLAB or \
                   tok.pos not in PREPPOS:
                continue
            y = find_noun_child(tokens, tok.idx, POBJLABS)
            if y is not None:
                prep = tok.word.lower()
                break
    if y is None:
        return None

    verb = stem(root.word)
    if prep is None:
        template = " ".join((SLOTX, verb, SLOTY))
    else:
        template = " ".join((SLOTX, verb, prep, SLOTY))
    return PredicateInstance(template, stem(x.word), stem(y.word))


#
# Full extraction chain for one line: root, auxiliary filter, predicate,
# cleaning. Returns the cleaned instance or None. Argument words that are
# not clean are blanked, not rejected, since each slot counts on its own.
#
def line_to_predicate(parsed, stem):
    root = find_root(parsed.tokens)
    if root is None:
        return None
    word = root.word.strip()
    if not is_clean_word(word) or is_auxiliary(word, stem):
        return None

    inst = extract_predicate(parsed.tokens, root, stem)
    if inst is None:
        return None
    template = clean_template(inst.template)
    if not template:
        return None

    x_word = inst.x_word.strip().lower()
    y_word = inst.y_word.strip().lower()
    return PredicateInstance(template,
                             x_word if is_clean_word(x_word) else "",
                             y_word if is_clean_word(y_word) else "")


#
# Write the predicate instances of a biarcs stream, one per line:
# headword, template, X word, Y word, count. Lines without a head word
# column show "_". Returns the number of instances written.
#
def dump_predicates(instream, outstream, stem):
    written = 0
    for parsed in read_biarcs(instream):
        inst = line_to_predicate(parsed, stem)
        if inst is None:
            continue
        print("\t".join((parsed.headword or "_", inst.template,
                         inst.x_word or "_", inst.y_word or "_",
                         str(parsed.count))), file=outstream)
        written += 1
    return written


if __name__ == "__main__":

    import codecs
    import sys
    import time
    from optparse import OptionParser

    parser = OptionParser(usage="%prog [options] [BIARCS ...]")
    parser.add_option("--quiet", dest="quiet", action="store_true", default=False, help='Do not report progress on stderr.')
    (opts, args) = parser.parse_args()

    t0 = time.time()
    stem = make_stemmer()
    total = 0
    if not args:
        total += dump_predicates(sys.stdin, sys.stdout, stem)
    for path in args:
        f = codecs.open(path, "r", ENCODING)
        total += dump_predicates(f, sys.stdout, stem)
        f.close()
    if not opts.quiet:
        print("# predicate instances: %d" % total, file=sys.stderr)
        print("Done in %s sec." % (time.time()-t0), file=sys.stderr)
