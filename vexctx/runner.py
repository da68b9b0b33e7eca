import logging

from vexctx.bootstrap import ctx_from_assignments
from vexctx.dump import dump_context
from vexctx.literals import parse_assignments
from vexctx.platform import ArchPlatform

# This file acts as interface for
# - bootstrapping a context for a named architecture from declaration lines
# - dumping its initial state as smtlib into a file

l = logging.getLogger(name=__name__)


def bootstrap(archname, lines, ip=None):
    """Returns (ctx, rejected) where rejected lists the lines that failed to parse."""
    platform = ArchPlatform.from_name(archname)
    assignments, rejected = parse_assignments(lines)
    l.debug("%d declarations, %d rejected", len(assignments), len(rejected))
    ctx = ctx_from_assignments(assignments, platform, ip)
    return ctx, rejected


def run(archname, lines, outfile, ip=None):
    ctx, rejected = bootstrap(archname, lines, ip)
    dump_context(ctx, outfile)
    return ctx, rejected
