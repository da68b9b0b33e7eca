"""Build the initial execution context from declared initial state."""

import logging

from vexctx.context import ExecutionContext
from vexctx.errors import InvalidAssignment, PlatformUnavailable
from vexctx.literals import Concrete, Memory as MemoryLocation, Register, Symbolic
from vexctx.memory import Memory
from vexctx.regfile import RegisterFile
from vexctx.solver import DEFAULT_LOGIC, Session

l = logging.getLogger(name=__name__)

# memory declarations always cover a 64-bit cell, whatever the pointer width
MEMORY_CELL_BITS = 64


def _query_platform(platform):
    try:
        registers = platform.reg_info()
        info = platform.bin_info()
        reg_endian = platform.register_endian()
    except PlatformUnavailable:
        raise
    except Exception as e:
        raise PlatformUnavailable(f"platform query failed: {e}") from e
    if not registers:
        raise PlatformUnavailable("platform reports no registers")
    if not info.bits or info.bits <= 0:
        raise PlatformUnavailable(f"invalid pointer width {info.bits!r}")
    for endian in (info.endian, reg_endian):
        if endian not in ("little", "big"):
            raise PlatformUnavailable(f"unsupported byte order {endian!r}")
    return registers, info, reg_endian


def _apply_sym(ctx, location):
    if isinstance(location, MemoryLocation):
        ctx.set_mem_as_sym(location.address, MEMORY_CELL_BITS)
    elif isinstance(location, Register):
        ctx.set_reg_as_sym(location.name)
    else:
        raise TypeError(f"not a location: {location!r}")


def _apply_const(ctx, location, value):
    if isinstance(location, MemoryLocation):
        ctx.set_mem_as_const(location.address, value, MEMORY_CELL_BITS)
    elif isinstance(location, Register):
        ctx.set_reg_as_const(location.name, value)
    else:
        raise TypeError(f"not a location: {location!r}")


def new_ctx(ip=None, syms=None, consts=None, platform=None):
    """Create the execution context for one analysis run.

    Args:
        ip: starting instruction pointer, or None
        syms: locations to make symbolic, applied in order
        consts: (location, int) pairs to make concrete, applied after syms
        platform: Platform describing registers and binary metadata

    Every register the platform reports that is not declared in syms or
    consts is set to zero. Any failure aborts the whole construction.
    """
    if platform is None:
        raise PlatformUnavailable("no platform given")
    registers, info, reg_endian = _query_platform(platform)
    l.debug(
        "bootstrapping %s: %d-bit, %s endian, %d registers",
        info.arch_name, info.bits, info.endian, len(registers),
    )

    regfile = RegisterFile(registers, reg_endian)
    memory = Memory(info.bits, info.endian)
    session = Session(DEFAULT_LOGIC)
    memory.init_memory(session)

    ctx = ExecutionContext(ip, memory, regfile, session, info.arch_name)

    for location in syms or ():
        _apply_sym(ctx, location)
    for location, value in consts or ():
        _apply_const(ctx, location, value)

    # fill the gaps only, explicit declarations win
    defaulted = 0
    for name in regfile:
        if not ctx.is_declared(name):
            regfile.set_const(name, 0)
            defaulted += 1
    l.debug(
        "%d declarations applied, %d registers defaulted to zero",
        len(ctx.declared), defaulted,
    )
    return ctx


def split_assignments(assignments):
    """Turn parsed assignments into the syms and consts lists of new_ctx."""
    syms = []
    consts = []
    for assignment in assignments:
        rvalue = assignment.rvalue
        if isinstance(rvalue, Symbolic):
            syms.append(assignment.lvalue)
        elif isinstance(rvalue, Concrete):
            consts.append((assignment.lvalue, rvalue.value))
        else:
            raise InvalidAssignment(
                repr(assignment), f"{type(rvalue).__name__} cannot be an initial value"
            )
    return syms, consts


def ctx_from_assignments(assignments, platform, ip=None):
    syms, consts = split_assignments(assignments)
    return new_ctx(ip, syms, consts, platform)
