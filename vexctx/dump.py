# This file provides functions for dumping a bootstrapped context into a python
# module holding the initial state as smtlib s-expressions

import z3


def extract_registers(regfile):
    smt_regs = {}
    for regname, value in regfile.items():
        smt_regs[regname] = z3.simplify(value).sexpr()
    return smt_regs


def extract_memory(memory):
    return memory.array.sexpr()


def extract_declarations(session):
    return {name: term.sort().sexpr() for name, term in session.declarations.items()}


class ContextDump(object):

    def __init__(self, arch, ip, declarations, init_regs, init_mem, declared):
        self.arch = arch
        self.ip = ip
        self.declarations = declarations
        self.init_registers = init_regs
        self.init_memory = init_mem
        self.declared = declared

    @classmethod
    def from_context(cls, ctx):
        declared = sorted(repr(location) for location in ctx.declared)
        return cls(
            ctx.arch_name,
            ctx.ip,
            extract_declarations(ctx.session),
            extract_registers(ctx.regfile),
            extract_memory(ctx.memory),
            declared,
        )

    def to_py(self):
        code = []
        code.append("arch = %r" % self.arch)
        code.append("ip = %r" % self.ip)
        code.append("declarations = %r" % self.declarations)
        code.append("declared = %r" % self.declared)
        code.append("init_registers = %r" % self.init_registers)
        code.append("init_memory = %r" % " ".join(self.init_memory.split()))
        return "\n".join(code) + "\n"


def dump_context(ctx, filename):
    with open(filename, "w") as outfile:
        outfile.write(ContextDump.from_context(ctx).to_py())
