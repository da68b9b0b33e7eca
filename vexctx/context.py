import logging

from vexctx.literals import Memory as MemoryLocation, Register

l = logging.getLogger(name=__name__)


class ExecutionContext:
    """Initial machine state of one analysis run.

    Owns the register file, the memory and the solver session. `declared`
    holds the locations that were explicitly set through the set_* methods,
    registers under their full name.
    """

    def __init__(self, ip, memory, regfile, session, arch_name=None):
        self.ip = ip
        self.memory = memory
        self.regfile = regfile
        self.session = session
        self.declared = set()
        self.arch_name = arch_name

    def set_reg_as_sym(self, name):
        term = self.regfile.set_sym(name, self.session)
        self.declared.add(Register(self.regfile.full_name(name)))
        l.debug("register %s is symbolic", name)
        return term

    def set_reg_as_const(self, name, value):
        self.regfile.set_const(name, value)
        self.declared.add(Register(self.regfile.full_name(name)))
        l.debug("register %s = %#x", name, value)

    def set_mem_as_sym(self, address, width):
        term = self.memory.set_sym(address, width, self.session)
        self.declared.add(MemoryLocation(address))
        l.debug("%d-bit memory at %#x is symbolic", width, address)
        return term

    def set_mem_as_const(self, address, value, width):
        self.memory.set_const(address, value, width)
        self.declared.add(MemoryLocation(address))
        l.debug("%d-bit memory at %#x = %#x", width, address, value)

    def is_declared(self, name):
        return Register(self.regfile.full_name(name)) in self.declared

    def get_reg(self, name):
        return self.regfile.read(name)

    def get_mem(self, address, width):
        return self.memory.read(address, width)
