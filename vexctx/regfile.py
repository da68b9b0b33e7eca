import logging

import z3

from vexctx.errors import UnknownRegister, ValueTooWide

l = logging.getLogger(name=__name__)


class Slot:
    """Where a register name lives: bits [low, low + bits) of a full register."""

    def __init__(self, register, low, bits):
        self.register = register
        self.low = low
        self.bits = bits

    def is_full(self):
        return self.low == 0 and self.bits == self.register.bits

    def __repr__(self):
        return f"Slot({self.register.name!r}, {self.low}, {self.bits})"


class RegisterFile:
    """Register store laid out per a platform's register descriptors.

    Every full register holds one z3 bit-vector. Aliases and sub-registers
    resolve to a slice of their full register.
    """

    def __init__(self, registers, endian="little"):
        self.registers = {}
        self.values = {}
        self._slots = {}
        for reg in registers:
            self.registers[reg.name] = reg
            self._slots[reg.name] = Slot(reg, 0, reg.bits)
        for reg in registers:
            slot = self._slots[reg.name]
            for alias in reg.aliases:
                self._slots.setdefault(alias, slot)
            for name, offset, size in reg.subregisters:
                if endian == "little":
                    low = offset * 8
                else:
                    low = reg.bits - (offset + size) * 8
                self._slots.setdefault(name, Slot(reg, low, size * 8))

    def __contains__(self, name):
        return name in self._slots

    def __iter__(self):
        """Full register names in platform order."""
        return iter(self.registers)

    def resolve(self, name):
        try:
            return self._slots[name]
        except KeyError:
            raise UnknownRegister(name) from None

    def full_name(self, name):
        return self.resolve(name).register.name

    def width(self, name):
        return self.resolve(name).bits

    def _full_value(self, reg):
        return self.values.get(reg.name, z3.BitVecVal(0, reg.bits))

    def read(self, name):
        slot = self.resolve(name)
        value = self._full_value(slot.register)
        if slot.is_full():
            return value
        return z3.Extract(slot.low + slot.bits - 1, slot.low, value)

    def write(self, name, value):
        slot = self.resolve(name)
        assert value.size() == slot.bits, (name, value.size(), slot.bits)
        reg = slot.register
        if slot.is_full():
            self.values[reg.name] = value
            return
        current = self._full_value(reg)
        parts = []
        high = slot.low + slot.bits
        if high < reg.bits:
            parts.append(z3.Extract(reg.bits - 1, high, current))
        parts.append(value)
        if slot.low > 0:
            parts.append(z3.Extract(slot.low - 1, 0, current))
        self.values[reg.name] = z3.simplify(z3.Concat(*parts))

    def set_sym(self, name, session):
        term = session.fresh_bitvec(name, self.width(name))
        self.write(name, term)
        return term

    def set_const(self, name, value):
        width = self.width(name)
        if value >= 1 << width:
            raise ValueTooWide(value, width)
        self.write(name, z3.BitVecVal(value, width))

    def items(self):
        """(name, value) for every full register, unwritten ones read as zero."""
        for name, reg in self.registers.items():
            yield name, self._full_value(reg)
