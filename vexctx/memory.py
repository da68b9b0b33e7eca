import logging

import z3

from vexctx.errors import ContextError, InvalidAddress, ValueTooWide

l = logging.getLogger(name=__name__)

MEMORY_NAME = "mem"


class Memory:
    """Byte-addressable memory backed by a z3 array of bytes."""

    def __init__(self, bits, endian):
        assert endian in ("little", "big"), endian
        self.bits = bits
        self.endian = endian
        self.array = None

    def init_memory(self, session):
        self.array = session.declare_array(MEMORY_NAME, self.bits, 8)

    def _check(self, address, width):
        if self.array is None:
            raise ContextError("memory used before init_memory")
        if width <= 0 or width % 8:
            raise ContextError(f"memory cells are whole bytes, got {width} bits")
        last = address + width // 8 - 1
        if address < 0 or last >= 1 << self.bits:
            raise InvalidAddress(
                f"{width}-bit cell at {address:#x} outside {self.bits}-bit address space"
            )

    def _byte_addresses(self, address, size_bytes):
        """Byte addresses from least to most significant byte."""
        addresses = [address + i for i in range(size_bytes)]
        if self.endian == "big":
            addresses.reverse()
        return addresses

    def read(self, address, width):
        self._check(address, width)
        bytes_values = [
            z3.Select(self.array, z3.BitVecVal(a, self.bits))
            for a in self._byte_addresses(address, width // 8)
        ]
        if len(bytes_values) == 1:
            return bytes_values[0]
        # z3.Concat takes the high bits first
        return z3.Concat(*reversed(bytes_values))

    def write(self, address, value, width):
        self._check(address, width)
        assert value.size() == width, (value.size(), width)
        array = self.array
        for i, a in enumerate(self._byte_addresses(address, width // 8)):
            byte_value = z3.Extract(i * 8 + 7, i * 8, value)
            array = z3.Store(array, z3.BitVecVal(a, self.bits), byte_value)
        self.array = z3.simplify(array)

    def set_sym(self, address, width, session):
        term = session.fresh_bitvec(f"{MEMORY_NAME}_{address:#x}", width)
        self.write(address, term, width)
        return term

    def set_const(self, address, value, width):
        if value >= 1 << width:
            raise ValueTooWide(value, width)
        self.write(address, z3.BitVecVal(value, width), width)
