"""Register layout and binary metadata, as reported by archinfo."""

import logging

import archinfo
from archinfo.arch import ArchNotFound

from vexctx.errors import PlatformUnavailable

l = logging.getLogger(name=__name__)

ENDNESS_TO_BYTEORDER = {
    archinfo.Endness.LE: "little",
    archinfo.Endness.BE: "big",
}


class RegisterInfo:
    def __init__(self, name, bits, aliases=(), subregisters=()):
        self.name = name
        self.bits = bits
        self.aliases = tuple(aliases)
        # (name, byte offset, byte size), offsets in register byte order
        self.subregisters = tuple(subregisters)

    def __repr__(self):
        return f"RegisterInfo({self.name!r}, {self.bits})"


class BinInfo:
    def __init__(self, bits, endian, arch_name=None):
        self.bits = bits
        self.endian = endian
        self.arch_name = arch_name

    def __repr__(self):
        return f"BinInfo({self.bits}, {self.endian!r}, {self.arch_name!r})"


class Platform:
    """What the bootstrapper needs to know about the analysed binary."""

    def reg_info(self):
        raise NotImplementedError

    def bin_info(self):
        raise NotImplementedError

    def register_endian(self):
        return self.bin_info().endian


def _byteorder(endness, arch):
    try:
        return ENDNESS_TO_BYTEORDER[endness]
    except KeyError:
        raise PlatformUnavailable(
            f"unsupported byte order {endness} for {arch.name}"
        ) from None


class ArchPlatform(Platform):
    def __init__(self, arch):
        if arch is None:
            raise PlatformUnavailable("no architecture given")
        self.arch = arch

    @classmethod
    def from_name(cls, name):
        try:
            arch = archinfo.arch_from_id(name)
        except ArchNotFound as e:
            raise PlatformUnavailable(f"unknown architecture {name!r}") from e
        return cls(arch)

    def reg_info(self):
        registers = [
            RegisterInfo(
                reg.name, reg.size * 8, reg.alias_names, reg.subregisters
            )
            for reg in self.arch.register_list
        ]
        if not registers:
            raise PlatformUnavailable(f"{self.arch.name} reports no registers")
        l.debug("%s reports %d registers", self.arch.name, len(registers))
        return registers

    def bin_info(self):
        return BinInfo(
            self.arch.bits,
            _byteorder(self.arch.memory_endness, self.arch),
            self.arch.name,
        )

    def register_endian(self):
        return _byteorder(self.arch.register_endness, self.arch)
