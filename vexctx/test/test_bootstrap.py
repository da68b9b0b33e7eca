import archinfo
import pytest
import z3

from vexctx.bootstrap import (
    MEMORY_CELL_BITS,
    ctx_from_assignments,
    new_ctx,
    split_assignments,
)
from vexctx.errors import InvalidAssignment, PlatformUnavailable, UnknownRegister
from vexctx.literals import (
    Assignment,
    Break,
    Concrete,
    Memory,
    Register,
    Symbolic,
    Unknown,
    parse_assignments,
)
from vexctx.platform import ArchPlatform, BinInfo, Platform, RegisterInfo


def is_zero(value):
    value = z3.simplify(value)
    return z3.is_bv_value(value) and value.as_long() == 0


class FakePlatform(Platform):
    def __init__(self, registers, bits=64, endian="little"):
        self.registers = registers
        self.bits = bits
        self.endian = endian

    def reg_info(self):
        return self.registers

    def bin_info(self):
        return BinInfo(self.bits, self.endian, "fake")


class BrokenPlatform(Platform):
    def reg_info(self):
        raise RuntimeError("disassembler went away")

    def bin_info(self):
        raise RuntimeError("disassembler went away")


def amd64():
    return ArchPlatform(archinfo.ArchAMD64())


def test_defaults_zero_every_register():
    platform = amd64()
    ctx = new_ctx(platform=platform)
    assert not ctx.declared
    names = [reg.name for reg in platform.reg_info()]
    assert sorted(ctx.regfile.registers) == sorted(names)
    for name, value in ctx.regfile.items():
        assert is_zero(value), name


def test_context_parts():
    ctx = new_ctx(0x400000, platform=amd64())
    assert ctx.ip == 0x400000
    assert ctx.arch_name == "AMD64"
    assert ctx.memory.bits == 64
    assert ctx.memory.endian == "little"
    assert ctx.session.logic == "QF_ABV"
    assert "mem" in ctx.session.declarations


def test_no_ip():
    ctx = new_ctx(platform=amd64())
    assert ctx.ip is None


def test_explicit_register_survives_defaults(assert_z3_equivalent):
    ctx = new_ctx(
        syms=[Register("rbx")],
        consts=[(Register("rax"), 0x10)],
        platform=amd64(),
    )
    assert_z3_equivalent(ctx.get_reg("rax"), z3.BitVecVal(0x10, 64))
    rbx = ctx.session.declarations["rbx"]
    assert_z3_equivalent(ctx.get_reg("rbx"), rbx)
    assert is_zero(ctx.get_reg("rcx"))
    assert ctx.declared == {Register("rax"), Register("rbx")}


def test_symbolic_register_is_unconstrained():
    ctx = new_ctx(syms=[Register("rdi")], platform=amd64())
    ctx.session.add(ctx.get_reg("rdi") == 0x1337)
    assert ctx.session.check() == z3.sat
    assert ctx.session.evaluate(ctx.get_reg("rdi")) == 0x1337


def test_subregister_declaration_protects_full_register(assert_z3_equivalent):
    ctx = new_ctx(syms=[Register("eax")], platform=amd64())
    assert ctx.is_declared("rax")
    eax = ctx.session.declarations["eax"]
    assert_z3_equivalent(ctx.get_reg("rax"), z3.ZeroExt(32, eax))


def test_alias_declaration(assert_z3_equivalent):
    registers = [RegisterInfo("pc", 32, aliases=["ip"]), RegisterInfo("sp", 32)]
    ctx = new_ctx(
        consts=[(Register("ip"), 0x401000)], platform=FakePlatform(registers, 32)
    )
    assert ctx.is_declared("pc")
    assert_z3_equivalent(ctx.get_reg("pc"), z3.BitVecVal(0x401000, 32))
    assert is_zero(ctx.get_reg("sp"))


def test_memory_declarations(assert_z3_equivalent):
    ctx = new_ctx(
        syms=[Memory(0x1000)],
        consts=[(Memory(0x2000), 0xDEADBEEF)],
        platform=amd64(),
    )
    sym = ctx.session.declarations["mem_0x1000"]
    assert sym.size() == MEMORY_CELL_BITS
    assert_z3_equivalent(ctx.get_mem(0x1000, 64), sym)
    assert_z3_equivalent(ctx.get_mem(0x2000, 64), z3.BitVecVal(0xDEADBEEF, 64))
    assert_z3_equivalent(ctx.get_mem(0x2000, 8), z3.BitVecVal(0xEF, 8))
    assert Memory(0x1000) in ctx.declared


def test_duplicate_symbolic_declarations(assert_z3_equivalent):
    ctx = new_ctx(syms=[Register("rax"), Register("rax")], platform=amd64())
    assert_z3_equivalent(ctx.get_reg("rax"), ctx.session.declarations["rax_1"])


def test_consts_applied_after_syms(assert_z3_equivalent):
    ctx = new_ctx(
        syms=[Register("rax"), Memory(0x1000)],
        consts=[(Register("rax"), 3), (Memory(0x1000), 4)],
        platform=amd64(),
    )
    assert_z3_equivalent(ctx.get_reg("rax"), z3.BitVecVal(3, 64))
    assert_z3_equivalent(ctx.get_mem(0x1000, 64), z3.BitVecVal(4, 64))


def test_x86_is_32_bit(assert_z3_equivalent):
    ctx = new_ctx(
        consts=[(Register("eax"), 0xFFFFFFFF)],
        platform=ArchPlatform(archinfo.ArchX86()),
    )
    assert ctx.memory.bits == 32
    assert_z3_equivalent(ctx.get_reg("eax"), z3.BitVecVal(0xFFFFFFFF, 32))


def test_big_endian_platform(assert_z3_equivalent):
    ctx = new_ctx(
        consts=[(Memory(0x1000), 0x1122334455667788)],
        platform=ArchPlatform(archinfo.ArchPPC32(archinfo.Endness.BE)),
    )
    assert ctx.memory.endian == "big"
    assert_z3_equivalent(ctx.get_mem(0x1000, 8), z3.BitVecVal(0x11, 8))


def test_unknown_register_aborts():
    with pytest.raises(UnknownRegister):
        new_ctx(syms=[Register("nosuchreg")], platform=amd64())


def test_fake_platform(assert_z3_equivalent):
    registers = [RegisterInfo("a", 16), RegisterInfo("b", 16)]
    ctx = new_ctx(consts=[(Register("a"), 0xFFFF)], platform=FakePlatform(registers, 16))
    assert_z3_equivalent(ctx.get_reg("a"), z3.BitVecVal(0xFFFF, 16))
    assert is_zero(ctx.get_reg("b"))
    assert ctx.memory.bits == 16


def test_platform_failure():
    with pytest.raises(PlatformUnavailable) as excinfo:
        new_ctx(platform=BrokenPlatform())
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_missing_platform():
    with pytest.raises(PlatformUnavailable):
        new_ctx()
    with pytest.raises(PlatformUnavailable):
        ArchPlatform(None)


def test_empty_register_layout():
    with pytest.raises(PlatformUnavailable):
        new_ctx(platform=FakePlatform([]))


def test_bad_binary_metadata():
    registers = [RegisterInfo("a", 16)]
    with pytest.raises(PlatformUnavailable):
        new_ctx(platform=FakePlatform(registers, bits=0))
    with pytest.raises(PlatformUnavailable):
        new_ctx(platform=FakePlatform(registers, endian="middle"))


def test_unknown_arch_name():
    with pytest.raises(PlatformUnavailable):
        ArchPlatform.from_name("bogus")


def test_split_assignments():
    assignments = [
        Assignment(Register("rax"), Symbolic()),
        Assignment(Memory(0x10), Concrete(1)),
        Assignment(Memory(0x20), Symbolic()),
    ]
    syms, consts = split_assignments(assignments)
    assert syms == [Register("rax"), Memory(0x20)]
    assert consts == [(Memory(0x10), 1)]


def test_reserved_values_rejected():
    for value in [Break(), Unknown("?")]:
        with pytest.raises(InvalidAssignment):
            split_assignments([Assignment(Register("rax"), value)])


def test_ctx_from_parsed_declarations(assert_z3_equivalent):
    assignments, rejected = parse_assignments(
        ["rax = 0x10", "0x1000 = SYM", "rbx = 0xZZ", "rsp = 0x7fff0000"]
    )
    assert len(rejected) == 1
    ctx = ctx_from_assignments(assignments, amd64(), ip=0x400000)
    assert_z3_equivalent(ctx.get_reg("rax"), z3.BitVecVal(0x10, 64))
    assert_z3_equivalent(ctx.get_reg("rsp"), z3.BitVecVal(0x7FFF0000, 64))
    assert is_zero(ctx.get_reg("rbx"))
    assert_z3_equivalent(
        ctx.get_mem(0x1000, 64), ctx.session.declarations["mem_0x1000"]
    )
