import pytest
from src.i8086_asm.ast import Reg, Imm, Mem, Sym, ins
from src.i8086_asm.encoding import encode_instruction, make_modrm, modrm
from src.i8086_asm.errors import InvalidMemoryOperand, OperandOutOfRange, TemplateNotFound
from src.i8086_asm.isa import Template, Pattern, Classifier, LiteralByte, Immediate8, Immediate16

def _fields(b):
    """(mod, spare, rm) de un byte ModRM."""
    return (b >> 6) & 0x3, (b >> 3) & 0x7, b & 0x7

@pytest.mark.parametrize("instr, expected", [
    (ins("mov", Reg("bl"), Imm(5)),        [0xB3, 0x05]),
    (ins("mov", Reg("ax"), Imm(300)),      [0xB8, 0x2C, 0x01]),
    (ins("mov", Reg("ds"), Reg("ax")),     [0x8E, 0xD8]),
    (ins("mov", Reg("ds"), Mem((), 0x10)), [0x8E, 0x1E, 0x10, 0x00]),
    (ins("xor", Reg("ax"), Reg("ax")),     [0x31, 0xC0]),
    (ins("xor", Mem(("bx", "si")), Reg("al")), [0x30, 0x00]),
    (ins("push", Reg("bx")),               [0x53]),
    (ins("pop", Reg("di")),                [0x5F]),
    (ins("stosb"),                         [0xAA]),
    (ins("ret"),                           [0xC3]),
    (ins("inc", Reg("cx")),                [0x41]),
    (ins("inc", Reg("al")),                [0xFE, 0xC0]),
    (ins("cmp", Reg("al"), Imm(10)),       [0x3C, 0x0A]),
    (ins("cmp", Reg("ax"), Imm(10)),       [0x3D, 0x0A, 0x00]),
    (ins("cmp", Reg("bl"), Imm(10)),       [0x80, 0xFB, 0x0A]),
    (ins("cmp", Mem(("bp",)), Imm(5)),     [0x80, 0x7E, 0x00, 0x05]),
    (ins("add", Reg("ax"), Imm(1)),        [0x05, 0x01, 0x00]),
    (ins("add", Mem(("bx", "si"), 4), Imm(0x20)), [0x80, 0x40, 0x04, 0x20]),
    (ins("add", Reg("bx"), Imm(0x1234)),   [0x81, 0xFB, 0x34, 0x12]),
    (ins("sal", Reg("bx"), Imm(1)),        [0xD1, 0xE3]),
    (ins("sal", Reg("bx"), Imm(4)),        [0xC1, 0xE3, 0x04]),
    (ins("or", Reg("dl"), Imm(0x80)),      [0x80, 0xCA, 0x80]),
    (ins("int", Imm(3)),                   [0xCC]),
    (ins("int", Imm(0x21)),                [0xCD, 0x21]),
])
def test_encode(instr, expected):
    assert encode_instruction(instr) == expected

def test_register_offset_opcode():
    for name in ("ax", "cx", "dx", "bx", "sp", "bp", "si", "di"):
        out = encode_instruction(ins("push", Reg(name)))
        assert out == [0x50 + Reg(name).info.value]

def test_shift_by_one_is_shorter():
    one = encode_instruction(ins("sal", Reg("al"), Imm(1)))
    three = encode_instruction(ins("sal", Reg("al"), Imm(3)))
    assert one == [0xD0, 0xE0]
    assert three == [0xC0, 0xE0, 0x03]
    assert len(one) != len(three)

def test_setcc_keeps_spare_two():
    assert encode_instruction(ins("sete", Reg("al"))) == [0x0F, 0x94, 0xD0]
    assert encode_instruction(ins("setz", Reg("al"))) == [0x0F, 0x94, 0xD0]
    assert encode_instruction(ins("setg", Mem(("di",)))) == [0x0F, 0x9F, 0x15]

def test_condition_synonyms_encode_alike():
    assert encode_instruction(ins("je", Sym("x"))) == encode_instruction(ins("jz", Sym("x")))
    assert encode_instruction(ins("je", Sym("x"))) == [0x74, Sym("x")]
    assert encode_instruction(ins("jnae", Sym("x")))[0] == 0x72

def test_branch_leaves_label_marker():
    assert encode_instruction(ins("jmp", Sym("fin"))) == [0xEB, Sym("fin")]
    assert encode_instruction(ins("loop", Sym("top"))) == [0xE2, Sym("top")]

# ---------------- ModRM ----------------

def test_modrm_pack():
    assert modrm(3, 7, 7) == 0xFF
    assert modrm(1, 0, 6) == 0x46

def test_register_direct():
    assert make_modrm(Reg("dx"), 5) == [0xEA]
    assert _fields(make_modrm(Reg("bh"), 0)[0]) == (3, 0, 7)

def test_direct_address_always_two_bytes():
    out = make_modrm(Mem(), 0)
    assert out == [0x06, 0x00, 0x00]
    assert _fields(out[0]) == (0, 0, 6)
    assert make_modrm(Mem((), 0x1234), 0) == [0x06, 0x34, 0x12]
    assert make_modrm(Mem((), 0xFFFF), 0) == [0x06, 0xFF, 0xFF]

def test_bp_alone_forces_one_displacement_byte():
    out = make_modrm(Mem(("bp",), 0), 0)
    assert out == [0x46, 0x00]
    assert _fields(out[0]) == (1, 0, 6)

@pytest.mark.parametrize("regs, disp, expected", [
    (("bx",), 0,        [0x07]),
    (("si", "bx"), 0,   [0x00]),           # el orden de los registros no importa
    (("bx", "di"), 0,   [0x01]),
    (("bp", "si"), 0,   [0x02]),
    (("di", "bp"), -2,  [0x43, 0xFE]),
    (("si",), 0,        [0x04]),
    (("di",), 0x100,    [0x85, 0x00, 0x01]),
    (("bp",), 8,        [0x46, 0x08]),
    (("bx",), 127,      [0x47, 0x7F]),
    (("bx",), -128,     [0x47, 0x80]),
    (("bx",), 128,      [0x87, 0x80, 0x00]),
    (("bx",), -129,     [0x87, 0x7F, 0xFF]),
])
def test_memory_forms(regs, disp, expected):
    assert make_modrm(Mem(regs, disp), 0) == expected

@pytest.mark.parametrize("bad", [
    Mem(("bx", "bp")),
    Mem(("si", "di")),
    Mem(("bx", "si", "di")),
    Mem(("ax",)),
    Mem(("bx", "bx")),
])
def test_invalid_memory_operand(bad):
    with pytest.raises(InvalidMemoryOperand) as ex:
        make_modrm(bad, 0)
    assert ex.value.operand == bad

def test_invalid_memory_inside_instruction():
    with pytest.raises(InvalidMemoryOperand):
        encode_instruction(ins("cmp", Mem(("ax", "bx")), Imm(1)))

def test_displacement_out_of_range():
    with pytest.raises(OperandOutOfRange):
        make_modrm(Mem(("bx",), 40000), 0)
    with pytest.raises(OperandOutOfRange):
        make_modrm(Mem((), 70000), 0)

def test_immediate_width_checked():
    t = Template(Pattern("foo", (Classifier("imm8", lambda op: True),)), (LiteralByte(1), Immediate8()))
    assert encode_instruction(ins("foo", Imm(-1)), t) == [1, 0xFF]
    with pytest.raises(OperandOutOfRange) as ex:
        encode_instruction(ins("foo", Imm(300)), t)
    assert ex.value.width == 8
    t16 = Template(Pattern("foo", (Classifier("imm16", lambda op: True),)), (Immediate16(),))
    assert encode_instruction(ins("foo", Imm(-2)), t16) == [0xFE, 0xFF]

def test_no_template():
    with pytest.raises(TemplateNotFound):
        encode_instruction(ins("mov", Reg("al"), Reg("ax")))

def test_add_rm16_keeps_extension_seven():
    out = encode_instruction(ins("add", Reg("bx"), Imm(0x1234)))
    assert out == [0x81, 0xFB, 0x34, 0x12]
    assert _fields(out[1]) == (3, 7, 3)
    # las formas de acumulador y de 8 bits no cambian
    assert encode_instruction(ins("add", Reg("bl"), Imm(1))) == [0x80, 0xC3, 0x01]
