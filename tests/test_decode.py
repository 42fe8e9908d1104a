"""Tests for the opcode table and decoder."""

import pytest

from chip8.cpu import MNEMONICS, OPCODE_TABLE, Interpreter, decode

# One representative opcode per documented instruction
REPRESENTATIVES = {
    0x0123: 'SYS', 0x00E0: 'CLS', 0x00EE: 'RET',
    0x1234: 'JP', 0x2345: 'CALL', 0x3A12: 'SE_Vx_kk', 0x4A12: 'SNE_Vx_kk',
    0x5AB0: 'SE_Vx_Vy', 0x6A12: 'LD_Vx_kk', 0x7A12: 'ADD_Vx_kk',
    0x8AB0: 'LD_Vx_Vy', 0x8AB1: 'OR', 0x8AB2: 'AND', 0x8AB3: 'XOR',
    0x8AB4: 'ADD', 0x8AB5: 'SUB', 0x8AB6: 'SHR', 0x8AB7: 'SUBN', 0x8ABE: 'SHL',
    0x9AB0: 'SNE_Vx_Vy', 0xA123: 'LD_I', 0xB123: 'JP_V0', 0xCA12: 'RND',
    0xDAB5: 'DRW', 0xEA9E: 'SKP', 0xEAA1: 'SKNP',
    0xFA07: 'LD_Vx_DT', 0xFA0A: 'WAITKEY', 0xFA15: 'LD_DT_Vx', 0xFA18: 'LD_ST_Vx',
    0xFA1E: 'ADD_I_Vx', 0xFA29: 'FONT', 0xFA33: 'BCD', 0xFA55: 'STORE', 0xFA65: 'LOAD',
}


def test_table_covers_all_documented_instructions():
    names = [name for _, _, name in OPCODE_TABLE]
    assert len(names) == 35
    assert len(set(names)) == 35
    assert set(names) == set(REPRESENTATIVES.values())
    assert set(names) == set(MNEMONICS)


def test_every_instruction_has_a_handler():
    for _, _, name in OPCODE_TABLE:
        assert callable(getattr(Interpreter, 'op_' + name, None)), name


@pytest.mark.parametrize("opcode, name", sorted(REPRESENTATIVES.items()))
def test_decode_representatives(opcode, name):
    assert decode(opcode).name == name


@pytest.mark.parametrize("opcode", [0x5AB1, 0x9ABF, 0x8AB8, 0x8ABD, 0xEA9F, 0xE000, 0xFA00, 0xFA66, 0xF0FF])
def test_decode_unknown(opcode):
    assert decode(opcode) is None


def test_operand_fields():
    ins = decode(0xD7A3)
    assert (ins.x, ins.y, ins.n) == (0x7, 0xA, 0x3)
    assert ins.kk == 0xA3
    assert ins.nnn == 0x7A3
    assert ins.opcode == 0xD7A3


@pytest.mark.parametrize("opcode, text", [
    (0x00E0, "CLS"),
    (0x2345, "CALL 0x345"),
    (0x6A0F, "LD VA, 0x0F"),
    (0x8AB4, "ADD VA, VB"),
    (0xD125, "DRW V1, V2, 5"),
    (0xF30A, "LD V3, K"),
    (0xF455, "LD [I], V4"),
])
def test_mnemonic(opcode, text):
    assert decode(opcode).mnemonic() == text
