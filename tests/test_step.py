"""Tests for the fetch/execute cycle and program loading."""

import jax
import pytest
from chipjax import (
    step, fetch, run_n_instruction, write_program, load_rom, read_memory,
    MemoryAccessError, PROGRAM_START,
)
from chipjax.constants import MAX_PROGRAM_SIZE, MEMORY_SIZE
from conftest import with_registers, load_opcodes


class TestFetch:
    """Test opcode fetching."""

    def test_fetch_is_big_endian(self, fresh_state):
        state = load_opcodes(fresh_state, [0x6A3C])
        assert fetch(state) == 0x6A3C
        assert state.pc == PROGRAM_START

    def test_fetch_past_end_of_memory(self, fresh_state):
        """An opcode straddling 0xFFF/0x1000 cannot be fetched."""
        state = fresh_state.replace(pc=fresh_state.pc * 0 + 0xFFF)
        with pytest.raises(MemoryAccessError):
            step(state)


class TestStep:
    """Test single machine cycles."""

    def test_step_executes_and_advances(self, fresh_state):
        state = load_opcodes(fresh_state, [0x6A3C, 0x7A01])
        state = step(state)
        assert state.V[0xA] == 0x3C
        assert state.pc == 0x202

        state = step(state)
        assert state.V[0xA] == 0x3D
        assert state.pc == 0x204

    def test_step_ticks_timers(self, fresh_state):
        """Timers are decremented after the instruction that set them."""
        state = with_registers(fresh_state, V0=10)
        state = load_opcodes(state, [0xF015, 0xF018])
        state = step(state)
        assert state.delay_timer == 9
        state = step(state)
        assert state.delay_timer == 8
        assert state.sound_timer == 9

    def test_run_n_instruction(self, fresh_state):
        """Counting loop: V0 += 1, jump back."""
        state = load_opcodes(fresh_state, [0x7001, 0x1200])
        state = run_n_instruction(state, 10)
        assert state.V[0] == 5
        assert state.pc == 0x200

    def test_run_n_matches_repeated_step(self, fresh_state):
        program = [0x6005, 0x6103, 0x8014, 0xA300, 0xF033, 0x1200]
        stepped = load_opcodes(fresh_state, program)
        scanned = stepped
        for _ in range(6):
            stepped = step(stepped)
        scanned = run_n_instruction(scanned, 6)

        assert (stepped.V == scanned.V).all()
        assert (stepped.memory == scanned.memory).all()
        assert stepped.pc == scanned.pc


class TestUnknownOpcode:
    """Test opcodes that match nothing in the instruction table."""

    @pytest.mark.parametrize("opcode", [0x8008, 0x800F, 0xE000, 0xF0FF])
    def test_unknown_keeps_pc(self, fresh_state, opcode):
        state = load_opcodes(fresh_state, [opcode])
        after = step(state)
        jax.effects_barrier()

        assert after.pc == state.pc
        assert (after.V == state.V).all()
        assert (after.memory == state.memory).all()

    def test_unknown_is_logged(self, fresh_state, capsys):
        state = load_opcodes(fresh_state, [0xF0FF])
        step(state)
        jax.effects_barrier()

        out = capsys.readouterr().out
        assert "Unknown opcode 0xF0FF at 0x200" in out


class TestProgramLoading:
    """Test writing program images to memory."""

    def test_write_program(self, fresh_state):
        data = bytes([0x12, 0x34, 0x56, 0x78])
        state = write_program(fresh_state, data)

        assert read_memory(state, PROGRAM_START, 4) == data
        assert state.memory[PROGRAM_START - 1] == 0
        assert state.memory[PROGRAM_START + 4] == 0

    def test_write_program_fills_memory(self, fresh_state):
        data = bytes(range(256)) * (MAX_PROGRAM_SIZE // 256)
        state = write_program(fresh_state, data)
        assert read_memory(state, MEMORY_SIZE - 1, 1) == bytes([0xFF])

    def test_oversized_program_is_rejected(self, fresh_state):
        data = bytes(MAX_PROGRAM_SIZE + 1)
        with pytest.raises(MemoryAccessError):
            write_program(fresh_state, data)

    def test_load_rom(self, fresh_state, tmp_path):
        rom = tmp_path / "prog.ch8"
        rom.write_bytes(bytes([0x00, 0xE0, 0x12, 0x00]))

        state = load_rom(fresh_state, str(rom))

        assert read_memory(state, PROGRAM_START, 4) == bytes([0x00, 0xE0, 0x12, 0x00])
        assert state.pc == PROGRAM_START

    def test_load_missing_rom(self, fresh_state, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_rom(fresh_state, str(tmp_path / "missing.ch8"))
