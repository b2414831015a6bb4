from types import SimpleNamespace

from pychip8.cpu import CPUState
from pychip8.utils.trace import TraceRecorder


def _state(**kwargs):
    defaults = {
        "pc": 0x200,
        "registers": bytes(16),
        "index": 0x000,
        "sp": 0,
        "delay_timer": 0,
        "sound_timer": 0,
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


def test_trace_recorder_overwrites_old_entries():
    recorder = TraceRecorder(capacity=2)

    recorder.record_step(_state(pc=0x200), 0x6012, mnemonic="LD Vx, byte")
    recorder.record_step(_state(pc=0x202, index=0x300), 0xA300, mnemonic="LD I, addr")
    recorder.record_step(_state(pc=0x204, sp=1), 0x0123, mnemonic="??? 0123", note="unknown")

    lines = list(recorder.format_entries())
    assert len(recorder) == 2
    assert len(lines) == 2
    assert "pc=0202" in lines[0]
    assert "I=0300" in lines[0]
    assert "pc=0204" in lines[1]
    assert "note=unknown" in lines[1]
    assert recorder.last_entry().opcode == 0x0123


def test_trace_recorder_formats_registers_and_timers():
    recorder = TraceRecorder(1)
    registers = bytes(range(16))
    recorder.record_step(_state(registers=registers, delay_timer=0x3C, sound_timer=0x05), None)

    line = recorder.format_entries()[0]
    assert "opcode=----" in line
    assert "V=00 01 02 03 04 05 06 07 08 09 0A 0B 0C 0D 0E 0F" in line
    assert "DT=3C ST=05" in line
    assert "note=-" in line


def test_trace_recorder_copies_cpu_state():
    recorder = TraceRecorder(4)
    state = CPUState()
    state.registers[0] = 0x11

    recorder.record_step(state, 0x00E0, mnemonic="CLS")
    state.registers[0] = 0x22

    assert recorder.last_entry().registers[0] == 0x11


def test_trace_recorder_limit_returns_newest():
    recorder = TraceRecorder(8)
    for offset in range(5):
        recorder.record_step(_state(pc=0x200 + offset * 2), 0x1200)

    entries = list(recorder.entries(limit=2))
    assert [entry.pc for entry in entries] == [0x206, 0x208]


def test_trace_recorder_rejects_zero_capacity():
    import pytest

    with pytest.raises(ValueError):
        TraceRecorder(0)
