"""Tests for console logging and callbacks."""

import io

from chip8vm.logging import ConsoleCallback, ConsoleLogger, EmulatorLogger, ProgressCallback, TraceCallback
from chip8vm.runner import run_steps
from conftest import load_program


def make_logger(cls=ConsoleLogger, **kwargs):
    stream = io.StringIO()
    return cls(stream=stream, use_colors=False, show_timestamps=False, **kwargs), stream


def test_level_filtering():
    logger, stream = make_logger(log_level="WARNING")
    logger.info("hidden")
    logger.warning("shown")
    assert stream.getvalue() == "[ WARNING][chip8vm] shown\n"


def test_console_callback_summarises_run(platform):
    logger, stream = make_logger(EmulatorLogger)
    machine = load_program(platform, 0x1200)
    run_steps(machine, 5, callbacks=[ConsoleCallback(logger)], config={"rom": "loop.ch8"})
    output = stream.getvalue()
    assert "rom: loop.ch8" in output
    assert "Stopped after 5 instructions" in output


def test_console_callback_reports_fault(platform):
    logger, stream = make_logger(EmulatorLogger)
    machine = load_program(platform, 0x6A01, 0x0000)
    try:
        run_steps(machine, 5, callbacks=[ConsoleCallback(logger)])
    except Exception:
        pass
    output = stream.getvalue()
    assert "[   ERROR][chip8vm] DecodeError: Invalid opcode at 0202: 0000" in output
    assert "va=01" in output


def test_trace_callback(platform):
    logger, stream = make_logger(log_level="DEBUG")
    machine = load_program(platform, 0x6A42, 0x1202)
    run_steps(machine, 2, callbacks=[TraceCallback(logger)])
    output = stream.getvalue()
    assert "6A42 LD_IMM" in output
    assert "1202 JP" in output


def test_trace_callback_silent_above_debug(platform):
    logger, stream = make_logger(log_level="INFO")
    machine = load_program(platform, 0x1200)
    run_steps(machine, 3, callbacks=[TraceCallback(logger)])
    assert stream.getvalue() == ""


def test_progress_callback(platform):
    machine = load_program(platform, 0x1200)
    progress = ProgressCallback(10, print_rate=3, file=io.StringIO())
    run_steps(machine, 10, callbacks=[progress])
    assert progress.bar.n == 10
