"""Command line entry point.

Examples::

    python -m chip8vm rom=games/PONG.ch8 scale=12
    python -m chip8vm rom=tests/IBM.ch8 headless=true steps=200 screenshot=ibm.png
"""

from typing import Optional

import hydra
from omegaconf import DictConfig

from chip8vm.config import EmulatorConfig, load_config
from chip8vm.emulator import read_rom, Machine
from chip8vm.logging import ConsoleCallback, EmulatorLogger, ProgressCallback, TraceCallback
from chip8vm.port import CancellationToken, HeadlessPlatform
from chip8vm.rendering import display_to_ascii, save_screenshot
from chip8vm.runner import EmulatorLoop, EmulatorSession


def run_headless(config: EmulatorConfig, rom: bytes, logger: EmulatorLogger) -> Machine:
    """Run ``config.steps`` instructions without a window and print the final frame."""
    token = CancellationToken()
    platform = HeadlessPlatform(token, seed=config.seed, logger=logger)
    machine = Machine(platform, rom, timer_hz=config.timer_hz)

    callbacks = [ConsoleCallback(logger), ProgressCallback(config.steps, leave=False)]
    if config.trace:
        callbacks.append(TraceCallback(EmulatorLogger(name="trace", log_level="DEBUG")))

    loop = EmulatorLoop(machine, token, callbacks, vars(config), max_steps=config.steps)
    loop.start()
    try:
        loop.join()
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        loop.stop()

    frame = machine.display.frame()
    print(display_to_ascii(frame))
    if config.screenshot:
        save_screenshot(frame, config.screenshot, config.scale, config.color_scheme)
        logger.info(f"Saved {config.screenshot}")
    return machine


def run(config: EmulatorConfig) -> Optional[Machine]:
    logger = EmulatorLogger(log_level=config.log_level)
    if not config.rom:
        logger.error("No ROM given; pass rom=path/to/game.ch8")
        return None
    rom = read_rom(config.rom)
    logger.info(f"Loaded {config.rom} ({len(rom)} bytes)")

    if config.headless:
        return run_headless(config, rom, logger)

    # Imported here so headless runs work without a display
    from chip8vm.app import PygameApp

    callbacks = [ConsoleCallback(logger)]
    if config.trace:
        callbacks.append(TraceCallback(EmulatorLogger(name="trace", log_level="DEBUG")))
    session = EmulatorSession(
        rom,
        seed=config.seed,
        yield_ms=config.yield_ms,
        timer_hz=config.timer_hz,
        callbacks=callbacks,
        config=vars(config),
    )
    PygameApp(session, config, logger).run()
    return session.machine


@hydra.main(version_base=None, config_path="conf", config_name="config")
def main(cfg: DictConfig) -> None:
    run(load_config(base=cfg))


if __name__ == "__main__":
    main()
