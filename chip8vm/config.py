"""Structured emulator configuration."""

from dataclasses import dataclass
from typing import List, Optional

from omegaconf import DictConfig, OmegaConf

from chip8vm.constants import TIMER_HZ


@dataclass
class EmulatorConfig:
    """Options for the command line runners.

    Attributes:
        rom: Path to the ROM file.
        headless: Run without a window for ``steps`` instructions.
        steps: Instruction budget for headless runs.
        scale: Window pixels per CHIP-8 pixel.
        color_scheme: Name from :func:`chip8vm.rendering.create_color_scheme`.
        timer_hz: Delay/sound timer rate.
        yield_ms: Sleep after every instruction; bounds CPU usage.
        seed: PRNG seed for CXKK.
        log_level: Console log level.
        trace: Dump the machine after every instruction (DEBUG).
        screenshot: Save the final frame to this image file.
    """
    rom: Optional[str] = None
    headless: bool = False
    steps: int = 1000
    scale: int = 10
    color_scheme: str = "mono"
    timer_hz: float = TIMER_HZ
    yield_ms: float = 1.0
    seed: int = 0
    log_level: str = "INFO"
    trace: bool = False
    screenshot: Optional[str] = None


def load_config(overrides: Optional[List[str]] = None, base: Optional[DictConfig] = None) -> EmulatorConfig:
    """Merge ``base`` and ``key=value`` overrides onto the defaults and validate.

    Raises:
        omegaconf.errors.ValidationError: on unknown keys or values of the wrong type.
    """
    cfg = OmegaConf.structured(EmulatorConfig)
    if base is not None:
        cfg = OmegaConf.merge(cfg, base)
    if overrides:
        cfg = OmegaConf.merge(cfg, OmegaConf.from_dotlist(overrides))
    config = OmegaConf.to_object(cfg)
    if config.steps < 0:
        raise ValueError(f"steps must be >= 0, got {config.steps}")
    if config.scale < 1:
        raise ValueError(f"scale must be >= 1, got {config.scale}")
    if config.timer_hz <= 0:
        raise ValueError(f"timer_hz must be > 0, got {config.timer_hz}")
    return config
