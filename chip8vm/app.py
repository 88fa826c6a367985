"""pygame front end: window, keyboard and incremental rendering."""

import pygame

from chip8vm.config import EmulatorConfig
from chip8vm.constants import SCREEN_WIDTH, SCREEN_HEIGHT
from chip8vm.logging import EmulatorLogger
from chip8vm.rendering import create_color_scheme, save_screenshot
from chip8vm.runner import EmulatorSession

# Classic COSMAC VIP layout on the left of a QWERTY keyboard
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}


class PygameApp:
    """Main-thread window that renders a session's display and feeds its keypad.

    Controls: ESC quits, F5 restarts the ROM, F12 saves a screenshot.
    """

    def __init__(self, session: EmulatorSession, config: EmulatorConfig, logger: EmulatorLogger):
        self.session = session
        self.config = config
        self.logger = logger
        self.scale = config.scale
        self.on_color, self.off_color = create_color_scheme(config.color_scheme)
        self.screen = None
        self._reported_error = None

    def _paint(self, x: int, y: int, value: bool) -> None:
        rect = pygame.Rect(x * self.scale, y * self.scale, self.scale, self.scale)
        pygame.draw.rect(self.screen, self.on_color if value else self.off_color, rect)

    def repaint(self) -> None:
        """Paint the whole frame, then drop the pending updates it already covers."""
        display = self.session.display
        with display.batch():
            frame = display.frame()
            display.drain_updates()
        self.screen.fill(self.off_color)
        for x in range(SCREEN_WIDTH):
            for y in range(SCREEN_HEIGHT):
                if frame[x, y]:
                    self._paint(x, y, True)
        pygame.display.flip()

    def render_updates(self) -> bool:
        updates = self.session.display.drain_updates()
        for pixel in updates:
            self._paint(pixel.x, pixel.y, pixel.value)
        return bool(updates)

    def handle_event(self, event) -> bool:
        """Apply one pygame event. Returns False when the app should quit."""
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                return False
            if event.key == pygame.K_F5:
                self.logger.info("Restarting")
                self.session.restart()
                self._reported_error = None
                self.repaint()
            elif event.key == pygame.K_F12:
                filename = self.config.screenshot or "screenshot.png"
                save_screenshot(self.session.display.frame(), filename, self.scale, self.config.color_scheme)
                self.logger.info(f"Saved {filename}")
            elif event.key in KEY_MAP:
                self.session.keypad.press(KEY_MAP[event.key])
        elif event.type == pygame.KEYUP and event.key in KEY_MAP:
            self.session.keypad.release(KEY_MAP[event.key])
        return True

    def run(self) -> None:
        pygame.init()
        self.screen = pygame.display.set_mode((SCREEN_WIDTH * self.scale, SCREEN_HEIGHT * self.scale))
        pygame.display.set_caption(f"CHIP-8 - {self.config.rom}")
        clock = pygame.time.Clock()

        self.session.start()
        self.repaint()
        running = True
        try:
            while running:
                clock.tick(60)
                for event in pygame.event.get():
                    if not self.handle_event(event):
                        running = False
                        break

                error = self.session.error
                if error is not None and error is not self._reported_error:
                    self._reported_error = error
                    pygame.display.set_caption(f"CHIP-8 - stopped: {error}")

                if self.render_updates():
                    pygame.display.flip()
        finally:
            self.session.stop()
            pygame.quit()
