import argparse
import logging
import time

from pulsecore.events import PatternEngine
from pulsecore.logging_config import setup_logging
from pulsecore.moodboard import Moodboard
from pulsecore.osc_control import OscControl, apply_messages, DEFAULT_PORT
from pulsecore.primitives import Canvas
from pulsecore.settings import PatternSettings, SettingsLoader
from pulsecore.visualizers import create_pattern_visualizer
from pulsescenes.modes import PatternMode

logger = logging.getLogger("pulsegrid.app")

FRAME_TIME = 1 / 40


class PatternSystem:
    """Glue between the engine, the OSC control input and the preview window"""

    def __init__(self, engine, osc=None, visualizer=None):
        self.engine = engine
        self.osc = osc
        self.visualizer = visualizer
        # name -> (x, y) offset of that panel on the preview board
        self.origins = {}
        self.quit_requested = False

    def place(self, timers, origins):
        for timer, origin in zip(timers, origins):
            self.origins[timer.name] = origin

    def placed_frames(self):
        for name, timer in self.engine.timers.items():
            config = timer.config or self.engine.settings.settings_for(timer.mode)
            yield timer.frame, config.color_scheme, self.origins.get(name, (0, 0))

    def update(self):
        """Called every loop iteration"""
        if self.osc is not None:
            messages = self.osc.drain()
            if messages:
                apply_messages(self.engine, messages)

        frames = self.engine.update()

        if frames and self.visualizer is not None:
            key = self.visualizer.update(self.placed_frames())
            if key == ord(' '):
                self.engine.toggle_running()
            elif key in (ord('q'), 27):
                self.quit_requested = True

        if not self.engine.timers and not self.engine.event_queue:
            self.quit_requested = True


def build_settings(path):
    if path is None:
        return PatternSettings()
    if path.endswith(('.yaml', '.yml')):
        return SettingsLoader.from_yaml(path)
    return SettingsLoader.from_json(path)


def main():
    parser = argparse.ArgumentParser(description='Run PulseGrid pattern generators')
    parser.add_argument('--mode', default='signal_mesh', help='Pattern mode to show')
    parser.add_argument('--moodboard', default=None,
                        help='Comma separated list of 1-4 modes to show side by side')
    parser.add_argument('--settings', default=None, help='JSON or YAML settings document')
    parser.add_argument('--seed', type=int, default=None, help='Seed for particle and graph setup')
    parser.add_argument('--width', type=int, default=800)
    parser.add_argument('--height', type=int, default=600)
    parser.add_argument('--intensity', type=float, default=None, help='Global intensity (0.1 - 1.0)')
    parser.add_argument('--duration', type=float, default=None,
                        help='Presentation length in seconds (rounded to whole minutes)')
    parser.add_argument('--no-preview', action='store_true', help='Run without the OpenCV window')
    parser.add_argument('--osc-port', type=int, default=None,
                        help=f'Listen for OSC control messages (e.g. {DEFAULT_PORT})')
    parser.add_argument('--log-level', default='INFO')
    args = parser.parse_args()

    setup_logging(level=getattr(logging, args.log_level.upper(), logging.INFO))

    settings = build_settings(args.settings)
    board = Canvas(args.width, args.height)
    engine = PatternEngine(settings=settings, seed=args.seed, canvas=board)
    if args.intensity is not None:
        engine.intensity = args.intensity

    visualizer = None if args.no_preview else create_pattern_visualizer(args.width, args.height)
    osc = None
    if args.osc_port is not None:
        osc = OscControl(port=args.osc_port)
        osc.start()

    system = PatternSystem(engine, osc=osc, visualizer=visualizer)

    if args.moodboard:
        modes = [PatternMode.from_name(name.strip()) for name in args.moodboard.split(',')]
        moodboard = Moodboard.create(
            "Board",
            [(mode, settings.settings_for(mode), "") for mode in modes],
        )
        timers = moodboard.activate_on(engine, args.width, args.height)
        origins = [layout.position.to_pixels(args.width, args.height)[:2] for layout in moodboard.layouts]
        system.place(timers, origins)
    elif args.duration is not None:
        engine.schedule_presentation(args.mode, args.duration)
    else:
        engine.activate(args.mode)

    lasttime = time.perf_counter()
    try:
        while not system.quit_requested:
            system.update()

            elapsed = time.perf_counter() - lasttime
            time.sleep(max(0, FRAME_TIME - elapsed))
            lasttime = time.perf_counter()

    except KeyboardInterrupt:
        pass
    finally:
        engine.cancel_all()
        if osc is not None:
            osc.stop()
        if visualizer is not None:
            visualizer.close()
        logger.info("Done!")


if __name__ == "__main__":
    main()
