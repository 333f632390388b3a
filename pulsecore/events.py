import heapq
import logging
import time
from enum import Enum
from typing import Dict, List, Optional

import numpy as np

from pulsecore.primitives import Canvas, Frame
from pulsecore.settings import INTENSITY_RANGE, PatternConfig, PatternSettings, clamp
from pulsescenes.modes import PatternMode

logger = logging.getLogger("pulsegrid.engine")

PRESENTATION_RANGE = (60.0, 3600.0, 60.0)


class ClockState(Enum):
    RUNNING = "running"
    PAUSED = "paused"


class FrameClock:
    """
    Shared running/paused flag.

    Timers keep firing at their wall-clock rate while paused; a paused tick
    simply does not advance anything, so resuming never jumps or catches up.
    """

    def __init__(self, running=True):
        self.state = ClockState.RUNNING if running else ClockState.PAUSED

    @property
    def is_running(self):
        return self.state is ClockState.RUNNING

    def toggle(self):
        self.state = ClockState.PAUSED if self.is_running else ClockState.RUNNING
        return self.state

    def pause(self):
        self.state = ClockState.PAUSED

    def resume(self):
        self.state = ClockState.RUNNING


class PatternTimer:
    """One active generator: its private state, tick interval and optional lifetime"""

    def __init__(self, name, mode, canvas, start_time, config=None, duration=None):
        self.name = name
        self.mode = mode
        self.action = mode.scene
        self.interval = mode.tick_interval
        self.config = config
        self.start_time = start_time
        self.duration = duration
        self.next_due = start_time + self.interval
        self.ticks = 0
        self.state = {
            'count': 0,
            'name': name,
            'canvas': canvas,
            'phase': 0.0,
            'primitives': [],
        }

    def __lt__(self, other):
        return self.start_time < other.start_time

    @property
    def canvas(self):
        return self.state['canvas']

    @property
    def phase(self):
        return self.state['phase']

    def start(self, outstate):
        """Setup call: allocate pools and publish the first frame"""
        self.action(self.state, outstate)
        self.state['count'] += 1

    def due(self, now):
        return now >= self.next_due

    def expired(self, now):
        return self.duration is not None and now - self.start_time >= self.duration

    def remaining(self, now):
        if self.duration is None:
            return None
        return max(0.0, self.duration - (now - self.start_time))

    def fire(self, outstate, running):
        self.ticks += 1
        if running:
            self.action(self.state, outstate)
            self.state['count'] += 1
        return self.frame

    def reschedule(self, now):
        self.next_due += self.interval
        # After a stall fire once and carry on from now rather than bursting
        if self.next_due <= now:
            self.next_due = now + self.interval

    def close(self, outstate):
        self.state['count'] = -1
        self.action(self.state, outstate)

    @property
    def frame(self):
        return Frame(
            name=self.name,
            mode=self.mode.value,
            phase=self.state['phase'],
            count=max(0, self.state['count'] - 1),
            canvas=self.canvas,
            primitives=list(self.state['primitives']),
        )


class PatternEngine:
    """
    Drives every active pattern generator.

    All generator state is touched only from tick()/update(), on the caller's
    thread; readers use snapshot() between ticks.
    """

    def __init__(self, settings: Optional[PatternSettings] = None, seed=None, rng=None,
                 canvas: Optional[Canvas] = None, running=True):
        self.settings = settings or PatternSettings()
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.canvas = canvas or Canvas()
        self.clock = FrameClock(running)
        self.timers: Dict[str, PatternTimer] = {}
        self.event_queue: List[PatternTimer] = []

    @property
    def intensity(self):
        return self.settings.intensity

    @intensity.setter
    def intensity(self, value):
        self.settings.intensity = clamp(value, INTENSITY_RANGE)

    @property
    def is_running(self):
        return self.clock.is_running

    def toggle_running(self):
        state = self.clock.toggle()
        logger.info(f"Animation {state.value}")
        return state

    def pause(self):
        self.clock.pause()

    def resume(self):
        self.clock.resume()

    def _outstate(self, timer, now):
        config = timer.config if timer.config is not None else self.settings.settings_for(timer.mode)
        return {
            'config': config.clamped(),
            'intensity': clamp(self.settings.intensity, INTENSITY_RANGE),
            'rng': self.rng,
            'current_time': now,
        }

    def _make_timer(self, mode, canvas, config, name, duration, start_time):
        mode = PatternMode.from_name(mode)
        name = name or mode.value
        config = config.snapshot() if isinstance(config, PatternConfig) else None
        return PatternTimer(name, mode, canvas or self.canvas, start_time, config=config, duration=duration)

    def _start(self, timer, now):
        if timer.name in self.timers:
            self.deactivate(timer.name, now=now)
        timer.start_time = now
        timer.next_due = now + timer.interval
        timer.start(self._outstate(timer, now))
        self.timers[timer.name] = timer
        logger.info(f"Activated {timer.mode.value} as '{timer.name}' ({timer.canvas.width:g}x{timer.canvas.height:g})")
        return timer

    def activate(self, mode, canvas=None, config=None, name=None, duration=None, now=None):
        """Allocate a generator for mode and run its setup. Returns the timer."""
        now = time.time() if now is None else now
        timer = self._make_timer(mode, canvas, config, name, duration, now)
        return self._start(timer, now)

    def schedule_event(self, delay, mode, canvas=None, config=None, name=None, duration=None, now=None):
        """Queue an activation delay seconds from now; update() starts it"""
        now = time.time() if now is None else now
        timer = self._make_timer(mode, canvas, config, name, duration, now + delay)
        heapq.heappush(self.event_queue, timer)
        return timer

    def schedule_presentation(self, mode, duration, delay=0.0, canvas=None, config=None, name=None, now=None):
        """Bounded run of one mode; duration snaps to whole minutes within [1, 60] minutes"""
        low, high, step = PRESENTATION_RANGE
        duration = max(low, min(high, round(float(duration) / step) * step))
        return self.schedule_event(delay, mode, canvas=canvas, config=config, name=name,
                                   duration=duration, now=now)

    def deactivate(self, name, now=None):
        timer = self.timers.pop(name, None)
        if timer is None:
            logger.warning(f"Deactivate ignored: '{name}' is not active")
            return
        now = time.time() if now is None else now
        timer.close(self._outstate(timer, now))
        logger.info(f"Deactivated '{name}' after {timer.ticks} ticks")

    def cancel_all(self, now=None):
        for name in list(self.timers):
            self.deactivate(name, now=now)
        self.event_queue = []

    def tick(self, name=None, now=None):
        """Fire one tick for one timer (or all of them) regardless of wall-clock time"""
        now = time.time() if now is None else now
        names = [name] if name is not None else list(self.timers)
        frames = {}
        for timer_name in names:
            timer = self.timers[timer_name]
            frames[timer_name] = timer.fire(self._outstate(timer, now), self.clock.is_running)
        return frames

    def update(self, now=None):
        """Wall-clock driver: start queued events, retire expired ones, fire due timers"""
        now = time.time() if now is None else now

        while self.event_queue and self.event_queue[0].start_time <= now:
            self._start(heapq.heappop(self.event_queue), now)

        frames = {}
        for timer in list(self.timers.values()):
            if timer.expired(now):
                logger.info(f"Presentation of '{timer.name}' finished")
                self.deactivate(timer.name, now=now)
                continue
            if timer.due(now):
                frames[timer.name] = timer.fire(self._outstate(timer, now), self.clock.is_running)
                timer.reschedule(now)
        return frames

    def snapshot(self, name) -> Frame:
        """Current frame of an active generator, without advancing it"""
        if name not in self.timers:
            raise KeyError(f"'{name}' is not active")
        return self.timers[name].frame

    def time_remaining(self, name, now=None):
        now = time.time() if now is None else now
        return self.timers[name].remaining(now)

    def has_mode(self, mode):
        mode = PatternMode.from_name(mode)
        return any(timer.mode is mode for timer in self.timers.values())
