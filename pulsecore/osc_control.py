import logging
import queue
import socket
import threading

from pythonosc.dispatcher import Dispatcher
from pythonosc.osc_server import ThreadingOSCUDPServer

from pulsecore.settings import BRIGHTNESS_RANGE, LINE_WIDTH_RANGE, SPEED_RANGE, clamp
from pulsescenes.modes import PatternMode

logger = logging.getLogger("pulsegrid.osc")

PREFIX = "/pulsegrid"
DEFAULT_PORT = 5005
SETTING_RANGES = {
    'speed': SPEED_RANGE,
    'brightness': BRIGHTNESS_RANGE,
    'line_width': LINE_WIDTH_RANGE,
}


class OscControl:
    """
    Receives OSC messages on a background thread and queues them.

    Nothing here touches the engine: the loop thread calls drain() and hands
    the messages to apply_messages().
    """

    def __init__(self, host="0.0.0.0", port=DEFAULT_PORT, maxsize=1000):
        self.messages = queue.Queue(maxsize=maxsize)
        self.dispatcher = Dispatcher()
        self.dispatcher.set_default_handler(self.handle)
        self.host = host
        self.port = port
        self.server = None
        self.thread = None

    def start(self):
        self.server = ThreadingOSCUDPServer((self.host, self.port), self.dispatcher)
        self.server.socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.thread = threading.Thread(target=self._run, daemon=True)
        self.thread.start()

    def _run(self):
        logger.info(f"OSC control listening on {self.host}:{self.port}")
        try:
            self.server.serve_forever()
        except OSError as e:
            logger.error(f"OSC server error: {e}")

    def stop(self):
        if self.server is not None:
            self.server.shutdown()
            self.server.server_close()
            self.server = None

    def handle(self, address, *args):
        """Default dispatcher handler for all addresses"""
        try:
            self.messages.put_nowait((address, args))
        except queue.Full:
            logger.warning("OSC message queue full, dropping message")

    def drain(self):
        """All messages received since the last call"""
        messages = []
        try:
            while True:
                messages.append(self.messages.get_nowait())
        except queue.Empty:
            pass
        return messages


def apply_messages(engine, messages):
    """Apply queued OSC messages to the engine. Returns how many were understood."""
    applied = 0
    for address, args in messages:
        try:
            if _apply(engine, address, args):
                applied += 1
            else:
                logger.debug(f"Ignoring OSC message {address} {args}")
        except (ValueError, IndexError, TypeError) as e:
            logger.warning(f"Bad OSC message {address} {args}: {e}")
    return applied


def _apply(engine, address, args):
    if not address.startswith(PREFIX + "/"):
        return False
    command = address[len(PREFIX) + 1:]

    if command == "toggle":
        engine.toggle_running()
    elif command == "running":
        if int(args[0]):
            engine.resume()
        else:
            engine.pause()
    elif command == "intensity":
        engine.intensity = float(args[0])
    elif command in SETTING_RANGES:
        config = engine.settings.settings_for(PatternMode.from_name(args[0]))
        setattr(config, command, clamp(args[1], SETTING_RANGES[command]))
    elif command == "scheme":
        config = engine.settings.settings_for(PatternMode.from_name(args[0]))
        config.color_scheme = engine.settings.scheme_named(args[1])
    elif command == "activate":
        engine.activate(args[0])
    elif command == "deactivate":
        engine.deactivate(args[0])
    else:
        return False
    return True
