import sys
import threading
import time


class Progress:
    """Receives status messages at pipeline checkpoints. The base class ignores them."""

    def update(self, message: str):
        pass

    def finish(self):
        pass


class Spinner(Progress):
    """Single-line '[elapsed] message' status redrawn on a background thread."""

    FRAMES = '|/-\\'

    def __init__(self, stream=None, interval: float = 0.1):
        self.stream = stream or sys.stderr
        self.interval = interval
        self.message = ''
        self._started = time.monotonic()
        self._stop = threading.Event()
        self._lock = threading.Lock()
        self._thread = None

    def _elapsed(self) -> str:
        seconds = int(time.monotonic() - self._started)
        hours, rest = divmod(seconds, 3600)
        minutes, seconds = divmod(rest, 60)
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"

    def _draw(self, frame: str):
        with self._lock:
            self.stream.write(f"\r\033[K{frame} [{self._elapsed()}] {self.message}")
            self.stream.flush()

    def _run(self):
        tick = 0
        while not self._stop.wait(self.interval):
            self._draw(self.FRAMES[tick % len(self.FRAMES)])
            tick += 1

    def update(self, message: str):
        self.message = message
        if self._thread is None:
            self._thread = threading.Thread(target=self._run, daemon=True)
            self._thread.start()

    def finish(self):
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
            with self._lock:
                self.stream.write(f"\r\033[K[{self._elapsed()}] {self.message}\n")
                self.stream.flush()
