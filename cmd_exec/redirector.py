"""Background forwarding of one readable stream into one text sink."""

from __future__ import annotations

import codecs
import io
import locale
import logging
import threading
import typing as t

from ._validators import validate_buffer_size
from .config import DECODE_ERRORS, DEFAULT_BUFFER_SIZE

logger = logging.getLogger(__name__)


class StreamRedirector:
    """Copy *source* into *destination* chunk by chunk on a daemon thread.

    Each iteration reads up to ``buffer_size`` units, writes exactly what was
    read and flushes the destination, so output appears as it is produced
    rather than in large batches. An empty read ends the loop.

    Binary sources exposing ``read1`` (such as process pipes) are read without
    waiting for a full buffer and decoded incrementally; ``buffer_size`` then
    counts bytes. Text sources are read with ``read`` and ``buffer_size``
    counts characters.

    The destination is never locked. Two redirectors sharing one sink may
    interleave their chunks.
    """

    def __init__(
        self,
        source: t.IO[t.Any],
        destination: t.TextIO,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        *,
        encoding: str | None = None,
        close_source: bool = False,
        name: str | None = None,
    ) -> None:
        """Create a redirector; call :meth:`start` to begin forwarding."""
        validate_buffer_size(buffer_size)
        self._source = source
        self._destination = destination
        self._buffer_size = buffer_size
        self._encoding = encoding or locale.getpreferredencoding(False)
        self._close_source = close_source
        self._name = name or "stream-redirector"
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()
        self._finished = threading.Event()
        self._exception: Exception | None = None

    @property
    def buffer_size(self) -> int:
        """Return the maximum chunk size moved per iteration."""
        return self._buffer_size

    @property
    def done(self) -> bool:
        """Return ``True`` once the forwarding loop has ended."""
        return self._finished.is_set()

    @property
    def exception(self) -> Exception | None:
        """Return the error that stopped forwarding early, if any."""
        return self._exception

    def start(self) -> StreamRedirector:
        """Start forwarding in the background and return immediately."""
        with self._lock:
            if self._thread is not None:
                msg = f"{self._name} already started"
                raise RuntimeError(msg)
            self._thread = threading.Thread(
                target=self._run, name=self._name, daemon=True
            )
            thread = self._thread

        thread.start()
        logger.debug("Started %s (buffer_size=%d)", self._name, self._buffer_size)
        return self

    def wait(self, timeout: float | None = None) -> bool:
        """Block until forwarding ends; return ``False`` if *timeout* expired."""
        return self._finished.wait(timeout)

    def forward(self) -> None:
        """Run the copy loop on the calling thread until end-of-stream."""
        read = getattr(self._source, "read1", None) or self._source.read
        decoder: io.IncrementalNewlineDecoder | None = None

        while True:
            chunk = read(self._buffer_size)
            if not chunk:
                break
            if isinstance(chunk, bytes):
                decoder = decoder or self._new_decoder()
                self._emit(decoder.decode(chunk))
            else:
                self._emit(chunk)

        if decoder is not None:
            self._emit(decoder.decode(b"", final=True))

    def _new_decoder(self) -> io.IncrementalNewlineDecoder:
        """Return a decoder that also normalises newlines like text mode does."""
        decoder = codecs.getincrementaldecoder(self._encoding)(errors=DECODE_ERRORS)
        return io.IncrementalNewlineDecoder(decoder, translate=True)

    def _emit(self, text: str) -> None:
        if not text:
            return
        self._destination.write(text)
        self._destination.flush()

    def _run(self) -> None:
        try:
            self.forward()
        except Exception as exc:  # noqa: BLE001 - surfaced via ``exception``
            self._exception = exc
            logger.warning("%s stopped early: %s", self._name, exc)
        finally:
            if self._close_source:
                self._close(self._source)
            self._finished.set()
            logger.debug("Finished %s", self._name)

    def _close(self, stream: t.IO[t.Any]) -> None:
        try:
            stream.close()
        except OSError as exc:
            logger.debug("Ignoring error closing %s source: %s", self._name, exc)


__all__ = ["StreamRedirector"]
