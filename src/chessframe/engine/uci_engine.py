"""UCI engine subprocess wrapped as an :class:`IMoveOracle`."""

from __future__ import annotations

import logging
import queue
import shlex
import subprocess
import threading
import time
from collections.abc import Sequence
from dataclasses import dataclass

from chessframe.core.errors import OracleError
from chessframe.game.interfaces import IMoveOracle, SearchLimit

_LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 60_000
_QUIT_GRACE_S = 2.0
_EOF = None


@dataclass(frozen=True, slots=True)
class EngineOption:
    """One ``option name ... type ...`` line of the handshake."""

    name: str
    type: str
    default: str | None = None


def _parse_option(line: str) -> EngineOption | None:
    tokens = line.split()
    if "name" not in tokens or "type" not in tokens:
        return None
    name_at = tokens.index("name")
    type_at = tokens.index("type")
    if type_at < name_at:
        return None
    name = " ".join(tokens[name_at + 1 : type_at])
    if not name or type_at + 1 >= len(tokens):
        return None
    default = None
    if "default" in tokens:
        default_at = tokens.index("default")
        rest = []
        for token in tokens[default_at + 1 :]:
            if token in ("min", "max", "var"):
                break
            rest.append(token)
        default = " ".join(rest)
    return EngineOption(name, tokens[type_at + 1], default)


class UciEngine(IMoveOracle):
    """A UCI engine process.

    Construction spawns the process and completes the ``uci`` / ``isready``
    handshake, blocking up to *default_timeout_ms*.  Every later command
    waits at most that long too.  Failures (a dead process, a timeout,
    an engine that cannot be started) raise :class:`OracleError`.

    The process is released by :meth:`close` or by leaving a ``with``
    block; closing twice is a no-op.

    Args:
        command: Engine executable and arguments; a string is split the
            way a shell would.
        default_timeout_ms: Per-command timeout, also the search budget
            when a :class:`SearchLimit` gives neither depth nor time.
    """

    __slots__ = (
        "_command",
        "_timeout_ms",
        "_process",
        "_lines",
        "_reader",
        "_lock",
        "_closed",
        "name",
        "author",
        "options",
    )

    def __init__(
        self,
        command: str | Sequence[str],
        default_timeout_ms: int = DEFAULT_TIMEOUT_MS,
    ) -> None:
        self._command = shlex.split(command) if isinstance(command, str) else list(command)
        self._timeout_ms = default_timeout_ms
        self._lines: queue.Queue[str | None] = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False
        self.name = ""
        self.author = ""
        self.options: dict[str, EngineOption] = {}

        try:
            self._process = subprocess.Popen(
                self._command,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
                bufsize=1,
            )
        except OSError as exc:
            raise OracleError(f"Cannot start engine {self._command!r}: {exc}") from exc

        self._reader = threading.Thread(
            target=self._read_output, name="chessframe-uci-reader", daemon=True
        )
        self._reader.start()

        try:
            self._handshake()
        except OracleError:
            self.close()
            raise
        _LOGGER.info("Started engine %s (%s)", self.name or "?", self._command[0])

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def default_timeout_ms(self) -> int:
        return self._timeout_ms

    @property
    def closed(self) -> bool:
        return self._closed

    # ── IMoveOracle impl ─────────────────────────────────────────────────

    def new_game(self) -> None:
        with self._lock:
            self._send("ucinewgame")
            self._sync()

    def position_fen(self, fen: str) -> None:
        with self._lock:
            self._send(f"position fen {fen}")

    def best_move(self, limit: SearchLimit) -> str:
        if limit.depth is not None:
            go = f"go depth {limit.depth}"
            timeout_ms = self._timeout_ms
        else:
            move_time = limit.move_time_ms or self._timeout_ms
            go = f"go movetime {move_time}"
            timeout_ms = move_time + self._timeout_ms
        with self._lock:
            self._send(go)
            line = self._wait_for("bestmove", timeout_ms)
        tokens = line.split()
        if len(tokens) < 2 or tokens[1] == "(none)":
            raise OracleError(f"Engine found no move: {line!r}")
        return tokens[1]

    def close(self) -> None:
        """Ask the engine to quit, then kill it if it lingers."""
        if self._closed:
            return
        self._closed = True
        process = self._process
        if process.poll() is None:
            try:
                process.stdin.write("quit\n")
                process.stdin.flush()
            except (BrokenPipeError, OSError, ValueError) as exc:
                _LOGGER.debug("Engine pipe already closed: %s", exc)
            try:
                process.wait(timeout=_QUIT_GRACE_S)
            except subprocess.TimeoutExpired:
                process.kill()
                process.wait()
        self._reader.join(timeout=_QUIT_GRACE_S)
        for stream in (process.stdin, process.stdout):
            if stream is None:
                continue
            try:
                stream.close()
            except (BrokenPipeError, OSError) as exc:
                _LOGGER.debug("Dropping unsent engine input: %s", exc)
        _LOGGER.info("Closed engine %s", self.name or self._command[0])

    # ── Options ──────────────────────────────────────────────────────────

    def set_option(self, name: str, value: object) -> None:
        if isinstance(value, bool):
            value = "true" if value else "false"
        with self._lock:
            self._send(f"setoption name {name} value {value}")
            self._sync()

    def set_threads(self, threads: int) -> None:
        self.set_option("Threads", threads)

    def set_hash(self, megabytes: int) -> None:
        self.set_option("Hash", megabytes)

    def set_limit_strength(self, limit_strength: bool) -> None:
        self.set_option("UCI_LimitStrength", limit_strength)

    def set_elo(self, elo: int) -> None:
        self.set_option("UCI_Elo", elo)

    # ── Protocol ─────────────────────────────────────────────────────────

    def _handshake(self) -> None:
        self._send("uci")
        deadline = time.monotonic() + self._timeout_ms / 1000
        while True:
            line = self._next_line(deadline)
            if line == "uciok":
                break
            if line.startswith("id name "):
                self.name = line[len("id name ") :].strip()
            elif line.startswith("id author "):
                self.author = line[len("id author ") :].strip()
            elif line.startswith("option "):
                option = _parse_option(line)
                if option is not None:
                    self.options[option.name] = option
        self._sync()

    def _sync(self) -> None:
        self._send("isready")
        self._wait_for("readyok", self._timeout_ms)

    def _send(self, command: str) -> None:
        if self._closed:
            raise OracleError("Engine is closed")
        _LOGGER.debug("> %s", command)
        try:
            self._process.stdin.write(command + "\n")
            self._process.stdin.flush()
        except (BrokenPipeError, OSError, ValueError) as exc:
            raise OracleError(f"Engine pipe closed: {exc}") from exc

    def _wait_for(self, prefix: str, timeout_ms: int) -> str:
        deadline = time.monotonic() + timeout_ms / 1000
        while True:
            line = self._next_line(deadline)
            if line == prefix or line.startswith(prefix + " "):
                return line

    def _next_line(self, deadline: float) -> str:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise OracleError("Engine timed out")
        try:
            line = self._lines.get(timeout=remaining)
        except queue.Empty:
            raise OracleError("Engine timed out") from None
        if line is _EOF:
            # Keep the marker for anyone waiting after us.
            self._lines.put(_EOF)
            raise OracleError(f"Engine exited (code {self._process.poll()})")
        return line

    def _read_output(self) -> None:
        stdout = self._process.stdout
        try:
            for raw in stdout:
                line = raw.strip()
                if line:
                    _LOGGER.debug("< %s", line)
                    self._lines.put(line)
        except (OSError, ValueError) as exc:
            _LOGGER.debug("Engine output closed: %s", exc)
        finally:
            self._lines.put(_EOF)

    # ── Context manager ──────────────────────────────────────────────────

    def __enter__(self) -> UciEngine:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "running"
        return f"UciEngine({self.name or self._command[0]!r}, {state})"
