import io
import sys
import threading
from http import HTTPStatus
from typing import BinaryIO, TextIO

from mypy_extensions import mypyc_attr

from .config import DEFAULT_ENCODING
from .utils.io import EOL, asBytes, asHeaderBytes, stdoutBinary
from .utils.logging import debug, logged, warning

# --
# == Output channel
#
# The channel is the process-wide, write-once output of a response. Writes
# are intercepted by a stack of buffering scopes, and go to the transport
# only when no scope is open. Headers are queued, and sent right before the
# first bytes reach the transport.


def headerName(line: str) -> str:
	return line.split(":", 1)[0].strip().lower()


def statusPhrase(status: int) -> str:
	try:
		return HTTPStatus(status).phrase
	except ValueError:
		return "Unknown status"


@mypyc_attr(allow_interpreted_subclasses=True)
class OutputChannel:
	"""An output channel writing to a binary transport, with nested
	buffering scopes and queued headers."""

	def __init__(self, transport: BinaryIO, *, protocol: str = "1.1"):
		self.transport: BinaryIO = transport
		self.protocol: str = protocol
		self.scopes: list[bytearray] = []
		self.statusLine: str | None = None
		self.headers: list[str] = []
		self.code: int = 200
		self.sent: bool = False
		self.lock: threading.RLock = threading.RLock()

	@property
	def level(self) -> int:
		return len(self.scopes)

	# =========================================================================
	# SCOPES
	# =========================================================================

	def open(self) -> int:
		"""Opens a new buffering scope and returns the new level."""
		self.scopes.append(bytearray())
		return len(self.scopes)

	def captured(self) -> bytes:
		if not self.scopes:
			raise RuntimeError("Output channel has no open buffering scope")
		return bytes(self.scopes[-1])

	def closeDiscard(self) -> None:
		self._pop()

	def closeGet(self) -> bytes:
		return bytes(self._pop())

	def _pop(self) -> bytearray:
		if not self.scopes:
			raise RuntimeError("Output channel has no open buffering scope")
		return self.scopes.pop()

	# =========================================================================
	# HEADERS
	# =========================================================================

	def header(self, line: str, replace: bool = True, status: int | None = None) -> bool:
		"""Queues the given header line. Lines starting with `HTTP/` are
		status lines. Unless `replace` is false, any previous line with
		the same name is removed."""
		if self.sent:
			warning("Headers already sent, header ignored", Header=line)
			return False
		if line.startswith("HTTP/"):
			self.statusLine = line
		else:
			if replace:
				name: str = headerName(line)
				self.headers = [_ for _ in self.headers if headerName(_) != name]
			self.headers.append(line)
		if status is not None:
			self.code = status
		return True

	def resetHeaders(self) -> None:
		self.statusLine = None
		self.headers.clear()
		self.code = 200

	def head(self) -> bytes:
		"""Serializes the queued status line and headers."""
		lines: list[str] = [
			self.statusLine
			or f"HTTP/{self.protocol} {self.code} {statusPhrase(self.code)}"
		] + self.headers
		return b"".join(asHeaderBytes(_) + EOL for _ in lines) + EOL

	def sendHeaders(self) -> bool:
		if self.sent:
			return False
		# NOTE: We mark as sent first, so that a failing transport does not
		# send a second head.
		self.sent = True
		head = self.head()
		logged(debug) and debug(
			"Sending headers", Status=self.code, Headers=len(self.headers)
		)
		self.transport.write(head)
		return True

	# =========================================================================
	# OUTPUT
	# =========================================================================

	def write(self, data: str | bytes | bytearray) -> int:
		payload: bytes = asBytes(data)
		if self.scopes:
			self.scopes[-1] += payload
		elif payload:
			self.sendHeaders()
			self.transport.write(payload)
		return len(payload)

	def flush(self) -> None:
		"""Sends the headers and flushes the transport, unless a scope is
		still open."""
		if self.scopes:
			return
		self.sendHeaders()
		self.transport.flush()

	def __str__(self) -> str:
		return f"{self.__class__.__name__}(level={self.level}, sent={self.sent})"


# -----------------------------------------------------------------------------
#
# STANDARD OUTPUT
#
# -----------------------------------------------------------------------------


class ChannelBuffer(io.RawIOBase):
	"""Binary view of an output channel, exposed as `sys.stdout.buffer`."""

	def __init__(self, channel: OutputChannel):
		super().__init__()
		self.channel: OutputChannel = channel

	def writable(self) -> bool:
		return True

	def write(self, data: bytes | bytearray) -> int:  # type: ignore[override]
		return self.channel.write(bytes(data))


class ChannelWriter(io.TextIOBase):
	"""Text stream that stands in for `sys.stdout` while a buffering scope
	is open, so that `print()` ends up in the channel."""

	def __init__(self, channel: OutputChannel, encoding: str = DEFAULT_ENCODING):
		super().__init__()
		self.channel: OutputChannel = channel
		self._encoding: str = encoding
		self._buffer: ChannelBuffer = ChannelBuffer(channel)

	@property
	def encoding(self) -> str:  # type: ignore[override]
		return self._encoding

	@property
	def buffer(self) -> ChannelBuffer:
		return self._buffer

	def writable(self) -> bool:
		return True

	def isatty(self) -> bool:
		return False

	def write(self, text: str) -> int:
		self.channel.write(text.encode(self._encoding))
		return len(text)


@mypyc_attr(allow_interpreted_subclasses=True)
class StandardChannel(OutputChannel):
	"""The channel of a CGI-style process, writing to the standard output.
	While a scope is open, `sys.stdout` is redirected to the channel."""

	def __init__(self, transport: BinaryIO | None = None, *, protocol: str = "1.1"):
		super().__init__(stdoutBinary() if transport is None else transport, protocol=protocol)
		self.stdout: TextIO | None = None

	def open(self) -> int:
		level = super().open()
		if level == 1:
			self.stdout = sys.stdout
			# Anything the previous stdout still holds must go out before
			# the response.
			self.stdout.flush()
			sys.stdout = ChannelWriter(self)
		return level

	def _pop(self) -> bytearray:
		scope = super()._pop()
		if not self.scopes and self.stdout is not None:
			sys.stdout = self.stdout
			self.stdout = None
		return scope


# -----------------------------------------------------------------------------
#
# ACTIVE CHANNEL
#
# -----------------------------------------------------------------------------

ACTIVE: OutputChannel | None = None


def active() -> OutputChannel:
	"""Returns the process-wide output channel, creating a standard one
	on first use."""
	global ACTIVE
	if ACTIVE is None:
		ACTIVE = StandardChannel()
	return ACTIVE


def use(channel: OutputChannel | None) -> OutputChannel | None:
	"""Installs the given channel as the process-wide one, returning the
	previous one."""
	global ACTIVE
	previous, ACTIVE = ACTIVE, channel
	return previous


# EOF
