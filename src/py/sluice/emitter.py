from enum import Enum
from typing import Any, Callable

from . import config
from .channel import OutputChannel, active
from .errors import ConfigurationError, UnexpectedResponseTypeError
from .http.model import HTTPResponse, HTTPStream, InvalidReturn, Valid, invoke
from .utils.logging import event


class Mode(Enum):
	"""Tells what to do with the output leaking from the app callable."""

	Prepend = "prepend"  # Emitted before the response body (default)
	Append = "append"  # Emitted after the response body
	Clean = "clean"  # Not emitted


MODES: tuple[str, ...] = tuple(_.value for _ in Mode)


class Emitter:
	"""Gets a response from the application callable and emits it on the
	output channel.

	Any output leaking from the callable is buffered and emitted according
	to the output buffering mode:

	- `prepend`, before the response body (default)
	- `append`, after the response body
	- `clean`, not emitted
	"""

	__slots__ = ["app", "mode", "channel", "chunk"]

	def __init__(
		self,
		app: Callable[[], Any],
		mode: Mode | str = Mode.Prepend,
		*,
		channel: OutputChannel | None = None,
		chunk: int | None = None,
	):
		value = mode.value if isinstance(mode, Mode) else mode
		if value not in MODES:
			raise ConfigurationError(mode, MODES)
		self.app: Callable[[], Any] = app
		self.mode: Mode = Mode(value)
		self.channel: OutputChannel | None = channel
		self.chunk: int = config.CHUNK_SIZE if chunk is None else chunk
		# A read of zero or less would drop or slurp the whole body.
		if self.chunk < 1:
			raise ValueError(f"Body chunk size must be at least 1, {self.chunk} given")

	def run(self) -> None:
		channel: OutputChannel = self.channel or active()
		with channel.lock:
			level: int = channel.level
			channel.open()

			match invoke(self.app):
				case Valid(response):
					pass
				case InvalidReturn(value):
					# The captured output stays in the open scope, no
					# response is emitted at all.
					raise UnexpectedResponseTypeError(value)

			# We clean unflushed scopes and get the content of ours.
			channel.resetHeaders()
			while channel.level > level + 1:
				channel.closeDiscard()
			output: bytes = channel.closeGet()

			self.headers(channel, response)
			if self.mode is Mode.Prepend:
				channel.write(output)
			size: int = self.body(channel, response.body)
			if self.mode is Mode.Append:
				channel.write(output)
			channel.flush()

			config.LOG_EMIT and event(
				"Emit",
				response.status,
				Mode=self.mode.value,
				Output=len(output),
				Body=size,
			)

	def headers(self, channel: OutputChannel, response: HTTPResponse) -> None:
		channel.header(
			f"HTTP/{response.protocol} {response.status} {response.message}",
			True,
			response.status,
		)
		for name, values in response.headers.items():
			for value in (values,) if isinstance(values, str) else values:
				channel.header(f"{name}: {value}", False)

	def body(self, channel: OutputChannel, stream: HTTPStream) -> int:
		"""Streams the body in chunks, returning the number of bytes
		written."""
		if stream.seekable():
			stream.rewind()
		size: int = 0
		while not stream.eof():
			size += channel.write(stream.read(self.chunk))
		return size


def run(app: Callable[[], Any], mode: Mode | str = Mode.Prepend) -> None:
	"""Emits the response of the given app on the process-wide channel."""
	Emitter(app, mode).run()


# EOF
