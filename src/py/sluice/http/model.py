from typing import (
	Any,
	BinaryIO,
	Callable,
	Mapping,
	NamedTuple,
	Protocol,
	Sequence,
	TypeAlias,
)
from io import BytesIO

# -----------------------------------------------------------------------------
#
# CAPABILITIES
#
# -----------------------------------------------------------------------------
# --
# The emitter does not create responses, it only reads them. These protocols
# describe what it reads, any object exposing these attributes will do.


class HTTPStream(Protocol):
	"""A forward-only byte stream, as exposed by a response body."""

	def eof(self) -> bool: ...

	def read(self, size: int = -1) -> bytes: ...

	def seekable(self) -> bool: ...

	def rewind(self) -> None: ...


class HTTPResponse(Protocol):
	"""The read contract of a response: `protocol` is the version only,
	eg. `1.1`, `message` is the reason phrase and `headers` maps each name to
	the sequence of its values."""

	@property
	def protocol(self) -> str: ...

	@property
	def status(self) -> int: ...

	@property
	def message(self) -> str: ...

	@property
	def headers(self) -> Mapping[str, Sequence[str]]: ...

	@property
	def body(self) -> HTTPStream: ...


RESPONSE_ATTRIBUTES: tuple[str, ...] = ("protocol", "status", "message", "headers")
STREAM_METHODS: tuple[str, ...] = ("eof", "read", "seekable", "rewind")


def isStream(value: Any) -> bool:
	return all(callable(getattr(value, _, None)) for _ in STREAM_METHODS)


def isResponse(value: Any) -> bool:
	"""Tells if the given value satisfies the `HTTPResponse` capabilities."""
	if value is None or isinstance(value, (bool, int, float, str, bytes)):
		return False
	elif not all(hasattr(value, _) for _ in RESPONSE_ATTRIBUTES):
		return False
	else:
		return isStream(getattr(value, "body", None))


# -----------------------------------------------------------------------------
#
# INVOCATION
#
# -----------------------------------------------------------------------------


class Valid(NamedTuple):
	"""The app returned a response."""

	response: HTTPResponse


class InvalidReturn(NamedTuple):
	"""The app returned something that is not a response."""

	value: Any


TInvocation: TypeAlias = Valid | InvalidReturn


def invoke(app: Callable[[], Any]) -> TInvocation:
	"""Calls the app and wraps its return value, so that callers match on
	the result instead of inspecting it."""
	value = app()
	return Valid(value) if isResponse(value) else InvalidReturn(value)


# -----------------------------------------------------------------------------
#
# BODY
#
# -----------------------------------------------------------------------------


class StreamBody:
	"""Adapts a binary file-like object to the `HTTPStream` contract."""

	__slots__ = ["io", "ended"]

	@staticmethod
	def FromBytes(data: bytes) -> "StreamBody":
		return StreamBody(BytesIO(data))

	def __init__(self, io: BinaryIO):
		self.io: BinaryIO = io
		self.ended: bool = False

	def eof(self) -> bool:
		if self.ended:
			return True
		elif self.io.seekable():
			# We peek at the next byte rather than comparing with the size,
			# as the underlying file may still be growing.
			position = self.io.tell()
			if self.io.read(1):
				self.io.seek(position)
				return False
			else:
				self.ended = True
				return True
		else:
			return False

	def read(self, size: int = -1) -> bytes:
		chunk: bytes = self.io.read(size)
		if not chunk:
			self.ended = True
		return chunk

	def seekable(self) -> bool:
		return self.io.seekable()

	def rewind(self) -> None:
		self.io.seek(0)
		self.ended = False

	def __str__(self) -> str:
		return f"StreamBody({self.io})"


# EOF
