from io import BytesIO
from typing import Iterator, NamedTuple

import pytest

from sluice import OutputChannel, StreamBody, use


class Transport(BytesIO):
	"""A transport that keeps track of each individual write."""

	def __init__(self) -> None:
		super().__init__()
		self.writes: list[bytes] = []

	def write(self, data) -> int:  # type: ignore[override]
		self.writes.append(bytes(data))
		return super().write(data)


class Response(NamedTuple):
	protocol: str
	status: int
	message: str
	headers: dict[str, list[str]]
	body: object


class OneWayBody:
	"""A body that can't be rewound, as read from a pipe."""

	def __init__(self, data: bytes):
		self.io = BytesIO(data)
		self.ended = False

	def eof(self) -> bool:
		return self.ended

	def read(self, size: int = -1) -> bytes:
		chunk = self.io.read(size)
		if not chunk:
			self.ended = True
		return chunk

	def seekable(self) -> bool:
		return False

	def rewind(self) -> None:
		raise AssertionError("A one-way body can't be rewound")


def respond(
	body: bytes | object = b"",
	status: int = 200,
	message: str = "OK",
	headers: dict[str, list[str]] | None = None,
	protocol: str = "1.1",
) -> Response:
	return Response(
		protocol=protocol,
		status=status,
		message=message,
		headers=headers or {},
		body=StreamBody.FromBytes(body) if isinstance(body, bytes) else body,
	)


def split(data: bytes) -> tuple[list[str], bytes]:
	"""Splits what was emitted as the head lines and the payload."""
	head, _, payload = data.partition(b"\r\n\r\n")
	return head.decode("latin-1").split("\r\n"), payload


@pytest.fixture
def transport() -> Transport:
	return Transport()


@pytest.fixture
def channel(transport: Transport) -> OutputChannel:
	return OutputChannel(transport)


@pytest.fixture
def installed(channel: OutputChannel) -> Iterator[OutputChannel]:
	"""Installs the test channel as the process-wide one."""
	previous = use(channel)
	try:
		yield channel
	finally:
		use(previous)


# EOF
