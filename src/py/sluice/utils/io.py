import sys
from typing import BinaryIO

DEFAULT_ENCODING: str = "utf8"
EOL: bytes = b"\r\n"


def asBytes(value: str | bytes | bytearray | None) -> bytes:
	if isinstance(value, bytes):
		return value
	elif isinstance(value, bytearray):
		return bytes(value)
	elif isinstance(value, str):
		return value.encode(DEFAULT_ENCODING)
	elif value is None:
		return b""
	else:
		raise ValueError(f"Expected bytes or str, got: {value}")


def asHeaderBytes(line: str) -> bytes:
	"""Encodes a header line as-is: latin-1 when it can be, which is what
	HTTP/1.1 historically allows, and UTF-8 otherwise. Nothing is escaped
	or replaced."""
	try:
		return line.encode("latin-1")
	except UnicodeEncodeError:
		return line.encode(DEFAULT_ENCODING)


def stdoutBinary() -> BinaryIO:
	"""Returns the binary stream behind the standard output."""
	# NOTE: The stream may have been replaced by a text-only object (eg. in
	# some embedded interpreters), in which case there is no buffer.
	buffer = getattr(sys.stdout, "buffer", None)
	if buffer is None:
		raise RuntimeError(f"Standard output has no binary buffer: {sys.stdout}")
	return buffer


# EOF
