"""
Basic Hello World Example

This demonstrates emitting a response as a CGI script would.
Features shown:
- A minimal response object, with a streamed body
- Stray `print()` output relocated before the body
- Sluice logging for nicer output (on stderr)

Usage:
    python helloworld.py
    python -m sluice helloworld:app --mode append
"""

from typing import NamedTuple

from sluice import Emitter, HTTPStream, StreamBody
from sluice.utils.logging import info


class Response(NamedTuple):
	protocol: str
	status: int
	message: str
	headers: dict[str, list[str]]
	body: HTTPStream


def app() -> Response:
	"""Responds with Hello World, leaking a debug line on the way."""
	print("debug: this line is relocated by the emitter")
	return Response(
		protocol="1.1",
		status=200,
		message="OK",
		headers={"Content-Type": ["text/plain"], "X-Powered-By": ["sluice"]},
		body=StreamBody.FromBytes(b"Hello, World!\n"),
	)


if __name__ == "__main__":
	info("Emitting Hello World response")
	Emitter(app, "prepend").run()

# EOF
