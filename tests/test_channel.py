import sys
from io import BytesIO

import pytest

from sluice import OutputChannel, StandardChannel, active, use
from sluice.channel import ChannelWriter


def test_write_without_scope_sends_headers_first(channel, transport):
	channel.header("Content-Type: text/plain")
	channel.write("Hello")
	channel.write(b", World")
	assert transport.getvalue() == (
		b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\n\r\nHello, World"
	)
	assert channel.sent


def test_write_in_scope_is_captured(channel, transport):
	assert channel.open() == 1
	channel.write("captured")
	assert channel.captured() == b"captured"
	assert transport.getvalue() == b""
	assert channel.closeGet() == b"captured"
	assert channel.level == 0


def test_nested_scopes(channel):
	channel.open()
	channel.write("outer")
	channel.open()
	channel.write("inner")
	assert channel.level == 2
	channel.closeDiscard()
	assert channel.captured() == b"outer"


def test_close_without_scope(channel):
	with pytest.raises(RuntimeError):
		channel.closeDiscard()
	with pytest.raises(RuntimeError):
		channel.closeGet()
	with pytest.raises(RuntimeError):
		channel.captured()


def test_header_replace(channel):
	channel.header("Set-Cookie: a=1")
	channel.header("set-cookie: b=2", False)
	channel.header("X-A: 1")
	assert channel.headers == ["Set-Cookie: a=1", "set-cookie: b=2", "X-A: 1"]
	channel.header("Set-Cookie: c=3")
	assert channel.headers == ["X-A: 1", "Set-Cookie: c=3"]


def test_status_line(channel):
	channel.header("HTTP/1.0 404 Not Found", True, 404)
	assert channel.head() == b"HTTP/1.0 404 Not Found\r\n\r\n"
	assert channel.code == 404


def test_default_status_line(channel):
	channel.header("X-A: 1", status=404)
	assert channel.head() == b"HTTP/1.1 404 Not Found\r\nX-A: 1\r\n\r\n"
	channel.resetHeaders()
	assert channel.head() == b"HTTP/1.1 200 OK\r\n\r\n"


def test_header_after_sent_is_ignored(channel, transport, capsys):
	channel.flush()
	assert channel.header("X-Late: 1") is False
	assert "Headers already sent" in capsys.readouterr().err
	assert transport.getvalue() == b"HTTP/1.1 200 OK\r\n\r\n"


def test_flush_keeps_headers_while_scope_open(channel, transport):
	channel.open()
	channel.flush()
	assert not channel.sent
	assert transport.getvalue() == b""


def test_non_ascii_header(channel):
	channel.header("X-Name: Café")
	assert b"X-Name: Caf\xe9\r\n" in channel.head()


def test_standard_channel_redirects_stdout():
	transport = BytesIO()
	channel = StandardChannel(transport)
	stdout = sys.stdout
	channel.open()
	try:
		assert isinstance(sys.stdout, ChannelWriter)
		print("stray")
		sys.stdout.buffer.write(b"raw")
		channel.open()
		print("nested")
		channel.closeDiscard()
		assert isinstance(sys.stdout, ChannelWriter)
	finally:
		output = channel.closeGet()
	assert sys.stdout is stdout
	assert output == b"stray\nraw"
	assert transport.getvalue() == b""


def test_active_channel(channel):
	previous = use(channel)
	try:
		assert active() is channel
	finally:
		use(previous)



def test_header_outside_latin1_is_kept(channel):
	channel.header("X-Price: 5€")
	assert "X-Price: 5€\r\n".encode("utf8") in channel.head()


# EOF
