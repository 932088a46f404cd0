import pytest

from sluice import StandardChannel, use
from sluice.__main__ import load, main
from conftest import split

APP = '''\
from sluice import StreamBody


class Response:
	protocol = "1.1"
	status = 201
	message = "Created"
	headers = {"Content-Type": ["text/plain"]}
	body = StreamBody.FromBytes(b"body")


def app():
	print("stray")
	return Response()


def broken():
	return None
'''


@pytest.fixture
def module(tmp_path, monkeypatch) -> str:
	(tmp_path / "sluice_cli_app.py").write_text(APP)
	monkeypatch.syspath_prepend(str(tmp_path))
	return "sluice_cli_app"


@pytest.fixture
def standard(transport):
	"""Installs a channel that captures `print()`, as when run as CGI."""
	previous = use(StandardChannel(transport))
	try:
		yield
	finally:
		use(previous)


def test_main_emits_response(standard, transport, module):
	assert main([f"{module}:app", "--mode", "append"]) == 0
	lines, payload = split(transport.getvalue())
	assert lines == ["HTTP/1.1 201 Created", "Content-Type: text/plain"]
	assert payload == b"bodystray\n"


def test_main_reports_invalid_return(installed, transport, module, capsys):
	assert main([f"{module}:broken"]) == 1
	assert "UnexpectedResponseTypeError" in capsys.readouterr().err
	assert transport.getvalue() == b""


def test_main_rejects_unknown_mode(module):
	with pytest.raises(SystemExit):
		main([f"{module}:app", "--mode", "flush"])


def test_load(module):
	assert load(f"{module}:app").__name__ == "app"
	with pytest.raises(ValueError):
		load(module)
	with pytest.raises(ValueError):
		load(f"{module}:Response.status")


# EOF
