import argparse
import importlib
import os
import sys
from typing import Any, Callable

from . import config
from .emitter import MODES, Emitter
from .errors import EmitError
from .utils.logging import exception


def load(target: str) -> Callable[[], Any]:
	"""Loads the `module:callable` target."""
	module_name, _, attribute = target.partition(":")
	if not module_name or not attribute:
		raise ValueError(f"Expected a target like 'module:callable', got: {target}")
	module = importlib.import_module(module_name)
	value: Any = module
	for name in attribute.split("."):
		value = getattr(value, name)
	if not callable(value):
		raise ValueError(f"Target is not callable: {target}")
	return value


def main(args: list[str] | None = None) -> int:
	parser = argparse.ArgumentParser(
		prog="sluice",
		description="Emits the response of an app callable on the standard output",
		formatter_class=argparse.ArgumentDefaultsHelpFormatter,
	)
	parser.add_argument(
		"target",
		help="The app callable, as 'module:callable'",
	)
	parser.add_argument(
		"-m",
		"--mode",
		action="store",
		dest="mode",
		choices=MODES,
		help="What to do with the output leaking from the app",
		default=config.MODE,
	)
	options = parser.parse_args(args)
	# The app is usually next to the script that is run, as in CGI.
	if os.getcwd() not in sys.path:
		sys.path.insert(0, os.getcwd())
	try:
		Emitter(load(options.target), options.mode).run()
	except EmitError as e:
		exception(e)
		return 1
	return 0


if __name__ == "__main__":
	sys.exit(main())

# EOF
