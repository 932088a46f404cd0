from typing import Any, Sequence

# -----------------------------------------------------------------------------
#
# ERRORS
#
# -----------------------------------------------------------------------------


def describe(value: Any) -> str:
	"""Describes the runtime type of the given value, as used in error
	messages: `instance of <qualified name>` for objects, the primitive kind
	otherwise."""
	if value is None or isinstance(value, (bool, int, float, str, bytes)):
		return type(value).__name__
	else:
		t = type(value)
		return f"instance of {t.__module__}.{t.__qualname__}"


class EmitError(Exception):
	"""Base class for the errors raised when emitting a response."""


class ConfigurationError(EmitError, ValueError):
	"""Raised when an emitter is given an unknown output buffering mode."""

	def __init__(self, value: Any, options: Sequence[str], origin: str = "sluice.Emitter"):
		self.value: Any = value
		self.options: tuple[str, ...] = tuple(options)
		legal: str = (
			" or ".join(
				[", ".join(f"'{_}'" for _ in self.options[:-1]), f"'{self.options[-1]}'"]
			)
			if len(self.options) > 1
			else "".join(f"'{_}'" for _ in self.options)
		)
		super().__init__(
			f"{origin} output buffering mode must be {legal}, '{value}' given"
		)


class UnexpectedResponseTypeError(EmitError, TypeError):
	"""Raised when the app callable returns something that is not a
	response."""

	def __init__(
		self,
		value: Any,
		expected: str = "sluice.HTTPResponse",
		origin: str = "sluice.Emitter",
	):
		self.value: Any = value
		self.expected: str = expected
		self.received: str = describe(value)
		super().__init__(
			f"{origin} expects the app callable to return an implementation of {expected}, {self.received} returned"
		)


# EOF
