from .http.model import HTTPResponse, HTTPStream, StreamBody  # NOQA: F401
from .channel import OutputChannel, StandardChannel, active, use  # NOQA: F401
from .errors import EmitError, ConfigurationError, UnexpectedResponseTypeError  # NOQA: F401
from .emitter import Emitter, Mode, run  # NOQA: F401

__version__ = "1.0.0"

# EOF
