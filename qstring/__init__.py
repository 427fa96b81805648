"""Order-preserving, immutable URL query string values."""

__version__ = "0.1.0"

from qstring.codec import decode, decode_key, encode  # noqa: E402
from qstring.models import MISSING, Pair  # noqa: E402
from qstring.query_string import QueryString, environ_source, from_environ, parse  # noqa: E402

__all__ = [
    "MISSING",
    "Pair",
    "QueryString",
    "__version__",
    "decode",
    "decode_key",
    "encode",
    "environ_source",
    "from_environ",
    "parse",
]
