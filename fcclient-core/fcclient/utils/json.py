import json
from datetime import date, datetime

from .strings import to_str


class CustomEncoder(json.JSONEncoder):
    """Helper class to convert JSON documents with datetimes, sets or bytes."""

    def default(self, o):
        if isinstance(o, (datetime, date)):
            return o.isoformat()
        if isinstance(o, (set, frozenset)):
            return sorted(o)
        if isinstance(o, bytes):
            return to_str(o)
        return super(CustomEncoder, self).default(o)


def canonical_json(obj) -> str:
    """Serializes the given document compactly, as it is sent on the wire."""
    return json.dumps(obj, cls=CustomEncoder, separators=(",", ":"))
