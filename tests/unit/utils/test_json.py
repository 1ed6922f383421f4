import datetime
import json

from fcclient.utils.json import CustomEncoder, canonical_json


def test_custom_encoder():
    document = {
        "time": datetime.datetime(2026, 10, 19, 8, 0, 0),
        "date": datetime.date(2026, 10, 19),
        "set": {"b", "a"},
        "bytes": b"hello",
    }
    assert json.loads(json.dumps(document, cls=CustomEncoder)) == {
        "time": "2026-10-19T08:00:00",
        "date": "2026-10-19",
        "set": ["a", "b"],
        "bytes": "hello",
    }


def test_canonical_json_is_compact():
    assert canonical_json({"serviceName": "svc", "tags": {"k": "v"}}) == '{"serviceName":"svc","tags":{"k":"v"}}'
