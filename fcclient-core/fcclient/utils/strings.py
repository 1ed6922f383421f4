import base64
import binascii
import hashlib
import random
import re
import string
import uuid
from typing import Union

from fcclient.constants import DEFAULT_ENCODING


def to_str(obj: Union[str, bytes], encoding: str = DEFAULT_ENCODING, errors="strict") -> str:
    """If ``obj`` is an instance of ``binary_type``, return
    ``obj.decode(encoding, errors)``, otherwise return ``obj``"""
    return obj.decode(encoding, errors) if isinstance(obj, bytes) else obj


def to_bytes(obj: Union[str, bytes], encoding: str = DEFAULT_ENCODING, errors="strict") -> bytes:
    """If ``obj`` is an instance of ``text_type``, return
    ``obj.encode(encoding, errors)``, otherwise return ``obj``"""
    return obj.encode(encoding, errors) if isinstance(obj, str) else obj


def truncate(data: str, max_length: int = 100) -> str:
    data = str(data or "")
    return ("%s..." % data[:max_length]) if len(data) > max_length else data


_re_camel_to_snake_case = re.compile("((?<=[a-z0-9])[A-Z]|(?!^)[A-Z](?=[a-z]))")


def camel_to_snake_case(string: str) -> str:
    return _re_camel_to_snake_case.sub(r"_\1", string).replace("__", "_").lower()


def snake_to_camel_case(string: str, capitalize_first: bool = True) -> str:
    components = string.split("_")
    start_idx = 0 if capitalize_first else 1
    components = [x.title() for x in components[start_idx:]]
    return "".join(components)


def first_char_to_lower(s: str) -> str:
    return s and "%s%s" % (s[0].lower(), s[1:])


def long_uid() -> str:
    return str(uuid.uuid4())


def random_letters(length: int) -> str:
    """Returns a random string of ASCII letters, used to build unique resource names."""
    return "".join(random.choices(string.ascii_letters, k=length))


def md5(string: Union[str, bytes]) -> str:
    m = hashlib.md5()
    m.update(to_bytes(string))
    return m.hexdigest()


def md5_base64(string: Union[str, bytes]) -> str:
    """Returns the base64 encoded MD5 digest, as used by the ``Content-MD5`` header."""
    return base64.b64encode(hashlib.md5(to_bytes(string)).digest()).decode()


def base64_encode(data: Union[str, bytes]) -> str:
    return to_str(base64.b64encode(to_bytes(data)))


def base64_decode(data: Union[str, bytes], strict: bool = False) -> bytes:
    """Decode base64 data - with optional padding, and able to handle urlsafe encoding (containing -/_).

    :param data: the base64 encoded data
    :param strict: if True, only correctly padded data of the standard base64 alphabet is accepted, anything else
        raises a ``binascii.Error``
    """
    data = to_str(data)
    if strict:
        return base64.b64decode(data, validate=True)
    missing_padding = len(data) % 4
    if missing_padding != 0:
        data = data + "=" * (4 - missing_padding)
    if "-" in data or "_" in data:
        return base64.urlsafe_b64decode(data)
    return base64.b64decode(data)


def is_base64(s) -> bool:
    try:
        base64_decode(s, strict=True)
        return True
    except (binascii.Error, ValueError, TypeError):
        return False
