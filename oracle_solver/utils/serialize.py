"""
Base64 and hex codecs, plus loaders for the line-oriented data files that
accompany the exercises.
"""

import base64
import binascii
from pathlib import Path
from typing import Callable, List, Union

from ..core.errors import DecodeError

PathLike = Union[str, Path]


def to_base64(data: bytes) -> str:
    return base64.b64encode(data).decode('ascii')


def from_base64(text: str) -> bytes:
    """
    Decode standard base64. The input length must be a multiple of 4 and
    unused trailing bits must be zero.
    """
    if len(text) % 4 != 0:
        raise DecodeError("input length needs to be multiple of 4")
    try:
        data = base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as err:
        raise DecodeError(f"not a valid base64 string: {text!r}") from err
    # b64decode silently drops non-zero padding bits
    if to_base64(data) != text:
        raise DecodeError("input not padded with zero")
    return data


def to_hex(data: bytes) -> str:
    return data.hex()


def from_hex(text: str) -> bytes:
    if len(text) % 2 != 0:
        raise DecodeError("input length needs to be multiple of 2")
    try:
        return bytes.fromhex(text)
    except ValueError as err:
        raise DecodeError(f"not a valid hex string: {text!r}") from err


def from_base64_file(path: PathLike) -> bytes:
    """Decode a base64 file whose content is wrapped over several lines."""
    with open(path, "r") as f:
        content = "".join(line.strip() for line in f)
    return from_base64(content)


def _from_lines(path: PathLike, converter: Callable[[str], bytes]) -> List[bytes]:
    with open(path, "r") as f:
        return [converter(line.strip()) for line in f if line.strip()]


def from_base64_lines(path: PathLike) -> List[bytes]:
    return _from_lines(path, from_base64)


def from_hex_lines(path: PathLike) -> List[bytes]:
    return _from_lines(path, from_hex)
