"""Signature table for the built-in content classifier.

Descriptions follow the libmagic convention: a short category first, then
optional comma-separated detail ("PNG image data, 16 x 16"). The scanner
only keeps the part before the first separator.
"""

from __future__ import annotations

import struct
from typing import Callable, Optional

Describer = Callable[[bytes], str]


def _pdf(head: bytes) -> str:
    version = head[5:8].decode("ascii", errors="replace")
    return f"PDF document, version {version}"


def _png(head: bytes) -> str:
    if len(head) >= 24 and head[12:16] == b"IHDR":
        width, height = struct.unpack(">II", head[16:24])
        return f"PNG image data, {width} x {height}"
    return "PNG image data"


def _gif(head: bytes) -> str:
    version = head[3:6].decode("ascii", errors="replace")
    if len(head) >= 10:
        width, height = struct.unpack("<HH", head[6:10])
        return f"GIF image data, version {version}, {width} x {height}"
    return f"GIF image data, version {version}"


def _elf(head: bytes) -> str:
    bits = {1: "32-bit", 2: "64-bit"}.get(head[4] if len(head) > 4 else 0, "invalid class")
    order = {1: "LSB", 2: "MSB"}.get(head[5] if len(head) > 5 else 0, "invalid byte order")
    return f"ELF {bits} {order} executable"


def _mz(head: bytes) -> str:
    if len(head) >= 0x40:
        (pe_offset,) = struct.unpack("<I", head[0x3C:0x40])
        if head[pe_offset:pe_offset + 4] == b"PE\x00\x00":
            return "PE32 executable, for MS Windows"
    return "MS-DOS executable"


def _riff(head: bytes) -> str:
    kind = head[8:12]
    if kind == b"WAVE":
        return "RIFF (little-endian) data, WAVE audio"
    if kind == b"WEBP":
        return "RIFF (little-endian) data, Web/P image"
    if kind == b"AVI ":
        return "RIFF (little-endian) data, AVI"
    return "RIFF (little-endian) data"


def _constant(description: str) -> Describer:
    return lambda head: description


# (offset, signature, describer), checked in order
SIGNATURES: list[tuple[int, bytes, Describer]] = [
    (0, b"%PDF-", _pdf),
    (0, b"\x89PNG\r\n\x1a\n", _png),
    (0, b"\xff\xd8\xff", _constant("JPEG image data")),
    (0, b"GIF87a", _gif),
    (0, b"GIF89a", _gif),
    (0, b"PK\x03\x04", _constant("Zip archive data, at least v1.0 to extract")),
    (0, b"PK\x05\x06", _constant("Zip archive data (empty)")),
    (0, b"\x1f\x8b", _constant("gzip compressed data")),
    (0, b"BZh", _constant("bzip2 compressed data")),
    (0, b"\xfd7zXZ\x00", _constant("XZ compressed data")),
    (0, b"7z\xbc\xaf\x27\x1c", _constant("7-zip archive data")),
    (0, b"Rar!\x1a\x07", _constant("RAR archive data")),
    (257, b"ustar", _constant("POSIX tar archive")),
    (0, b"\x7fELF", _elf),
    (0, b"MZ", _mz),
    (0, b"\xca\xfe\xba\xbe", _constant("compiled Java class data")),
    (0, b"SQLite format 3\x00", _constant("SQLite 3.x database")),
    (0, b"ID3", _constant("Audio file with ID3 version 2")),
    (0, b"OggS", _constant("Ogg data")),
    (0, b"fLaC", _constant("FLAC audio bitstream data")),
    (0, b"RIFF", _riff),
    (0, b"\x00asm", _constant("WebAssembly (wasm) binary module")),
]

# Interpreter basename -> script description prefix
SCRIPT_INTERPRETERS = {
    "sh": "POSIX shell script",
    "bash": "Bourne-Again shell script",
    "zsh": "Paul Falstad's zsh script",
    "python": "Python script",
    "python3": "Python script",
    "perl": "Perl script",
    "ruby": "Ruby script",
    "node": "Node.js script",
}


def match_signature(head: bytes) -> Optional[str]:
    """Describe *head* from the binary signature table, or None."""
    for offset, signature, describer in SIGNATURES:
        if head[offset:offset + len(signature)] == signature:
            return describer(head)
    return None


def describe_script(head: bytes) -> Optional[str]:
    """Describe a ``#!`` script by its interpreter, or None if not a script."""
    if not head.startswith(b"#!"):
        return None
    first_line = head[2:].split(b"\n", 1)[0].decode("utf-8", errors="replace").split()
    if not first_line:
        return "a script text executable"
    interpreter = first_line[0].rsplit("/", 1)[-1]
    if interpreter == "env" and len(first_line) > 1:
        interpreter = first_line[1]
    prefix = SCRIPT_INTERPRETERS.get(interpreter, f"a {interpreter} script")
    return f"{prefix}, {describe_text(head)} executable"


def describe_text(head: bytes) -> str:
    """Describe content without a known signature."""
    if b"\x00" in head or any(b < 0x09 or 0x0E <= b < 0x1B for b in head):
        return "data"
    try:
        head.decode("ascii")
        return "ASCII text"
    except UnicodeDecodeError:
        pass
    try:
        head.decode("utf-8")
        return "UTF-8 Unicode text"
    except UnicodeDecodeError as e:
        # A multi-byte sequence cut off at the end of the sniff window
        if e.start >= len(head) - 3 and e.reason == "unexpected end of data":
            return "UTF-8 Unicode text"
    return "ISO-8859 text"


def describe(head: bytes) -> str:
    """Full libmagic-style description of a file's leading bytes."""
    if not head:
        return "empty"
    return match_signature(head) or describe_script(head) or describe_text(head)
