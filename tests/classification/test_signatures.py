"""Tests for the signature table behind the built-in classifier."""

import struct

import pytest

from filetally.classification import describe, normalize_label
from filetally.classification.signatures import describe_script, describe_text, match_signature


def _png(width, height):
    ihdr = struct.pack(">II", width, height) + b"\x08\x06\x00\x00\x00"
    return b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\x0dIHDR" + ihdr


class TestBinarySignatures:
    @pytest.mark.parametrize(
        "head, label",
        [
            (b"%PDF-1.7\n%\xe2\xe3", "PDF document"),
            (b"\xff\xd8\xff\xe0\x00\x10JFIF", "JPEG image data"),
            (b"PK\x03\x04\x14\x00", "Zip archive data"),
            (b"\x1f\x8b\x08\x00", "gzip compressed data"),
            (b"BZh91AY&SY", "bzip2 compressed data"),
            (b"\xfd7zXZ\x00\x00", "XZ compressed data"),
            (b"7z\xbc\xaf\x27\x1c\x00\x04", "7-zip archive data"),
            (b"Rar!\x1a\x07\x01\x00", "RAR archive data"),
            (b"\xca\xfe\xba\xbe\x00\x00\x00\x34", "compiled Java class data"),
            (b"SQLite format 3\x00\x10\x00", "SQLite 3.x database"),
            (b"ID3\x03\x00\x00\x00", "Audio file with ID3 version 2"),
            (b"OggS\x00\x02", "Ogg data"),
            (b"fLaC\x00\x00\x00\x22", "FLAC audio bitstream data"),
            (b"RIFF\x24\x08\x00\x00WAVEfmt ", "RIFF (little-endian) data"),
            (b"\x00asm\x01\x00\x00\x00", "WebAssembly (wasm) binary module"),
        ],
    )
    def test_short_label(self, head, label):
        assert normalize_label(describe(head)) == label

    def test_png_dimensions(self):
        assert describe(_png(640, 480)) == "PNG image data, 640 x 480"

    def test_gif_version_and_dimensions(self):
        head = b"GIF89a" + struct.pack("<HH", 16, 32) + b"\x00"
        assert describe(head) == "GIF image data, version 89a, 16 x 32"

    def test_elf_class_and_order(self):
        assert describe(b"\x7fELF\x02\x01\x01" + b"\x00" * 9) == "ELF 64-bit LSB executable"
        assert describe(b"\x7fELF\x01\x02\x01" + b"\x00" * 9) == "ELF 32-bit MSB executable"

    def test_pe_versus_dos_executable(self):
        dos = b"MZ" + b"\x00" * 62
        pe = bytearray(b"MZ" + b"\x00" * 0x7E)
        pe[0x3C:0x40] = struct.pack("<I", 0x40)
        pe[0x40:0x44] = b"PE\x00\x00"
        assert describe(dos) == "MS-DOS executable"
        assert normalize_label(describe(bytes(pe))) == "PE32 executable"

    def test_tar_at_offset(self):
        head = b"\x00" * 257 + b"ustar\x0000"
        assert describe(head) == "POSIX tar archive"

    def test_unknown_binary_is_none(self):
        assert match_signature(b"\x01\x02\x03\x04") is None


class TestScripts:
    def test_env_python(self):
        desc = describe(b"#!/usr/bin/env python3\nprint('hi')\n")
        assert desc == "Python script, ASCII text executable"
        assert normalize_label(desc) == "Python script"

    def test_shell(self):
        assert normalize_label(describe(b"#!/bin/sh\necho hi\n")) == "POSIX shell script"

    def test_unknown_interpreter(self):
        assert normalize_label(describe(b"#!/opt/bin/tclsh\nputs hi\n")) == "a tclsh script"

    def test_not_a_script(self):
        assert describe_script(b"# just a comment\n") is None


class TestText:
    def test_empty(self):
        assert describe(b"") == "empty"

    def test_ascii(self):
        assert describe_text(b"hello world\n\ttabbed\r\n") == "ASCII text"

    def test_utf8(self):
        assert describe_text("naïve café\n".encode("utf-8")) == "UTF-8 Unicode text"

    def test_utf8_cut_mid_character(self):
        head = "ab€".encode("utf-8")[:-1]
        assert describe_text(head) == "UTF-8 Unicode text"

    def test_latin1(self):
        assert describe_text("café\n".encode("latin-1")) == "ISO-8859 text"

    def test_binary_is_data(self):
        assert describe_text(b"abc\x00def") == "data"
        assert describe_text(b"\x01\x02\x03") == "data"
