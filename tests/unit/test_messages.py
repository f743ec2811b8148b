from __future__ import annotations

import unittest

from protocol.messages import (
    MESSAGE_UNKNOWN_PREFIX,
    MessageTooLarge,
    decode_message,
    encode_message,
    format_uname,
    format_unknown_command,
    truncate_utf8,
)


class TruncateTests(unittest.TestCase):
    def test_short_text_is_unchanged(self) -> None:
        self.assertEqual(truncate_utf8("help", 10), "help")

    def test_cut_never_splits_a_character(self) -> None:
        # "é" is two bytes in UTF-8.
        self.assertEqual(truncate_utf8("aé", 2), "a")
        self.assertEqual(truncate_utf8("aé", 3), "aé")

    def test_negative_limit_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            truncate_utf8("x", -1)

    def test_undecodable_input_bytes_survive(self) -> None:
        # b"caf\xe9" read with surrogateescape.
        self.assertEqual(truncate_utf8("caf\udce9", 10), "caf\udce9")
        self.assertEqual(truncate_utf8("caf\udce9", 3), "caf")

    def test_cut_backs_off_a_partial_three_byte_character(self) -> None:
        self.assertEqual(truncate_utf8("ab€", 4), "ab")
        self.assertEqual(truncate_utf8("ab€", 3), "ab")


class CodecTests(unittest.TestCase):
    def test_encode_rejects_oversized_text(self) -> None:
        with self.assertRaises(MessageTooLarge) as exc:
            encode_message("x" * 33, 32)
        self.assertEqual(exc.exception.size, 33)
        self.assertEqual(exc.exception.limit, 32)

    def test_encode_accepts_exact_fit(self) -> None:
        self.assertEqual(encode_message("x" * 32, 32), b"x" * 32)

    def test_invalid_input_bytes_reach_the_peer_unchanged(self) -> None:
        raw = encode_message("caf\udce9", 32)
        self.assertEqual(raw, b"caf\xe9")
        self.assertEqual(decode_message(raw), "caf\ufffd")
        self.assertEqual(format_unknown_command(decode_message(raw), 64), 'Unknown command: "caf\ufffd"')

    def test_decode_stops_at_nul_padding(self) -> None:
        buffer = b"gethostname" + b"\0" * 1013
        self.assertEqual(decode_message(buffer), "gethostname")

    def test_decode_replaces_invalid_bytes(self) -> None:
        self.assertEqual(decode_message(b"ok\xff"), "ok\ufffd")

    def test_decode_memoryview(self) -> None:
        self.assertEqual(decode_message(memoryview(b"uname")), "uname")


class FormatTests(unittest.TestCase):
    def test_unknown_command_wraps_input(self) -> None:
        self.assertEqual(format_unknown_command("foobar", 1024), 'Unknown command: "foobar"')

    def test_unknown_command_reserves_room_for_wrapper(self) -> None:
        text = format_unknown_command("a" * 40, 32)
        self.assertEqual(len(text.encode("utf-8")), 32)
        self.assertTrue(text.startswith(MESSAGE_UNKNOWN_PREFIX))
        self.assertTrue(text.endswith('"'))

    def test_unknown_command_at_full_capacity(self) -> None:
        text = format_unknown_command("z" * 1024, 1024)
        self.assertLessEqual(len(text.encode("utf-8")), 1024)

    def test_unknown_command_needs_room_for_wrapper(self) -> None:
        with self.assertRaises(ValueError):
            format_unknown_command("x", 10)

    def test_uname_layout(self) -> None:
        text = format_uname("Linux", "node1", "6.1.0", "#1 SMP", "x86_64", "(none)")
        self.assertEqual(
            text,
            " System: Linux\n"
            "   Node: node1\n"
            "Release: 6.1.0\n"
            "Version: #1 SMP\n"
            "Machine: x86_64\n"
            " Domain: (none)",
        )


if __name__ == "__main__":
    unittest.main()
