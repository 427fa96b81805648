import unittest

from qstring.codec import decode, decode_key, encode


class DecodeTests(unittest.TestCase):
    def test_plus_becomes_space(self):
        self.assertEqual(decode("a+b"), "a b")

    def test_invalid_hex_left_untouched(self):
        self.assertEqual(decode("%zz"), "%zz")
        self.assertEqual(decode("100%"), "100%")

    def test_ascii_escapes(self):
        self.assertEqual(decode("also%20space%3D%26"), "also space=&")

    def test_decoded_percent_is_not_rescanned(self):
        self.assertEqual(decode("%2541"), "%41")

    def test_two_byte_sequence(self):
        self.assertEqual(decode("caf%C3%A9"), "café")

    def test_three_byte_sequence(self):
        self.assertEqual(decode("%E2%84%A0"), "℠")
        self.assertEqual(decode("%41%C3%A9%E2%82%AC"), "Aé€")

    def test_overlong_two_byte_left_literal(self):
        self.assertEqual(decode("%C1%81"), "%C1%81")
        self.assertEqual(decode("%C0%AF"), "%C0%AF")

    def test_overlong_three_byte_left_literal(self):
        self.assertEqual(decode("%E0%80%AF"), "%E0%80%AF")

    def test_four_byte_sequence_left_literal(self):
        self.assertEqual(decode("%F0%9F%98%80"), "%F0%9F%98%80")

    def test_lone_continuation_and_high_bytes_left_literal(self):
        self.assertEqual(decode("%A0"), "%A0")
        self.assertEqual(decode("%FF"), "%FF")
        self.assertEqual(decode("%C3"), "%C3")

    def test_lowercase_hex_is_not_recognised(self):
        self.assertEqual(decode("%e2%84%a0"), "%e2%84%a0")
        self.assertEqual(decode("%2f"), "%2f")

    def test_mixed_valid_and_invalid(self):
        self.assertEqual(decode("%C1%81+%C3%A9%zz"), "%C1%81 é%zz")


class DecodeKeyTests(unittest.TestCase):
    def test_plus_and_escapes(self):
        self.assertEqual(decode_key("with+space%20too"), "with space too")

    def test_multibyte(self):
        self.assertEqual(decode_key("%E2%84%A0"), "℠")

    def test_invalid_input_does_not_raise(self):
        self.assertEqual(decode_key("%zz"), "%zz")
        self.assertEqual(decode_key("%FF"), "\ufffd")


class EncodeTests(unittest.TestCase):
    def test_space_becomes_plus(self):
        self.assertEqual(encode("a b"), "a+b")

    def test_reserved_characters_escaped(self):
        self.assertEqual(encode("=a="), "%3Da%3D")
        self.assertEqual(encode("a+b&c"), "a%2Bb%26c")
        self.assertEqual(encode("/?#"), "%2F%3F%23")

    def test_unreserved_characters_kept(self):
        self.assertEqual(encode("AZaz09!*'()-_.~"), "AZaz09!*'()-_.~")

    def test_utf8(self):
        self.assertEqual(encode("℠"), "%E2%84%A0")
        self.assertEqual(encode("é"), "%C3%A9")

    def test_empty(self):
        self.assertEqual(encode(""), "")

    def test_lone_surrogate_from_decode(self):
        self.assertEqual(decode("%ED%A0%80"), "\ud800")
        self.assertEqual(encode("\ud800"), "%ED%A0%80")

    def test_decode_reverses_encode(self):
        for text in ["a b", "x=y&z", "℠ café", "100%", "+"]:
            self.assertEqual(decode(encode(text)), text)


if __name__ == "__main__":
    unittest.main()
