"""
Unit tests for language codes and file name parsing
"""

import unittest

from transcribe_robot.transcription.languages import DEFAULT_LANGUAGES, LanguageTable, parse_file_name


class TestParseFileName(unittest.TestCase):
    def test_three_segments(self):
        parsed = parse_file_name("interview.en-US.wav")
        self.assertEqual(parsed.base_name, "interview")
        self.assertEqual(parsed.language_code, "en-US")
        self.assertEqual(parsed.extension, "wav")

    def test_wrong_segment_count(self):
        for name in ("interview.wav", "a.b.c.d", "", "noextension"):
            self.assertIsNone(parse_file_name(name), name)


class TestLanguageTable(unittest.TestCase):
    def setUp(self):
        self.table = LanguageTable()

    def test_default_entries(self):
        self.assertEqual(len(self.table), 10)
        self.assertEqual(len(DEFAULT_LANGUAGES), 10)
        self.assertEqual(self.table.resolve("ja-JP"), "Japanese (Japan)")
        self.assertEqual(self.table.resolve("pr-BR"), "Portuguese (Brazil)")
        self.assertEqual(self.table.resolve("zh-CN"), "Chinese (Mandarin, simplified)")

    def test_lookup_ignores_case(self):
        self.assertEqual(self.table.resolve("EN-us"), "English (US)")
        self.assertIn("de-de", self.table)
        self.assertEqual(self.table.canonical_code("ko-kr"), "ko-KR")

    def test_unknown_code(self):
        self.assertIsNone(self.table.resolve("xx-YY"))
        self.assertIsNone(self.table.resolve(None))
        self.assertNotIn("pt-BR", self.table)

    def test_custom_table(self):
        table = LanguageTable({"nl-NL": "Dutch (Netherlands)"})
        self.assertEqual(table.codes(), ["nl-NL"])
        self.assertIsNone(table.resolve("en-US"))


if __name__ == "__main__":
    unittest.main()
