"""
Unit tests for canonical filename generation and collision handling.
"""

import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

# Add the project root to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from bill_organizer.core.filename_generator import FilenameGenerator
from bill_organizer.core.naming_rules import NamingRule, RuleSet


class TestIsAlreadyNamedFilename(unittest.TestCase):
    """Test cases for the naming convention predicate."""

    def test_canonical_names(self):
        self.assertTrue(FilenameGenerator.is_already_named_filename("aysa_2025-03-21_santander"))
        self.assertTrue(FilenameGenerator.is_already_named_filename("muni_quilmes_2024-12-01_mercado_pago"))

    def test_non_canonical_names(self):
        self.assertFalse(FilenameGenerator.is_already_named_filename("aysa_21-03-2025_santander"))
        self.assertFalse(FilenameGenerator.is_already_named_filename("scan 001"))
        self.assertFalse(FilenameGenerator.is_already_named_filename("aysa_2025-03-21"))
        self.assertFalse(FilenameGenerator.is_already_named_filename("aysa-x_2025-03-21_santander"))
        self.assertFalse(FilenameGenerator.is_already_named_filename(""))


class TestCleanupFilename(unittest.TestCase):
    """Test cases for filename sanitation."""

    def test_invalid_characters_replaced(self):
        self.assertEqual(FilenameGenerator.cleanup_filename('a:b*c?_2025-01-01_x'), "a_b_c_2025-01-01_x")

    def test_whitespace_and_repeated_underscores(self):
        self.assertEqual(FilenameGenerator.cleanup_filename("__muni  quilmes__2025-01-01__"), "muni_quilmes_2025-01-01")

    def test_empty_names(self):
        self.assertEqual(FilenameGenerator.cleanup_filename(""), "unknown_file")
        self.assertEqual(FilenameGenerator.cleanup_filename("___"), "cleaned_file")


class TestGenerateFilename(unittest.TestCase):
    """Test cases for content based naming."""

    def setUp(self):
        self.rule_set = RuleSet.from_rules(
            [NamingRule(name="AySA", keywords=("aysa",), provider="aysa")],
            default_provider="servicio",
            default_payment_method="santander",
        )
        self.generator = FilenameGenerator(self.rule_set)

    def test_matched_rule_and_date(self):
        name = self.generator.generate_filename("AYSA agua vencimiento 21/03/2025", "/tmp/scan01.PDF")
        self.assertEqual(name, "aysa_2025-03-21_santander.PDF")

    def test_missing_date_uses_today(self):
        with patch('bill_organizer.core.filename_generator.datetime') as mock_datetime:
            mock_datetime.now.return_value.strftime.return_value = "2026-01-15"
            name = self.generator.generate_filename("AYSA agua sin fecha", "scan.txt")

        self.assertEqual(name, "aysa_2026-01-15_santander.txt")

    def test_provider_with_spaces_is_sanitized(self):
        rule_set = RuleSet.from_rules(
            [NamingRule(name="Muni", keywords=("quilmes",), provider="muni quilmes")],
            "servicio", "santander"
        )
        name = FilenameGenerator(rule_set).generate_filename("Municipio de Quilmes 01/02/2025", "a.pdf")
        self.assertEqual(name, "muni_quilmes_2025-02-01_santander.pdf")


class TestGenerateUniqueFilename(unittest.TestCase):
    """Test cases for collision-free target paths."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.directory = Path(self.temp_dir.name)
        self.generator = FilenameGenerator(RuleSet())

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_free_name_returned_unchanged(self):
        self.assertEqual(self.generator.generate_unique_filename(self.directory, "f.pdf"), self.directory / "f.pdf")

    def test_next_after_highest_suffix(self):
        for name in ("f.pdf", "f_2.pdf", "f_3.pdf"):
            (self.directory / name).touch()

        self.assertEqual(self.generator.generate_unique_filename(self.directory, "f.pdf"), self.directory / "f_4.pdf")

    def test_first_collision_gets_suffix_two(self):
        (self.directory / "f.pdf").touch()
        self.assertEqual(self.generator.generate_unique_filename(self.directory, "f.pdf"), self.directory / "f_2.pdf")

    def test_gaps_and_other_extensions_ignored(self):
        for name in ("f.pdf", "f_7.txt", "f_5.pdf", "fx_9.pdf"):
            (self.directory / name).touch()

        self.assertEqual(self.generator.generate_unique_filename(self.directory, "f.pdf"), self.directory / "f_6.pdf")

    def test_returned_name_is_reserved(self):
        first = self.generator.generate_unique_filename(self.directory, "f.pdf")
        second = self.generator.generate_unique_filename(self.directory, "f.pdf")

        self.assertEqual(first, self.directory / "f.pdf")
        self.assertEqual(second, self.directory / "f_2.pdf")
        self.assertTrue(first.exists())

    def test_rename_into_reserved_name_fills_it(self):
        reserved = self.generator.generate_unique_filename(self.directory, "f.pdf")
        source = self.directory / "scan.pdf"
        source.write_text("bill")

        renamed = self.generator.rename_unique(source, reserved.name)

        self.assertEqual(renamed, reserved)
        self.assertEqual(renamed.read_text(), "bill")
        self.assertFalse(source.exists())

    def test_rename_unique_keeps_existing_file(self):
        (self.directory / "aysa_2025-03-21_santander.pdf").write_text("first")
        source = self.directory / "scan.pdf"
        source.write_text("second")

        renamed = self.generator.rename_unique(source, "aysa_2025-03-21_santander.pdf")

        self.assertEqual(renamed.name, "aysa_2025-03-21_santander_2.pdf")
        self.assertEqual((self.directory / "aysa_2025-03-21_santander.pdf").read_text(), "first")
        self.assertEqual(renamed.read_text(), "second")
        self.assertFalse(source.exists())


if __name__ == '__main__':
    unittest.main()
