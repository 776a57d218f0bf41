"""
Unit tests for year/month directory placement.
"""

import sys
import tempfile
import unittest
from pathlib import Path

# Add the project root to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from bill_organizer.core.directory_organizer import DirectoryOrganizer


class TestMonthNames(unittest.TestCase):
    """Test cases for the Spanish month table."""

    def test_known_months(self):
        self.assertEqual(DirectoryOrganizer.get_month_name(1), "enero")
        self.assertEqual(DirectoryOrganizer.get_month_name(9), "septiembre")
        self.assertEqual(DirectoryOrganizer.get_month_name(12), "diciembre")

    def test_out_of_range(self):
        self.assertEqual(DirectoryOrganizer.get_month_name(0), "unknown")
        self.assertEqual(DirectoryOrganizer.get_month_name(13), "unknown")

    def test_month_folder_name(self):
        self.assertEqual(DirectoryOrganizer().month_folder_name(3), "03_marzo")


class TestIsInYearMonthStructure(unittest.TestCase):
    """Test cases for recognizing organized directories."""

    def test_month_under_year(self):
        self.assertTrue(DirectoryOrganizer.is_in_year_month_structure("/docs/2025/03_marzo"))

    def test_bare_year(self):
        self.assertTrue(DirectoryOrganizer.is_in_year_month_structure("/docs/2025"))

    def test_unorganized(self):
        self.assertFalse(DirectoryOrganizer.is_in_year_month_structure("/docs/scans"))
        self.assertFalse(DirectoryOrganizer.is_in_year_month_structure("/docs/misc/03_marzo"))


class TestOrganizeFile(unittest.TestCase):
    """Test cases for moving files into the hierarchy."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.base = Path(self.temp_dir.name)
        self.organizer = DirectoryOrganizer(self.base)

    def tearDown(self):
        self.temp_dir.cleanup()

    def _make_file(self, relative: str, content: str = "x") -> Path:
        path = self.base / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    def test_moves_into_year_month(self):
        source = self._make_file("aysa_2025-03-21_santander.pdf")

        result = self.organizer.organize_file_into_directory_structure(source, "2025-03-21")

        self.assertEqual(result, self.base / "2025" / "03_marzo" / "aysa_2025-03-21_santander.pdf")
        self.assertTrue(result.exists())
        self.assertFalse(source.exists())

    def test_second_call_is_noop(self):
        source = self._make_file("scans/gloria_2025-08-08_mercadopago.jpg")

        first = self.organizer.organize_file_into_directory_structure(source, "2025-08-08")
        second = self.organizer.organize_file_into_directory_structure(first, "2025-08-08")

        self.assertEqual(first, second)
        self.assertEqual(second, self.base / "2025" / "08_agosto" / "gloria_2025-08-08_mercadopago.jpg")

    def test_invalid_dates_leave_file_alone(self):
        source = self._make_file("scan.pdf")

        for date_str in ("", "   ", None, "2025-02-30", "21/03/2025", "soon"):
            self.assertEqual(self.organizer.organize_file_into_directory_structure(source, date_str), source)
        self.assertTrue(source.exists())

    def test_wrong_month_is_corrected(self):
        source = self._make_file("2025/02_febrero/aysa_2025-03-21_santander.pdf")

        result = self.organizer.organize_file_into_directory_structure(source, "2025-03-21")

        self.assertEqual(result, self.base / "2025" / "03_marzo" / "aysa_2025-03-21_santander.pdf")

    def test_wrong_year_is_corrected(self):
        source = self._make_file("2024/03_marzo/aysa_2025-03-21_santander.pdf")

        result = self.organizer.organize_file_into_directory_structure(source, "2025-03-21")

        self.assertEqual(result, self.base / "2025" / "03_marzo" / "aysa_2025-03-21_santander.pdf")

    def test_file_in_bare_year_folder(self):
        source = self._make_file("2025/aysa_2025-03-21_santander.pdf")

        result = self.organizer.organize_file_into_directory_structure(source, "2025-03-21")

        self.assertEqual(result, self.base / "2025" / "03_marzo" / "aysa_2025-03-21_santander.pdf")
        self.assertFalse((self.base / "2025" / "2025").exists())

    def test_base_path_that_is_the_year_folder_is_reused(self):
        year_base = self.base / "2025"
        source = self._make_file("2025/inbox/aysa_2025-03-21_santander.pdf")
        organizer = DirectoryOrganizer(year_base)

        result = organizer.organize_file_into_directory_structure(source, "2025-03-21")

        self.assertEqual(result, year_base / "03_marzo" / "aysa_2025-03-21_santander.pdf")

    def test_base_path_of_another_year_uses_sibling_year_folder(self):
        year_base = self.base / "2025"
        source = self._make_file("2025/inbox/aysa_2024-01-10_santander.pdf")
        organizer = DirectoryOrganizer(year_base)

        result = organizer.organize_file_into_directory_structure(source, "2024-01-10")

        self.assertEqual(
            result,
            self.base.resolve() / "2024" / "01_enero" / "aysa_2024-01-10_santander.pdf"
        )
        self.assertFalse((year_base / "2024").exists())

    def test_collision_gets_suffix(self):
        self._make_file("2025/03_marzo/aysa_2025-03-21_santander.pdf", "existing")
        source = self._make_file("aysa_2025-03-21_santander.pdf", "new")

        result = self.organizer.organize_file_into_directory_structure(source, "2025-03-21")

        self.assertEqual(result.name, "aysa_2025-03-21_santander_2.pdf")
        self.assertEqual(result.read_text(), "new")
        self.assertEqual(
            (self.base / "2025" / "03_marzo" / "aysa_2025-03-21_santander.pdf").read_text(),
            "existing"
        )


if __name__ == '__main__':
    unittest.main()
