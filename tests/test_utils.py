"""Tests for shared utility functions."""

import pytest

from src.utils import is_date_shaped, is_digits, normalize_command, normalize_phone


class TestNormalizePhone:
    def test_strips_spaces(self):
        assert normalize_phone("591 600 12345") == "59160012345"

    def test_strips_dashes(self):
        assert normalize_phone("591-600-12345") == "59160012345"

    def test_preserves_leading_plus(self):
        assert normalize_phone("+591 600 12345") == "+59160012345"

    def test_clean_number_unchanged(self):
        assert normalize_phone("59160012345") == "59160012345"

    def test_non_phone_becomes_empty(self):
        assert normalize_phone("console-user") == ""


class TestNormalizeCommand:
    @pytest.mark.parametrize("raw", ["menu", " MENU ", "Menu\n"])
    def test_menu_variants(self, raw):
        assert normalize_command(raw) == "menu"


class TestShapes:
    @pytest.mark.parametrize("value", ["2026-02-01", "0000-00-00", "2026-13-45"])
    def test_date_shape_accepts(self, value):
        assert is_date_shaped(value)

    @pytest.mark.parametrize("value", ["2026-2-1", "26-02-01", "2026-02-01 ", "2026/02/01", ""])
    def test_date_shape_rejects(self, value):
        assert not is_date_shaped(value)

    def test_digits(self):
        assert is_digits("1234567")
        assert not is_digits("")
        assert not is_digits("12.5")
        assert not is_digits("１２３")
