"""Tests for RAM speed recovery from titles."""

import pytest

from hwextract.extract.speed import (
    PC_MODULE_SPEEDS,
    extract_speed_from_title,
    normalize_ram_speed,
    pc_module_to_mhz,
)


class TestPCModuleToMHz:

    @pytest.mark.parametrize(
        "code", ["PC4-21300", "PC4-21300V", "pc4-21300", "  PC4-21300R ", "PC421300", "21300"]
    )
    def test_pc4_21300_forms(self, code):
        assert pc_module_to_mhz(code) == 2666

    @pytest.mark.parametrize(
        "code, mhz",
        [("PC3-10600R", 1333), ("PC3-12800", 1600), ("PC4-25600", 3200), ("PC5-38400", 4800),
         ("PC5-51200", 6400)],
    )
    def test_table_entries(self, code, mhz):
        assert pc_module_to_mhz(code) == mhz

    @pytest.mark.parametrize("code", ["PC4-99999", "", "PC4-", "DDR4-2666", "PC4-21300VV"])
    def test_miss(self, code):
        assert pc_module_to_mhz(code) is None

    def test_table_has_eleven_entries(self):
        assert len(PC_MODULE_SPEEDS) == 11


class TestExtractSpeedFromTitle:

    def test_pc_module_code(self):
        assert extract_speed_from_title("Samsung 32GB 2Rx4 PC4-2666V-RB2 PC4-21300V ECC REG") == 2666

    def test_pc_code_without_hyphen_case_insensitive(self):
        assert extract_speed_from_title("16gb pc3l12800r ddr3") is None
        assert extract_speed_from_title("16gb pc312800r ddr3 ecc") == 1600

    def test_ddr_fallback(self):
        assert extract_speed_from_title("Hynix 32GB DDR4-2666 ECC RDIMM") == 2666

    def test_ddr5(self):
        assert extract_speed_from_title("Micron 64GB ddr5-4800 RDIMM") == 4800

    def test_unknown_pc_code_falls_back_to_ddr(self):
        assert extract_speed_from_title("PC4-99999 DDR4-2400 8GB") == 2400

    def test_ddr_value_outside_range_rejected(self):
        assert extract_speed_from_title("Kit DDR4-9999 weird listing") is None
        assert extract_speed_from_title("DDR3-0667 module") is None

    def test_no_pattern(self):
        assert extract_speed_from_title("Dell 32GB ECC Server Memory") is None


class TestNormalizeRAMSpeed:

    @pytest.mark.parametrize("existing", [2400, 2400.0, 3200])
    def test_never_overwrites_existing(self, existing):
        attrs = {"speed_mhz": existing}
        assert normalize_ram_speed("Samsung 32GB PC4-21300V", attrs) is True
        assert attrs["speed_mhz"] == existing

    @pytest.mark.parametrize("attrs", [{}, {"speed_mhz": None}, {"speed_mhz": 0}, {"speed_mhz": 0.0}])
    def test_fills_missing_zero_or_null(self, attrs):
        assert normalize_ram_speed("Samsung 32GB 2Rx4 PC4-21300V ECC", attrs) is True
        assert attrs["speed_mhz"] == 2666

    def test_leaves_unset_when_nothing_matches(self):
        attrs = {"capacity_gb": 32}
        assert normalize_ram_speed("Dell 32GB ECC Server Memory", attrs) is False
        assert "speed_mhz" not in attrs

    def test_null_stays_null_when_nothing_matches(self):
        attrs = {"speed_mhz": None}
        assert normalize_ram_speed("", attrs) is False
        assert attrs["speed_mhz"] is None

    def test_non_numeric_speed_is_replaced(self):
        attrs = {"speed_mhz": "fast"}
        assert normalize_ram_speed("DDR4-3200 16GB", attrs) is True
        assert attrs["speed_mhz"] == 3200
