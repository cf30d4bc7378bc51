"""Tests for FieldConfig."""

from __future__ import annotations

import pytest

from flagfield.config import ABSOLUTE_MAX_WIDTH, FieldConfig


class TestFieldConfig:
    """Tests for FieldConfig validation and persistence."""

    def test_defaults(self) -> None:
        """Defaults fit a native 64-bit column with half precision."""
        config = FieldConfig()
        assert config.max_width == 64
        assert config.default_precision == "half"
        assert config.verbose is False

    @pytest.mark.parametrize("max_width", [0, -8, ABSOLUTE_MAX_WIDTH + 1])
    def test_invalid_max_width(self, max_width) -> None:
        """max_width must be within the supported range."""
        with pytest.raises(ValueError, match="max_width"):
            FieldConfig(max_width=max_width)

    def test_invalid_precision(self) -> None:
        """Unknown default precisions are rejected."""
        with pytest.raises(ValueError, match="default_precision"):
            FieldConfig(default_precision="quad")

    def test_collects_all_errors(self) -> None:
        """Every problem is reported at once."""
        with pytest.raises(ValueError) as exc_info:
            FieldConfig(max_width=0, default_precision="quad")
        message = str(exc_info.value)
        assert "max_width" in message
        assert "default_precision" in message

    def test_json_roundtrip(self) -> None:
        """Config should roundtrip through JSON."""
        config = FieldConfig(max_width=128, default_precision="single", verbose=True)
        assert FieldConfig.from_json(config.to_json()) == config

    def test_save_and_load(self, tmp_path) -> None:
        """Config should save to and load from disk."""
        config = FieldConfig(max_width=32)
        path = config.save(tmp_path / "configs" / "field.json")
        assert path.exists()
        assert FieldConfig.load(path) == config
