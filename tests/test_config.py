"""
EventBudget - Configuration Tests.

Checks the shipped defaults that other modules rely on.
"""

from pathlib import Path

from eventbudget import config


class TestConfigDefaults:
    """Unit tests for configuration constants."""

    def test_default_category_is_suggested(self) -> None:
        """Verify the fallback category is one of the suggestions."""
        assert config.DEFAULT_CATEGORY in config.SUGGESTED_CATEGORIES

    def test_suggested_categories_are_unique(self) -> None:
        """Verify no category is suggested twice."""
        assert len(set(config.SUGGESTED_CATEGORIES)) == len(config.SUGGESTED_CATEGORIES)

    def test_palette_has_six_colours(self) -> None:
        """Verify the chart palette holds six hex colours."""
        assert len(config.CATEGORY_COLOURS) == 6
        assert all(c.startswith("#") and len(c) == 7 for c in config.CATEGORY_COLOURS)

    def test_output_dir_is_path(self) -> None:
        """Verify the output directory is a Path."""
        assert isinstance(config.OUTPUT_DIR, Path)

    def test_thresholds_are_positive(self) -> None:
        """Verify due-soon window and upcoming limit are usable."""
        assert config.DUE_SOON_DAYS >= 0
        assert config.UPCOMING_LIMIT > 0
