"""Smoke tests for timeshift package structure.

Test Techniques Used:
- Specification-based: Verify package imports and version metadata exist.
"""

import timeshift


class TestPackageStructure:
    """Verify the timeshift package is properly installed and importable."""

    def test_package_importable(self) -> None:
        """Package can be imported without error."""
        assert timeshift is not None

    def test_version_is_string(self) -> None:
        """Package exposes a non-empty version string."""
        assert isinstance(timeshift.__version__, str)
        assert len(timeshift.__version__) > 0
