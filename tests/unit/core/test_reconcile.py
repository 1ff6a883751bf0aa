"""Unit tests for VersionReconciler.

Tests for single and bulk update checks against a registry.
"""

import pytest
from capctl.core.inventory import PackageInventory
from capctl.core.reconcile import VersionReconciler, outdated_name_padding
from capctl.models.package import Package, PackageStatus, PackageWithStatus
from capctl.registry.base import RegistryError
from semver import Version


class TestCheckOne:
    """Tests for VersionReconciler.check_one."""

    def test_out_of_date(
        self, fake_registry, sample_inventory: PackageInventory, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """A newer registry version marks the package out of date."""
        result = VersionReconciler(fake_registry, sample_inventory).check_one("foo")

        assert result is not None
        assert result.status == PackageStatus.OUT_OF_DATE
        assert result.latest_version == Version.parse("1.3.0")
        assert "Package foo is out of date (1.2.0 -> 1.3.0)." in capsys.readouterr().out

    def test_up_to_date(
        self, fake_registry, sample_inventory: PackageInventory, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """An equal registry version is up to date and carries no latest version."""
        result = VersionReconciler(fake_registry, sample_inventory).check_one("bar")

        assert result is not None
        assert result.status == PackageStatus.UP_TO_DATE
        assert result.latest_version is None
        assert "Package bar is up to date." in capsys.readouterr().out

    def test_not_available(
        self, fake_registry, sample_inventory: PackageInventory, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """A registry miss is reported, not raised."""
        result = VersionReconciler(fake_registry, sample_inventory).check_one("baz")

        assert result is None
        assert "Package baz is not available on fake registry." in capsys.readouterr().out

    def test_not_installed(
        self, fake_registry, sample_inventory: PackageInventory, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Packages missing locally are never looked up."""
        result = VersionReconciler(fake_registry, sample_inventory).check_one("qux")

        assert result is None
        assert fake_registry.lookups == []
        assert "Package qux is not installed." in capsys.readouterr().out

    def test_bracketed_name_not_installed(
        self, fake_registry, sample_inventory: PackageInventory, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """A name containing markup is reported literally."""
        result = VersionReconciler(fake_registry, sample_inventory).check_one("foo[/]")

        assert result is None
        assert "Package foo[/] is not installed." in capsys.readouterr().out

    def test_registry_error_is_not_available(
        self, fake_registry, sample_inventory: PackageInventory, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Any registry error downgrades to not available."""

        def fail(name: str) -> Version:
            raise RegistryError("connection refused")

        fake_registry.get_latest_version = fail
        assert VersionReconciler(fake_registry, sample_inventory).check_one("foo") is None
        assert "not available" in capsys.readouterr().out


class TestCheckAll:
    """Tests for VersionReconciler.check_all."""

    def test_lists_outdated(
        self, fake_registry, sample_inventory: PackageInventory, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Only out-of-date packages are returned; unknown ones are skipped."""
        result = VersionReconciler(fake_registry, sample_inventory).check_all()

        assert result is not None
        assert [entry.name for entry in result] == ["foo"]
        assert "foo is out of date (1.2.0 -> 1.3.0)" in capsys.readouterr().out

    def test_checks_every_package_in_order(
        self, fake_registry, sample_inventory: PackageInventory
    ) -> None:
        """Every installed package is looked up in inventory order."""
        VersionReconciler(fake_registry, sample_inventory).check_all()
        assert fake_registry.lookups == ["bar", "baz", "foo"]

    def test_all_up_to_date_returns_none(
        self, fake_registry, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """None is returned when nothing is outdated."""
        inventory = PackageInventory([Package("bar", Version.parse("0.5.0"))])

        assert VersionReconciler(fake_registry, inventory).check_all() is None
        assert "All packages are up to date." in capsys.readouterr().out

    def test_empty_inventory(self, fake_registry) -> None:
        """An empty inventory has nothing to update."""
        assert VersionReconciler(fake_registry, PackageInventory()).check_all() is None

    def test_names_are_padded(self, capsys: pytest.CaptureFixture[str], fake_registry) -> None:
        """Names are left-aligned to the longest outdated name."""
        fake_registry.versions = {
            "a": Version.parse("2.0.0"),
            "longname": Version.parse("2.0.0"),
        }
        inventory = PackageInventory(
            [Package("a", Version.parse("1.0.0")), Package("longname", Version.parse("1.0.0"))]
        )

        VersionReconciler(fake_registry, inventory).check_all()

        out = capsys.readouterr().out
        assert "a        is out of date (1.0.0 -> 2.0.0)" in out
        assert "longname is out of date (1.0.0 -> 2.0.0)" in out

    def test_padding_ignores_up_to_date_names(
        self, capsys: pytest.CaptureFixture[str], fake_registry
    ) -> None:
        """Up-to-date packages do not widen the name column."""
        fake_registry.versions = {
            "ab": Version.parse("2.0.0"),
            "abcd": Version.parse("2.0.0"),
            "a-much-longer-name": Version.parse("1.0.0"),
        }
        inventory = PackageInventory(
            [
                Package("ab", Version.parse("1.0.0")),
                Package("abcd", Version.parse("1.0.0")),
                Package("a-much-longer-name", Version.parse("1.0.0")),
            ]
        )

        result = VersionReconciler(fake_registry, inventory).check_all()

        assert result is not None
        assert [entry.name for entry in result] == ["ab", "abcd"]
        out = capsys.readouterr().out
        assert "ab   is out of date (1.0.0 -> 2.0.0)" in out
        assert "abcd is out of date (1.0.0 -> 2.0.0)" in out
        assert "a-much-longer-name" not in out


class TestOutdatedNamePadding:
    """Tests for outdated_name_padding function."""

    def test_empty(self) -> None:
        """No entries need no padding."""
        assert outdated_name_padding([]) == 0

    def test_longest_name(self) -> None:
        """Padding is the longest name length."""
        entries = [
            PackageWithStatus(Package(name, Version.parse("1.0.0")), PackageStatus.OUT_OF_DATE)
            for name in ("bat", "ripgrep", "fd")
        ]
        assert outdated_name_padding(entries) == len("ripgrep")
