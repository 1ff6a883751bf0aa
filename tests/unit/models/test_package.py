"""Unit tests for package models.

Tests for PackageKey, Package, PackageWithStatus, classify and map merging.
"""

import itertools

import pytest
from capctl.models.package import (
    Package,
    PackageExecutable,
    PackageKey,
    PackageStatus,
    PackageWithStatus,
    classify,
    merge_executable_maps,
)
from semver import Version


def v(text: str) -> Version:
    return Version.parse(text)


# Versions with their precedence rank; build metadata does not change the rank
RANKED_VERSIONS = [
    ("0.9.9", 0),
    ("1.0.0-alpha", 1),
    ("1.0.0-alpha.1", 2),
    ("1.0.0-beta.2", 3),
    ("1.0.0-rc.1", 4),
    ("1.0.0-rc.1+build.5", 4),
    ("1.0.0", 5),
    ("1.0.0+a", 5),
    ("1.0.0+b", 5),
    ("1.0.1", 6),
    ("1.10.0", 7),
    ("2.0.0-0", 8),
    ("2.0.0", 9),
]


class TestPackageStatus:
    """Tests for PackageStatus enum."""

    def test_values(self) -> None:
        """Statuses have stable string values."""
        assert PackageStatus.UP_TO_DATE.value == "up-to-date"
        assert PackageStatus.OUT_OF_DATE.value == "out-of-date"


class TestPackageKey:
    """Tests for PackageKey dataclass."""

    def test_same_name_different_versions_are_distinct(self) -> None:
        """Keys differ when only the version differs."""
        assert PackageKey("tool", v("1.0.0")) != PackageKey("tool", v("1.0.1"))

    def test_hashable(self) -> None:
        """Keys can be used as dictionary keys."""
        mapping = {PackageKey("tool", v("1.0.0")): 1}
        assert mapping[PackageKey("tool", v("1.0.0"))] == 1

    def test_ordering_by_name_then_version(self) -> None:
        """Keys sort by name, then by semantic version."""
        keys = [
            PackageKey("b", v("1.0.0")),
            PackageKey("a", v("10.0.0")),
            PackageKey("a", v("9.0.0")),
        ]
        assert sorted(keys) == [
            PackageKey("a", v("9.0.0")),
            PackageKey("a", v("10.0.0")),
            PackageKey("b", v("1.0.0")),
        ]


class TestPackage:
    """Tests for Package dataclass."""

    def test_minimal_package(self) -> None:
        """Package can be created without executables."""
        pkg = Package("ripgrep", v("14.1.0"))
        assert pkg.name == "ripgrep"
        assert pkg.executables == ()

    def test_empty_name_raises(self) -> None:
        """Empty package name raises ValueError."""
        with pytest.raises(ValueError, match="cannot be empty"):
            Package("", v("1.0.0"))

    def test_executables_coerced_to_tuple(self) -> None:
        """A list of executables is stored as a tuple."""
        pkg = Package("fd-find", v("9.0.0"), [PackageExecutable("fd")])  # type: ignore[arg-type]
        assert pkg.executables == (PackageExecutable("fd"),)

    def test_from_key(self) -> None:
        """from_key copies name and version."""
        key = PackageKey("bat", v("0.24.0"))
        pkg = Package.from_key(key, [PackageExecutable("bat")])
        assert pkg.key == key
        assert pkg.executable_names == ["bat"]

    def test_is_immutable(self) -> None:
        """Package fields cannot be reassigned."""
        pkg = Package("bat", v("0.24.0"))
        with pytest.raises(AttributeError):
            pkg.name = "other"  # type: ignore[misc]

    def test_sorting_is_idempotent(self) -> None:
        """Sorting an already sorted list changes nothing."""
        packages = [
            Package("zoxide", v("0.9.0")),
            Package("bat", v("0.24.0")),
            Package("bat", v("0.23.0")),
        ]
        once = sorted(packages)
        assert sorted(once) == once
        assert [p.name for p in once] == ["bat", "bat", "zoxide"]
        assert once[0].version == v("0.23.0")


class TestClassify:
    """Tests for classify function."""

    @pytest.mark.parametrize(
        ("local", "latest", "expected"),
        [
            ("1.2.0", "1.3.0", PackageStatus.OUT_OF_DATE),
            ("1.2.0", "1.2.0", PackageStatus.UP_TO_DATE),
            ("1.3.0", "1.2.0", PackageStatus.UP_TO_DATE),
            ("1.0.0-beta.1", "1.0.0", PackageStatus.OUT_OF_DATE),
            ("1.0.0", "1.0.0-rc.1", PackageStatus.UP_TO_DATE),
            ("0.9.9", "0.10.0", PackageStatus.OUT_OF_DATE),
        ],
    )
    def test_classify(self, local: str, latest: str, expected: PackageStatus) -> None:
        """Only a strictly newer registry version is out of date."""
        assert classify(v(local), v(latest)) == expected

    def test_build_metadata_is_ignored(self) -> None:
        """Versions differing only in build metadata are up to date."""
        assert classify(v("1.0.0+a"), v("1.0.0+b")) == PackageStatus.UP_TO_DATE
        assert classify(v("1.0.0+b"), v("1.0.0+a")) == PackageStatus.UP_TO_DATE
        assert classify(v("1.0.0-rc.1+x"), v("1.0.0-rc.1")) == PackageStatus.UP_TO_DATE

    @pytest.mark.parametrize(
        ("local", "latest"), list(itertools.product(RANKED_VERSIONS, repeat=2))
    )
    def test_up_to_date_iff_latest_not_newer(
        self, local: tuple[str, int], latest: tuple[str, int]
    ) -> None:
        """Every version pair is up to date exactly when latest <= local."""
        (local_text, local_rank), (latest_text, latest_rank) = local, latest
        expected = (
            PackageStatus.UP_TO_DATE if latest_rank <= local_rank else PackageStatus.OUT_OF_DATE
        )
        assert classify(v(local_text), v(latest_text)) == expected


class TestPackageWithStatus:
    """Tests for PackageWithStatus dataclass."""

    def test_out_of_date(self) -> None:
        """is_out_of_date reflects the status."""
        entry = PackageWithStatus(
            Package("foo", v("1.2.0")), PackageStatus.OUT_OF_DATE, v("1.3.0")
        )
        assert entry.is_out_of_date is True
        assert entry.name == "foo"

    def test_up_to_date_has_no_latest(self) -> None:
        """Up-to-date entries default to no latest version."""
        entry = PackageWithStatus(Package("foo", v("1.2.0")), PackageStatus.UP_TO_DATE)
        assert entry.is_out_of_date is False
        assert entry.latest_version is None


class TestMergeExecutableMaps:
    """Tests for merge_executable_maps function."""

    @pytest.fixture
    def maps(self) -> list[dict[PackageKey, list[PackageExecutable]]]:
        key_a = PackageKey("a", v("1.0.0"))
        key_b = PackageKey("b", v("2.0.0"))
        return [
            {key_a: [PackageExecutable("a1")]},
            {key_a: [PackageExecutable("a2")], key_b: [PackageExecutable("b")]},
            {key_b: [PackageExecutable("b2")]},
        ]

    @staticmethod
    def _normalize(mapping: dict) -> dict:
        return {key: sorted(value) for key, value in mapping.items()}

    def test_concatenates_shared_keys(self, maps: list) -> None:
        """Executables of a shared key are combined."""
        merged = merge_executable_maps(maps[0], maps[1])
        key_a = PackageKey("a", v("1.0.0"))
        assert merged[key_a] == [PackageExecutable("a1"), PackageExecutable("a2")]

    def test_does_not_mutate_inputs(self, maps: list) -> None:
        """Inputs are left untouched."""
        before = self._normalize(maps[0])
        merge_executable_maps(maps[0], maps[1])
        assert self._normalize(maps[0]) == before

    def test_empty_is_identity(self, maps: list) -> None:
        """Merging with an empty map returns an equal map."""
        assert merge_executable_maps({}, maps[1]) == maps[1]
        assert merge_executable_maps(maps[1], {}) == maps[1]

    def test_commutative(self, maps: list) -> None:
        """Order of arguments only affects order within a key."""
        left = merge_executable_maps(maps[0], maps[1])
        right = merge_executable_maps(maps[1], maps[0])
        assert self._normalize(left) == self._normalize(right)

    def test_associative(self, maps: list) -> None:
        """Grouping of merges does not change the result."""
        a, b, c = maps
        left = merge_executable_maps(merge_executable_maps(a, b), c)
        right = merge_executable_maps(a, merge_executable_maps(b, c))
        assert self._normalize(left) == self._normalize(right)
