"""Tests for chartpub.charts.model."""

from __future__ import annotations

from chartpub.charts.model import ChangeRecord, describe, tag_collisions, version_tag


def test_version_tag_is_plain_concatenation() -> None:
    assert version_tag(ChangeRecord("foo", "1.2.0")) == "foo-1.2.0"
    assert version_tag(ChangeRecord("My-Chart", "v1.0.0+build.1")) == "My-Chart-v1.0.0+build.1"
    assert ChangeRecord("foo", "1.2.0").tag == "foo-1.2.0"


def test_identity_is_package_and_version() -> None:
    a = ChangeRecord("foo", "1.0.0", chart_path="charts/foo")
    b = ChangeRecord("foo", "1.0.0", chart_path="charts/foo-renamed")

    assert a == b
    assert hash(a) == hash(b)
    assert ChangeRecord("foo", "1.0.0") != ChangeRecord("Foo", "1.0.0")


def test_records_with_colliding_tags_stay_distinct() -> None:
    left = ChangeRecord("foo", "1-0.0")
    right = ChangeRecord("foo-1", "0.0")

    assert left != right
    assert len({left, right}) == 2
    # Known limitation: both map to the same tag and release name.
    assert version_tag(left) == version_tag(right) == "foo-1-0.0"


def test_tag_collisions_reports_only_distinct_records() -> None:
    left = ChangeRecord("foo", "1-0.0")
    right = ChangeRecord("foo-1", "0.0")
    other = ChangeRecord("bar", "1.0.0")

    assert tag_collisions([left, right, other]) == {"foo-1-0.0": (left, right)}
    # The same record twice is a duplicate, not a collision.
    assert tag_collisions([other, other]) == {}


def test_similar_looking_tags_do_not_collide() -> None:
    assert version_tag(ChangeRecord("foo", "1.0.0")) != version_tag(ChangeRecord("foo-1", "0.0"))
    assert tag_collisions([ChangeRecord("foo", "1.0.0"), ChangeRecord("foo-1", "0.0")]) == {}


def test_describe() -> None:
    assert describe([ChangeRecord("a", "1"), ChangeRecord("b", "2")]) == "a-1, b-2"
    assert describe([]) == ""
