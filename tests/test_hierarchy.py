import pytest

from modelmap.dispatch import Hierarchy


def test_derive_and_isa() -> None:
    h = Hierarchy()
    h.derive("venue", "place")
    h.derive("place", "thing")

    assert h.isa("venue", "venue")
    assert h.isa("venue", "place")
    assert h.isa("venue", "thing")
    assert not h.isa("thing", "venue")
    assert h.ancestors("venue") == ["place", "thing"]


def test_ancestors_are_nearest_first_without_duplicates() -> None:
    h = Hierarchy()
    h.derive("d", "b")
    h.derive("d", "c")
    h.derive("b", "a")
    h.derive("c", "a")

    assert h.ancestors("d") == ["b", "c", "a"]


def test_class_bases_are_ancestors() -> None:
    class Base:
        pass

    class Child(Base):
        pass

    h = Hierarchy()
    assert h.isa(Child, Base)
    assert h.ancestors(Child) == [Base]

    h.derive(Base, "tagged")
    assert h.ancestors(Child) == [Base, "tagged"]


def test_derive_rejects_cycles() -> None:
    h = Hierarchy()
    h.derive("a", "b")
    with pytest.raises(ValueError, match="itself"):
        h.derive("a", "a")
    with pytest.raises(ValueError, match="Cyclic"):
        h.derive("b", "a")


def test_version_changes_on_mutation() -> None:
    h = Hierarchy()
    v0 = h.version
    h.derive("a", "b")
    v1 = h.version
    h.derive("a", "b")
    assert h.version == v1 > v0

    h.underive("a", "b")
    assert h.version > v1
    assert not h.isa("a", "b")


def test_snapshot_restore_and_clear() -> None:
    h = Hierarchy()
    h.derive("a", "b")
    snap = h.snapshot()
    h.derive("c", "d")
    h.restore(snap)
    assert h.isa("a", "b")
    assert not h.isa("c", "d")
    h.clear()
    assert h.ancestors("a") == []
