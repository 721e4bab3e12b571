"""Tests for Aes names and AesMap."""

from benchplot.plot.aes import AES_COUNT, Aes, AesMap


def test_aes_short_names_round_trip():
    """from_name(short_name) returns the same aesthetic for every Aes."""
    for aes in Aes:
        assert Aes.from_name(aes.short_name) is aes
    assert [a.short_name for a in Aes] == ["x", "y", "color", "row", "col"]


def test_aes_from_name_unknown():
    """Unknown names map to None."""
    assert Aes.from_name("size") is None
    assert Aes.from_name("X") is None


def test_aes_map_default_and_set():
    """An AesMap starts with the default everywhere and set() changes one slot."""
    m = AesMap(0)
    assert len(m) == AES_COUNT
    m.set(Aes.Y, 2)
    assert m.get(Aes.Y) == 2
    assert m.values() == (0, 2, 0, 0, 0)


def test_aes_map_copy_is_independent():
    """Mutating a copy leaves the original untouched."""
    m = AesMap("a")
    c = m.copy()
    c.set(Aes.COL, "b")
    assert m.get(Aes.COL) == "a"
    assert c.get(Aes.COL) == "b"
    assert m != c


def test_aes_map_transform():
    """transform() applies a function to every slot."""
    m = AesMap(values=[1, 2, 3, 4, 5])
    assert m.transform(lambda v: v * 10).values() == (10, 20, 30, 40, 50)
    assert dict(m.items())[Aes.ROW] == 4
