import pytest

from molkit.errors import (
    FieldCountNotMatch,
    HeaderIsBroken,
    OffsetsNotMatch,
    TotalSizeNotMatch,
    UnknownItem,
    VerificationError,
)


def test_total_size_message():
    err = TotalSizeNotMatch("ByteReader", 1, 2)
    assert str(err) == "ByteReader total size doesn't match, expect 1, actual 2"


def test_unknown_item_message():
    err = UnknownItem("UnionA", 3, 9)
    assert str(err) == "UnionA item id (=9) is an unknown id, only has 3 kind of items"


def test_offsets_message():
    assert str(OffsetsNotMatch("Table1")) == "Table1 some offsets is not match"


def test_header_is_broken_fields():
    err = HeaderIsBroken("BytesVec", 8, 5)
    assert err.name == "BytesVec"
    assert (err.expected, err.actual) == (8, 5)
    assert str(err).startswith("BytesVec total size is not enough for header")
    assert str(err).endswith(f"expect {8}, actual {5}")


def test_field_count_fields():
    err = FieldCountNotMatch("Table2", 2, 3)
    assert (err.name, err.expected, err.actual) == ("Table2", 2, 3)
    assert str(err).startswith("Table2 field count doesn't match")


@pytest.mark.parametrize(
    "err",
    [
        TotalSizeNotMatch("A", 1, 2),
        HeaderIsBroken("B", 4, 0),
        UnknownItem("C", 1, 5),
        OffsetsNotMatch("D"),
        FieldCountNotMatch("E", 1, 0),
    ],
)
def test_all_caught_as_verification_error(err):
    with pytest.raises(VerificationError) as info:
        raise err
    assert info.value.name == err.name
    assert isinstance(info.value, ValueError)