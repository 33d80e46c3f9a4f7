import pytest

from chunkscan.pipeline import plan_chunks


def test_ranges_cover_file_exactly(tmp_path):
    path = tmp_path / "data.xls"
    path.write_bytes(b"x" * 10)

    chunks = plan_chunks(str(path), 3)

    assert [(c.index, c.offset, c.size) for c in chunks] == [(0, 0, 4), (1, 4, 4), (2, 8, 2)]
    assert sum(c.size for c in chunks) == 10
    assert all(c.file_path == str(path) for c in chunks)


def test_small_file_yields_fewer_chunks(tmp_path):
    path = tmp_path / "data.xls"
    path.write_bytes(b"abc")

    chunks = plan_chunks(path, 8)

    assert [c.size for c in chunks] == [1, 1, 1]


def test_empty_file_has_no_chunks(tmp_path):
    path = tmp_path / "empty.xls"
    path.write_bytes(b"")
    assert plan_chunks(path, 4) == []


def test_count_must_be_positive(tmp_path):
    path = tmp_path / "data.xls"
    path.write_bytes(b"abc")
    with pytest.raises(ValueError):
        plan_chunks(path, 0)
