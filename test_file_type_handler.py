import json

import pandas as pd
import pytest

from cell_classifier import CellKind, Classification, classify
from file_type_handler import FileTypeHandler, dataset_from_frame, write_blob


def test_csv_load_turns_missing_values_into_none(tmp_path):
    path = tmp_path / "people.csv"
    path.write_text("Name,Age\nAl,25\nBob,\n")
    dataset = FileTypeHandler(str(path)).load()
    assert dataset.headings == ["Name", "Age"]
    assert dataset.rows == [["Al", 25.0], ["Bob", None]]
    assert type(dataset.rows[0][1]) is float


def test_json_headings_and_data_keep_rich_cells(tmp_path):
    path = tmp_path / "t.json"
    link = {"type": "url", "value": "https://x"}
    path.write_text(json.dumps({"headings": ["a", "b"], "data": [[1, link]]}))
    dataset = FileTypeHandler(str(path)).load()
    assert dataset.headings == ["a", "b"]
    assert dataset.rows == [[1, link]]


def test_json_records_union_keys(tmp_path):
    path = tmp_path / "r.json"
    path.write_text(json.dumps([{"a": 1}, {"a": 2, "b": [1, 2]}]))
    dataset = FileTypeHandler(str(path)).load()
    assert dataset.headings == ["a", "b"]
    assert dataset.rows == [[1, None], [2, [1, 2]]]


def test_missing_file_is_empty_dataset(tmp_path):
    dataset = FileTypeHandler(str(tmp_path / "none.csv")).load()
    assert dataset.headings == []
    assert dataset.rows == []


def test_unsupported_extension_exits(tmp_path):
    with pytest.raises(SystemExit):
        FileTypeHandler(str(tmp_path / "x.txt"))


def test_dataset_from_frame_keeps_timestamps():
    df = pd.DataFrame({"when": pd.to_datetime(["2024-01-05", None]), "n": [1, 2]})
    dataset = dataset_from_frame(df)
    assert isinstance(dataset.rows[0][0], pd.Timestamp)
    assert dataset.rows[1][0] is None
    assert dataset.rows[0][1] == 1
    assert type(dataset.rows[0][1]) is int


def test_parquet_list_column_loads_as_list_cells(tmp_path):
    pytest.importorskip("pyarrow")
    path = tmp_path / "tags.parquet"
    pd.DataFrame({"tags": [["a", "b"]]}).to_parquet(path)

    dataset = FileTypeHandler(str(path)).load()
    assert dataset.headings == ["tags"]
    assert dataset.rows == [[["a", "b"]]]
    assert classify(dataset.rows[0][0]) == Classification("a, b", CellKind.LIST)


def test_write_blob(tmp_path):
    target = tmp_path / "out.csv"
    write_blob(b'"a"\n', str(target))
    assert target.read_bytes() == b'"a"\n'
