import pytest

from circonus_adapter.core.errors import (
    DataShapeError,
    EmptySeriesError,
    MissingDataError,
)
from circonus_adapter.infrastructure.circonus.schemas import decode_caql_response


def test_decodes_points():
    points = decode_caql_response(b'{"_data": [[100, [5.0, 1.0]], [160, [4]]], "_meta": {}}')
    assert [(p.timestamp, p.values) for p in points] == [(100.0, [5.0, 1.0]), (160.0, [4.0])]


def test_null_points_are_kept_as_none():
    points = decode_caql_response(b'{"_data": [null, [100, [null]]]}')
    assert points[0] is None
    assert points[1].value is None


def test_bare_value_form():
    [point] = decode_caql_response(b'{"_data": [[100, 7.5]]}')
    assert point.values == [7.5]


def test_flat_multi_stream_point_keeps_first_value():
    [point] = decode_caql_response(b'{"_data": [[100, 5.0, 7.0, null]]}')
    assert point.timestamp == 100.0
    assert point.values == [5.0]
    assert point.value == 5.0


def test_missing_data_field():
    with pytest.raises(MissingDataError):
        decode_caql_response(b'{"_meta": {"error": "bad"}}')


def test_null_data_field_counts_as_missing():
    with pytest.raises(MissingDataError):
        decode_caql_response(b'{"_data": null}')


def test_empty_series():
    with pytest.raises(EmptySeriesError):
        decode_caql_response(b'{"_data": []}')


@pytest.mark.parametrize(
    "body",
    [
        b"not json",
        b"[1, 2, 3]",
        b'{"_data": "oops"}',
        b'{"_data": [[100]]}',
        b'{"_data": [["yesterday", [1]]]}',
        b'{"_data": [[100, ["many"]]]}',
        b'{"_data": [[[1], [2]]]}',
    ],
)
def test_malformed_responses(body):
    with pytest.raises(DataShapeError) as exc:
        decode_caql_response(body)
    assert not isinstance(exc.value, (MissingDataError, EmptySeriesError))
