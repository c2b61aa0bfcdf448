"""
Tests for the geocode response parser.
"""

import pytest

from .exceptions import DecodeError
from .parser import parseGeocodeResponse, parseResultItem
from .test_helpers import makeBody, makeResultItem


def test_parse_full_response():
    """Test every known field is carried over, dood!"""
    body = makeBody(remaining=10, reset=1700000100, results=[makeResultItem()])
    body["results"][0]["components"] = {"city": "Leuven", "country_code": "be"}

    result = parseGeocodeResponse(body)

    assert result == {
        "status": {"code": 200, "message": "OK"},
        "rate": {"limit": 2500, "remaining": 10, "reset": 1700000100},
        "results": [
            {
                "confidence": 9,
                "formatted": "Fonteinstraat, 3000 Leuven, Belgium",
                "geometry": {"lat": 50.8789, "lng": 4.7009},
                "bounds": {
                    "northeast": {"lat": 50.8789 + 0.001, "lng": 4.7009 + 0.001},
                    "southwest": {"lat": 50.8789 - 0.001, "lng": 4.7009 - 0.001},
                },
                "components": {"city": "Leuven", "country_code": "be"},
            }
        ],
        "totalResults": 1,
    }


def test_parse_drops_unknown_fields():
    item = makeResultItem()
    item["annotations"] = {"timezone": {"name": "Europe/Brussels"}}
    item["components"] = "not an object"

    parsed = parseResultItem(item, 0)

    assert "annotations" not in parsed
    assert "components" not in parsed


def test_parse_integer_coordinates():
    """Test integer coordinates are accepted as floats."""
    parsed = parseResultItem({"confidence": 1, "formatted": "Earth", "geometry": {"lat": 0, "lng": 10}}, 0)

    assert parsed["geometry"] == {"lat": 0.0, "lng": 10.0}
    assert isinstance(parsed["geometry"]["lat"], float)
    assert "bounds" not in parsed


def test_parse_without_rate_block():
    result = parseGeocodeResponse(makeBody(remaining=None))
    assert "rate" not in result


def test_parse_error_envelope_without_results():
    result = parseGeocodeResponse({"status": {"code": 403, "message": "disabled"}})
    assert result["status"] == {"code": 403, "message": "disabled"}
    assert result["results"] == []


@pytest.mark.parametrize(
    "body",
    [
        [],
        "OK",
        None,
        {"results": []},
        {"status": {"code": "200", "message": "OK"}, "results": []},
        {"status": {"code": True, "message": "OK"}, "results": []},
        {"status": {"code": 200}, "results": []},
        {"status": {"code": 200, "message": "OK"}},
        {"status": {"code": 200, "message": "OK"}, "results": {}},
        {"status": {"code": 200, "message": "OK"}, "results": [], "rate": {"limit": 1, "remaining": "1", "reset": 0}},
        {"status": {"code": 200, "message": "OK"}, "results": [{"formatted": "x", "geometry": {"lat": 1, "lng": 2}}]},
        {"status": {"code": 200, "message": "OK"}, "results": [{"confidence": 1, "formatted": "x"}]},
        {
            "status": {"code": 200, "message": "OK"},
            "results": [{"confidence": 1, "formatted": "x", "geometry": {"lat": "1", "lng": 2}}],
        },
        {
            "status": {"code": 200, "message": "OK"},
            "results": [
                {"confidence": 1, "formatted": "x", "geometry": {"lat": 1, "lng": 2}, "bounds": {"northeast": {}}}
            ],
        },
    ],
)
def test_parse_invalid_shape(body):
    """Test bodies that do not match the envelope raise DecodeError, dood!"""
    with pytest.raises(DecodeError):
        parseGeocodeResponse(body)


def test_decode_error_carries_http_status():
    with pytest.raises(DecodeError) as excInfo:
        parseGeocodeResponse({"status": None}, httpStatus=500)

    assert excInfo.value.httpStatus == 500
    assert "status" in excInfo.value.message


def test_error_path_in_message():
    body = makeBody(results=[makeResultItem(), {"confidence": 1, "formatted": 5, "geometry": {"lat": 1, "lng": 2}}])

    with pytest.raises(DecodeError, match=r"results\[1\]\.formatted"):
        parseGeocodeResponse(body)
