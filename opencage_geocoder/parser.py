"""
Response parser for the OpenCage geocoding API.

Turns decoded JSON into GeocodeResult TypedDicts, checking the shape of
every field the client relies on. Anything that does not match raises
DecodeError.
"""

import logging
from typing import Any, Dict, List, Optional

from .exceptions import DecodeError
from .models import GeocodeResult, GeocodeResultItem, Geometry, Rate, ResultBounds, Status

logger = logging.getLogger(__name__)

STATUS_OK = 200


def _requireDict(data: Any, path: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise DecodeError(f"Expected object at '{path}', got {type(data).__name__}")
    return data


def _requireInt(data: Dict[str, Any], key: str, path: str) -> int:
    value = data.get(key)
    # bool is an int subclass, but never a valid count or code
    if not isinstance(value, int) or isinstance(value, bool):
        raise DecodeError(f"Expected integer at '{path}.{key}', got {value!r}")
    return value


def _requireFloat(data: Dict[str, Any], key: str, path: str) -> float:
    value = data.get(key)
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise DecodeError(f"Expected number at '{path}.{key}', got {value!r}")
    return float(value)


def _requireStr(data: Dict[str, Any], key: str, path: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise DecodeError(f"Expected string at '{path}.{key}', got {value!r}")
    return value


def parseGeometry(data: Any, path: str) -> Geometry:
    """Parse a {"lat": .., "lng": ..} object."""
    geometry = _requireDict(data, path)
    return {
        "lat": _requireFloat(geometry, "lat", path),
        "lng": _requireFloat(geometry, "lng", path),
    }


def parseStatus(data: Any) -> Status:
    status = _requireDict(data, "status")
    return {
        "code": _requireInt(status, "code", "status"),
        "message": _requireStr(status, "message", "status"),
    }


def parseRate(data: Any) -> Rate:
    rate = _requireDict(data, "rate")
    return {
        "limit": _requireInt(rate, "limit", "rate"),
        "remaining": _requireInt(rate, "remaining", "rate"),
        "reset": _requireInt(rate, "reset", "rate"),
    }


def parseResultItem(data: Any, index: int) -> GeocodeResultItem:
    """Parse single entry of the results array.

    Args:
        data: Decoded JSON of the entry
        index: Position in the results array, used in error messages

    Returns:
        Parsed GeocodeResultItem. Unknown keys other than components are dropped.
    """
    path = f"results[{index}]"
    item = _requireDict(data, path)

    result: GeocodeResultItem = {
        "confidence": _requireInt(item, "confidence", path),
        "formatted": _requireStr(item, "formatted", path),
        "geometry": parseGeometry(item.get("geometry"), f"{path}.geometry"),
    }

    if "bounds" in item:
        bounds = _requireDict(item["bounds"], f"{path}.bounds")
        resultBounds: ResultBounds = {
            "northeast": parseGeometry(bounds.get("northeast"), f"{path}.bounds.northeast"),
            "southwest": parseGeometry(bounds.get("southwest"), f"{path}.bounds.southwest"),
        }
        result["bounds"] = resultBounds

    if isinstance(item.get("components"), dict):
        result["components"] = item["components"]

    return result


def parseGeocodeResponse(data: Any, httpStatus: Optional[int] = None) -> GeocodeResult:
    """
    Build GeocodeResult from decoded response JSON.

    The results array is required for successful responses only; error
    envelopes usually come without it and get an empty list. The rate block
    is optional since paid plans do not receive one.

    Args:
        data: Decoded JSON body
        httpStatus: HTTP status of the response, attached to DecodeError

    Returns:
        Parsed GeocodeResult

    Raises:
        DecodeError: If the body does not match the expected shape
    """
    try:
        body = _requireDict(data, "$")
        status = parseStatus(body.get("status"))

        result: GeocodeResult = {"status": status, "results": []}

        if body.get("rate") is not None:
            result["rate"] = parseRate(body["rate"])

        rawResults = body.get("results")
        if rawResults is None and status["code"] != STATUS_OK:
            rawResults = []
        if not isinstance(rawResults, list):
            raise DecodeError(f"Expected array at 'results', got {rawResults!r}")
        items: List[GeocodeResultItem] = [parseResultItem(item, idx) for idx, item in enumerate(rawResults)]
        result["results"] = items

        if isinstance(body.get("total_results"), int):
            result["totalResults"] = body["total_results"]

        return result
    except DecodeError as e:
        e.httpStatus = httpStatus
        logger.debug(f"Failed to decode geocode response (HTTP {httpStatus}): {e.message}")
        raise
