import pydantic
import pytest

from streetview_explorer.models import ImageRequest, MetadataRequest, parse_lat_lng


def test_image_request_defaults():
    request = ImageRequest(filename="x.jpg", location="Empire State Building, NY")

    assert request.size == "600x400"
    assert (request.heading, request.pitch, request.fov, request.radius) == (0, 0, 90, 50)
    assert request.source == "default"
    assert request.upstream_params() == {
        "location": "Empire State Building, NY",
        "source": "default",
        "radius": 50,
        "size": "600x400",
        "heading": 0,
        "pitch": 0,
        "fov": 90,
        "return_error_code": "true",
    }


def test_unknown_arguments_are_ignored():
    request = MetadataRequest.model_validate({"pano_id": "abc", "zoom": 3})
    assert not hasattr(request, "zoom")


@pytest.mark.parametrize(
    "value,expected",
    [
        ("40.714728,-73.998672", (40.714728, -73.998672)),
        (" 51.5 , -0.12 ", (51.5, -0.12)),
        ("0,0", (0.0, 0.0)),
    ],
)
def test_parse_lat_lng(value, expected):
    coord = parse_lat_lng(value)
    assert (coord.lat, coord.lng) == expected


@pytest.mark.parametrize("value", ["40.7", "40.7,-74.0,10", "north,south", "nan,1", "10,200"])
def test_parse_lat_lng_rejects(value):
    with pytest.raises(ValueError):
        parse_lat_lng(value)


def test_boundary_camera_values_are_accepted():
    request = ImageRequest(filename="x.jpg", pano_id="abc", heading=360, pitch=-90, fov=10)
    assert request.heading == 360
    assert "radius" not in request.upstream_params()


def test_fractional_heading_is_rejected():
    with pytest.raises(pydantic.ValidationError):
        ImageRequest(filename="x.jpg", pano_id="abc", heading=12.5)


def test_input_schema_declares_selectors():
    schema = ImageRequest.model_json_schema()
    assert {"location", "lat_lng", "pano_id", "heading", "pitch", "fov"} <= set(schema["properties"])
    assert schema["properties"]["heading"]["maximum"] == 360
