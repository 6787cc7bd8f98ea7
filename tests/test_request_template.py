import json

import httpx
import pytest

from adapters.request_template import PLACEHOLDER_URL, build_request_template, encode_payload
from core.domain.errors import EncodingError
from core.domain.models import Payload


def test_template_is_a_json_post_to_the_placeholder():
    template = build_request_template(Payload(data="example data"))

    assert template.method == "POST"
    assert template.url == PLACEHOLDER_URL
    assert template.headers["Content-Type"] == "application/json"
    assert json.loads(template.body) == {"data": "example data"}


def test_plain_mappings_are_serialized_too():
    assert json.loads(encode_payload({"data": "x"})) == {"data": "x"}


def test_unserializable_payload_raises_encoding_error():
    with pytest.raises(EncodingError):
        build_request_template({"data": object()})


def test_clone_overrides_only_the_url():
    template = build_request_template(Payload())
    clone = template.clone("https://other.example")

    assert clone.url == "https://other.example"
    assert template.url == PLACEHOLDER_URL
    assert clone.method == template.method
    assert clone.body == template.body
    assert dict(clone.headers) == dict(template.headers)


def test_template_headers_are_read_only():
    template = build_request_template(Payload())
    with pytest.raises(TypeError):
        template.headers["X-Extra"] = "1"  # type: ignore[index]


def test_build_request_uses_the_clone_destination():
    template = build_request_template(Payload(data="d")).clone("https://bar.com/x")
    client = httpx.AsyncClient()

    request = template.build_request(client)

    assert request.method == "POST"
    assert request.url.host == "bar.com"
    assert request.url.path == "/x"
    assert request.headers["content-type"] == "application/json"
    assert json.loads(request.content) == {"data": "d"}
