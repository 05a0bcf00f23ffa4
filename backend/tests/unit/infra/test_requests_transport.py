# tests/unit/infra/test_requests_transport.py
"""Unit tests for RequestsTransport with ``responses`` mocking the network."""

from __future__ import annotations

import pytest
import requests
import responses
from responses import matchers

from wechat_kit.infra.http.requests_transport import RequestsTransport
from wechat_kit.services._shared.errors import TransportError

URL = "https://api.test/cgi-bin/token"


@responses.activate
def test_get_returns_raw_body_and_sends_params():
    responses.add(
        responses.GET,
        URL,
        body=b'{"access_token": "T1"}',
        status=200,
        match=[matchers.query_param_matcher({"appid": "wx", "grant_type": "client_credential"})],
    )

    body = RequestsTransport().get(URL, params={"appid": "wx", "grant_type": "client_credential"})

    assert body == b'{"access_token": "T1"}'


@responses.activate
def test_post_sends_json_payload():
    responses.add(
        responses.POST,
        URL,
        json={"errcode": 0, "msgid": 1},
        match=[matchers.json_params_matcher({"touser": "o1"})],
    )

    body = RequestsTransport().post(URL, json={"touser": "o1"})

    assert b'"msgid": 1' in body


@responses.activate
def test_non_2xx_status_raises_transport_error():
    responses.add(responses.GET, URL, status=503)

    with pytest.raises(TransportError) as excinfo:
        RequestsTransport().get(URL)

    assert excinfo.value.status_code == 503
    assert excinfo.value.timeout is False


@responses.activate
def test_timeout_raises_transport_error_flagged_as_timeout():
    responses.add(responses.GET, URL, body=requests.Timeout("read timed out"))

    with pytest.raises(TransportError) as excinfo:
        RequestsTransport(timeout=0.1).get(URL)

    assert excinfo.value.timeout is True


@responses.activate
def test_connection_error_raises_transport_error():
    responses.add(responses.GET, URL, body=requests.ConnectionError("refused"))

    with pytest.raises(TransportError) as excinfo:
        RequestsTransport().get(URL)

    assert excinfo.value.url == URL
    assert excinfo.value.status_code is None
