# tests/unit/services/test_credential_store.py
from __future__ import annotations

import pytest

from tests.helpers.payloads import TICKET_URL, TOKEN_URL, json_body, xml_body
from wechat_kit.services._shared.errors import RemoteAPIError, ResponseDecodeError
from wechat_kit.services.credentials.dto import CredentialKind, IssuedCredential


def test_fetch_access_token_from_json(store, transport):
    transport.queue(TOKEN_URL, json_body(access_token="T1", expires_in=7200))

    assert store.fetch_access_token() == IssuedCredential(value="T1", expires_in=7200)


def test_fetch_access_token_from_xml(store, transport):
    transport.queue(TOKEN_URL, xml_body(access_token="X1", expires_in=3600))

    assert store.fetch_access_token() == IssuedCredential(value="X1", expires_in=3600)


def test_fetch_ticket_from_xml_with_errcode_zero(store, transport):
    transport.queue(TICKET_URL, xml_body(errcode=0, errmsg="ok", ticket="TK", expires_in=7200))

    assert store.fetch_jsapi_ticket("T1") == IssuedCredential(value="TK", expires_in=7200)


def test_remote_error_code_raises(store, transport):
    transport.queue(TOKEN_URL, json_body(errcode=40125, errmsg="invalid appsecret"))

    with pytest.raises(RemoteAPIError) as excinfo:
        store.fetch_access_token()

    assert excinfo.value.code == 40125
    assert excinfo.value.kind == "access_token"
    assert excinfo.value.to_dict()["error"] == "remote_api_error"


def test_remote_error_code_from_xml_raises(store, transport):
    transport.queue(TOKEN_URL, xml_body(errcode=40164, errmsg="invalid ip"))

    with pytest.raises(RemoteAPIError) as excinfo:
        store.fetch_access_token()

    assert excinfo.value.code == 40164


@pytest.mark.parametrize(
    "body",
    [
        b"not a body",
        b"<xml><access_token>",
        b"[1, 2, 3]",
        b'{"expires_in": 7200}',
    ],
)
def test_undecodable_bodies_raise_decode_error(store, transport, body):
    transport.queue(TOKEN_URL, body)

    with pytest.raises(ResponseDecodeError):
        store.fetch_access_token()


def test_refresh_dispatches_by_kind(store, transport):
    transport.queue(TOKEN_URL, json_body(access_token="T1", expires_in=7200))
    transport.queue(TICKET_URL, json_body(errcode=0, ticket="TK", expires_in=7200))

    assert store.refresh(CredentialKind.ACCESS_TOKEN).value == "T1"
    assert store.refresh(CredentialKind.JSAPI_TICKET, access_token=lambda: "T1").value == "TK"


def test_ticket_refresh_requires_a_token_supplier(store):
    with pytest.raises(ValueError):
        store.refresh(CredentialKind.JSAPI_TICKET)


def test_identity_repr_hides_the_secret(identity):
    assert "app-secret" not in repr(identity)
