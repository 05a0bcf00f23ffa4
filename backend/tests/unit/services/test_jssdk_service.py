# tests/unit/services/test_jssdk_service.py
from __future__ import annotations

import hashlib

import pytest

from tests.helpers.payloads import TICKET_URL, json_body
from wechat_kit.services.credentials.dto import CredentialKind
from wechat_kit.services.jssdk import service as jssdk_module
from wechat_kit.services.jssdk.service import JSSDKService


@pytest.fixture()
def service(ctx) -> JSSDKService:
    return JSSDKService(ctx=ctx, clock=lambda: 1414587457.9)


def test_get_config_matches_published_example(service, manager, cache, monkeypatch):
    ticket = "sM4AOVdWfPE4DxkXGEs8VMCPGGVi4C3VM0P37wVUCFvkVAy_90u5h9nbSlYy3-Sl-HhTdfl2fzFy1AOcHKP7qg"
    cache.set(manager.cache_key(CredentialKind.JSAPI_TICKET), ticket, 100)
    monkeypatch.setattr(jssdk_module, "random_str", lambda length: "Wm3WZYTPz0wzccnW")

    config = service.get_config("http://mp.weixin.qq.com?params=value")

    assert config.timestamp == 1414587457
    assert config.nonce_str == "Wm3WZYTPz0wzccnW"
    assert config.signature == "0f9de62fce790f9a083d5c99e95740ceb90c27ed"


def test_get_config_signs_fixed_field_order(service, manager, cache):
    cache.set(manager.cache_key(CredentialKind.JSAPI_TICKET), "TK", 100)

    config = service.get_config("https://shop.test/page?a=1")

    text = f"jsapi_ticket=TK&noncestr={config.nonce_str}&timestamp={config.timestamp}&url=https://shop.test/page?a=1"
    assert config.signature == hashlib.sha1(text.encode()).hexdigest()
    assert config.app_id == "wx-app"
    assert len(config.nonce_str) == 16


def test_get_config_refreshes_ticket_on_cold_cache(service, token_ok, transport):
    token_ok("T1")
    transport.queue(TICKET_URL, json_body(errcode=0, errmsg="ok", ticket="TK", expires_in=7200))

    service.get_config("https://shop.test/")
    service.get_config("https://shop.test/other")

    assert transport.count(TICKET_URL) == 1


def test_to_dict_uses_bridge_keys(service, manager, cache):
    cache.set(manager.cache_key(CredentialKind.JSAPI_TICKET), "TK", 100)

    data = service.get_config("https://shop.test/").to_dict()

    assert set(data) == {"appId", "timestamp", "nonceStr", "signature"}


def test_default_clock_uses_wall_time(ctx, manager, cache, freeze_time):
    cache.set(manager.cache_key(CredentialKind.JSAPI_TICKET), "TK", 100)

    with freeze_time("2024-01-01 00:00:00"):
        config = JSSDKService(ctx=ctx).get_config("https://shop.test/")

    assert config.timestamp == 1704067200
