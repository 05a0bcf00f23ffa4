# tests/unit/cli/test_wechat_cli.py
from __future__ import annotations

import json

from flask import Flask

from tests.helpers.payloads import API_BASE, TICKET_URL, json_body
from tests.helpers.utils import FailingCache
from wechat_kit.core.extensions import init_app as init_wechat
from wechat_kit.core.logger import mask_secret
from wechat_kit.services.signing import sign


def test_token_is_masked_by_default(app, token_ok):
    token_ok("ACCESS-TOKEN-1234")

    result = app.test_cli_runner().invoke(args=["wechat", "token"])

    assert result.exit_code == 0, result.output
    assert result.output.strip() == mask_secret("ACCESS-TOKEN-1234")
    assert "ACCESS-TOKEN" not in result.output


def test_token_reveal(app, token_ok):
    token_ok("ACCESS-TOKEN-1234")

    result = app.test_cli_runner().invoke(args=["wechat", "token", "--reveal"])

    assert result.output.strip() == "ACCESS-TOKEN-1234"


def test_token_printed_when_cache_refuses_it(transport, token_ok):
    host = Flask(__name__)
    host.config.update(WECHAT_APP_ID="wx-app", WECHAT_APP_SECRET="app-secret", WECHAT_API_BASE=API_BASE)
    init_wechat(host, cache=FailingCache("set"), transport=transport)
    token_ok("ACCESS-TOKEN-1234")

    result = host.test_cli_runner().invoke(args=["wechat", "token", "--reveal"])

    assert result.exit_code == 0, result.output
    assert result.output.strip() == "ACCESS-TOKEN-1234"


def test_token_failure_exits_non_zero(app, transport):
    result = app.test_cli_runner().invoke(args=["wechat", "token"])

    assert result.exit_code == 1
    assert "Could not obtain access_token" in result.output


def test_ticket_command(app, token_ok, transport):
    token_ok("T1")
    transport.queue(TICKET_URL, json_body(errcode=0, errmsg="ok", ticket="TICKET-5678", expires_in=7200))

    result = app.test_cli_runner().invoke(args=["wechat", "ticket", "--reveal"])

    assert result.output.strip() == "TICKET-5678"


def test_jssdk_config_prints_bridge_payload(app, token_ok, transport):
    token_ok("T1")
    transport.queue(TICKET_URL, json_body(errcode=0, errmsg="ok", ticket="TK", expires_in=7200))

    result = app.test_cli_runner().invoke(args=["wechat", "jssdk-config", "https://shop.test/"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["appId"] == "wx-app"
    assert len(payload["signature"]) == 40


def test_sign_command(app):
    result = app.test_cli_runner().invoke(args=["wechat", "sign", "b=2", "a=1", "--key", "KEY"])

    assert result.exit_code == 0, result.output
    assert result.output.strip() == sign({"a": "1", "b": "2"}, "KEY")


def test_sign_rejects_malformed_pair(app):
    result = app.test_cli_runner().invoke(args=["wechat", "sign", "oops", "--key", "KEY"])

    assert result.exit_code == 2
    assert "KEY=VALUE" in result.output
