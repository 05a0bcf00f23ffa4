# wechat_kit/services/template/dto.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class DataItem:
    """Value of one ``{{name.DATA}}`` placeholder."""

    value: str
    color: str = ""

    def to_dict(self) -> dict[str, str]:
        data = {"value": self.value}
        if self.color:
            data["color"] = self.color
        return data


@dataclass(frozen=True, slots=True)
class MiniProgram:
    """Mini program page opened when the user taps the message."""

    appid: str
    pagepath: str = ""


@dataclass(frozen=True, slots=True)
class TemplateMessage:
    """
    Template message addressed to one follower.

    :param touser: Recipient openid.
    :param template_id: Template id.
    :param data: Placeholder values keyed by placeholder name.
    :param url: Optional page opened on tap.
    :param color: Optional title color.
    :param miniprogram: Optional mini program target; takes precedence over
        ``url`` on clients that support it.
    """

    touser: str
    template_id: str
    data: dict[str, DataItem] = field(default_factory=dict)
    url: str = ""
    color: str = ""
    miniprogram: MiniProgram | None = None

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body of the send call."""
        payload: dict[str, Any] = {
            "touser": self.touser,
            "template_id": self.template_id,
            "data": {name: item.to_dict() for name, item in self.data.items()},
        }
        if self.url:
            payload["url"] = self.url
        if self.color:
            payload["color"] = self.color
        if self.miniprogram is not None:
            payload["miniprogram"] = {
                "appid": self.miniprogram.appid,
                "pagepath": self.miniprogram.pagepath,
            }
        return payload


@dataclass(frozen=True, slots=True)
class TemplateInfo:
    """One private template of the account."""

    template_id: str
    title: str = ""
    primary_industry: str = ""
    deputy_industry: str = ""
    content: str = ""
    example: str = ""
