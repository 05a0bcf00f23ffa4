# wechat_kit/services/template/service.py
from __future__ import annotations

import logging

from wechat_kit.schemas.template import TemplateListResponseSchema, TemplateSendResponseSchema
from wechat_kit.services._shared.base import BaseService

from .dto import TemplateInfo, TemplateMessage

logger = logging.getLogger(__name__)

SEND_PATH = "/cgi-bin/message/template/send"
LIST_PATH = "/cgi-bin/template/get_all_private_template"


class TemplateService(BaseService):
    """Send template messages and list the account's templates."""

    def send(self, message: TemplateMessage) -> int:
        """
        Send a template message.

        :param message: Message to deliver.
        :returns: Platform ``msgid``.
        :raises TransportError: On network failure.
        :raises RemoteAPIError: On a non-zero ``errcode``; an invalid access
            token is dropped from the cache first.
        """
        msgid = self.post_json(
            SEND_PATH,
            params={"access_token": self.access_token()},
            payload=message.to_payload(),
            schema=TemplateSendResponseSchema(),
            kind="template_send",
            app_token=True,
        )
        logger.info(
            "Template message sent",
            extra={"app_id": self.app_id, "template_id": message.template_id, "msgid": msgid},
        )
        return msgid

    def list_templates(self) -> list[TemplateInfo]:
        """Return every private template of the account."""
        return self.get_json(
            LIST_PATH,
            params={"access_token": self.access_token()},
            schema=TemplateListResponseSchema(),
            kind="template_list",
            app_token=True,
        )
