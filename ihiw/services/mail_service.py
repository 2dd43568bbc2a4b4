# ihiw/services/mail_service.py

"""
ARQ 워커에서 메일을 렌더링하고 SMTP로 발송하는 서비스 모듈입니다.

발송 실패는 로그로만 남기고 False를 반환합니다. (요청 결과와 분리된 부수 효과)
"""

import html
import logging
from email.message import EmailMessage
from typing import Any, Dict, Optional

import aiosmtplib

from ihiw.core.config import Settings, settings as default_settings
from ihiw.services.mail_templates import LAYOUT, MESSAGES, TEMPLATES

logger = logging.getLogger(__name__)


class MailService:
    """템플릿 기반 메일 발송 서비스 (aiosmtplib)"""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings

    def subject(self, title_key: str, lang_key: Optional[str]) -> str:
        """언어별 제목을 찾습니다. 없으면 기본 언어(en), 그래도 없으면 키 자체를 반환합니다."""
        lang = (lang_key or self.settings.DEFAULT_LANG_KEY).split("-")[0].lower()
        for candidate in (lang, "en"):
            message = MESSAGES.get(candidate, {}).get(title_key)
            if message:
                return message
        return title_key

    def render(self, template_name: str, variables: Dict[str, Any], title: str = "") -> str:
        template = TEMPLATES.get(template_name)
        if template is None:
            raise KeyError(f"Unknown mail template: {template_name}")
        escaped = {k: html.escape("" if v is None else str(v)) for k, v in variables.items()}
        body = template.safe_substitute(escaped)
        return LAYOUT.safe_substitute(title=html.escape(title), body=body)

    async def send_email(
        self, to: str, subject: str, content: str, is_html: bool = True
    ) -> bool:
        logger.debug("Send email[html '%s'] to '%s' with subject '%s'", is_html, to, subject)

        message = EmailMessage()
        message["From"] = self.settings.MAIL_FROM
        message["To"] = to
        message["Subject"] = subject
        message.set_content(content, subtype="html" if is_html else "plain", charset="utf-8")

        password = self.settings.MAIL_PASSWORD.get_secret_value() if self.settings.MAIL_PASSWORD else None
        try:
            await aiosmtplib.send(
                message,
                hostname=self.settings.MAIL_HOST,
                port=self.settings.MAIL_PORT,
                username=self.settings.MAIL_USERNAME,
                password=password,
                start_tls=self.settings.MAIL_START_TLS,
            )
            logger.debug("Sent email to User '%s'", to)
            return True
        except Exception as e:
            logger.warning("Email could not be sent to user '%s': %s", to, e)
            return False

    async def send_email_from_template(
        self,
        user: Dict[str, Any],
        receiver: str,
        template_name: str,
        title_key: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """
        수신자 스냅샷(user)과 추가 컨텍스트로 템플릿을 렌더링해 발송합니다.
        """
        variables = {**user, "base_url": self.settings.MAIL_BASE_URL, **(context or {})}
        subject = self.subject(title_key, user.get("lang_key"))
        content = self.render(template_name, variables, title=subject)
        return await self.send_email(receiver, subject, content, is_html=True)
