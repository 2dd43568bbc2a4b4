# ihiw/services/notification.py

"""
알림 디스패처 모듈입니다.

요청을 처리하는 쪽은 메일 발송 작업을 ARQ 큐에 넣기만 하고 결과를 기다리지 않습니다.
큐가 없거나 작업 등록이 실패해도 경고 로그만 남기며, 호출한 작업의 결과에는 영향을 주지 않습니다.
실제 렌더링과 SMTP 발송은 워커의 MailService가 수행합니다.
"""

import logging
from typing import Any, Dict, Optional

from ihiw.domains.usr import models as usr_models

logger = logging.getLogger(__name__)

SEND_MAIL_TASK = "send_email_from_template_task"

# 템플릿 이름
CREATION_TEMPLATE = "mail/creationEmail"
ACTIVATION_CONFIRMATION_TEMPLATE = "mail/activationconfirmation"
PASSWORD_RESET_TEMPLATE = "mail/passwordResetEmail"
SUBSCRIPTION_TEMPLATE = "mail/subscriptionEmail"


def mail_recipient(user: usr_models.User) -> Dict[str, Any]:
    """
    큐에 실을 수신자 스냅샷을 만듭니다. 워커는 DB를 다시 조회하지 않고 이 값으로 렌더링합니다.
    """
    return {
        "login": user.login,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "lang_key": user.lang_key,
        "activation_key": user.activation_key,
        "reset_key": user.reset_key,
    }


class NotificationDispatcher:
    """
    메일 발송 작업을 ARQ 큐에 제출하는 디스패처입니다.

    Args:
        redis_pool: arq.connections.ArqRedis 인스턴스. None이면 발송을 건너뜁니다.
    """

    def __init__(self, redis_pool: Optional[Any]):
        self.redis_pool = redis_pool

    async def send(
        self,
        template_name: str,
        recipient: usr_models.User,
        title_key: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        to = recipient.email
        if self.redis_pool is None:
            logger.warning("ARQ Redis pool not available, skipping '%s' mail to '%s'", template_name, to)
            return
        try:
            await self.redis_pool.enqueue_job(
                SEND_MAIL_TASK,
                mail_recipient(recipient),
                to,
                template_name,
                title_key,
                context or {},
            )
            logger.debug("ARQ Job enqueued: %s (%s) for '%s'", SEND_MAIL_TASK, template_name, to)
        except Exception as e:
            # 발송 실패는 호출한 요청의 결과로 전파하지 않습니다.
            logger.warning("Could not enqueue '%s' mail to '%s': %s", template_name, to, e)

    async def send_creation_email(self, user: usr_models.User) -> None:
        logger.debug("Sending creation email to '%s'", user.email)
        await self.send(CREATION_TEMPLATE, user, "email.activation.title")

    async def send_activation_confirmation(self, user: usr_models.User) -> None:
        logger.debug("Sending activation confirmation email to '%s'", user.email)
        await self.send(ACTIVATION_CONFIRMATION_TEMPLATE, user, "email.activationconfirmation.title")

    async def send_password_reset_mail(self, user: usr_models.User) -> None:
        logger.debug("Sending password reset email to '%s'", user.email)
        await self.send(PASSWORD_RESET_TEMPLATE, user, "email.reset.title")

    async def send_subscription_notification(self, user: usr_models.User, lab: Any, project: Any) -> None:
        """프로젝트에 실험실이 구독되었음을 프로젝트 생성자에게 알립니다."""
        logger.debug("Sending subscription email to '%s'", user.email)
        await self.send(
            SUBSCRIPTION_TEMPLATE, user, "email.subscription.title",
            context={
                "lab_code": lab.code,
                "lab_name": lab.name or "",
                "project_name": project.name,
            },
        )
