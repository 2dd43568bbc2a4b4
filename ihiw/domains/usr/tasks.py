# ihiw/domains/usr/tasks.py

"""
'usr' 도메인의 ARQ 워커 태스크입니다.
"""

import logging
from typing import Any, Dict, Optional

from ihiw.services.mail_service import MailService

logger = logging.getLogger(__name__)


async def send_email_from_template_task(
    ctx,  # ARQ context
    user: Dict[str, Any],
    receiver: str,
    template_name: str,
    title_key: str,
    context: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    디스패처가 큐에 넣은 템플릿 메일 한 건을 렌더링하여 발송합니다.
    발송 실패는 MailService가 로그로 남기며, 결과는 상태 딕셔너리로만 돌려줍니다.
    """
    mail_service: MailService = ctx.get("mail_service") or MailService()
    logger.debug("ARQ 태스크: '%s' 메일 발송 시작 (수신자 %s)", template_name, receiver)

    try:
        sent = await mail_service.send_email_from_template(user, receiver, template_name, title_key, context)
    except KeyError as e:
        logger.error("알 수 없는 메일 템플릿: %s", e)
        return {"status": "error", "message": str(e)}

    if not sent:
        return {"status": "failed", "receiver": receiver, "template": template_name}
    return {"status": "success", "receiver": receiver, "template": template_name}
