# ihiw/services/mail_templates.py

"""
메일 본문 템플릿과 언어별 제목 메시지입니다.

본문은 string.Template 형식이며, 치환 변수는 MailService.render가 HTML 이스케이프한 뒤 채웁니다.
"""

from string import Template

_LAYOUT = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>$title</title></head>
<body>
$body
<p>Regards,<br/><em>The IHIW Team.</em></p>
</body>
</html>
"""

TEMPLATES = {
    "mail/creationEmail": Template(
        "<p>Dear $login,</p>"
        "<p>Your IHIW account has been created. Please click on the URL below to activate it:</p>"
        '<p><a href="$base_url/account/activate?key=$activation_key">Activate your account</a></p>'
        "<p>Then choose your password here:</p>"
        '<p><a href="$base_url/account/reset/finish?key=$reset_key">Set your password</a></p>'
    ),
    "mail/activationconfirmation": Template(
        "<p>Dear $login,</p>"
        "<p>Your IHIW account has been activated. You can now sign in:</p>"
        '<p><a href="$base_url/login">Sign in</a></p>'
    ),
    "mail/passwordResetEmail": Template(
        "<p>Dear $login,</p>"
        "<p>For your IHIW account a password reset was requested, please click on the URL below to reset it:</p>"
        '<p><a href="$base_url/account/reset/finish?key=$reset_key">Reset your password</a></p>'
    ),
    "mail/subscriptionEmail": Template(
        "<p>Dear $login,</p>"
        "<p>The lab <strong>$lab_code</strong> ($lab_name) has subscribed to your project "
        "<strong>$project_name</strong>.</p>"
        '<p><a href="$base_url/project">Open your projects</a></p>'
    ),
}

MESSAGES = {
    "en": {
        "email.activation.title": "IHIW account activation",
        "email.activationconfirmation.title": "IHIW account activated",
        "email.reset.title": "IHIW password reset",
        "email.subscription.title": "IHIW project subscription",
    },
    "de": {
        "email.activation.title": "IHIW Kontoaktivierung",
        "email.activationconfirmation.title": "IHIW Konto aktiviert",
        "email.reset.title": "IHIW Passwort zurücksetzen",
        "email.subscription.title": "IHIW Projektanmeldung",
    },
}

LAYOUT = Template(_LAYOUT)
