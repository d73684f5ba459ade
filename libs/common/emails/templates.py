"""
Branded account e-mails for the EndoNurseVR LMS.

Every template returns ``(subject, plain_body, html_body)``; the HTML is
wrapped in the shared layout from ``wrap_html()``.
"""

from html import escape
from typing import Optional

from libs.common.datetime_utils import current_year

BRAND_NAME = "EndoNurseVR LMS"
BRAND_TITLE = "EndoNurseVR Learning Management System"
BRAND_COLOR = "#766EA9"
HEADING_COLOR = "#0c4a6e"
LOGO_URL = "https://drive.google.com/uc?export=view&id=1ErsoCRSSitylpDB-TZeIXwlU_Js8SMMS"


def wrap_html(title: str, body_html: str, show_logo: bool = True) -> str:
    """Wrap inner content in the branded LMS e-mail layout."""
    logo_html = (
        f'<div style="text-align:center;margin-bottom:10px;">'
        f'<img src="{LOGO_URL}" alt="EndoNurseVR Logo" '
        f'style="width:120px;height:auto;margin-bottom:10px;" /></div>'
        if show_logo
        else ""
    )
    return f"""\
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <title>{escape(title)}</title>
</head>
<body style="margin:0;padding:0;background-color:#e9f2f5;font-family:Arial,sans-serif;">
    <div style="padding:20px;">
        <div style="max-width:600px;margin:auto;background:#ffffff;border-radius:10px;padding:30px;box-shadow:0 3px 10px rgba(0,0,0,0.1);">
            {logo_html}
            {body_html}
            <p style="font-size:13px;color:#555;text-align:center;margin-top:30px;">
                Best Regards,<br/>
                <strong>{BRAND_TITLE}</strong><br/>
                &copy; {current_year()}
            </p>
        </div>
    </div>
</body>
</html>
"""


def detail_box(items: dict[str, Optional[str]]) -> str:
    """Render label/value pairs in a bordered box, skipping empty values."""
    rows = "".join(
        f"<p><strong>{escape(label)}:</strong> {escape(value)}</p>"
        for label, value in items.items()
        if value
    )
    return (
        '<div style="background-color:#f9fafb;border:1px solid #e0e0e0;'
        f'border-radius:8px;padding:15px;margin:20px 0;">{rows}</div>'
    )


def cta_button(label: str, url: str) -> str:
    return (
        '<div style="text-align:center;margin-top:30px;">'
        f'<a href="{url}" style="background-color:{BRAND_COLOR};color:#ffffff;'
        "text-decoration:none;padding:12px 25px;border-radius:6px;font-size:15px;"
        f'display:inline-block;">{escape(label)}</a></div>'
    )


def _greeting(first_name: Optional[str], last_name: Optional[str]) -> str:
    if not first_name:
        return "Dear User,"
    return f"Dear {first_name} {last_name or ''}".rstrip() + ","


def account_created_email(
    *,
    first_name: Optional[str],
    last_name: Optional[str],
    email: str,
    role: str,
    password: str,
    trainee_code: Optional[str],
    login_url: str,
) -> tuple[str, str, str]:
    """Credentials e-mail sent after an account is created."""
    subject = f"Your {BRAND_NAME} Account Details"
    greeting = _greeting(first_name, last_name)

    credentials = {"Email": email, "Password": password}
    if role == "trainee":
        credentials["Trainee ID"] = trainee_code

    body = (
        f"{greeting}\n\n"
        f"Your account has been successfully created on the {BRAND_NAME} platform.\n\n"
        + "".join(f"{label}: {value}\n" for label, value in credentials.items() if value)
        + f"\nLog in: {login_url}\n"
    )
    body_html = (
        f'<h2 style="text-align:center;color:{HEADING_COLOR};margin-bottom:15px;">'
        f"{BRAND_TITLE}</h2>"
        f'<p style="color:#333;font-size:15px;line-height:1.6;">{escape(greeting)}</p>'
        '<p style="color:#333;font-size:15px;line-height:1.6;">'
        f"Your account has been successfully created on the {BRAND_NAME} platform. "
        "Below are your login details:</p>"
        + detail_box(credentials)
        + cta_button("Go to Login", login_url)
    )
    return subject, body, wrap_html(f"{BRAND_NAME} Account Created", body_html)


def password_reset_email(
    *,
    first_name: Optional[str],
    last_name: Optional[str],
    email: str,
    new_password: str,
    login_url: str,
) -> tuple[str, str, str]:
    """Notification that an administrator reset the account password."""
    subject = f"Your {BRAND_NAME} Password Has Been Reset"
    greeting = _greeting(first_name, last_name)

    body = (
        f"{greeting}\n\n"
        "Your password has been reset.\n\n"
        f"Email: {email}\n"
        f"New Password: {new_password}\n\n"
        f"Log in: {login_url}\n"
    )
    body_html = (
        f'<h2 style="text-align:center;color:{HEADING_COLOR};">Password Reset Successful</h2>'
        f"<p>{escape(greeting)}</p>"
        + detail_box({"Email": email, "New Password": new_password})
        + cta_button("Login Now", login_url)
    )
    return subject, body, wrap_html("Password Reset", body_html, show_logo=False)
