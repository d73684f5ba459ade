"""
LMS email package.

Modules:
- core: SMTP send_email
- templates: branded account-created / password-reset bodies
- accounts: AccountNotifier, the notification collaborator used by user workflows
"""
