from __future__ import annotations


def mask_email(email: str | None) -> str | None:
    if not email:
        return None
    local, _, domain = email.partition("@")
    if not domain:
        return local[:1] + "***"
    return local[:1] + "***@" + domain
