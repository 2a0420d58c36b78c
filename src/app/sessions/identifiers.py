"""Normalização de contatos e derivação de session ids."""

from __future__ import annotations

import re

_NON_DIGITS = re.compile(r"\D+")
_UNSAFE_ID_CHARS = re.compile(r"[^A-Za-z0-9_.-]+")


def normalize_phone(phone: str | None) -> str:
    """Mantém apenas dígitos (`+55 (11) 9999-0000` → `551199990000`)."""
    if not phone:
        return ""
    return _NON_DIGITS.sub("", phone)


def derive_session_id(phone: str | None, user_id: str | None = None) -> str:
    """Deriva o session id quando o caller informa só o telefone.

    Formato: `<user_id>_<digitos>` ou apenas `<digitos>`; vazio se não há
    dígitos. O resultado é seguro para uso como segmento de URL.
    """
    digits = normalize_phone(phone)
    if not digits:
        return ""
    owner = _UNSAFE_ID_CHARS.sub("", (user_id or "").strip())
    return f"{owner}_{digits}" if owner else digits


def contacts_match(left: str | None, right: str | None) -> bool:
    """Compara contatos pelos dígitos; vazios nunca casam."""
    left_digits = normalize_phone(left)
    return bool(left_digits) and left_digits == normalize_phone(right)
