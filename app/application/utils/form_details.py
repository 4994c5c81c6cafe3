from __future__ import annotations

import re
from typing import Iterable

from app.application.exceptions import NotesTooLongError
from app.domain.entities.form_details import FormDetails

NOTES_MAX_LENGTH = 10_000

_NAME_SEPARATORS = re.compile(r"[._-]")


def derive_display_name(email: str) -> str:
    """Turn the local part of an email into a presentable name: john.doe -> John Doe."""
    local = email.split("@", 1)[0]
    words = [w for w in _NAME_SEPARATORS.split(local) if w]
    if not words:
        return local or email
    return " ".join(w[:1].upper() + w[1:] for w in words)


def build_form_details(
    email: str,
    guest_emails: Iterable[str] | None = None,
    notes: str | None = None,
) -> FormDetails:
    guests = tuple(g.strip() for g in (guest_emails or []) if g and g.strip())
    return FormDetails(
        name=derive_display_name(email),
        email=email,
        guest_emails=guests or None,
        notes=notes if notes and notes.strip() else None,
    )


def validate_notes(notes: str | None) -> None:
    if notes and len(notes) > NOTES_MAX_LENGTH:
        raise NotesTooLongError(
            f"Notes exceed maximum length of {NOTES_MAX_LENGTH} characters ({len(notes)} given)"
        )
