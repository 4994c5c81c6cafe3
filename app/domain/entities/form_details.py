from dataclasses import dataclass


@dataclass(frozen=True)
class FormDetails:
    name: str
    email: str
    guest_emails: tuple[str, ...] | None = None
    notes: str | None = None
