from sqlalchemy.exc import IntegrityError


def is_foreign_key_violation(exc: IntegrityError) -> bool:
    """True when the store rejected a write because of a foreign key (PostgreSQL and SQLite wording)."""
    err_msg = str(exc.orig) if getattr(exc, "orig", None) else str(exc)
    return "foreign key" in err_msg.lower()
