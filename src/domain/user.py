"""User entity."""

from dataclasses import dataclass


@dataclass
class User:
    """
    A registered (or about-to-be-registered) account holder.

    A candidate built from a form submission has no ``id`` and no
    ``hashed_password``; both are set only on the registration success path.
    """

    email_address: str = ""
    first_name: str = ""
    last_name: str = ""
    hashed_password: str | None = None
    id: int | None = None

    def __repr__(self) -> str:
        # Keep the hash out of logs and tracebacks
        return (
            f"User(id={self.id!r}, email_address={self.email_address!r}, "
            f"first_name={self.first_name!r}, last_name={self.last_name!r})"
        )
