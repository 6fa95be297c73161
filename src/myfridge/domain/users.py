"""Domain models for authenticated users."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class UserIdentity:
    """Authenticated user as reported by the auth service."""

    id: str
    email: str | None = None
    metadata: dict[str, object] = field(default_factory=dict)

    @property
    def username(self) -> str:
        username = self.metadata.get("username")
        if isinstance(username, str) and username:
            return username
        if self.email:
            return self.email.split("@", 1)[0]
        return "User"
