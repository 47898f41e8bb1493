class CorruptCollectionError(ValueError):
    """Raised when a persisted collection cannot be decoded."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"Collection '{name}' is corrupt: {reason}")
        self.name = name


class UsernameTakenError(ValueError):
    """Raised on registration when the username already exists."""

    def __init__(self, username: str):
        super().__init__(f"Username '{username}' is already taken")
        self.username = username
