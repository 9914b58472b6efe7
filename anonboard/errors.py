import enum


class NotFound(Exception):
    """A board, thread or reply id did not resolve."""

    def __init__(self, entity: str) -> None:
        self.entity = entity
        super().__init__(f"{entity} not found")


class OperationFailed(Exception):
    """The store or the password hash failed underneath an operation."""


class BadRequest(Exception):
    pass


class DeleteResult(str, enum.Enum):
    SUCCESS = "success"
    INCORRECT_PASSWORD = "incorrect password"
