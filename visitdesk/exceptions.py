"""Errors raised by the storage layer. Not-found is signalled with None, not an exception."""


class VisitDeskError(Exception):
    pass


class UsernameTakenError(VisitDeskError):
    def __init__(self, username: str):
        super().__init__(f"Admin username already exists: {username}")
        self.username = username
