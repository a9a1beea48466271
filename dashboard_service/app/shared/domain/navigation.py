from typing import NoReturn


class Redirect(BaseException):
    """Non-local exit telling the caller to navigate to ``location``.

    ``except Exception`` blocks do not intercept it. Only the HTTP layer
    turns it into a response.
    """

    def __init__(self, location: str) -> None:
        super().__init__(location)
        self.location = location


def redirect(location: str) -> NoReturn:
    raise Redirect(location)


def is_local_path(location: object) -> bool:
    if not isinstance(location, str) or not location.startswith("/"):
        return False
    return not location.startswith("//") and "\\" not in location
