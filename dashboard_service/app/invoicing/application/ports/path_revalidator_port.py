from typing import Protocol


class PathRevalidatorPort(Protocol):
    def revalidate_path(self, path: str) -> None: ...
