"""Navigation capability injected into services that redirect the user"""

from typing import List

from ..utils.logger import get_logger

logger = get_logger(__name__)


class Navigator:
    """Records where the user is sent

    Presentation layers subclass this and override `redirect` and
    `hard_redirect` to drive their router. A hard redirect is a full reset
    of the application at the given path.
    """

    def __init__(self, initial_path: str = "/"):
        self.current_path = initial_path
        self.history: List[str] = [initial_path]
        self.hard_redirects: List[str] = []

    def redirect(self, path: str) -> None:
        logger.debug(f"[Navigation] redirect -> {path}")
        self.current_path = path
        self.history.append(path)

    def hard_redirect(self, path: str = "/") -> None:
        logger.info(f"[Navigation] hard redirect -> {path}")
        self.hard_redirects.append(path)
        self.current_path = path
        self.history = [path]
