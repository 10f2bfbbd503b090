"""Page location and session history (the window.location / window.history pair)"""

import logging
from typing import Callable, List, Optional

import httpx

logger = logging.getLogger(__name__)

PopStateListener = Callable[["PageLocation"], None]


class PageLocation:
    """
    Current page URL plus a linear history stack.

    ``push_state`` truncates any forward entries, ``back``/``forward`` move
    through the stack and notify popstate listeners, mirroring what a
    browser does when the user presses its navigation buttons.
    """

    def __init__(self, url: str):
        self._history: List[httpx.URL] = [httpx.URL(url)]
        self._index = 0
        self._popstate_listeners: List[PopStateListener] = []

    @property
    def url(self) -> httpx.URL:
        return self._history[self._index]

    @property
    def href(self) -> str:
        return str(self.url)

    @property
    def hostname(self) -> str:
        return self.url.host

    @property
    def origin(self) -> str:
        origin = f"{self.url.scheme}://{self.url.host}"
        if self.url.port is not None:
            origin += f":{self.url.port}"
        return origin

    def get_param(self, name: str) -> Optional[str]:
        """First value of a query parameter, or None"""
        return self.url.params.get(name)

    def get_all_params(self, name: str) -> List[str]:
        """All values of a repeatable query parameter"""
        return self.url.params.get_list(name)

    def push_state(self, url: httpx.URL) -> None:
        """Add a history entry; no-op when the URL does not change"""
        if url == self.url:
            return
        del self._history[self._index + 1:]
        self._history.append(url)
        self._index += 1
        logger.debug(f"History push: {url}")

    def set_param(self, name: str, value: str) -> None:
        self.push_state(self.url.copy_set_param(name, value))

    def delete_param(self, name: str) -> None:
        self.push_state(self.url.copy_remove_param(name))

    def can_go_back(self) -> bool:
        return self._index > 0

    def can_go_forward(self) -> bool:
        return self._index < len(self._history) - 1

    def back(self) -> bool:
        if not self.can_go_back():
            return False
        self._index -= 1
        self._fire_popstate()
        return True

    def forward(self) -> bool:
        if not self.can_go_forward():
            return False
        self._index += 1
        self._fire_popstate()
        return True

    def on_popstate(self, listener: PopStateListener) -> Callable[[], None]:
        """
        Register a back/forward listener

        Returns:
            Callable that removes the listener
        """
        self._popstate_listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._popstate_listeners:
                self._popstate_listeners.remove(listener)

        return unsubscribe

    def _fire_popstate(self) -> None:
        for listener in list(self._popstate_listeners):
            listener(self)
