import logging
from typing import Callable, List, Optional

from iwems.models import Identity

SIGNED_OUT_EVENTS = {"SIGNED_OUT", "USER_DELETED"}


class SessionStore:
    """Holds the identity of whoever is signed in to this running application.

    There is one instance per application (kept on ``app.state``) and screens
    receive it explicitly. The identity only changes through ``handle_auth_event``,
    which is the listener registered with the auth provider.
    """

    def __init__(self):
        self._identity: Optional[Identity] = None
        self._initialized = False
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._watchers: List[Callable[[Optional[Identity]], None]] = []

    @property
    def identity(self) -> Optional[Identity]:
        return self._identity

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def is_authenticated(self) -> bool:
        return self._identity is not None

    async def attach(self, data_client) -> None:
        """Subscribe to auth events and read the current session once."""
        self._unsubscribe = data_client.on_auth_state_change(self.handle_auth_event)
        result = await data_client.get_session_identity()
        if result.get("status") == "success":
            self._identity = result.get("identity")
        else:
            logging.warning(f"SessionStore: could not read the current session: {result.get('error')}")
            self._identity = None
        self._initialized = True
        logging.info(f"SessionStore initialized, identity={self._identity.id if self._identity else None}")

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def handle_auth_event(self, event: str, identity: Optional[Identity]) -> None:
        if event in SIGNED_OUT_EVENTS:
            identity = None
        logging.info(f"SessionStore: auth event {event}, identity={identity.id if identity else None}")
        self._identity = identity
        self._initialized = True
        for watcher in list(self._watchers):
            watcher(identity)

    def watch(self, callback: Callable[[Optional[Identity]], None]) -> Callable[[], None]:
        """Register a callback for identity changes; returns a function that removes it."""
        self._watchers.append(callback)
        return lambda: self._watchers.remove(callback)
