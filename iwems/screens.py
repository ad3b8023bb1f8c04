"""Base view controller shared by every screen.

A screen moves through ``loading -> authorized_empty | authorized_populated
-> mutating -> reloaded``. The access guard runs before a controller is built
(see ``iwems.roles``); a denied caller gets ``denied_view`` instead and never
reaches the protected loads.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set

from iwems.models import Identity, Notice, ScreenView, ViewState
from iwems.roles import AccessDecision, AccessOutcome

Loader = Callable[[], Awaitable[Dict[str, Any]]]


def denied_view(screen: str, decision: AccessDecision) -> ScreenView:
    if decision.outcome == AccessOutcome.PENDING:
        return ScreenView(screen=screen, state=ViewState.LOADING)
    notices = [decision.notice] if decision.notice else []
    return ScreenView(screen=screen, state=ViewState.REDIRECTED, notices=notices, redirect_to=decision.redirect_to)


class ScreenController:
    screen: str = ""
    # Sections counted when deciding between the empty and populated states.
    primary_sections: tuple = ()
    load_errors: Dict[str, str] = {}

    def __init__(self, session_store, data_client, decision: Optional[AccessDecision] = None):
        self.session_store = session_store
        self.data_client = data_client
        self.decision = decision
        self.state = ViewState.LOADING
        self.data: Dict[str, Any] = {}
        self.notices: List[Notice] = []
        self.redirect_to: Optional[str] = None
        self.form: Optional[Dict[str, Any]] = None
        self._mount_token = 0
        self._active = False
        self._stop_watching: Optional[Callable[[], None]] = None
        # Sections whose latest load failed; their data is the previous copy.
        self.failed_sections: Set[str] = set()

    @property
    def identity(self) -> Optional[Identity]:
        return self.session_store.identity

    @property
    def user_id(self) -> str:
        return self.identity.id

    def notify(self, level: str, message: str) -> None:
        self.notices.append(Notice(level=level, message=message))

    # --- lifecycle ---

    async def mount(self) -> ScreenView:
        self._mount_token += 1
        self._active = True
        self.state = ViewState.LOADING
        if self._stop_watching is None:
            self._stop_watching = self.session_store.watch(self._on_identity_change)
        if await self.reload():
            self.state = ViewState.AUTHORIZED_POPULATED if self.row_count() else ViewState.AUTHORIZED_EMPTY
        return self.render()

    def unmount(self) -> None:
        self._active = False
        self._mount_token += 1
        if self._stop_watching is not None:
            self._stop_watching()
            self._stop_watching = None

    def is_current(self, token: int) -> bool:
        return self._active and token == self._mount_token

    def _on_identity_change(self, identity: Optional[Identity]) -> None:
        logging.info(f"{type(self).__name__}: identity changed, unmounting")
        self.unmount()

    # --- loading ---

    def loaders(self) -> Dict[str, Loader]:
        """Section name -> zero-argument coroutine function returning a status dict."""
        return {}

    async def before_load(self) -> Dict[str, Dict[str, Any]]:
        """Loads that later sections depend on (e.g. the caller's own vendor profile).

        Returns section name -> status dict; results are applied only while the
        mount that requested them is still current.
        """
        return {}

    def after_load(self) -> None:
        """Recompute derived values from ``self.data``."""

    def _apply(self, results: Dict[str, Dict[str, Any]]) -> None:
        for name, result in results.items():
            if result.get("status") == "success":
                self.data[name] = result.get("data", [])
            else:
                # Keep whatever was loaded before.
                self.data.setdefault(name, [])
                self.failed_sections.add(name)
                self.notify("error", self.load_errors.get(name, f"Failed to load {name.replace('_', ' ')}"))

    async def reload(self) -> bool:
        token = self._mount_token
        staged = await self.before_load()
        if not self.is_current(token):
            logging.debug(f"{type(self).__name__}: dropping results from a stale mount")
            return False

        # Dependent sections read the staged data, so it is applied now and
        # rolled back if this mount goes stale before the rest arrives.
        previous_data, previous_failed, notice_count = dict(self.data), self.failed_sections, len(self.notices)
        self.failed_sections = set()
        self._apply(staged or {})

        sections = self.loaders()
        names = list(sections)
        results = await asyncio.gather(*(sections[name]() for name in names))

        if not self.is_current(token):
            logging.debug(f"{type(self).__name__}: dropping results from a stale mount")
            self.data, self.failed_sections = previous_data, previous_failed
            del self.notices[notice_count:]
            return False

        self._apply(dict(zip(names, results)))
        self.after_load()
        return True

    def row_count(self) -> int:
        names = self.primary_sections or tuple(k for k, v in self.data.items() if isinstance(v, list))
        return sum(len(self.data.get(name) or []) for name in names)

    # --- mutations ---

    async def mutate(
        self,
        operation: Loader,
        success_message: str,
        failure_message: str,
        form: Optional[Dict[str, Any]] = None,
    ) -> bool:
        previous = self.state
        self.state = ViewState.MUTATING
        result = await operation()
        if result.get("status") != "success":
            logging.error(f"{type(self).__name__}: mutation failed: {result.get('error')}")
            self.notify("error", failure_message)
            self.form = form
            self.state = previous
            return False

        self.notify("success", success_message)
        # Reload only after the store confirmed the write.
        if await self.reload():
            self.state = ViewState.RELOADED
        return True

    # --- rendering ---

    def view_data(self) -> Dict[str, Any]:
        return dict(self.data)

    def render(self) -> ScreenView:
        return ScreenView(
            screen=self.screen,
            state=self.state,
            data=self.view_data(),
            notices=list(self.notices),
            redirect_to=self.redirect_to,
            form=self.form,
        )
