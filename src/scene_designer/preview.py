"""Preview reconciliation.

A preview is a disposable instantiation of descriptors, excluded from
persistence. Exactly one `PreviewSession` is active at a time. Every refresh
destroys the previous session before building the next one, then sweeps the
host for leftovers carrying the reserved name prefix in case bookkeeping was
lost (an editor reload, a crash mid-refresh).

`LivePreviewController` drives the reconciler from configuration changes.
The host loop (editor update tick, timer, test) calls `tick()`; at most one
rebuild happens per tick no matter how many edits arrived in between.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Sequence

from .composer import compose
from .config import cfg
from .host import SceneHost, materialize
from .models import SceneConfig, SceneObjectDescriptor

logger = logging.getLogger(__name__)

PREVIEW_ROOT_NAME = "SceneCreator"


@dataclass
class PreviewSession:
    """Handles created by one refresh, in descriptor order, plus their root."""
    root: int
    handles: list[int] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.handles)


class PreviewReconciler:
    """Sole owner and writer of the active PreviewSession."""

    def __init__(self, host: SceneHost, prefix: str | None = None):
        self.host = host
        self.prefix = prefix if prefix is not None else cfg.preview_prefix
        self._session: PreviewSession | None = None

    @property
    def session(self) -> PreviewSession | None:
        return self._session

    @property
    def is_active(self) -> bool:
        return self._session is not None

    def clear_preview(self) -> int:
        """Destroy the current session and any stray prefixed objects.

        Returns the number of host objects destroyed.
        """
        destroyed = 0
        session, self._session = self._session, None
        if session is not None:
            # Root first: destroying it takes its children along.
            for handle in [session.root, *session.handles]:
                destroyed += self.host.destroy(handle)

        # Recovery path for previews whose session record was lost.
        strays = self.host.find_by_name_prefix(self.prefix)
        for handle in strays:
            destroyed += self.host.destroy(handle)
        if strays:
            logger.debug("Swept %d stray preview object(s)", len(strays))
        return destroyed

    def refresh_preview(self, descriptors: Sequence[SceneObjectDescriptor]) -> PreviewSession:
        """Replace the live preview with one instance per descriptor."""
        self.clear_preview()

        root = self.host.create_container(f"{self.prefix}{PREVIEW_ROOT_NAME}", preview=True)
        session = PreviewSession(root=root)
        # Record before populating so a failure mid-loop is still torn down next time.
        self._session = session
        for descriptor in descriptors:
            handle = materialize(
                self.host,
                descriptor,
                name=f"{self.prefix}{descriptor.name}",
                parent=root,
                preview=True,
            )
            session.handles.append(handle)

        logger.debug("Preview rebuilt with %d object(s)", len(session))
        return session


ConfigListener = Callable[[SceneConfig], None]


class LivePreviewController:
    """Observer-style live mode on top of a PreviewReconciler."""

    def __init__(self, reconciler: PreviewReconciler, config: SceneConfig | None = None, *, live: bool = True):
        self.reconciler = reconciler
        self._config = config or SceneConfig()
        self._live = live
        self._dirty = True
        self._listeners: list[ConfigListener] = []

    @property
    def config(self) -> SceneConfig:
        return self._config

    @property
    def live(self) -> bool:
        return self._live

    @property
    def needs_refresh(self) -> bool:
        return self._dirty

    def subscribe(self, listener: ConfigListener) -> Callable[[], None]:
        """Call `listener` on every config change. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update_config(self, config: SceneConfig) -> None:
        self._config = config
        self._dirty = True
        for listener in list(self._listeners):
            listener(config)

    def request_refresh(self) -> None:
        """Force a rebuild on the next tick without a config change."""
        self._dirty = True

    def set_live(self, live: bool) -> None:
        if live == self._live:
            return
        self._live = live
        if live:
            self._dirty = True
        else:
            # Turning live mode off clears the preview rather than freezing it.
            self.reconciler.clear_preview()

    def tick(self) -> bool:
        """Rebuild the preview if live and something changed. Returns True if it rebuilt."""
        if not (self._live and self._dirty):
            return False
        self._dirty = False
        descriptors = compose(
            self._config,
            scene_has_camera=self.reconciler.host.has_camera(include_preview=False),
        )
        self.reconciler.refresh_preview(descriptors)
        return True

    def close(self) -> None:
        """Window-close path: tear the preview down and drop listeners."""
        self.reconciler.clear_preview()
        self._listeners.clear()
        self._dirty = True
