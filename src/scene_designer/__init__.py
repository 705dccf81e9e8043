"""Scene composition and preview reconciliation engine."""
from .composer import compose, describe_descriptors
from .errors import (
    InvalidConfigError,
    MissingTemplateError,
    SceneDesignerError,
    SceneFileSystemError,
)
from .host import InMemorySceneHost, SceneHost
from .models import CommitResult, ObjectKind, SceneConfig, SceneObjectDescriptor
from .persistence import PersistenceWriter
from .preview import LivePreviewController, PreviewReconciler, PreviewSession


class SceneEngine:
    """Wires one host, its preview reconciler, live controller and writer together."""

    def __init__(self, project_path, host: SceneHost | None = None, *, live: bool = False):
        self.host = host if host is not None else InMemorySceneHost()
        self.reconciler = PreviewReconciler(self.host)
        self.live = LivePreviewController(self.reconciler, live=live)
        self.writer = PersistenceWriter(self.host, self.reconciler, project_path)


__all__ = [
    "compose",
    "describe_descriptors",
    "CommitResult",
    "InMemorySceneHost",
    "InvalidConfigError",
    "LivePreviewController",
    "MissingTemplateError",
    "ObjectKind",
    "PersistenceWriter",
    "PreviewReconciler",
    "PreviewSession",
    "SceneConfig",
    "SceneDesignerError",
    "SceneEngine",
    "SceneFileSystemError",
    "SceneHost",
    "SceneObjectDescriptor",
]
