"""Tool exchange: request/response dispatcher between an agent and the engine.

The exchange is transport agnostic. FastMCP tools, the CLI and tests all go
through `ToolExchange.dispatch`, which never raises: every failure comes back
as a `ToolResponse` with `is_error` set.

Two calls make up the agent loop:

    request_scaffold(query, project_path)        -> scaffold_source
    submit_script(modified_script, project_path) -> ack_source

`compose_scene` drives the composition engine, live preview and commit
directly from a JSON scene config.

Requests are handled one at a time; file writes are awaited before the
response is returned.
"""
from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Mapping

from models import ToolResponse
from scene_designer import SceneConfig, SceneEngine, compose, describe_descriptors
from scene_designer.config import cfg
from scene_designer.errors import (
    ConfirmationRequiredError,
    InvalidArgumentTypeError,
    MissingArgumentError,
    SceneDesignerError,
    UnknownToolError,
)
from scene_designer.execution import ExecutionResult, UnityBatchExecutor
from scene_designer.fileio import atomic_write_text
from scene_designer.install import script_path
from scene_designer.scaffold import build_scaffold, unescape_transport_quotes
from transport.param_normalizer_middleware import normalize_arguments

logger = logging.getLogger("scene-designer-mcp")

RerenderListener = Callable[[Path], None]
Handler = Callable[[dict[str, Any]], Awaitable[ToolResponse]]

COMPOSE_ACTIONS = ("compose", "preview", "update", "live_on", "live_off", "commit", "clear")
_TRUTHY = {"1", "true", "yes", "on"}


def _require_str(tool: str, args: Mapping[str, Any], key: str, *, allow_blank: bool = True) -> str:
    value = args.get(key)
    if value is None:
        raise MissingArgumentError(tool, key)
    if not isinstance(value, str):
        raise InvalidArgumentTypeError(tool, key, "string", value)
    if not allow_blank and not value.strip():
        raise MissingArgumentError(tool, key)
    return value


def _optional_str(tool: str, args: Mapping[str, Any], key: str) -> str | None:
    value = args.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidArgumentTypeError(tool, key, "string", value)
    return value


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return bool(value)


class ToolExchange:
    """Serialized dispatcher for the tool-exchange protocol."""

    def __init__(
        self,
        *,
        executor: UnityBatchExecutor | None = None,
        execute_on_submit: bool | None = None,
    ):
        self._lock = asyncio.Lock()
        self._engines: dict[str, SceneEngine] = {}
        self._rerender_listeners: list[RerenderListener] = []
        self._background: set[asyncio.Task] = set()
        self.executor = executor
        self.execute_on_submit = cfg.execute_on_submit if execute_on_submit is None else execute_on_submit
        self.last_execution: ExecutionResult | None = None
        self._handlers: dict[str, Handler] = {
            "request_scaffold": self._request_scaffold,
            "submit_script": self._submit_script,
            "compose_scene": self._compose_scene,
        }

    @property
    def tool_names(self) -> list[str]:
        return list(self._handlers)

    # ── Hooks ────────────────────────────────────────────────────────

    def on_rerender(self, listener: RerenderListener) -> Callable[[], None]:
        """Call `listener` with the script path after every successful submission."""
        self._rerender_listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._rerender_listeners:
                self._rerender_listeners.remove(listener)

        return unsubscribe

    def _signal_rerender(self, written: Path) -> None:
        for listener in list(self._rerender_listeners):
            try:
                listener(written)
            except Exception:
                logger.exception("Re-render listener failed for %s", written)

    def engine_for(self, project_path: str) -> SceneEngine:
        """Engine for a project, created on first use."""
        key = str(Path(project_path))
        engine = self._engines.get(key)
        if engine is None:
            engine = SceneEngine(key)
            self._engines[key] = engine
        return engine

    # ── Dispatch ─────────────────────────────────────────────────────

    async def dispatch(self, name: str, arguments: Mapping[str, Any] | None) -> ToolResponse:
        try:
            handler = self._handlers.get(name)
            if handler is None:
                raise UnknownToolError(name)
            args = normalize_arguments(dict(arguments or {})) or {}
            async with self._lock:
                return await handler(args)
        except SceneDesignerError as e:
            logger.info("%s failed: %s", name, e)
            return ToolResponse.fail(e.kind, f"Error: {e}")
        except Exception as e:
            logger.exception("Unexpected error handling %s", name)
            return ToolResponse.fail("InternalError", f"Error: {e}")

    async def drain(self) -> None:
        """Wait for scheduled background work (script execution) to finish."""
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)

    # ── Handlers ─────────────────────────────────────────────────────

    async def _request_scaffold(self, args: dict[str, Any]) -> ToolResponse:
        query = _require_str("request_scaffold", args, "query")
        _require_str("request_scaffold", args, "project_path")
        scaffold = build_scaffold(query)
        return ToolResponse.ok(scaffold, scaffold_source=scaffold)

    async def _submit_script(self, args: dict[str, Any]) -> ToolResponse:
        source = _require_str("submit_script", args, "modified_script")
        project_path = _require_str("submit_script", args, "project_path", allow_blank=False)

        content = unescape_transport_quotes(source)
        destination = script_path(project_path)
        written = await asyncio.to_thread(atomic_write_text, destination, content)
        logger.info("Wrote submitted script to %s", written)

        self._signal_rerender(written)
        if self.execute_on_submit:
            self._schedule_execution(project_path)
        return ToolResponse.ok(content, ack_source=content, path=str(written))

    def _schedule_execution(self, project_path: str) -> None:
        executor = self.executor or UnityBatchExecutor()
        task = asyncio.create_task(self._execute(executor, project_path))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _execute(self, executor: UnityBatchExecutor, project_path: str) -> None:
        try:
            self.last_execution = await executor.run(project_path)
        except OSError:
            logger.exception("Could not start editor process for %s", project_path)
            return
        if not self.last_execution.success:
            logger.warning(
                "Editor run for %s failed (exit=%s, timed_out=%s): %s",
                project_path,
                self.last_execution.exit_code,
                self.last_execution.timed_out,
                self.last_execution.stderr.strip()[-500:],
            )

    async def _compose_scene(self, args: dict[str, Any]) -> ToolResponse:
        tool = "compose_scene"
        action = _require_str(tool, args, "action")
        if action not in COMPOSE_ACTIONS:
            raise InvalidArgumentTypeError(tool, "action", f"value in ({', '.join(COMPOSE_ACTIONS)})", action)
        project_path = _require_str(tool, args, "project_path", allow_blank=False)
        engine = self.engine_for(project_path)

        raw_config = args.get("config")
        if raw_config is not None and not isinstance(raw_config, (str, Mapping)):
            raise InvalidArgumentTypeError(tool, "config", "JSON object or string", raw_config)
        config = SceneConfig.from_payload(raw_config) if raw_config is not None else engine.live.config

        if action == "compose":
            descriptors = compose(config, scene_has_camera=engine.host.has_camera())
            return ToolResponse.ok(
                describe_descriptors(descriptors),
                descriptors=[d.model_dump(mode="json") for d in descriptors],
                count=len(descriptors),
            )

        if action == "preview":
            engine.live.update_config(config)
            session = engine.reconciler.refresh_preview(
                compose(config, scene_has_camera=engine.host.has_camera())
            )
            return ToolResponse.ok(f"Preview rebuilt with {len(session)} object(s).", preview_count=len(session))

        if action == "update":
            engine.live.update_config(config)
            rebuilt = engine.live.tick()
            return ToolResponse.ok(
                "Preview rebuilt." if rebuilt else "Config stored; live preview is off.",
                rebuilt=rebuilt,
            )

        if action == "live_on":
            if raw_config is not None:
                engine.live.update_config(config)
            engine.live.set_live(True)
            engine.live.tick()
            count = len(engine.reconciler.session) if engine.reconciler.session else 0
            return ToolResponse.ok(f"Live preview on ({count} object(s)).", live=True, preview_count=count)

        if action == "live_off":
            engine.live.set_live(False)
            return ToolResponse.ok("Live preview off; preview cleared.", live=False, preview_count=0)

        if action == "commit":
            path = _optional_str(tool, args, "path")
            result = await asyncio.to_thread(engine.writer.compose_and_commit, config, path)
            return ToolResponse.ok(
                f"Committed {result.object_count} object(s) to {result.path}",
                path=result.path,
                object_count=result.object_count,
            )

        # clear
        if not _coerce_bool(args.get("confirm", False)):
            raise ConfirmationRequiredError(
                "clear destroys every top-level object in the working scene; pass confirm=true"
            )
        path = _optional_str(tool, args, "path")
        destroyed = await asyncio.to_thread(engine.writer.clear, path)
        return ToolResponse.ok(f"Scene cleared ({destroyed} object(s) destroyed).", destroyed=destroyed)


def format_response(response: ToolResponse) -> str:
    return json.dumps(response.to_payload(), indent=2)
