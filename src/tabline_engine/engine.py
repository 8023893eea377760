"""Public façade: one ``TablineEngine`` instance per host display."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Callable, Mapping, Optional

from tabline_engine.buffers.snapshot import BufferSnapshot, SnapshotBuilder
from tabline_engine.cache.highlights import HighlightCache
from tabline_engine.cache.icons import IconCache, IconProvider
from tabline_engine.config import DEFAULT_CONFIG, ConfigResult, TablineConfig, validate_config
from tabline_engine.errors import ActionFailure, RenderPipelineFailure
from tabline_engine.host import events as host_events
from tabline_engine.host.boundary import HostBoundary
from tabline_engine.host.events import HostEvent
from tabline_engine.host.protocols import Host
from tabline_engine.keymaps.defaults import install_tabline_keymaps, remove_tabline_keymaps
from tabline_engine.keymaps.registry import KeymapRegistry
from tabline_engine.layout.selector import VisibleSet, select_visible, width_budget
from tabline_engine.render.segment import CLICK_HANDLER, CLOSE_HANDLER, SegmentRenderer
from tabline_engine.render.tabline import TablineAssembler
from tabline_engine.runtime import telemetry
from tabline_engine.runtime.scheduler import Defer, UpdateScheduler

CLOSE_PROMPT = "Buffer modified. Save?"
CLOSE_CHOICES = ("&Yes", "&No", "&Cancel")
CHOICE_SAVE, CHOICE_DISCARD, CHOICE_CANCEL = 1, 2, 3

_LISTED_ONLY_EVENTS = (
    host_events.BUFFER_ENTER,
    host_events.BUFFER_DELETE,
    host_events.BUFFER_WIPEOUT,
)


class TablineEngine:
    """Owns the caches, config and scheduler for one tabline.

    Lifecycle: construct (disabled) -> ``setup`` (validate, subscribe, first
    render) -> any number of reconfiguring ``setup`` calls -> ``teardown``.
    All host access goes through ``self.boundary``.
    """

    def __init__(
        self,
        host: Host,
        *,
        defer: Defer,
        icon_provider: Optional[IconProvider] = None,
        keymaps: Optional[KeymapRegistry] = None,
        click_handler: str = CLICK_HANDLER,
        close_handler: str = CLOSE_HANDLER,
        logger_name: str | None = None,
    ) -> None:
        self.host = host
        self._logger_name = logger_name or "tabline_engine.engine"
        self.logger = telemetry.get_logger(self._logger_name)
        self.boundary = HostBoundary(host, logger_name=self._logger_name)
        self._config: TablineConfig = DEFAULT_CONFIG
        self._defer = defer

        self.highlights = HighlightCache(self.boundary, logger_name=self._logger_name)
        self.icons = IconCache(icon_provider, logger_name=self._logger_name)
        self.snapshots = SnapshotBuilder(self.boundary, logger_name=self._logger_name)
        self.segments = SegmentRenderer(
            self.boundary,
            self.highlights,
            self.icons,
            lambda: self._config,
            click_handler=click_handler,
            close_handler=close_handler,
        )
        self.assembler = TablineAssembler(self.segments, self.highlights)
        self.scheduler = UpdateScheduler(
            defer,
            self._rebuild,
            on_failure=self._report_pipeline_failure,
            logger_name=self._logger_name,
        )
        self.keymaps = keymaps or KeymapRegistry(logger_name=self._logger_name)

        self._rendered = ""
        self._snapshot = BufferSnapshot()
        self._visible = VisibleSet()
        self._unsubscribers: list[Callable[[], None]] = []
        self._enabled = False
        self._source_installed = False

    # state -------------------------------------------------------------------

    @property
    def config(self) -> TablineConfig:
        return self._config

    @property
    def is_enabled(self) -> bool:
        return self._enabled

    @property
    def snapshot(self) -> BufferSnapshot:
        return self._snapshot

    @property
    def visible(self) -> VisibleSet:
        return self._visible

    @property
    def source_installed(self) -> bool:
        return self._source_installed

    def get_rendered_string(self) -> str:
        return self._rendered

    # lifecycle ---------------------------------------------------------------

    def setup(self, options: Optional[Mapping[str, Any]] = None) -> ConfigResult:
        """Validate ``options`` over the current config and (re)start the tabline."""

        result = validate_config(options, base=self._config)
        for correction in result.corrections:
            self.logger.warning(f"invalid tabline option: {correction.message}")
            self.boundary.notify(
                f"Invalid tabline configuration: {correction.message}", "warning"
            )
        self._config = result.config
        telemetry.record_event(
            "engine.setup",
            data={
                "enabled": result.config.enabled,
                "corrections": len(result.corrections),
            },
            logger_name=self._logger_name,
        )

        if result.config.enabled:
            self._activate()
        else:
            self._deactivate()
        return result

    def enable(self) -> None:
        if not self._config.enabled:
            self._config = replace(self._config, enabled=True)
        self._activate()

    def disable(self) -> None:
        if self._config.enabled:
            self._config = replace(self._config, enabled=False)
        self._deactivate()

    def toggle(self) -> bool:
        if self._enabled:
            self.disable()
            self.boundary.notify("Tabline disabled", "info")
        else:
            self.enable()
            self.boundary.notify("Tabline enabled", "info")
        return self._enabled

    def teardown(self) -> None:
        self._deactivate()
        self.highlights.clear()
        self.icons.clear()
        self._snapshot = BufferSnapshot()
        self._visible = VisibleSet()
        telemetry.record_event("engine.teardown", logger_name=self._logger_name)

    def _activate(self) -> None:
        # theme or style config may have changed since the last activation
        self.invalidate_theme()
        self._unsubscribe()
        bus = self.host.events
        for name in _LISTED_ONLY_EVENTS:
            self._unsubscribers.append(bus.subscribe(name, self._on_buffer_lifecycle))
        self._unsubscribers.append(
            bus.subscribe(host_events.BUFFER_MODIFIED, self._on_invalidate)
        )
        self._unsubscribers.append(
            bus.subscribe(host_events.VIEWPORT_RESIZED, self._on_invalidate)
        )
        self._unsubscribers.append(
            bus.subscribe(host_events.THEME_CHANGED, self._on_theme_changed)
        )

        install_tabline_keymaps(self.keymaps, self)
        self._source_installed = self.boundary.set_tabline_source(
            self.get_rendered_string
        ).ok
        self._enabled = True
        self.scheduler.request("setup")

    def _deactivate(self) -> None:
        self._unsubscribe()
        remove_tabline_keymaps(self.keymaps)
        self.scheduler.reset()
        if self._enabled or self._source_installed:
            self.boundary.set_tabline_source(None)
            self._source_installed = False
        self._rendered = ""
        self._enabled = False

    def _unsubscribe(self) -> None:
        while self._unsubscribers:
            self._unsubscribers.pop()()

    # updates -----------------------------------------------------------------

    def request_update(self, reason: str = "manual") -> bool:
        if not self._enabled:
            return False
        return self.scheduler.request(reason)

    def invalidate_theme(self) -> None:
        """Forget every registered style and icon before the next rebuild."""

        self.highlights.clear()
        self.icons.clear()

    def _on_buffer_lifecycle(self, event: HostEvent) -> None:
        if event.buffer_id is None:
            return
        if self.boundary.is_listed(event.buffer_id).value_or(False):
            self.request_update(event.name)

    def _on_invalidate(self, event: HostEvent) -> None:
        self.request_update(event.name)

    def _on_theme_changed(self, event: HostEvent) -> None:
        self.invalidate_theme()
        self.request_update(event.name)

    def _rebuild(self) -> None:
        config = self._config
        snapshot = self.snapshots.build(hide_misc=config.hide_misc)
        active = self.boundary.current_buffer().value_or(None)
        budget = width_budget(self.boundary.viewport_width())

        def cost(buffer_id: int) -> int:
            return len(self.segments.render(buffer_id, snapshot, active))

        visible = select_visible(
            snapshot.ids,
            active,
            budget=budget,
            min_visible=config.min_visible,
            max_visible=config.max_visible,
            cost=cost,
        )
        rendered = self.assembler.assemble(snapshot, visible, active)

        self._snapshot = snapshot
        self._visible = visible
        self._rendered = rendered

        redraw = self.boundary.redraw_tabline()
        if redraw.error is not None:
            self.logger.warning(f"tabline redraw failed: {redraw.error}")

    def _report_pipeline_failure(self, failure: RenderPipelineFailure) -> None:
        self.logger.error(str(failure))
        self.boundary.notify(str(failure), "warning")

    # actions -----------------------------------------------------------------

    def _perform(self, action: str, buffer_id: Optional[int], call: Callable[[], bool]) -> bool:
        telemetry.record_event(
            f"action.{action}",
            level="debug",
            data={"buffer": buffer_id},
            logger_name=self._logger_name,
        )
        try:
            return call()
        except ActionFailure as failure:
            self.logger.warning(f"{failure.action} failed: {failure.reason}")
            self.boundary.notify(failure.reason, failure.level)
            return False

    def handle_click(self, buffer_id: int) -> bool:
        def call() -> bool:
            if not self.snapshots.is_displayable(
                buffer_id, hide_misc=self._config.hide_misc
            ):
                raise ActionFailure(
                    "click", f"Buffer {buffer_id} is no longer available", buffer_id=buffer_id
                )
            if not self.boundary.set_current_buffer(buffer_id).ok:
                raise ActionFailure(
                    "click", f"Failed to switch to buffer {buffer_id}", buffer_id=buffer_id
                )
            return True

        return self._perform("click", buffer_id, call)

    def handle_close(self, buffer_id: int) -> bool:
        """Close ``buffer_id``, prompting to save when it is modified.

        The delete itself runs on the next tick so a close triggered from the
        tabline does not remove a buffer while the host is still drawing it.
        """

        def call() -> bool:
            if not self.boundary.is_valid(buffer_id).value_or(False):
                raise ActionFailure("close", "Invalid buffer", buffer_id=buffer_id)

            modified = self.boundary.is_modified(buffer_id)
            if not modified.ok:
                return False

            force = False
            if modified.value_or(False):
                choice = self.boundary.confirm(CLOSE_PROMPT, CLOSE_CHOICES, CHOICE_CANCEL)
                if choice == CHOICE_CANCEL:
                    return False
                if choice == CHOICE_SAVE:
                    if not self.boundary.write_buffer(buffer_id).ok:
                        raise ActionFailure(
                            "close",
                            "Failed to save buffer",
                            buffer_id=buffer_id,
                            level="error",
                        )
                else:
                    force = True

            self._defer(lambda: self._delete_later(buffer_id, force))
            return True

        return self._perform("close", buffer_id, call)

    def _delete_later(self, buffer_id: int, force: bool) -> None:
        def call() -> bool:
            if not self.boundary.is_valid(buffer_id).value_or(False):
                return False
            if not self.boundary.delete_buffer(buffer_id, force=force).ok:
                raise ActionFailure(
                    "delete",
                    f"Failed to delete buffer {buffer_id}",
                    buffer_id=buffer_id,
                    level="error",
                )
            return True

        self._perform("delete", buffer_id, call)

    def close_current(self) -> bool:
        current = self.boundary.current_buffer()
        if not current.ok or current.value is None:
            return False
        return self.handle_close(current.value)

    def select_next(self) -> bool:
        return self._step(1, "next")

    def select_previous(self) -> bool:
        return self._step(-1, "previous")

    def _step(self, offset: int, label: str) -> bool:
        def call() -> bool:
            current = self.boundary.current_buffer()
            if not current.ok or current.value is None:
                return False
            index = self._snapshot.index_of(current.value)
            if index is None:
                return False
            ids = self._snapshot.ids
            target = ids[(index + offset) % len(ids)]
            if not self.boundary.set_current_buffer(target).ok:
                raise ActionFailure(
                    label, f"Failed to switch to {label} buffer", buffer_id=target
                )
            return True

        return self._perform(label, None, call)


__all__ = ["TablineEngine", "CLOSE_PROMPT", "CLOSE_CHOICES"]
