"""Hot-reload session: wires config, host, source, orchestrator and poller.

Usage::

    import asyncio
    from nbhotreload import HotReloadSession, InMemoryHost, NotebookDocument

    async def main():
        host = InMemoryHost()
        raw = open("analysis.ipynb", "rb").read()
        host.open(NotebookDocument.from_bytes("analysis.ipynb", raw))

        async with HotReloadSession(host) as session:
            await asyncio.sleep(60)   # edits to analysis.ipynb flow in
        print(session.channel.lines)

    asyncio.run(main())
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from nbhotreload.config import HotReloadConfig
from nbhotreload.observability import ReloadChannel
from nbhotreload.reload import Poller, ReloadOrchestrator
from nbhotreload.sources import CompositeSource


class HotReloadSession:
    """One hot-reload session for one host.

    A session owns exactly one :class:`ReloadOrchestrator`, so the
    single-flight guard and the suppression windows survive configuration
    changes.  Pollers come and go with :meth:`start_polling` and
    :meth:`stop_polling`.

    Parameters
    ----------
    host:
        A :class:`~nbhotreload.host.NotebookHost`.
    source:
        A :class:`~nbhotreload.sources.NotebookSource`.  Defaults to a
        :class:`~nbhotreload.sources.CompositeSource` owned (and closed) by
        the session.
    config:
        Session configuration.  Defaults to ``HotReloadConfig()``.
    channel:
        Reload channel.  Defaults to a fresh :class:`ReloadChannel`.
    """

    def __init__(
        self,
        host: Any,
        source: Any | None = None,
        config: HotReloadConfig | None = None,
        channel: ReloadChannel | None = None,
    ) -> None:
        self._config = config if config is not None else HotReloadConfig()
        self._owns_source = source is None
        self._source = source if source is not None else CompositeSource(
            http_timeout_seconds=self._config.http_timeout_seconds,
        )
        self._host = host
        self.channel = channel if channel is not None else ReloadChannel()
        self.orchestrator = ReloadOrchestrator(host, self._source, self._config, self.channel)
        self._poller: Poller | None = None

    @property
    def config(self) -> HotReloadConfig:
        return self._config

    @property
    def poller(self) -> Poller | None:
        return self._poller

    @property
    def polling(self) -> bool:
        return self._poller is not None and self._poller.running

    # -- lifecycle ---------------------------------------------------------

    def activate(self) -> bool:
        """Announce the session and start polling (if enabled)."""
        self.channel.append_line("Notebook Hot Reload activated")
        return self.start_polling()

    def start_polling(self) -> bool:
        """Start a poller with the current config.  Must run inside a loop."""
        if self.polling:
            return True
        self._poller = Poller(
            self._host, self._source, self.orchestrator, self._config, self.channel,
        )
        return self._poller.start()

    async def stop_polling(self) -> None:
        """Stop the poller and wait for a tick in progress to finish."""
        poller, self._poller = self._poller, None
        if poller is not None:
            poller.stop()
            await poller.wait_stopped()

    async def on_configuration_changed(
        self, settings: HotReloadConfig | Mapping[str, Any],
    ) -> bool:
        """Restart polling with new settings.

        *settings* is either a complete :class:`HotReloadConfig` or a host
        key/value mapping (see :meth:`HotReloadConfig.from_settings`),
        applied on top of the current config.
        """
        if isinstance(settings, HotReloadConfig):
            config = settings
        else:
            base = HotReloadConfig.from_settings(settings)
            config = self._config.replace(
                enabled=base.enabled, polling_interval_ms=base.polling_interval_ms,
            )

        await self.stop_polling()
        self._config = config
        self.orchestrator.configure(config)
        return self.start_polling()

    async def deactivate(self) -> None:
        """Stop polling, drop suppression state, release the source."""
        await self.stop_polling()
        self.orchestrator.clear()
        if self._owns_source:
            await self._source.aclose()

    async def __aenter__(self) -> HotReloadSession:
        self.activate()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.deactivate()
