"""
Background Music
================
Starts the soundtrack once the scene is ready. If the transport refuses to
play (missing device, blocked playback), the failure is logged and one retry
is armed on the next user interaction. The retry listener is removed after
the first successful start.

Classes:
    AudioTransport: Protocol for the playback backend.
    AudioController: Autoplay / retry / toggle policy.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Protocol

from scrollscene.model.state import SceneStore

logger = logging.getLogger(__name__)

PlayResult = Callable[[bool, str], None]


class AudioTransport(Protocol):
    def play(self, on_result: PlayResult) -> None: ...
    def pause(self) -> None: ...
    def is_playing(self) -> bool: ...


class AudioController:
    def __init__(self, transport: AudioTransport, store: SceneStore, muted: bool = False) -> None:
        self.transport = transport
        self.store = store
        self.muted = muted
        self._interaction: Any = None
        self._retry_connected = False

    @property
    def is_playing(self) -> bool:
        return self.transport.is_playing()

    @property
    def retry_armed(self) -> bool:
        return self._retry_connected

    def bind_interaction(self, signal: Any) -> None:
        """Signal emitted on qualifying user interaction (key press, click, wheel)."""
        self._interaction = signal

    def start(self) -> None:
        """Single autoplay attempt on readiness."""
        if self.muted:
            logger.info("Music muted by preference; not starting playback.")
            return
        self._attempt()

    def toggle(self) -> None:
        if self.transport.is_playing():
            self.transport.pause()
            self.muted = True
            self._disarm_retry()
            self.store.sound_state_changed.emit(False)
        else:
            self.muted = False
            self._attempt()

    def shutdown(self) -> None:
        self._disarm_retry()
        if self.transport.is_playing():
            self.transport.pause()

    def _attempt(self) -> None:
        self.transport.play(self._on_result)

    def _on_result(self, ok: bool, message: str) -> None:
        if ok:
            logger.info("Music playback started.")
            self._disarm_retry()
            self.store.sound_state_changed.emit(True)
            return
        logger.warning(f"Music playback was rejected: {message}")
        self.store.sound_state_changed.emit(False)
        self._arm_retry()

    def _arm_retry(self) -> None:
        if self._retry_connected or self._interaction is None:
            return
        self._interaction.connect(self._on_interaction)
        self._retry_connected = True
        logger.debug("Playback retry armed for next user interaction.")

    def _disarm_retry(self) -> None:
        if not self._retry_connected:
            return
        self._interaction.disconnect(self._on_interaction)
        self._retry_connected = False

    def _on_interaction(self, *_: Any) -> None:
        self._disarm_retry()
        if not self.muted:
            self._attempt()
