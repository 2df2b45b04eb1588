"""
Decoder adapter.

Turns a raw audio byte stream into per-channel sample arrays. The
analysis pipeline only depends on the :class:`Decoder` protocol, so
alternative backends can be swapped in without touching the analysis.

The default backend, :class:`LibrosaDecoder`, decodes in-memory bytes
with librosa (soundfile under the hood) on a dedicated worker thread.
That worker is the per-call decoding resource: it is created by
``Decoder.open()`` and torn down by ``DecodeSession.close()``.
"""

from __future__ import annotations

import asyncio
import io
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Protocol, Sequence

import numpy as np

from beatcoach.core.errors import DecodeFormatError, DecodeUnsupportedError

logger = logging.getLogger(__name__)


@dataclass
class DecodedAudio:
    """Container for decoded, not yet mixed, audio."""

    channels: Sequence[np.ndarray]
    sample_rate: int
    duration: float

    @property
    def n_channels(self) -> int:
        return len(self.channels)

    @property
    def n_samples(self) -> int:
        """Samples per channel (0 when there are no channels)."""
        return len(self.channels[0]) if self.channels else 0


class DecodeSession(Protocol):
    """A decoding resource owned by exactly one analysis call."""

    async def decode(self, data: bytes) -> DecodedAudio:
        ...

    def close(self) -> None:
        ...


class Decoder(Protocol):
    """Factory for decode sessions."""

    def open(self) -> DecodeSession:
        ...


class LibrosaDecodeSession:
    """Decodes bytes on a single worker thread owned by this session."""

    def __init__(self, sr: int | None = None):
        self.sr = sr
        self.closed = False
        self._executor = ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix="beatcoach-decode",
        )

    async def decode(self, data: bytes) -> DecodedAudio:
        """
        Decode *data* without blocking the event loop.

        Raises:
            DecodeFormatError: If the bytes are not a readable audio stream.
        """
        if self.closed:
            raise RuntimeError("decode session is closed")
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self._decode_blocking, data)

    def _decode_blocking(self, data: bytes) -> DecodedAudio:
        import librosa
        import soundfile as sf

        t0 = time.perf_counter()
        try:
            y, sr = librosa.load(io.BytesIO(data), sr=self.sr, mono=False)
        except (sf.SoundFileError, RuntimeError, EOFError) as exc:
            logger.warning("Failed to decode %d bytes: %s", len(data), exc)
            raise DecodeFormatError(detail=str(exc)) from exc

        if sr <= 0:
            raise DecodeFormatError(detail=f"invalid sample rate {sr}")

        # librosa returns a 1-D array for mono input, (channels, n) otherwise
        if y.ndim == 1:
            channels = [y]
        else:
            channels = [y[c] for c in range(y.shape[0])]

        n_samples = len(channels[0]) if channels else 0
        duration = n_samples / sr
        logger.debug(
            "Decoded %d bytes -> %d channel(s), %d samples @ %d Hz in %.1f ms",
            len(data),
            len(channels),
            n_samples,
            sr,
            (time.perf_counter() - t0) * 1000,
        )
        return DecodedAudio(channels=channels, sample_rate=int(sr), duration=duration)

    def close(self) -> None:
        if not self.closed:
            self._executor.shutdown(wait=True)
            self.closed = True


class LibrosaDecoder:
    """
    Default decoder backend built on librosa + soundfile.

    Args:
        sr: Target sample rate. None keeps the file's native rate.
    """

    def __init__(self, sr: int | None = None):
        self.sr = sr

    def open(self) -> LibrosaDecodeSession:
        """
        Acquire a decode session.

        Raises:
            DecodeUnsupportedError: If the decoding libraries (or the native
                libsndfile they wrap) are not available on this host.
        """
        try:
            import librosa  # noqa: F401
            import soundfile  # noqa: F401
        except (ImportError, OSError) as exc:
            raise DecodeUnsupportedError(
                "Audio decoding is not available on this host.\n"
                "Install the decoder backend with:  pip install librosa soundfile"
            ) from exc
        return LibrosaDecodeSession(sr=self.sr)
