"""Channel mixing: N decoded channels down to one mono signal."""

from typing import Sequence

import numpy as np

from beatcoach.core.errors import DecodeFormatError, EmptySignalError


def mix_to_mono(channels: Sequence[np.ndarray]) -> np.ndarray:
    """
    Average all channels sample by sample.

    Args:
        channels: Equal-length 1-D sample arrays, one per channel.

    Returns:
        Mono float32 signal with the same length as each channel.

    Raises:
        EmptySignalError: If there are no channels.
        DecodeFormatError: If the channels differ in length.
    """
    if len(channels) == 0:
        raise EmptySignalError("Decoded audio contains no channels")

    lengths = {len(ch) for ch in channels}
    if len(lengths) > 1:
        raise DecodeFormatError(
            detail=f"channel lengths differ: {sorted(lengths)}"
        )

    if len(channels) == 1:
        return np.array(channels[0], dtype=np.float32)

    stacked = np.vstack([np.asarray(ch, dtype=np.float32) for ch in channels])
    mono = stacked.sum(axis=0, dtype=np.float32)
    mono /= np.float32(len(channels))
    return mono
