"""Brightness-threshold buckets precomputed for the discrete slider notches."""

from typing import Dict, List, Sequence, Tuple

from src.analysis.records import FireRecord

# Discrete brightness notches: 325, 350, ..., 500
NOTCH_MIN = 325
NOTCH_MAX = 500
NOTCH_STEP = 25
BRIGHTNESS_NOTCHES: Tuple[int, ...] = tuple(range(NOTCH_MIN, NOTCH_MAX + 1, NOTCH_STEP))


def snap_to_notch(value: float, notches: Sequence[int] = BRIGHTNESS_NOTCHES) -> int:
    """
    Snap a raw control value to the nearest notch, clamping to the range.

    Used at the UI boundary; the bucketed dataset itself only accepts notches.
    """
    if value <= notches[0]:
        return notches[0]
    if value >= notches[-1]:
        return notches[-1]
    return min(notches, key=lambda n: (abs(n - value), n))


class BucketedDataset:
    """
    Mapping from each brightness notch to the records with brightness >= notch.

    Records below the lowest notch (or without a usable brightness) are not
    part of any bucket. Every bucket keeps the original relative order, and
    bucket(n1) is a superset of bucket(n2) whenever n1 < n2.
    """

    def __init__(
        self,
        records: Sequence[FireRecord],
        notches: Sequence[int] = BRIGHTNESS_NOTCHES,
    ):
        if not notches:
            raise ValueError("At least one brightness notch is required")
        self.notches: Tuple[int, ...] = tuple(sorted(notches))
        self.records: Tuple[FireRecord, ...] = tuple(records)

        eligible = [
            r
            for r in self.records
            if r.brightness is not None and r.brightness >= self.notches[0]
        ]
        self._buckets: Dict[int, Tuple[FireRecord, ...]] = {}
        for notch in self.notches:
            # Each bucket narrows the previous one, preserving order
            eligible = [r for r in eligible if r.brightness >= notch]
            self._buckets[notch] = tuple(eligible)

    def __getitem__(self, notch: int) -> Tuple[FireRecord, ...]:
        try:
            return self._buckets[notch]
        except KeyError:
            raise KeyError(
                f"Brightness {notch} is not a notch; expected one of {list(self.notches)}"
            ) from None

    def __contains__(self, notch) -> bool:
        return notch in self._buckets

    def __len__(self) -> int:
        return len(self._buckets)

    def counts(self) -> Dict[int, int]:
        """Number of records per notch."""
        return {notch: len(bucket) for notch, bucket in self._buckets.items()}

    def all_buckets(self) -> List[Tuple[int, Tuple[FireRecord, ...]]]:
        return list(self._buckets.items())
