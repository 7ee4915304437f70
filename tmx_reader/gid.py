"""
Global tile id (gid) resolution.

=============================================================================
GLOBAL TILE IDs (GIDs)
=============================================================================

Tiles are referenced by Global IDs (GIDs) across all tilesets:

    Tileset A (firstgid=1):   tiles 1-100
    Tileset B (firstgid=101): tiles 101-200

    GID 0 = empty tile (no graphic)
    GID 50 = tile 49 of tileset A (50 - 1)
    GID 150 = tile 49 of tileset B (150 - 101)

Local tile ID within tileset = GID - tileset.firstgid

A GID belongs to the tileset with the largest firstgid <= gid. When the
tileset declares its tile count, the GID must also fall before
firstgid + tilecount, otherwise it does not reference anything.

Before the lookup the three flip bits are split off (see constants.py).

=============================================================================
"""

from bisect import bisect_right
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .constants import GID_MASK, FLIP_MASK, FlipFlags
from .errors import TilesetOverlap, UnresolvedGid

if TYPE_CHECKING:
    from .tileset import Tileset


# Stand-in end for tilesets whose size is unknown
_UNBOUNDED = np.iinfo(np.int64).max


def split_gid(raw: int) -> Tuple[int, FlipFlags]:
    """Split a raw gid into (gid without flags, flip flags)."""
    raw = int(raw)
    return raw & GID_MASK, FlipFlags(raw & FLIP_MASK)


@dataclass(frozen=True)
class TileRef:
    """Result of resolving a gid: which tileset, which tile, how flipped."""
    tileset: 'Tileset'
    local_id: int
    flags: FlipFlags = FlipFlags.NONE

    @property
    def gid(self) -> int:
        return self.tileset.firstgid + self.local_id


class GidResolver:
    """
    Read-only index over a map's tilesets.

    Parameters:
    -----------
    tilesets : iterable of Tileset
        In any order; they are sorted by firstgid here.

    Raises TilesetOverlap when two tilesets claim the same gids.
    """

    def __init__(self, tilesets: Iterable['Tileset']):
        self._tilesets: List['Tileset'] = sorted(tilesets, key=lambda t: t.firstgid)
        self._firstgids = [t.firstgid for t in self._tilesets]
        self._ends: List[Optional[int]] = [self._range_end(t) for t in self._tilesets]

        for i in range(1, len(self._tilesets)):
            prev, cur = self._tilesets[i - 1], self._tilesets[i]
            prev_end = self._ends[i - 1]
            if cur.firstgid == prev.firstgid or (
                    prev_end is not None and prev_end > cur.firstgid):
                raise TilesetOverlap(prev.name, cur.name, cur.firstgid)

        # Arrays for check()
        self._firstgid_array = np.array(self._firstgids, dtype=np.int64)
        self._end_array = np.array(
            [_UNBOUNDED if end is None else end for end in self._ends],
            dtype=np.int64)

    @staticmethod
    def _range_end(tileset: 'Tileset') -> Optional[int]:
        gids = tileset.tile_range()
        return gids.stop if gids is not None else None

    @property
    def tilesets(self) -> Sequence['Tileset']:
        return tuple(self._tilesets)

    def resolve(self, raw: int) -> Optional[TileRef]:
        """
        Map a raw gid to (tileset, local id, flags).

        Returns None for gid 0 (no tile). Raises UnresolvedGid when no
        tileset covers the gid.
        """
        gid, flags = split_gid(raw)
        if gid == 0:
            return None

        index = bisect_right(self._firstgids, gid) - 1
        if index < 0:
            raise UnresolvedGid(raw)

        end = self._ends[index]
        if end is not None and gid >= end:
            raise UnresolvedGid(raw)

        tileset = self._tilesets[index]
        return TileRef(tileset, gid - tileset.firstgid, flags)

    def check(self, gids: Sequence[int]):
        """
        Validate a whole grid of raw gids at once.

        Same rules as resolve(), vectorized with numpy. Raises
        UnresolvedGid for the first offending cell (row-major order).
        """
        raw = np.asarray(gids, dtype=np.int64)
        if raw.size == 0:
            return

        stripped = raw & GID_MASK
        cells = np.flatnonzero(stripped)
        if cells.size == 0:
            return
        if not self._tilesets:
            raise UnresolvedGid(int(raw[cells[0]]))

        values = stripped[cells]
        index = np.searchsorted(self._firstgid_array, values, side='right') - 1
        bad = (index < 0) | (values >= self._end_array[np.maximum(index, 0)])
        if bad.any():
            raise UnresolvedGid(int(raw[cells[np.argmax(bad)]]))
