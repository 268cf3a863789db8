"""
Unit tests for StationSequenceProvider
"""
from unittest.mock import AsyncMock

import pytest

from inspection_core.core.exceptions import ConfigurationError
from inspection_core.domain.models.station_position import StationPosition
from inspection_core.processing.station_sequence import (
    FALLBACK_STATION_ORDER,
    StationSequenceProvider,
)


def _repo(positions=None, error=None):
    repo = AsyncMock()
    if error is not None:
        repo.load_positions.side_effect = error
    else:
        repo.load_positions.return_value = positions
    return repo


class TestStationSequenceProvider:
    @pytest.mark.asyncio
    async def test_station_order_sorted_by_sequence_index(self):
        positions = [
            StationPosition(0, 0),
            StationPosition(1, 2),
            StationPosition(2, 3),
            StationPosition(3, 1),
        ]
        provider = StationSequenceProvider(_repo(positions))
        assert await provider.load_station_order() == [3, 1, 2]

    @pytest.mark.asyncio
    async def test_sequence_order_sorted_by_physical_id(self):
        positions = [
            StationPosition(3, 1),
            StationPosition(1, 2),
            StationPosition(2, 3),
        ]
        provider = StationSequenceProvider(_repo(positions))
        assert await provider.load_sequence_order() == [2, 3, 1]

    @pytest.mark.asyncio
    async def test_excludes_code_scan_and_unsequenced_positions(self):
        positions = [
            StationPosition(0, 5),
            StationPosition(4, 0),
            StationPosition(5, -1),
            StationPosition(6, 1),
        ]
        provider = StationSequenceProvider(_repo(positions))
        assert await provider.load_station_order() == [6]

    @pytest.mark.asyncio
    async def test_load_failure_returns_fallback(self):
        provider = StationSequenceProvider(_repo(error=ConfigurationError("missing")))
        assert await provider.load_station_order() == list(FALLBACK_STATION_ORDER)
        assert await provider.load_sequence_order() == list(FALLBACK_STATION_ORDER)

    @pytest.mark.asyncio
    async def test_empty_result_returns_fallback(self):
        provider = StationSequenceProvider(_repo([StationPosition(1, 0)]))
        assert await provider.load_station_order() == [1, 2, 3, 6, 5, 4, 7, 8, 9, 12, 11, 10]

    @pytest.mark.asyncio
    async def test_snake_calibration_gives_same_order_both_ways(self):
        positions = [
            StationPosition(station, step + 1)
            for step, station in enumerate(FALLBACK_STATION_ORDER)
        ]
        provider = StationSequenceProvider(_repo(positions))
        assert await provider.load_station_order() == list(FALLBACK_STATION_ORDER)
        assert await provider.load_sequence_order() == list(FALLBACK_STATION_ORDER)

    @pytest.mark.asyncio
    async def test_position_table_maps_step_to_station(self):
        positions = [StationPosition(0, 0), StationPosition(6, 4), StationPosition(4, 6)]
        provider = StationSequenceProvider(_repo(positions))
        assert await provider.load_position_table() == {0: 0, 4: 6, 6: 4}

    @pytest.mark.asyncio
    async def test_position_table_empty_on_failure(self):
        provider = StationSequenceProvider(_repo(error=OSError("disk")))
        assert await provider.load_position_table() == {}
