"""Tests for the sync and async faucet activity feeds."""
import concurrent.futures

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from pyfaucet.activity import ActivityFeed, ActivityKind, AsyncActivityFeed
from pyfaucet.activity.enrich import MAX_LOOKUP_WORKERS
from pyfaucet.core import ZERO_ADDRESS, FaucetError
from pyfaucet.token import TokenMetadata

UNIT = 10**18
R1 = "0x1111111111111111111111111111111111111111"
R2 = "0x2222222222222222222222222222222222222222"
C1 = "0x3333333333333333333333333333333333333333"


def dispense_log(to, amount, caller, tx, block):
    return {"args": {"to": to, "amount": amount, "caller": caller}, "transactionHash": tx, "blockNumber": block}


def transfer_log(sender, to, value, tx, block):
    return {"args": {"from": sender, "to": to, "value": value}, "transactionHash": tx, "blockNumber": block}


SCENARIO_DISPENSES = [dispense_log(R1, 100 * UNIT, C1, "0xaa", 100)]
SCENARIO_MINTS = [
    transfer_log(ZERO_ADDRESS, R1, 100 * UNIT, "0xaa", 100),
    transfer_log(ZERO_ADDRESS, R2, 50 * UNIT, "0xbb", 95),
]


def make_async_reader(dispenses=None, mints=None, head=5000):
    reader = MagicMock()
    reader.get_block_number = AsyncMock(return_value=head)
    reader.get_metadata = AsyncMock(return_value=TokenMetadata(name="Faucet Token", symbol="FCT", decimals=18))
    reader.query_dispense_logs = AsyncMock(return_value=list(dispenses or []))
    reader.query_mint_logs = AsyncMock(return_value=list(mints or []))
    reader.get_block_timestamp = AsyncMock(side_effect=lambda n: 1_700_000_000 + n)
    return reader


def make_sync_reader(dispenses=None, mints=None, head=5000):
    reader = MagicMock()
    reader.get_block_number = MagicMock(return_value=head)
    reader.get_metadata = MagicMock(return_value=TokenMetadata(name="Faucet Token", symbol="FCT", decimals=18))
    reader.query_dispense_logs = MagicMock(return_value=list(dispenses or []))
    reader.query_mint_logs = MagicMock(return_value=list(mints or []))
    reader.get_block_timestamp = MagicMock(side_effect=lambda n: 1_700_000_000 + n)
    return reader


class TestAsyncActivityFeed:
    """Tests for AsyncActivityFeed."""

    @pytest.mark.asyncio
    async def test_dispense_and_mint_are_merged(self):
        """A faucet call's mint transfer is folded into its dispense event."""
        feed = AsyncActivityFeed(make_async_reader(SCENARIO_DISPENSES, SCENARIO_MINTS))

        page = await feed.list_activity(limit=2)

        assert page.total == 2
        assert [(e.kind, e.recipient, e.amount, e.block_number) for e in page.events] == [
            (ActivityKind.DISPENSE, R1, "100", 100),
            (ActivityKind.MINT, R2, "50", 95),
        ]
        assert page.events[0].caller == C1
        assert page.events[1].caller is None
        assert page.events[0].timestamp == 1_700_000_100
        assert page.events[0].symbol == "FCT"

    @pytest.mark.asyncio
    async def test_default_range(self):
        """Without bounds the feed scans the last 1000 blocks."""
        reader = make_async_reader(head=5000)
        page = await AsyncActivityFeed(reader).list_activity()

        assert (page.from_block, page.to_block) == (4000, 5000)
        assert page.limit == 10
        reader.query_dispense_logs.assert_awaited_once_with(4000, 5000)
        reader.query_mint_logs.assert_awaited_once_with(4000, 5000)

    @pytest.mark.asyncio
    async def test_explicit_range_skips_head_lookup(self):
        reader = make_async_reader()
        reader.get_block_number = AsyncMock(side_effect=RuntimeError("rpc down"))

        page = await AsyncActivityFeed(reader).list_activity(from_block=0, to_block=50)

        assert (page.from_block, page.to_block) == (0, 50)
        reader.get_block_number.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_inverted_range_returns_empty_page(self):
        reader = make_async_reader(SCENARIO_DISPENSES, SCENARIO_MINTS)

        page = await AsyncActivityFeed(reader).list_activity(from_block=200, to_block=100)

        assert page.events == []
        assert page.total == 0
        reader.query_dispense_logs.assert_not_awaited()
        reader.query_mint_logs.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_malformed_entry_is_skipped(self):
        broken = dispense_log(R2, 1, C1, "0xcc", 99)
        del broken["args"]["amount"]
        reader = make_async_reader([broken] + SCENARIO_DISPENSES, SCENARIO_MINTS)

        page = await AsyncActivityFeed(reader).list_activity()

        assert [e.tx_hash for e in page.events] == ["0xaa", "0xbb"]
        assert page.total == 2

    @pytest.mark.asyncio
    async def test_mint_stream_failure_is_isolated(self):
        reader = make_async_reader(SCENARIO_DISPENSES)
        reader.query_mint_logs = AsyncMock(side_effect=RuntimeError("filter too large"))

        page = await AsyncActivityFeed(reader).list_activity()

        assert page.total == 1
        assert page.events[0].kind is ActivityKind.DISPENSE

    @pytest.mark.asyncio
    async def test_dispense_stream_failure_is_isolated(self):
        reader = make_async_reader(SCENARIO_DISPENSES, SCENARIO_MINTS)
        reader.query_dispense_logs = AsyncMock(side_effect=TimeoutError())

        page = await AsyncActivityFeed(reader).list_activity()

        assert [e.kind for e in page.events] == [ActivityKind.MINT, ActivityKind.MINT]

    @pytest.mark.asyncio
    async def test_truncation_and_enrichment_bounded_to_page(self):
        dispenses = [dispense_log(R1, UNIT, C1, f"0x{i:02x}", 10 + i) for i in range(15)]
        reader = make_async_reader(dispenses)

        page = await AsyncActivityFeed(reader).list_activity(limit=4)

        assert page.total == 15
        assert len(page.events) == 4
        numbers = [e.block_number for e in page.events]
        assert numbers == sorted(numbers, reverse=True) == [24, 23, 22, 21]
        assert reader.get_block_timestamp.await_count == 4

    @pytest.mark.asyncio
    async def test_block_lookup_failure_leaves_timestamp_empty(self):
        reader = make_async_reader(SCENARIO_DISPENSES, SCENARIO_MINTS)

        async def lookup(n):
            if n == 95:
                raise RuntimeError("block not found")
            return 1234

        reader.get_block_timestamp = AsyncMock(side_effect=lookup)

        page = await AsyncActivityFeed(reader).list_activity()

        assert [e.timestamp for e in page.events] == [1234, None]

    @pytest.mark.asyncio
    async def test_head_failure_is_fatal(self):
        reader = make_async_reader()
        reader.get_block_number = AsyncMock(side_effect=ConnectionError("refused"))

        with pytest.raises(FaucetError, match="current block number"):
            await AsyncActivityFeed(reader).list_activity()

    @pytest.mark.asyncio
    async def test_metadata_failure_yields_empty_page(self):
        reader = make_async_reader(SCENARIO_DISPENSES, SCENARIO_MINTS)
        reader.get_metadata = AsyncMock(side_effect=RuntimeError("decimals reverted"))

        page = await AsyncActivityFeed(reader).list_activity()

        assert page.events == []
        assert page.total == 0

    @pytest.mark.asyncio
    async def test_metadata_fetched_once_per_request(self):
        reader = make_async_reader(SCENARIO_DISPENSES, SCENARIO_MINTS)

        await AsyncActivityFeed(reader).list_activity()

        assert reader.get_metadata.await_count == 1

    @pytest.mark.asyncio
    async def test_repeated_calls_are_identical(self):
        feed = AsyncActivityFeed(make_async_reader(SCENARIO_DISPENSES, SCENARIO_MINTS))

        first = await feed.list_activity()
        second = await feed.list_activity()

        assert first.events == second.events
        assert first.total == second.total

    @pytest.mark.asyncio
    async def test_negative_limit_rejected(self):
        with pytest.raises(ValueError):
            await AsyncActivityFeed(make_async_reader()).list_activity(limit=-1)

    @pytest.mark.asyncio
    async def test_page_to_dict(self):
        page = await AsyncActivityFeed(make_async_reader(SCENARIO_DISPENSES, SCENARIO_MINTS)).list_activity(limit=1)

        body = page.to_dict()

        assert body["total"] == 2
        assert body["fromBlock"] == 4000
        assert body["toBlock"] == 5000
        assert body["limit"] == 1
        assert body["events"] == [
            {
                "type": "faucet",
                "to": R1,
                "amount": "100",
                "rawAmount": str(100 * UNIT),
                "caller": C1,
                "transactionHash": "0xaa",
                "blockNumber": 100,
                "timestamp": 1_700_000_100,
                "symbol": "FCT",
            }
        ]


class TestActivityFeed:
    """Tests for the sync ActivityFeed."""

    def test_dispense_and_mint_are_merged(self):
        feed = ActivityFeed(make_sync_reader(SCENARIO_DISPENSES, SCENARIO_MINTS))

        page = feed.list_activity(limit=2)

        assert page.total == 2
        assert [(e.kind, e.amount) for e in page.events] == [
            (ActivityKind.DISPENSE, "100"),
            (ActivityKind.MINT, "50"),
        ]
        assert [e.timestamp for e in page.events] == [1_700_000_100, 1_700_000_095]

    def test_stream_failure_is_isolated(self):
        reader = make_sync_reader(SCENARIO_DISPENSES)
        reader.query_mint_logs = MagicMock(side_effect=RuntimeError("boom"))

        page = ActivityFeed(reader).list_activity()

        assert [e.tx_hash for e in page.events] == ["0xaa"]

    def test_lookback_is_configurable(self):
        reader = make_sync_reader(head=100)

        page = ActivityFeed(reader, lookback=10).list_activity()

        assert (page.from_block, page.to_block) == (90, 100)

    def test_inverted_range(self):
        reader = make_sync_reader(SCENARIO_DISPENSES)

        page = ActivityFeed(reader).list_activity(from_block=10, to_block=5)

        assert page.total == 0
        reader.query_dispense_logs.assert_not_called()

    def test_head_failure_is_fatal(self):
        reader = make_sync_reader()
        reader.get_block_number = MagicMock(side_effect=RuntimeError("down"))

        with pytest.raises(FaucetError):
            ActivityFeed(reader).list_activity(to_block=10)

    def test_block_lookup_failure(self):
        reader = make_sync_reader(SCENARIO_DISPENSES)
        reader.get_block_timestamp = MagicMock(side_effect=RuntimeError("gone"))

        page = ActivityFeed(reader).list_activity()

        assert page.events[0].timestamp is None

    def test_lookup_threads_are_capped_for_large_pages(self):
        """A large limit does not start one lookup thread per event."""
        dispenses = [dispense_log(R1, UNIT, C1, f"0x{i:04x}", i) for i in range(100)]
        reader = make_sync_reader(dispenses)
        real_executor = concurrent.futures.ThreadPoolExecutor

        with patch("concurrent.futures.ThreadPoolExecutor", wraps=real_executor) as executor:
            page = ActivityFeed(reader).list_activity(limit=100)

        assert len(page.events) == 100
        assert all(e.timestamp is not None for e in page.events)
        worker_counts = [c.kwargs["max_workers"] for c in executor.call_args_list]
        assert max(worker_counts) == MAX_LOOKUP_WORKERS
