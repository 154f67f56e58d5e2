"""
Integration Tests

End-to-end tests that verify the complete system works together.

Run with: python -m pytest tests/test_integration.py -v
"""

import asyncio
import pytest


@pytest.mark.asyncio
@pytest.mark.integration
class TestEndToEnd:
    """End-to-end integration tests."""

    async def test_complete_workflow(self, server, client_factory):
        """Test a complete user workflow."""
        async with client_factory() as client:
            # Create multiple keys
            assert await client.send_command("set", "user:1", "alice") == "+OK"
            assert await client.send_command("set", "user:2", "bob") == "+OK"
            assert await client.send_command("set", "user:3", "charlie") == "+OK"

            # Read all keys
            assert await client.send_command("get", "user:1") == "+alice"
            assert await client.send_command("get", "user:2") == "+bob"
            assert await client.send_command("get", "user:3") == "+charlie"
            assert await client.send_command("dbsize") == ":3"

            # Update a key
            assert await client.send_command("set", "user:1", "alice_updated") == "+OK"
            assert await client.send_command("get", "user:1") == "+alice_updated"
            assert await client.send_command("dbsize") == ":3"

            # Delete a key
            assert await client.send_command("del", "user:2") == ":1"
            assert await client.send_command("get", "user:2") == "-ERR unknown key 'user:2'"
            assert await client.send_command("dbsize") == ":2"

            # Flush everything
            assert await client.send_command("flushdb") == "+OK"
            assert await client.send_command("dbsize") == ":0"
            assert await client.send_command("get", "user:1") == "-ERR unknown key 'user:1'"

    async def test_lru_eviction_through_server(self, server, client_factory):
        """max size 2: set a, set b, get a, set c evicts b."""
        async with client_factory() as client:
            assert await client.send_command("set_max_lru_size", "2") == "+OK"
            await client.send_command("set", "a", "1")
            await client.send_command("set", "b", "2")
            await client.send_command("get", "a")
            await client.send_command("set", "c", "3")

            assert await client.send_command("get", "b") == "-ERR unknown key 'b'"
            assert await client.send_command("get", "a") == "+1"
            assert await client.send_command("get", "c") == "+3"
            assert await client.send_command("dbsize") == ":2"

    async def test_shrink_below_size_rejected(self, server, client_factory):
        async with client_factory() as client:
            for i in range(5):
                await client.send_command("set", f"key{i}", f"value{i}")

            assert await client.send_command("set_max_lru_size", "3") == "-ERR invalid max size"
            assert await client.send_command("dbsize") == ":5"

            # Capacity is still the original 100: more keys fit without eviction
            await client.send_command("set", "key5", "value5")
            assert await client.send_command("get", "key0") == "+value0"
            assert await client.send_command("dbsize") == ":6"

    async def test_eviction_visible_to_other_clients(self, server, client_factory):
        async with client_factory() as first, client_factory() as second:
            await first.send_command("set_max_lru_size", "1")
            await first.send_command("set", "mine", "1")
            await second.send_command("set", "yours", "2")

            assert await first.send_command("get", "mine") == "-ERR unknown key 'mine'"
            assert await first.send_command("get", "yours") == "+2"

    async def test_errors_do_not_close_connection(self, server, client_factory):
        async with client_factory() as client:
            assert (await client.send_command("bogus")).startswith("-ERR")
            assert (await client.send_command("get", "missing")).startswith("-ERR")
            assert (await client.send_command("set_max_lru_size", "0")).startswith("-ERR")
            assert (await client.send_command("get")).startswith("-ERR")
            assert await client.send_command("ping") == "+PONG"

    async def test_quit_then_reconnect(self, server, client_factory):
        async with client_factory() as client:
            await client.send_command("set", "persist", "yes")
            assert await client.send_command("quit") == "+OK"

        async with client_factory() as client:
            assert await client.send_command("get", "persist") == "+yes"


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.slow
class TestLoad:
    """Heavier mixed workloads."""

    async def test_many_clients_mixed_operations(self, server, client_factory):
        async def worker(worker_id: int) -> None:
            async with client_factory() as client:
                for i in range(50):
                    key = f"w{worker_id}:{i % 10}"
                    assert await client.send_command("set", key, str(i)) == "+OK"
                    reply = await client.send_command("get", key)
                    assert reply.startswith("+") or reply.startswith("-ERR unknown key")
                    if i % 7 == 0:
                        assert (await client.send_command("del", key)) in (":0", ":1")

        await asyncio.gather(*(worker(n) for n in range(10)))

        async with client_factory() as client:
            size = int((await client.send_command("dbsize"))[1:])
            assert 0 <= size <= 100
