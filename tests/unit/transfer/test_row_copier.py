"""
Tests for the Row Copier.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from groupix.backend import InMemoryBackend
from groupix.core.exceptions import BackendError
from groupix.transfer.rows import RowCopier, RowCopyResult, copy_memories, strip_identity

NEWER = "2024-06-02T10:00:00+00:00"
OLDER = "2024-06-01T10:00:00+00:00"


class TestStripIdentity:
    def test_removes_only_identity(self):
        row = {"id": 1, "created_at": NEWER, "group_id": "g1", "media": [{"path": "a.jpg"}]}

        stripped = strip_identity(row)

        assert stripped == {"created_at": NEWER, "group_id": "g1", "media": [{"path": "a.jpg"}]}
        assert list(stripped) == ["created_at", "group_id", "media"]

    def test_does_not_modify_input(self):
        row = {"id": 1, "title": "x"}
        strip_identity(row)
        assert row == {"id": 1, "title": "x"}

    def test_nested_values_kept_verbatim(self):
        media = [{"url": "https://x/a.jpg", "type": "image/jpeg"}]
        stripped = strip_identity({"id": 5, "media": media})
        assert stripped["media"] is media

    def test_custom_identity_field(self):
        assert strip_identity({"uuid": "u", "id": 1}, "uuid") == {"id": 1}


class TestRowCopier:
    @pytest.mark.asyncio
    async def test_copies_newest_first_without_id(self, row_config, source, target):
        source.add_rows(
            "memories",
            [
                {"id": 2, "created_at": OLDER, "title": "older"},
                {"id": 1, "created_at": NEWER, "title": "newer"},
            ],
        )
        target.insert_rows = AsyncMock()

        result = await RowCopier(source, target, row_config).run()

        assert result == RowCopyResult(fetched=2, inserted=2)
        target.insert_rows.assert_awaited_once_with(
            "memories",
            [
                {"created_at": NEWER, "title": "newer"},
                {"created_at": OLDER, "title": "older"},
            ],
        )

    @pytest.mark.asyncio
    async def test_preserves_source_order_in_payload(self, row_config):
        source = MagicMock()
        source.name = "prod"
        source.select_rows = AsyncMock(
            return_value=[
                {"id": 1, "created_at": NEWER, "media": []},
                {"id": 2, "created_at": OLDER, "media": []},
            ]
        )
        target = MagicMock()
        target.name = "dev"
        target.insert_rows = AsyncMock()

        await RowCopier(source, target, row_config).run()

        source.select_rows.assert_awaited_once_with(
            "memories", order_by="created_at", descending=True, limit=500
        )
        payload = target.insert_rows.await_args.args[1]
        assert payload == [{"created_at": NEWER, "media": []}, {"created_at": OLDER, "media": []}]
        assert all("id" not in row for row in payload)

    @pytest.mark.asyncio
    async def test_zero_rows_never_contacts_target(self, row_config, source):
        target = MagicMock()
        target.insert_rows = AsyncMock()

        result = await RowCopier(source, target, row_config).run()

        assert result == RowCopyResult(fetched=0, inserted=0)
        target.insert_rows.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_query_error_aborts(self, row_config, target):
        source = MagicMock()
        source.name = "prod"
        source.select_rows = AsyncMock(side_effect=BackendError("permission denied", status_code=401))
        target.insert_rows = AsyncMock()

        with pytest.raises(BackendError, match="permission denied"):
            await RowCopier(source, target, row_config).run()

        target.insert_rows.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_insert_error_propagates(self, row_config, source):
        source.add_rows("memories", [{"id": 1, "created_at": NEWER}])
        target = MagicMock()
        target.name = "dev"
        target.insert_rows = AsyncMock(side_effect=BackendError("duplicate key", status_code=409))

        with pytest.raises(BackendError, match="duplicate key"):
            await RowCopier(source, target, row_config).run()

    @pytest.mark.asyncio
    async def test_rerun_inserts_again(self, row_config, source, target):
        source.add_rows("memories", [{"id": 1, "created_at": NEWER, "title": "a"}])

        copier = RowCopier(source, target, row_config)
        await copier.run()
        await copier.run()

        # Plain insert: a second run duplicates the rows
        assert [row["title"] for row in target.tables["memories"]] == ["a", "a"]
        assert [row["id"] for row in target.tables["memories"]] == [1, 2]


class TestCopyMemories:
    @pytest.mark.asyncio
    async def test_uses_factory_and_closes_clients(self, row_config):
        source = InMemoryBackend("prod")
        target = InMemoryBackend("dev")
        source.add_rows("memories", [{"id": 9, "created_at": NEWER, "title": "x"}])
        source.aclose = AsyncMock()
        target.aclose = AsyncMock()

        with patch("groupix.backend.factory.create_client", side_effect=[source, target]) as factory:
            result = await copy_memories(row_config)

        assert result.inserted == 1
        assert factory.call_args_list[0].args[0] == row_config.source
        assert factory.call_args_list[1].args[0] == row_config.target
        assert target.tables["memories"][0]["title"] == "x"
        source.aclose.assert_awaited_once()
        target.aclose.assert_awaited_once()
