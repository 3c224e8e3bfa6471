"""Tests for owner-scoped vault persistence."""

import pytest


async def _create(store, owner, service="Gmail", identity="user@x.com", ciphertext="aa" * 16, iv="bb" * 16):
    return await store.create(owner.id, service, identity, ciphertext, iv)


class TestCreateAndList:

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_timestamps(self, store, owners):
        alice, _ = owners
        entry = await _create(store, alice)

        assert entry.id
        assert entry.user_id == alice.id
        assert entry.created_at is not None
        assert entry.updated_at is not None
        assert entry.password == "aa" * 16
        assert entry.iv == "bb" * 16

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, store, owners):
        alice, _ = owners
        first = await _create(store, alice)
        second = await _create(store, alice)
        assert first.id != second.id

    @pytest.mark.asyncio
    async def test_list_by_owner_only_returns_own_entries(self, store, owners):
        alice, bob = owners
        await _create(store, alice, service="A1")
        await _create(store, alice, service="A2")
        await _create(store, bob, service="B1")

        alice_services = {e.service for e in await store.list_by_owner(alice.id)}
        bob_services = {e.service for e in await store.list_by_owner(bob.id)}

        assert alice_services == {"A1", "A2"}
        assert bob_services == {"B1"}

    @pytest.mark.asyncio
    async def test_list_empty_vault(self, store, owners):
        alice, _ = owners
        assert await store.list_by_owner(alice.id) == []


class TestOwnerScoping:

    @pytest.mark.asyncio
    async def test_find_other_owners_entry_is_not_found(self, store, owners):
        alice, bob = owners
        entry = await _create(store, bob)

        assert await store.find_by_id_and_owner(entry.id, alice.id) is None
        assert await store.find_by_id_and_owner("no-such-id", alice.id) is None
        assert (await store.find_by_id_and_owner(entry.id, bob.id)).id == entry.id

    @pytest.mark.asyncio
    async def test_update_replaces_all_four_fields(self, store, owners):
        alice, _ = owners
        entry = await _create(store, alice)

        updated = await store.update_by_id_and_owner(
            entry.id, alice.id,
            service="Outlook", identity="new@x.com", ciphertext="cc" * 16, iv="dd" * 16,
        )

        assert updated.id == entry.id
        assert updated.service == "Outlook"
        assert updated.username_or_email == "new@x.com"
        assert updated.password == "cc" * 16
        assert updated.iv == "dd" * 16
        assert updated.user_id == alice.id

    @pytest.mark.asyncio
    async def test_update_by_wrong_owner_changes_nothing(self, store, owners):
        alice, bob = owners
        entry = await _create(store, bob)

        result = await store.update_by_id_and_owner(
            entry.id, alice.id,
            service="Hijack", identity="evil@x.com", ciphertext="cc" * 16, iv="dd" * 16,
        )

        assert result is None
        unchanged = await store.find_by_id_and_owner(entry.id, bob.id)
        assert unchanged.service == "Gmail"
        assert unchanged.iv == "bb" * 16

    @pytest.mark.asyncio
    async def test_delete(self, store, owners):
        alice, bob = owners
        entry = await _create(store, bob)

        assert await store.delete_by_id_and_owner(entry.id, alice.id) is False
        assert await store.delete_by_id_and_owner(entry.id, bob.id) is True
        assert await store.delete_by_id_and_owner(entry.id, bob.id) is False
        assert await store.list_by_owner(bob.id) == []
