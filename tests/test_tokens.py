"""Tests for transaction tokens."""

from ff_logmux.tokens import TokenStore

TOKEN1 = "3d5e27f7-b97c-4adc-b1fd-adf1bd4314e0"
TOKEN2 = "1bdef605-34b9-4ec7-9a1c-cb58efc8a635"


class TestTokenStore:
    """Test save/restore of tokens."""

    def test_round_trip(self):
        """set A, save k, set B, restore k gives A."""
        store = TokenStore()
        key = object()

        store.token = TOKEN1
        store.save(key)
        store.token = TOKEN2
        store.restore(key)

        assert store.token == TOKEN1
        assert len(store) == 0

    def test_restore_unsaved_key_clears_token(self):
        store = TokenStore(TOKEN1)
        store.restore(object())
        assert store.token is None

    def test_save_without_token_is_noop(self):
        store = TokenStore()
        key = object()

        store.save(key)
        assert len(store) == 0

        store.token = TOKEN2
        store.restore(key)
        assert store.token is None

    def test_keys_are_identities(self):
        """Equal but distinct keys are separate entries."""
        store = TokenStore()
        first, second = [], []

        store.token = TOKEN1
        store.save(first)
        store.token = TOKEN2
        store.save(second)

        store.restore(first)
        assert store.token == TOKEN1
        store.restore(second)
        assert store.token == TOKEN2

    def test_restore_forgets_key(self):
        store = TokenStore(TOKEN1)
        key = object()

        store.save(key)
        store.restore(key)
        store.restore(key)

        assert store.token is None

    def test_none_key_is_ignored(self):
        store = TokenStore(TOKEN1)
        store.save(None)
        store.restore(None)
        assert store.token == TOKEN1
