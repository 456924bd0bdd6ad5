"""Tests for the single-slot credential vault."""

import asyncio
from unittest.mock import MagicMock

import pytest

from ticketchecker.config.schema_models import VaultSettings
from ticketchecker.credentials.interfaces import AccessPolicy, AuthPolicy
from ticketchecker.credentials.models import Credential
from ticketchecker.credentials.secure_store import MemorySecureStore
from ticketchecker.credentials.vault import CredentialVault, build_credential_vault
from ticketchecker.errors import ErrorCode
from tests.fakes import BrokenStore, FakeAuthenticator


@pytest.fixture
def vault(store, authenticator):
    return CredentialVault(store, authenticator)


def _read(vault):
    return asyncio.run(vault.authenticated_read())


class TestSave:
    def test_save_then_read_returns_saved_pair(self, vault, authenticator):
        assert vault.save("user@example.com", "s3cret") is True

        result = _read(vault)

        assert result.ok
        assert result.value.email == "user@example.com"
        assert result.value.password == "s3cret"
        assert len(authenticator.evaluate_calls) == 1

    def test_second_save_replaces_first(self, vault):
        assert vault.save("a@example.com", "first")
        assert vault.save("c@example.com", "second")

        result = _read(vault)

        assert result.value == Credential(email="c@example.com", password="second")

    def test_save_deletes_before_writing(self, authenticator):
        store = MagicMock()
        store.delete.return_value = True
        store.write.return_value = True
        vault = CredentialVault(store, authenticator)

        assert vault.save("a@example.com", "pw") is True

        names = [c[0] for c in store.method_calls]
        assert names == ["delete", "write"]
        service, account, policy, data = store.write.call_args.args
        assert (service, account) == (vault.service_name, vault.account)
        assert policy is AccessPolicy.WHEN_PASSCODE_SET_THIS_DEVICE_ONLY
        assert Credential.from_bytes(data).email == "a@example.com"

    def test_save_fails_without_device_passcode(self, authenticator):
        vault = CredentialVault(MemorySecureStore(passcode_set=False), authenticator)
        assert vault.save("a@example.com", "pw") is False

    def test_save_returns_false_when_write_rejected(self, authenticator):
        store = MagicMock()
        store.write.return_value = False
        vault = CredentialVault(store, authenticator)
        assert vault.save("a@example.com", "pw") is False

    def test_save_never_raises_on_store_error(self, authenticator):
        vault = CredentialVault(BrokenStore(OSError("disk gone")), authenticator)
        assert vault.save("a@example.com", "pw") is False

    def test_save_rejects_non_string_input(self, vault):
        assert vault.save("a@example.com", None) is False

    def test_uses_configured_identifiers(self, store, authenticator):
        settings = VaultSettings(service_name="svc.test", account="acct")
        vault = CredentialVault(store, authenticator, settings)

        vault.save("a@example.com", "pw")

        assert store.read("svc.test", "acct") is not None
        assert store.read("com.ticketchecker.credentials", "user_credentials") is None


class TestAuthenticatedRead:
    def test_empty_vault_fails_without_prompting(self, vault, authenticator):
        result = _read(vault)

        assert not result.ok
        assert result.error.error_code == ErrorCode.KEYCHAIN_ERROR.value
        assert result.error.error
        assert authenticator.can_evaluate_calls == []
        assert authenticator.evaluate_calls == []

    def test_corrupt_entry_is_decoding_error(self, store, authenticator, vault):
        store.write(
            vault.service_name,
            vault.account,
            AccessPolicy.WHEN_PASSCODE_SET_THIS_DEVICE_ONLY,
            b'{"email": "a@example.com"}',
        )

        result = _read(vault)

        assert result.error.error_code == ErrorCode.DECODING_ERROR.value
        assert "password" in result.error.details
        assert authenticator.evaluate_calls == []

    def test_decoding_error_never_echoes_stored_secret(self, store, vault):
        vault_with_failing_auth = CredentialVault(store, FakeAuthenticator(success=False))
        store.write(
            vault.service_name,
            vault.account,
            AccessPolicy.WHEN_PASSCODE_SET_THIS_DEVICE_ONLY,
            b'{"password": "hunter2-secret"}',
        )

        result = _read(vault_with_failing_auth)

        assert result.error.error_code == ErrorCode.DECODING_ERROR.value
        assert result.error.details
        assert "email" in result.error.details
        assert "hunter2" not in result.error.details
        assert "hunter2" not in result.error.error

    def test_non_string_extra_value_is_decoding_error(self, store, authenticator, vault):
        store.write(
            vault.service_name,
            vault.account,
            AccessPolicy.WHEN_PASSCODE_SET_THIS_DEVICE_ONLY,
            b'{"email": "a@example.com", "password": "pw", "pin": 1234}',
        )

        result = _read(vault)

        assert result.error.error_code == ErrorCode.DECODING_ERROR.value
        assert "pin" in result.error.details
        assert authenticator.evaluate_calls == []

    def test_string_extra_values_are_tolerated(self, store, vault):
        store.write(
            vault.service_name,
            vault.account,
            AccessPolicy.WHEN_PASSCODE_SET_THIS_DEVICE_ONLY,
            b'{"email": "a@example.com", "password": "pw", "note": "work"}',
        )

        result = _read(vault)

        assert result.ok
        assert result.value.password == "pw"

    def test_store_exception_is_keychain_error(self, authenticator):
        vault = CredentialVault(BrokenStore(RuntimeError("locked")), authenticator)

        result = _read(vault)

        assert result.error.error_code == ErrorCode.KEYCHAIN_ERROR.value
        assert result.error.details == "locked"
        assert authenticator.evaluate_calls == []

    def test_no_policy_available(self, store):
        authenticator = FakeAuthenticator(available=False)
        vault = CredentialVault(store, authenticator)
        vault.save("a@example.com", "pw")

        result = _read(vault)

        assert not result.ok
        assert result.value is None
        assert result.error.error_code == ErrorCode.BIOMETRIC_NOT_AVAILABLE.value
        assert authenticator.evaluate_calls == []

    def test_failed_challenge_with_message(self, store):
        authenticator = FakeAuthenticator(success=False, message="User cancelled")
        vault = CredentialVault(store, authenticator)
        vault.save("a@example.com", "pw")

        result = _read(vault)

        assert not result.ok
        assert result.value is None
        assert result.error.error == "User cancelled"
        assert result.error.error_code is None

    def test_failed_challenge_without_message(self, store):
        authenticator = FakeAuthenticator(success=False)
        vault = CredentialVault(store, authenticator)
        vault.save("a@example.com", "pw")

        result = _read(vault)

        assert result.error.error_code == ErrorCode.AUTH_FAILED.value
        assert result.error.error == "Authentication failed"

    def test_authenticator_exception_is_failure(self, store):
        authenticator = FakeAuthenticator(raises=RuntimeError("sensor error"))
        vault = CredentialVault(store, authenticator)
        vault.save("a@example.com", "pw")

        result = _read(vault)

        assert not result.ok
        assert result.error.error == "sensor error"

    def test_challenge_uses_configured_policy_and_reason(self, store, authenticator):
        settings = VaultSettings(auth_reason="Unlock to sign in")
        vault = CredentialVault(store, authenticator, settings)
        vault.save("a@example.com", "pw")

        _read(vault)

        assert authenticator.evaluate_calls == [
            (AuthPolicy.DEVICE_OWNER_AUTHENTICATION, "Unlock to sign in")
        ]

    def test_concurrent_reads_each_authenticate(self, vault, authenticator):
        vault.save("a@example.com", "pw")

        async def both():
            return await asyncio.gather(
                vault.authenticated_read(), vault.authenticated_read()
            )

        results = asyncio.run(both())

        assert all(r.ok for r in results)
        assert len(authenticator.evaluate_calls) == 2


class TestBuildingBlocks:
    def test_try_load_raw_does_not_authenticate(self, vault, authenticator):
        vault.save("a@example.com", "pw")

        loaded = vault.try_load_raw()

        assert loaded.ok
        assert loaded.value.email == "a@example.com"
        assert authenticator.evaluate_calls == []

    def test_authenticate_and_disclose_gates_credential(self, store):
        credential = Credential(email="a@example.com", password="pw")
        vault = CredentialVault(store, FakeAuthenticator(success=False))

        result = asyncio.run(vault.authenticate_and_disclose(credential))

        assert result.value is None


class TestClear:
    def test_clear_then_read_is_keychain_error(self, vault):
        vault.save("a@example.com", "pw")

        assert vault.clear() is True
        assert _read(vault).error.error_code == ErrorCode.KEYCHAIN_ERROR.value

    def test_clear_is_idempotent(self, vault):
        assert vault.clear() is True
        assert vault.clear() is True

    def test_clear_returns_false_on_store_error(self, authenticator):
        vault = CredentialVault(BrokenStore(OSError("nope")), authenticator)
        assert vault.clear() is False


class TestBuildCredentialVault:
    def test_defaults_to_memory_store(self, authenticator):
        vault = build_credential_vault(
            authenticator=authenticator, settings=VaultSettings()
        )
        assert vault.save("a@example.com", "pw")
        assert _read(vault).ok

    def test_file_store_from_settings(self, tmp_path, authenticator):
        from ticketchecker.credentials.secure_store import EncryptedFileSecureStore

        settings = VaultSettings(store_path=str(tmp_path), master_key="k" * 16)
        vault = build_credential_vault(authenticator=authenticator, settings=settings)

        assert isinstance(vault._store, EncryptedFileSecureStore)

    def test_without_authenticator_reads_are_refused(self):
        vault = build_credential_vault(settings=VaultSettings())
        vault.save("a@example.com", "pw")

        result = _read(vault)

        assert result.error.error_code == ErrorCode.BIOMETRIC_NOT_AVAILABLE.value

    def test_passcode_state_reaches_memory_store(self, authenticator):
        vault = build_credential_vault(
            authenticator=authenticator, settings=VaultSettings(passcode_set=False)
        )
        assert vault.save("a@example.com", "pw") is False

    def test_passcode_state_reaches_file_store(self, tmp_path, authenticator):
        settings = VaultSettings(
            store_path=str(tmp_path), master_key="k" * 16, passcode_set=False
        )
        vault = build_credential_vault(authenticator=authenticator, settings=settings)

        assert vault.save("a@example.com", "pw") is False
        assert list(tmp_path.iterdir()) == []
