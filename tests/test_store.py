"""HttpVaultKvStore のユニットテスト（respx モック）"""

import json

import httpx
import pytest
import respx
from k1s0_vault_import.exceptions import VaultImportError, VaultImportErrorCodes
from k1s0_vault_import.models import VaultStoreConfig
from k1s0_vault_import.store import HttpVaultKvStore, InMemorySecretStore

BASE_URL = "http://vault:8200"


def make_store(namespace: str = "") -> HttpVaultKvStore:
    return HttpVaultKvStore(
        VaultStoreConfig(address=BASE_URL, token="s.test", mount_path="secret", namespace=namespace)
    )


@respx.mock
def test_write_secret_success() -> None:
    """KV v2 の data パスに value フィールドで書き込まれること。"""
    route = respx.post(f"{BASE_URL}/v1/secret/data/myapp/db.password").mock(
        return_value=httpx.Response(200, json={"data": {"version": 1}})
    )
    make_store().write_secret("myapp/db.password", "s3cr3t")
    assert route.called
    request = route.calls.last.request
    assert request.headers["X-Vault-Token"] == "s.test"
    assert "X-Vault-Namespace" not in request.headers
    assert json.loads(request.content) == {"data": {"value": "s3cr3t"}}


@respx.mock
def test_write_secret_with_namespace() -> None:
    """namespace 指定時に X-Vault-Namespace ヘッダーが付与されること。"""
    route = respx.post(f"{BASE_URL}/v1/secret/data/myapp/key").mock(
        return_value=httpx.Response(204)
    )
    make_store(namespace="team-a").write_secret("myapp/key", "v")
    assert route.calls.last.request.headers["X-Vault-Namespace"] == "team-a"


@respx.mock
def test_write_secret_permission_denied() -> None:
    """403 で PERMISSION_DENIED になること。"""
    respx.post(f"{BASE_URL}/v1/secret/data/myapp/key").mock(
        return_value=httpx.Response(403, json={"errors": ["permission denied"]})
    )
    with pytest.raises(VaultImportError) as exc_info:
        make_store().write_secret("myapp/key", "v")
    assert exc_info.value.code == VaultImportErrorCodes.PERMISSION_DENIED


@respx.mock
def test_write_secret_server_error() -> None:
    """500 で STORE_WRITE_ERROR になること。"""
    respx.post(f"{BASE_URL}/v1/secret/data/myapp/key").mock(
        return_value=httpx.Response(500, text="Internal Server Error")
    )
    with pytest.raises(VaultImportError) as exc_info:
        make_store().write_secret("myapp/key", "v")
    assert exc_info.value.code == VaultImportErrorCodes.STORE_WRITE


@respx.mock
def test_write_secret_connection_error() -> None:
    """接続エラーで STORE_WRITE_ERROR になり原因が保持されること。"""
    respx.post(f"{BASE_URL}/v1/secret/data/myapp/key").mock(
        side_effect=httpx.ConnectError("connection refused")
    )
    with pytest.raises(VaultImportError) as exc_info:
        make_store().write_secret("myapp/key", "v")
    assert exc_info.value.code == VaultImportErrorCodes.STORE_WRITE
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


def test_in_memory_store() -> None:
    """インメモリストアにマウント付きパスで記録されること。"""
    store = InMemorySecretStore(mount_path="kv")
    store.write_secret("app/a.b", "1")
    assert store.secrets == {"kv/app/a.b": {"value": "1"}}
