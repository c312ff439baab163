"""シークレットストア（Vault KV v2）への書き込み"""

from __future__ import annotations

from abc import ABC, abstractmethod

import httpx

from .exceptions import VaultImportError, VaultImportErrorCodes
from .models import VaultStoreConfig

VALUE_FIELD = "value"


class SecretStore(ABC):
    """シークレットストア抽象基底クラス。"""

    @abstractmethod
    def write_secret(self, path: str, value: str) -> None:
        """マウント配下の path に値を書き込む。"""
        ...


class HttpVaultKvStore(SecretStore):
    """httpx を使った Vault KV v2 クライアント。

    値は各パスの "value" フィールドに文字列として格納する。
    """

    def __init__(self, config: VaultStoreConfig) -> None:
        self._config = config
        headers: dict[str, str] = {"X-Vault-Token": config.token}
        if config.namespace:
            headers["X-Vault-Namespace"] = config.namespace
        self._headers = headers

    def _make_client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self._config.address,
            headers=self._headers,
            timeout=self._config.timeout_seconds,
        )

    def _handle_error(self, resp: httpx.Response, context: str) -> None:
        if resp.status_code == 403:
            raise VaultImportError(
                code=VaultImportErrorCodes.PERMISSION_DENIED,
                message=f"{context}: permission denied",
            )
        if resp.status_code >= 400:
            raise VaultImportError(
                code=VaultImportErrorCodes.STORE_WRITE,
                message=f"{context}: HTTP {resp.status_code}: {resp.text}",
            )

    def write_secret(self, path: str, value: str) -> None:
        url = f"/v1/{self._config.mount_path}/data/{path}"
        body = {"data": {VALUE_FIELD: value}}
        try:
            with self._make_client() as client:
                resp = client.post(url, json=body)
            self._handle_error(resp, f"write_secret({path})")
        except VaultImportError:
            raise
        except httpx.HTTPError as e:
            raise VaultImportError(
                code=VaultImportErrorCodes.STORE_WRITE,
                message=f"Failed to write to vault path {path}: {e}",
                cause=e,
            ) from e


class InMemorySecretStore(SecretStore):
    """インメモリのシークレットストア（テスト用）。"""

    def __init__(self, mount_path: str = "secret") -> None:
        self._mount_path = mount_path
        self._store: dict[str, dict[str, str]] = {}

    @property
    def secrets(self) -> dict[str, dict[str, str]]:
        """"{mount}/{path}" をキーとした書き込み済みデータ。"""
        return self._store

    def write_secret(self, path: str, value: str) -> None:
        self._store[f"{self._mount_path}/{path}"] = {VALUE_FIELD: value}
