"""vault_import の例外型定義"""

from __future__ import annotations


class VaultImportError(Exception):
    """vault_import のエラー基底クラス。"""

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"


class VaultImportErrorCodes:
    """VaultImportError のエラーコード定数。"""

    CONFIG: str = "CONFIG_ERROR"
    DECRYPT: str = "DECRYPT_ERROR"
    PARSE_YAML: str = "PARSE_YAML_ERROR"
    INVALID_DOCUMENT: str = "INVALID_DOCUMENT_ERROR"
    STORE_WRITE: str = "STORE_WRITE_ERROR"
    PERMISSION_DENIED: str = "PERMISSION_DENIED"
    COUNTERPART_IO: str = "COUNTERPART_IO_ERROR"
    COUNTERPART_SHAPE: str = "COUNTERPART_SHAPE_ERROR"
