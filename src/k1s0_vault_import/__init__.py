"""k1s0 vault import library."""

from .counterpart import clean_filename, counterpart_filename, update_counterpart_file
from .decrypt import Decryptor, SopsDecryptor, parse_secrets
from .document import detect_indent, emit_document, parse_document
from .exceptions import VaultImportError, VaultImportErrorCodes
from .flatten import flatten, stringify_value
from .importer import SecretImporter
from .models import ImportConfig, ImportResult, VaultStoreConfig
from .patcher import patch_document
from .reference import build_reference
from .store import HttpVaultKvStore, InMemorySecretStore, SecretStore

__all__ = [
    "flatten",
    "stringify_value",
    "detect_indent",
    "parse_document",
    "emit_document",
    "build_reference",
    "patch_document",
    "clean_filename",
    "counterpart_filename",
    "update_counterpart_file",
    "Decryptor",
    "SopsDecryptor",
    "parse_secrets",
    "SecretStore",
    "HttpVaultKvStore",
    "InMemorySecretStore",
    "ImportConfig",
    "ImportResult",
    "VaultStoreConfig",
    "SecretImporter",
    "VaultImportError",
    "VaultImportErrorCodes",
]
