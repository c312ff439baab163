"""k1s0-vault-import コマンドのエントリーポイント"""

from __future__ import annotations

import argparse
import os
from collections.abc import Mapping, Sequence

from .config import resolve_config
from .decrypt import SopsDecryptor
from .exceptions import VaultImportError
from .importer import SecretImporter
from .logger import new_logger

DESCRIPTION = "Import secrets from a SOPS-encrypted YAML file to Vault KV v2."


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser("k1s0-vault-import", description=DESCRIPTION)
    parser.add_argument("sops_file", help="Path to SOPS-encrypted YAML file")
    parser.add_argument("vault_path", help="Destination path in Vault (under the mount)")
    parser.add_argument("--vault-addr", default="", help="Vault server address (env: VAULT_ADDR)")
    parser.add_argument("--vault-token", default="", help="Vault token (env: VAULT_TOKEN)")
    parser.add_argument(
        "--vault-namespace", default="", help="Vault namespace (env: VAULT_NAMESPACE)"
    )
    parser.add_argument("--mount", default="secret", help="Vault KV v2 mount path")
    parser.add_argument(
        "--dry-run", action="store_true", help="Print secrets without writing to Vault"
    )
    parser.add_argument(
        "--append-name", action="store_true", help="Append cleaned filename to vault path"
    )
    parser.add_argument(
        "--name", default="", help="Override the derived name (use with --append-name)"
    )
    parser.add_argument(
        "--update-counterpart",
        action="store_true",
        help="Update counterpart YAML file with vault references",
    )
    parser.add_argument("--sops-binary", default="sops", help="sops executable")
    parser.add_argument("--log-level", default="INFO", help="Log level")
    parser.add_argument("--log-format", choices=["json", "text"], default="text")
    return parser


def main(argv: Sequence[str] | None = None, environ: Mapping[str, str] | None = None) -> int:
    """コマンドを実行して終了コードを返す。"""
    args = build_parser().parse_args(argv)
    logger = new_logger(level=args.log_level, format=args.log_format)
    if environ is None:
        environ = os.environ

    try:
        config = resolve_config(
            args.sops_file,
            args.vault_path,
            environ,
            vault_addr=args.vault_addr,
            vault_token=args.vault_token,
            vault_namespace=args.vault_namespace,
            mount_path=args.mount,
            dry_run=args.dry_run,
            append_name=args.append_name,
            name_override=args.name,
            update_counterpart=args.update_counterpart,
            sops_binary=args.sops_binary,
            log_level=args.log_level,
            log_format=args.log_format,
        )
        importer = SecretImporter(config, SopsDecryptor(config.sops_binary), logger=logger)

        if config.dry_run:
            for line in importer.preview(importer.load_secrets()):
                print(line)
            return 0

        result = importer.run()
    except VaultImportError as e:
        logger.error("import failed", code=e.code, error=str(e))
        return 1

    print(f"Successfully wrote {len(result.written_keys)} secrets to {result.reference_root}/*")
    if result.counterpart_path is not None and result.counterpart_error is None:
        counterpart = result.counterpart_path.resolve()
        if result.counterpart_updated:
            print(f"Updated {counterpart} with {len(result.written_keys)} vault references")
        else:
            print(f"Counterpart file {counterpart} does not exist, skipping")
    return 0
