"""vals 形式の Vault 参照文字列"""

from __future__ import annotations

REFERENCE_SCHEME = "ref+vault://"
REFERENCE_FIELD = "value"


def build_reference(storage_root: str, dotted_key: str) -> str:
    """シークレットの格納先を指す参照文字列を返す。

    例: build_reference("secret/app", "db.password")
        -> "ref+vault://secret/app/db.password#value"
    """
    return f"{REFERENCE_SCHEME}{storage_root}/{dotted_key}#{REFERENCE_FIELD}"
