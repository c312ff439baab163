"""ドライラン出力（値そのものは表示しない）"""

from __future__ import annotations

from typing import Any


def describe_value(value: Any) -> str:
    """値の種類と、文字列なら文字数だけを返す。"""
    if isinstance(value, str):
        return f"<string, {len(value)} chars>"
    return f"<{type(value).__name__}>"


def render_dry_run(reference_root: str, secrets: dict[str, Any]) -> list[str]:
    lines = [
        f"[dry-run] Would write to Vault path: {reference_root}",
        f"[dry-run] {len(secrets)} secrets:",
    ]
    lines.extend(f"  {key} = {describe_value(secrets[key])}" for key in sorted(secrets))
    return lines
