"""CLI エントリーポイントのユニットテスト"""

from pathlib import Path

import httpx
import pytest
import respx
from k1s0_vault_import.cli import main
from k1s0_vault_import.decrypt import SopsDecryptor

BASE_URL = "http://vault:8200"


@pytest.fixture
def sops_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    path = tmp_path / "app-secrets.enc.yaml"
    path.write_text("encrypted")

    def fake_decrypt(self: SopsDecryptor, target: Path) -> bytes:
        return b"db:\n  password: hunter2\napi_key: k-123\n"

    monkeypatch.setattr(SopsDecryptor, "decrypt", fake_decrypt)
    return path


def test_dry_run(sops_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """ドライランは値を表示せずに 0 で終了すること。"""
    assert main([str(sops_file), "proj", "--dry-run"], environ={}) == 0
    out = capsys.readouterr().out
    assert "[dry-run] Would write to Vault path: secret/proj" in out
    assert "  db.password = <string, 7 chars>" in out
    assert "hunter2" not in out


def test_dry_run_with_counterpart(sops_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """ドライランでカウンターパートがなければスキップと表示されること。"""
    assert main([str(sops_file), "proj", "--dry-run", "--update-counterpart"], environ={}) == 0
    out = capsys.readouterr().out
    assert "does not exist, skipping" in out


def test_missing_config(sops_file: Path) -> None:
    """Vault アドレスがなければ 1 で終了すること。"""
    assert main([str(sops_file), "proj"], environ={}) == 1


@respx.mock
def test_import_success(sops_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """書き込みとカウンターパート更新が行われ 0 で終了すること。"""
    counterpart = sops_file.with_name("app.yaml")
    counterpart.write_text("api_key: placeholder\n")
    route_db = respx.post(f"{BASE_URL}/v1/secret/data/proj/app/db.password").mock(
        return_value=httpx.Response(200, json={})
    )
    route_api = respx.post(f"{BASE_URL}/v1/secret/data/proj/app/api_key").mock(
        return_value=httpx.Response(200, json={})
    )
    argv = [str(sops_file), "proj", "--append-name", "--update-counterpart"]
    environ = {"VAULT_ADDR": BASE_URL, "VAULT_TOKEN": "t"}
    assert main(argv, environ=environ) == 0
    assert route_db.called
    assert route_api.called
    out = capsys.readouterr().out
    assert "Successfully wrote 2 secrets to secret/proj/app/*" in out
    assert "with 2 vault references" in out
    assert counterpart.read_text() == (
        "api_key: ref+vault://secret/proj/app/api_key#value\n"
        "db:\n"
        "  password: ref+vault://secret/proj/app/db.password#value\n"
    )


@respx.mock
def test_store_failure_exit_code(sops_file: Path) -> None:
    """書き込み失敗で 1 で終了すること。"""
    respx.post(f"{BASE_URL}/v1/secret/data/proj/api_key").mock(
        return_value=httpx.Response(500, text="boom")
    )
    environ = {"VAULT_ADDR": BASE_URL, "VAULT_TOKEN": "t"}
    assert main([str(sops_file), "proj"], environ=environ) == 1


@respx.mock
def test_counterpart_failure_is_not_fatal(sops_file: Path) -> None:
    """カウンターパートの更新失敗は 0 で終了すること。"""
    sops_file.with_name("app.yaml").write_text("- a\n")
    respx.post(url__startswith=f"{BASE_URL}/v1/secret/data/proj/").mock(
        return_value=httpx.Response(200, json={})
    )
    environ = {"VAULT_ADDR": BASE_URL, "VAULT_TOKEN": "t"}
    assert main([str(sops_file), "proj", "--update-counterpart"], environ=environ) == 0


def test_usage_error() -> None:
    """引数不足は argparse により 2 で終了すること。"""
    with pytest.raises(SystemExit) as exc_info:
        main(["only-one-arg"], environ={})
    assert exc_info.value.code == 2
