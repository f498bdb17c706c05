"""Tests for the zatch CLI commands."""

from unittest.mock import patch

from typer.testing import CliRunner

from zatch import __version__
from zatch.cli import app
from zatch.modules.tenants.schemas import DomainVerificationResponse


runner = CliRunner()


class TestVersion:
    def test_version_flag(self) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.stdout


class TestArgumentValidation:
    """Bad arguments are rejected before any database work."""

    def test_add_domain_rejects_bad_hostname(self) -> None:
        with patch("zatch.cli._run") as run:
            result = runner.invoke(app, ["add-domain", "horizonte", "not a host"])

        assert result.exit_code != 0
        run.assert_not_called()

    def test_add_domain_rejects_unknown_type(self) -> None:
        with patch("zatch.cli._run") as run:
            result = runner.invoke(
                app, ["add-domain", "horizonte", "painel.example.com", "--type", "mobile"]
            )

        assert result.exit_code != 0
        run.assert_not_called()

    def test_set_tenant_status_rejects_unknown_status(self) -> None:
        with patch("zatch.cli._run") as run:
            result = runner.invoke(app, ["set-tenant-status", "horizonte", "paused"])

        assert result.exit_code != 0
        run.assert_not_called()

    def test_export_rejects_unknown_format(self, tmp_path) -> None:
        with patch("zatch.cli._run") as run:
            result = runner.invoke(
                app,
                ["export-properties", "horizonte", "-o", str(tmp_path / "out.xml"), "-f", "xml"],
            )

        assert result.exit_code != 0
        run.assert_not_called()


class TestVerifyDomain:
    def test_unverified_domain_exits_with_error(self) -> None:
        pending = DomainVerificationResponse(
            ok=False,
            verified=False,
            message="Verification record not found.",
            hostname="painel.example.com",
            expected_host="_zatch-verify.painel.example.com",
            expected_value="a" * 32,
        )
        with patch("zatch.cli._run", return_value=pending):
            result = runner.invoke(app, ["verify-domain", "painel.example.com"])

        assert result.exit_code == 1
        assert "_zatch-verify.painel.example.com" in result.stdout

    def test_verified_domain_exits_cleanly(self) -> None:
        done = DomainVerificationResponse(
            ok=True,
            verified=True,
            message="Domain verified",
            hostname="painel.example.com",
            expected_host="_zatch-verify.painel.example.com",
            expected_value="a" * 32,
        )
        with patch("zatch.cli._run", return_value=done):
            result = runner.invoke(app, ["verify-domain", "painel.example.com"])

        assert result.exit_code == 0
        assert "Domain verified" in result.stdout
