from __future__ import annotations

import json
import os
import stat
import sys
from unittest.mock import MagicMock, patch

import pytest

from exetel.customer import Services
from exetel.errors import AuthError, RequestError
from scripts import exetel_auth, exetel_services


@pytest.fixture
def no_dotenv():
    with patch("exetel.config.load_env_file_if_present"):
        yield


class TestExetelServicesScript:
    @patch("scripts.exetel_services.getpass.getpass", return_value="s3cret")
    @patch("scripts.exetel_services.Authorization.authenticate")
    def test_prints_services(self, mock_auth, mock_getpass, services_payload, capsys, clean_env, no_dotenv):
        client = MagicMock()
        client.__enter__.return_value = client
        client.services.return_value = Services.from_dict(services_payload)
        mock_auth.return_value.into_client.return_value = client

        exit_code = exetel_services.main(["--username", "alice"])

        assert exit_code == 0
        mock_getpass.assert_called_once()
        assert mock_auth.call_args[0] == ("alice", "s3cret")
        assert json.loads(capsys.readouterr().out) == services_payload

    @patch("scripts.exetel_services.getpass.getpass", return_value="wrong")
    @patch("scripts.exetel_services.Authorization.authenticate", side_effect=AuthError("Login failed: 401"))
    def test_auth_failure_exits_non_zero(self, mock_auth, mock_getpass, capsys, clean_env, no_dotenv):
        exit_code = exetel_services.main(["-u", "alice"])

        assert exit_code == 1
        assert "Login failed: 401" in capsys.readouterr().err

    @patch("scripts.exetel_services.getpass.getpass", return_value="pw")
    @patch("scripts.exetel_services.Authorization.authenticate")
    def test_request_failure_exits_non_zero(self, mock_auth, mock_getpass, capsys, clean_env, no_dotenv):
        client = MagicMock()
        client.__enter__.return_value = client
        client.services.side_effect = RequestError("Request to /service failed")
        mock_auth.return_value.into_client.return_value = client

        assert exetel_services.main(["-u", "alice"]) == 1
        assert "Request to /service failed" in capsys.readouterr().err

    @patch("scripts.exetel_services.getpass.getpass")
    def test_without_username_does_nothing(self, mock_getpass, clean_env, no_dotenv):
        assert exetel_services.main([]) == 0
        mock_getpass.assert_not_called()

    @patch("scripts.exetel_services.getpass.getpass", return_value="pw")
    @patch("scripts.exetel_services.Authorization.authenticate", side_effect=AuthError("nope"))
    def test_username_from_environment(self, mock_auth, mock_getpass, clean_env, no_dotenv, monkeypatch):
        monkeypatch.setenv("EXETEL_USERNAME", "bob")

        exetel_services.main([])

        assert mock_auth.call_args[0] == ("bob", "pw")


class TestExetelAuthScript:
    @patch("scripts.exetel_auth.getpass.getpass", return_value="pw")
    @patch("scripts.exetel_auth.Authorization.authenticate")
    def test_reports_and_saves_token(self, mock_auth, mock_getpass, authorization, tmp_path, capsys, clean_env, no_dotenv):
        mock_auth.return_value = authorization
        out = tmp_path / "auth" / "token.json"

        exit_code = exetel_auth.main(["-u", "alice", "--save", str(out)])

        assert exit_code == 0
        report = json.loads(capsys.readouterr().out)
        assert report["ok"] is True
        assert report["len"] == 3
        assert report["expiresAt"] == authorization.expires_at.isoformat()
        assert json.loads(out.read_text()) == authorization.to_dict()

    def test_requires_username(self, clean_env, no_dotenv):
        with pytest.raises(SystemExit):
            exetel_auth.main([])

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permission bits")
    @patch("scripts.exetel_auth.getpass.getpass", return_value="pw")
    @patch("scripts.exetel_auth.Authorization.authenticate")
    def test_saved_token_is_private(self, mock_auth, mock_getpass, authorization, tmp_path, clean_env, no_dotenv):
        mock_auth.return_value = authorization
        out = tmp_path / "token.json"
        out.write_text("stale")
        out.chmod(0o644)

        with patch("scripts.exetel_auth.os.open", wraps=os.open) as mock_open:
            assert exetel_auth.main(["-u", "alice", "--save", str(out)]) == 0

        assert any(call.args[1:] == (os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600) for call in mock_open.call_args_list)
        assert stat.S_IMODE(out.stat().st_mode) & 0o077 == 0
        assert json.loads(out.read_text()) == authorization.to_dict()
