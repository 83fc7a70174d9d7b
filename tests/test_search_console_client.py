"""
Unit tests for the Search Console API client.
"""

import pytest
from unittest.mock import MagicMock, patch

from clients.search_console import RemoteResult, SearchConsoleClient, error_status


class TestRemoteResult:

    def test_ok(self):
        assert RemoteResult(status=200, value={}).ok
        assert RemoteResult(status=204).ok
        assert not RemoteResult(status=404, error="missing").ok

    def test_not_found(self):
        assert RemoteResult(status=404, error="missing").not_found
        assert not RemoteResult(status=403, error="denied").not_found

    def test_error_status(self, make_http_error):
        assert error_status(make_http_error(404)) == 404
        assert error_status(ValueError("boom")) == 500


class TestServiceConstruction:

    def test_missing_credentials(self):
        client = SearchConsoleClient()
        with pytest.raises(RuntimeError, match="credentials"):
            client.list_sites()

    @patch("clients.search_console.build")
    @patch("clients.search_console.service_account.Credentials.from_service_account_file")
    def test_builds_webmasters_service_once(self, mock_creds, mock_build):
        client = SearchConsoleClient(credentials_file="/tmp/key.json")

        client.list_sites()
        client.list_sites()

        mock_creds.assert_called_once_with(
            "/tmp/key.json", scopes=["https://www.googleapis.com/auth/webmasters"]
        )
        mock_build.assert_called_once_with(
            "webmasters", "v3", credentials=mock_creds.return_value, cache_discovery=False
        )


class TestDeferral:

    def test_deferred_by_default(self, sc_client):
        assert sc_client.defer is True

    def test_deferral_context_restores(self, sc_client):
        with sc_client.deferral(False):
            assert sc_client.defer is False
        assert sc_client.defer is True

    def test_deferral_context_restores_on_error(self, sc_client):
        with pytest.raises(ValueError):
            with sc_client.deferral(False):
                raise ValueError("boom")
        assert sc_client.defer is True

    def test_immediate_calls_refused_while_deferred(self, sc_client, mock_service):
        with pytest.raises(RuntimeError):
            sc_client.get_site("https://a.com/")
        with pytest.raises(RuntimeError):
            sc_client.add_site("https://a.com/")
        mock_service.sites.return_value.get.assert_not_called()


class TestImmediateCalls:

    def test_get_site(self, sc_client, mock_service):
        mock_service.sites.return_value.get.return_value.execute.return_value = {
            "siteUrl": "https://a.com/", "permissionLevel": "siteOwner"
        }

        with sc_client.deferral(False):
            result = sc_client.get_site("https://a.com/")

        assert result.ok
        assert result.value["siteUrl"] == "https://a.com/"

    def test_get_site_not_found(self, sc_client, mock_service, make_http_error):
        mock_service.sites.return_value.get.return_value.execute.side_effect = (
            make_http_error(404)
        )

        with sc_client.deferral(False):
            result = sc_client.get_site("https://a.com/")

        assert result.not_found
        assert not result.ok

    def test_add_site(self, sc_client, mock_service):
        with sc_client.deferral(False):
            result = sc_client.add_site("https://a.com/")

        assert result.status == 204
        mock_service.sites.return_value.add.assert_called_once_with(siteUrl="https://a.com/")

    def test_add_site_failure(self, sc_client, mock_service, make_http_error):
        mock_service.sites.return_value.add.return_value.execute.side_effect = (
            make_http_error(409)
        )

        with sc_client.deferral(False):
            result = sc_client.add_site("https://a.com/")

        assert result.status == 409


class TestBatch:

    def test_empty_batch_sends_nothing(self, sc_client, mock_service):
        assert sc_client.execute_batch({}) == {}
        mock_service.new_batch_http_request.assert_not_called()

    def test_results_per_key(self, sc_client, mock_service, batch_outcomes, make_http_error):
        batch_outcomes["ok"] = {"rows": [{"clicks": 1}]}
        batch_outcomes["bad"] = make_http_error(500)
        first, second = MagicMock(), MagicMock()

        results = sc_client.execute_batch({"ok": first, "bad": second})

        assert len(mock_service.batches) == 1
        assert mock_service.batches[0].requests == [("ok", first), ("bad", second)]
        assert results["ok"].value == {"rows": [{"clicks": 1}]}
        assert results["bad"].status == 500
        assert not results["bad"].ok

    def test_missing_callback_marked_failed(self, sc_client, mock_service):
        batch = MagicMock()
        mock_service.new_batch_http_request.side_effect = None
        mock_service.new_batch_http_request.return_value = batch

        results = sc_client.execute_batch({"lost": MagicMock()})

        batch.execute.assert_called_once()
        assert not results["lost"].ok
