# Tests for endpoint families and the webhook reference.
# Created: 2026-10-03

import pytest

from driveview.endpoints import (
    API,
    WEBHOOK,
    WEBHOOK_OPERATIONS,
    curl_command,
    get_family,
    webhook_reference,
)
from driveview.errors import InvalidArgument

BASE = "https://drive.example.com"


class TestFamilies:
    def test_api_verbs(self):
        assert API.delete_file.method == "DELETE"
        assert API.rename_file.method == "PUT"
        assert API.rename_folder.method == "PUT"
        assert API.enveloped is False

    def test_webhook_writes_are_post(self):
        for endpoint in (
            WEBHOOK.upload_file,
            WEBHOOK.delete_file,
            WEBHOOK.rename_file,
            WEBHOOK.create_folder,
            WEBHOOK.delete_folder,
            WEBHOOK.rename_folder,
        ):
            assert endpoint.method == "POST"
            assert endpoint.path.startswith("/webhook/")
        assert WEBHOOK.enveloped is True
        assert WEBHOOK.list_files is None

    def test_get_family_case_insensitive(self):
        assert get_family("API") is API
        assert get_family("webhook") is WEBHOOK

    def test_get_family_unknown(self):
        with pytest.raises(InvalidArgument):
            get_family("grpc")


class TestWebhookReference:
    def test_lists_every_operation(self):
        ref = webhook_reference(BASE + "/")
        assert [e["operation"] for e in ref] == list(WEBHOOK_OPERATIONS)
        status = next(e for e in ref if e["operation"] == "status")
        assert status["method"] == "GET"
        assert status["url"] == f"{BASE}/webhook/folders/status"

    def test_curl_upload(self):
        cmd = curl_command("upload", BASE, "photos")
        assert cmd.startswith(f"curl -X POST {BASE}/webhook/files/upload")
        assert '-F "file=@/path/to/your/file.jpg"' in cmd
        assert "-F folder_path=photos" in cmd

    def test_curl_delete_inside_current_path(self):
        cmd = curl_command("delete", BASE, "photos/")
        assert "-G" in cmd
        assert "--data-urlencode file_path=photos/filename.jpg" in cmd

    def test_curl_delete_at_root_has_no_leading_slash(self):
        cmd = curl_command("delete", BASE, "")
        assert "file_path=filename.jpg" in cmd

    def test_curl_create_folder_json(self):
        cmd = curl_command("create-folder", BASE, "photos")
        assert '-H "Content-Type: application/json"' in cmd
        assert '"parent_path": "photos"' in cmd
        assert "-G" not in cmd

    def test_curl_status_root_has_no_params(self):
        assert curl_command("status", BASE) == f"curl -X GET {BASE}/webhook/folders/status"

    def test_curl_unknown_operation(self):
        with pytest.raises(InvalidArgument):
            curl_command("chmod", BASE)
