"""Unit tests for sync_engine module."""

from unittest.mock import Mock, call, patch

import pytest

from postman_sync.errors import CollectionParseError, ReadmeAPIError
from postman_sync.manifest import save_manifest
from postman_sync.markdown_generator import GeneratedPage
from postman_sync.readme_api import ReadmeAPI
from postman_sync.sync_engine import SyncEngine, SyncResult


GENERATED = ["api-auth", "api-admin", "api-admin-roles", "api-health"]
PUBLISH_ORDER = ["api-auth", "api-admin", "api-health", "api-admin-roles"]


def create_mock_api(existing=()):
    """Create a mock Readme client where only ``existing`` slugs are found."""
    api = Mock(spec=ReadmeAPI)
    api.page_exists.side_effect = lambda slug: slug in existing
    api.request_count = 0
    return api


def page(parent_slug, slug):
    return GeneratedPage(parent_slug=parent_slug, slug=slug, title=slug.upper(), content=f"# {slug}")


class TestSync:
    """Test cases for SyncEngine.sync()."""

    def test_first_run_creates_pages_parents_first(self, config):
        api = create_mock_api()

        result = SyncEngine(config, api=api).sync()

        assert [c.args[0] for c in api.create_page.call_args_list] == PUBLISH_ORDER
        roles_call = api.create_page.call_args_list[3]
        assert roles_call.args[1] == "Roles"
        assert roles_call.args[3] == "api-admin"
        api.update_page.assert_not_called()
        api.delete_page.assert_not_called()
        assert result.success
        assert result.published
        assert result.pages_created == PUBLISH_ORDER

    def test_markdown_files_are_written(self, config):
        result = SyncEngine(config, api=create_mock_api()).sync()

        assert result.pages_generated == GENERATED
        for slug in GENERATED:
            assert (config.markdown_folder / f"{slug}.md").exists()
        health = (config.markdown_folder / "api-health.md").read_text(encoding="utf-8")
        assert "// GET https://x.io/health" in health

    def test_manifest_is_written_in_publish_order(self, config):
        SyncEngine(config, api=create_mock_api()).sync()

        assert config.pages_file.read_text(encoding="utf-8") == "\n".join(PUBLISH_ORDER) + "\n"

    def test_existing_pages_are_updated(self, config):
        api = create_mock_api(existing={"api-auth", "api-admin-roles"})

        result = SyncEngine(config, api=api).sync()

        assert [c.args[0] for c in api.update_page.call_args_list] == ["api-auth", "api-admin-roles"]
        assert [c.args[0] for c in api.create_page.call_args_list] == ["api-admin", "api-health"]
        assert result.pages_updated == ["api-auth", "api-admin-roles"]

    def test_removed_pages_are_deleted_children_first(self, config):
        save_manifest(config.pages_file, ["api-auth", "api-old", "api-health", "api-old-child"])
        api = create_mock_api()

        result = SyncEngine(config, api=api).sync()

        assert api.delete_page.call_args_list == [call("api-old-child"), call("api-old")]
        assert result.pages_deleted == ["api-old-child", "api-old"]
        assert "api-old" not in config.pages_file.read_text(encoding="utf-8")

    def test_unchanged_second_run_deletes_nothing(self, config):
        SyncEngine(config, api=create_mock_api()).sync()
        api = create_mock_api(existing=set(GENERATED))

        result = SyncEngine(config, api=api).sync()

        api.delete_page.assert_not_called()
        api.create_page.assert_not_called()
        assert api.update_page.call_count == 4
        assert result.success

    def test_upsert_failure_does_not_stop_the_batch(self, config):
        api = create_mock_api()

        def fail_admin(slug, *args):
            if slug == "api-admin":
                raise ReadmeAPIError("POST", slug, 500)

        api.create_page.side_effect = fail_admin

        result = SyncEngine(config, api=api).sync()

        assert api.create_page.call_count == 4
        assert result.pages_failed == ["api-admin"]
        assert not result.success
        assert "api-admin\n" in config.pages_file.read_text(encoding="utf-8")

    def test_existence_check_failure_is_recorded(self, config):
        api = create_mock_api()
        api.page_exists.side_effect = ReadmeAPIError("GET", "api-auth", reason="timed out")

        result = SyncEngine(config, api=api).sync()

        assert result.pages_failed == PUBLISH_ORDER
        api.create_page.assert_not_called()

    def test_delete_failure_attempts_remaining_slugs(self, config):
        save_manifest(config.pages_file, ["api-gone-a", "api-gone-b"])
        api = create_mock_api()
        api.delete_page.side_effect = [ReadmeAPIError("DELETE", "api-gone-b", 500), None]

        result = SyncEngine(config, api=api).sync()

        assert api.delete_page.call_args_list == [call("api-gone-b"), call("api-gone-a")]
        assert result.deletes_failed == ["api-gone-b"]
        assert result.pages_deleted == ["api-gone-a"]
        assert result.pages_stale == ["api-gone-b", "api-gone-a"]
        assert not result.success
        manifest = config.pages_file.read_text(encoding="utf-8").splitlines()
        assert manifest == PUBLISH_ORDER

    def test_missing_remote_page_fails_only_one_run(self, config):
        save_manifest(config.pages_file, PUBLISH_ORDER + ["api-ghost"])

        results = []
        for _ in range(2):
            api = create_mock_api()
            api.delete_page.side_effect = ReadmeAPIError("DELETE", "api-ghost", 404)
            results.append((SyncEngine(config, api=api).sync(), api))

        first, first_api = results[0]
        second, second_api = results[1]
        first_api.delete_page.assert_called_once_with("api-ghost")
        assert not first.success
        second_api.delete_page.assert_not_called()
        assert second.success
        assert "api-ghost" not in config.pages_file.read_text(encoding="utf-8")

    def test_missing_publish_setting_only_generates(self, config):
        config.api_key = ""
        api = create_mock_api()

        result = SyncEngine(config, api=api).sync()

        api.page_exists.assert_not_called()
        assert result.pages_generated == GENERATED
        assert not result.published
        assert result.success
        assert not config.pages_file.exists()

    def test_no_publish(self, config):
        api = create_mock_api()

        result = SyncEngine(config, api=api).sync(publish=False)

        api.page_exists.assert_not_called()
        assert result.pages_generated == GENERATED

    def test_dry_run_sends_nothing(self, config):
        config.dry_run = True
        save_manifest(config.pages_file, ["api-auth", "api-old"])
        api = create_mock_api()

        result = SyncEngine(config, api=api).sync()

        assert api.method_calls == []
        assert not result.published
        assert result.pages_stale == ["api-old"]
        assert config.pages_file.read_text(encoding="utf-8") == "api-auth\napi-old\n"

    def test_write_failure_is_reported_and_sync_continues(self, config):
        api = create_mock_api()

        with patch("postman_sync.sync_engine.open", side_effect=OSError("disk full"), create=True):
            result = SyncEngine(config, api=api).sync()

        assert result.files_failed == GENERATED
        assert result.pages_generated == []
        assert api.create_page.call_count == 4
        assert result.success

    def test_collection_errors_propagate(self, config, tmp_path):
        config.source_file = tmp_path / "missing.json"

        with pytest.raises(CollectionParseError):
            SyncEngine(config, api=create_mock_api()).sync()


class TestPublishAndReconcile:
    """Test cases for the synchronizer building blocks."""

    def test_publish_processes_top_level_pages_first(self, config):
        api = create_mock_api()
        pages = [page("", "a"), page("a", "a-b"), page("a-b", "a-b-c"), page("", "c")]

        new_slugs = SyncEngine(config, api=api).publish(pages, SyncResult())

        assert new_slugs == ["a", "c", "a-b", "a-b-c"]
        assert api.create_page.call_args_list == [
            call("a", "A", "# a", ""),
            call("c", "C", "# c", ""),
            call("a-b", "A-B", "# a-b", "a"),
            call("a-b-c", "A-B-C", "# a-b-c", "a-b"),
        ]

    def test_reconcile_deletes_exactly_previous_minus_new(self, config):
        api = create_mock_api()
        result = SyncResult()

        stale = SyncEngine(config, api=api).reconcile(["a", "a-b", "c"], ["a", "a-b"], result)

        assert stale == ["c"]
        api.delete_page.assert_called_once_with("c")
        assert result.pages_deleted == ["c"]
        assert result.pages_stale == ["c"]

    def test_reconcile_with_empty_previous_manifest(self, config):
        api = create_mock_api()

        stale = SyncEngine(config, api=api).reconcile([], ["a"], SyncResult())

        assert stale == []
        api.delete_page.assert_not_called()


class TestStatusAndClean:
    """Test cases for status() and clean()."""

    def test_status_lists_manifest(self, config, capsys):
        save_manifest(config.pages_file, ["api-auth"])

        SyncEngine(config, api=create_mock_api()).status()

        assert "api-auth" in capsys.readouterr().out

    def test_clean_removes_markdown_files(self, config):
        config.markdown_folder.mkdir(parents=True)
        (config.markdown_folder / "api-auth.md").write_text("x", encoding="utf-8")
        (config.markdown_folder / "notes.txt").write_text("keep", encoding="utf-8")

        SyncEngine(config, api=create_mock_api()).clean(confirm=True)

        assert not (config.markdown_folder / "api-auth.md").exists()
        assert (config.markdown_folder / "notes.txt").exists()

    def test_clean_aborts_without_confirmation(self, config):
        config.markdown_folder.mkdir(parents=True)
        (config.markdown_folder / "api-auth.md").write_text("x", encoding="utf-8")

        with patch("builtins.input", return_value="no"):
            SyncEngine(config, api=create_mock_api()).clean()

        assert (config.markdown_folder / "api-auth.md").exists()
