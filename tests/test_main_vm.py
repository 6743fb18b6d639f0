from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from app.viewmodels.main_vm import GalleryVM
from core.errors import DecodeFailure, TransportFailure
from core.models import COLLAPSED, Expanded
from core.services.interfaces import UploadResult
from core.services.upload_service import UploadPipeline
from tests.conftest import FakeNetworkClient, fake_encoder


class _Repo:
    def __init__(self, records=None, error=None):
        self.records = records or []
        self.error = error

    def load(self):
        if self.error is not None:
            raise self.error
        yield from self.records


def make_vm(records, repo=None, store=None, client=None, metrics=None) -> GalleryVM:
    pipeline = UploadPipeline(client or FakeNetworkClient(), encoder=fake_encoder, app_id="me")
    return GalleryVM(repo or _Repo(records), pipeline, photo_store=store, metrics=metrics)


class TestFetch:
    def test_refresh_loads_catalog(self, records):
        vm = make_vm(records)
        result = vm.refresh()
        assert result.ok
        assert vm.catalog.view() == tuple(records)
        assert vm.row_count == 3

    def test_fetch_failure_is_reported_not_raised(self, records):
        vm = make_vm(records, repo=_Repo(error=TransportFailure("offline")))
        result = vm.refresh()
        assert not result.ok
        assert isinstance(result.error, TransportFailure)
        assert vm.row_count == 0

    def test_decode_failure_keeps_previous_catalog(self, records):
        repo = _Repo(records)
        vm = make_vm(records, repo=repo)
        vm.refresh()
        repo.error = DecodeFailure("bad json")
        vm.refresh()
        assert vm.catalog.view() == tuple(records)

    def test_stale_fetch_is_dropped(self, records):
        vm = make_vm(records)
        first = vm.begin_fetch()
        second = vm.begin_fetch()
        stale = vm.fetch(first)
        fresh = vm.fetch(second)

        assert vm.apply_fetch(stale) is False
        assert vm.row_count == 0
        assert vm.apply_fetch(fresh) is True
        assert vm.row_count == 3

    def test_stale_failure_is_not_current(self, records):
        repo = _Repo(error=TransportFailure("offline"))
        vm = make_vm(records, repo=repo)
        first = vm.begin_fetch()
        stale = vm.fetch(first)
        repo.error = None
        fresh = vm.fetch(vm.begin_fetch())

        assert stale.error is not None
        assert vm.is_current(stale) is False
        assert vm.is_current(fresh) is True
        assert vm.apply_fetch(fresh) is True
        assert vm.row_count == 3

    def test_reload_clears_expansion(self, records):
        vm = make_vm(records)
        vm.refresh()
        vm.tap_row(1)
        vm.refresh()
        assert vm.layout.state == COLLAPSED


class TestSearchAndTap:
    def test_filtered_tap_expands_within_view(self, records, metrics):
        vm = make_vm(records, metrics=metrics)
        vm.refresh()
        vm.set_query("cat")
        assert [i.record for i in vm.items()] == [records[1]]

        before = vm.geometry().content_height
        assert vm.tap_row(0) == Expanded(0)
        assert vm.expanded_record == records[1]
        assert vm.geometry().content_height == before + metrics.detail_height

    def test_query_change_clears_expansion(self, records):
        vm = make_vm(records)
        vm.refresh()
        vm.tap_row(2)
        vm.set_query("dog")
        assert vm.expanded_record is None

    def test_clear_query_shows_everything(self, records):
        vm = make_vm(records)
        vm.refresh()
        vm.set_query("zzz")
        assert vm.row_count == 0
        vm.clear_query()
        assert vm.row_count == 3

    def test_tap_outside_view(self, records):
        vm = make_vm(records)
        vm.refresh()
        vm.set_query("cat")
        with pytest.raises(IndexError):
            vm.tap_row(1)


class TestSave:
    def test_store_and_upload_both_run(self, records):
        store = MagicMock()
        store.save.return_value = "/tmp/a.png"
        client = FakeNetworkClient()
        vm = make_vm(records, store=store, client=client)

        result = vm.save(records[0], b"img")

        store.save.assert_called_once_with(b"img")
        assert result.stored_path == "/tmp/a.png"
        assert result.upload.success
        assert client.posts[0].original_url == "http://x/1.png"

    def test_store_failure_does_not_block_upload(self, records):
        store = MagicMock()
        store.save.side_effect = OSError("disk full")
        vm = make_vm(records, store=store)

        result = vm.save(records[0], b"img")

        assert not result.stored
        assert "disk full" in result.store_error
        assert result.upload.success

    def test_upload_failure_keeps_local_copy(self, records):
        store = MagicMock()
        store.save.return_value = "/tmp/a.png"
        client = FakeNetworkClient(post_status=500)
        vm = make_vm(records, store=store, client=client)

        result = vm.save(records[2], b"img")

        assert result.stored_path == "/tmp/a.png"
        assert isinstance(result.upload, UploadResult)
        assert not result.upload.success
        assert result.upload.status_code == 500

    def test_without_store_only_uploads(self, records):
        vm = make_vm(records)
        result = vm.save(records[0], b"img")
        assert not result.stored
        assert result.upload.success


def test_image_vm_detail_labels(records):
    from app.viewmodels.image_vm import ImageVM

    item = ImageVM(records[0])
    assert item.title_text == "Title: Sunny Dog"
    assert item.description_text == "Description: A dog on the beach"
    assert item.image_url == "http://x/1.png"
