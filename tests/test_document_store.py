"""Tests for the document store and its backends."""

import json
import re

import pytest

from bizdocs import DocumentKind, Invoice, TaxMode
from bizdocs.domain.models.documents import Letter
from bizdocs.infrastructure.store import document_store as store_module
from bizdocs.infrastructure.store.backends import InMemoryBackend, JsonFileBackend, RedisBackend
from bizdocs.infrastructure.store.document_store import DocumentStore, build_backend, get_document_store


class _BrokenBackend(InMemoryBackend):
    def set(self, key, value):
        raise OSError("disk full")


class _FakeRedis:
    def __init__(self):
        self.data = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value

    def delete(self, key):
        self.data.pop(key, None)


# =====================================================================
# CRUD
# =====================================================================

class TestDocumentStore:
    """CRUD semantics on the in-memory backend."""

    def test_add_assigns_id_and_timestamps(self, memory_store, sample_invoice):
        saved = memory_store.add(DocumentKind.INVOICE, sample_invoice)

        assert re.fullmatch(r"\d{13}-[0-9a-f]{9}", saved.id)
        assert saved.id != sample_invoice.id
        assert saved.created_at == saved.updated_at
        assert memory_store.list("invoice") == [saved]

    def test_records_live_under_legacy_keys(self, memory_store, sample_invoice, sample_challan, sample_letter):
        memory_store.add("invoice", sample_invoice)
        memory_store.add("challan", sample_challan)
        memory_store.add("letter", sample_letter)

        backend = memory_store.backend
        for key in ("invoices", "challans", "letterPads"):
            assert len(json.loads(backend.get(key))) == 1

    def test_add_accepts_dicts(self, memory_store):
        saved = memory_store.add("letter", {"refNo": "L-1", "subject": "Hi"})
        assert isinstance(saved, Letter)
        assert saved.ref_no == "L-1"

    def test_update_merges_and_protects_identity(self, memory_store, sample_invoice):
        saved = memory_store.add("invoice", sample_invoice)
        updated = memory_store.update(
            "invoice", saved.id, {"customer_name": "ACME", "id": "hijack", "created_at": "2000-01-01T00:00:00"},
        )

        assert updated.customer_name == "ACME"
        assert updated.id == saved.id
        assert updated.created_at == saved.created_at
        assert updated.updated_at > saved.updated_at
        assert memory_store.get("invoice", saved.id) == updated

    def test_update_accepts_camel_case_keys(self, memory_store, sample_invoice):
        saved = memory_store.add("invoice", sample_invoice)
        updated = memory_store.update("invoice", saved.id, {"customerName": "NEW NAME", "gstType": "CGST+SGST"})

        assert updated.customer_name == "NEW NAME"
        assert updated.tax_mode is TaxMode.CGST_SGST
        assert memory_store.get("invoice", saved.id).customer_name == "NEW NAME"

    def test_update_rejects_unknown_keys(self, memory_store, sample_invoice):
        saved = memory_store.add("invoice", sample_invoice)

        assert memory_store.update("invoice", saved.id, {"customerName": "X", "bogus": 1}) is None
        assert memory_store.get("invoice", saved.id) == saved

    def test_update_unknown_id(self, memory_store):
        assert memory_store.update("invoice", "nope", {"customer_name": "x"}) is None

    def test_remove(self, memory_store, sample_invoice):
        saved = memory_store.add("invoice", sample_invoice)
        assert memory_store.remove("invoice", saved.id) is True
        assert memory_store.remove("invoice", saved.id) is False
        assert memory_store.get("invoice", saved.id) is None
        assert memory_store.list("invoice") == []

    def test_corrupt_value_lists_empty(self):
        store = DocumentStore(InMemoryBackend({"invoices": "{not json"}))
        assert store.list("invoice") == []

    def test_non_list_value_lists_empty(self):
        store = DocumentStore(InMemoryBackend({"invoices": json.dumps({"a": 1})}))
        assert store.list("invoice") == []

    def test_failed_write(self, sample_invoice):
        store = DocumentStore(_BrokenBackend())
        assert store.add("invoice", sample_invoice) is None
        assert store.list("invoice") == []

    def test_amounts_are_persisted(self, memory_store, sample_invoice):
        memory_store.add("invoice", sample_invoice)
        record = json.loads(memory_store.backend.get("invoices"))[0]
        assert record["items"][0]["amount"] == pytest.approx(1180)
        assert record["kind"] == "invoice"


# =====================================================================
# Backends
# =====================================================================

class TestBackends:
    """Backend behaviour and store wiring."""

    def test_json_file_round_trip(self, tmp_path, sample_invoice):
        path = tmp_path / "data" / "documents.json"
        saved = DocumentStore(JsonFileBackend(path)).add("invoice", sample_invoice)

        reopened = DocumentStore(JsonFileBackend(path))
        assert reopened.get("invoice", saved.id) == saved
        assert list(tmp_path.joinpath("data").iterdir()) == [path]

    def test_corrupt_file_degrades_to_empty(self, tmp_path, sample_invoice):
        path = tmp_path / "documents.json"
        path.write_text("{oops", encoding="utf-8")
        store = DocumentStore(JsonFileBackend(path))

        assert store.list("invoice") == []
        assert store.add("invoice", sample_invoice) is not None
        assert len(store.list("invoice")) == 1

    def test_file_delete(self, tmp_path):
        backend = JsonFileBackend(tmp_path / "kv.json")
        backend.set("a", "1")
        backend.delete("a")
        assert backend.get("a") is None

    def test_redis_backend_prefixes_keys(self):
        fake = _FakeRedis()
        backend = RedisBackend("", prefix="bizdocs:", client=fake)
        backend.set("invoices", "[]")
        assert fake.data == {"bizdocs:invoices": "[]"}
        assert backend.get("invoices") == "[]"
        backend.delete("invoices")
        assert backend.get("invoices") is None

    def test_build_backend(self, tmp_path):
        assert isinstance(build_backend("memory"), InMemoryBackend)
        assert isinstance(build_backend("FILE", path=str(tmp_path / "x.json")), JsonFileBackend)
        with pytest.raises(ValueError):
            build_backend("sqlite")

    def test_get_document_store_is_lazy_singleton(self, monkeypatch):
        monkeypatch.setattr(store_module, "document_store", None)
        monkeypatch.setattr(store_module.settings, "STORE_BACKEND", "memory")

        first = get_document_store()
        assert isinstance(first.backend, InMemoryBackend)
        assert get_document_store() is first

    def test_invoice_survives_store_round_trip(self, memory_store, sample_invoice):
        saved = memory_store.add("invoice", sample_invoice)
        assert isinstance(memory_store.get("invoice", saved.id), Invoice)
