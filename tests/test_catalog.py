"""
==============================================================================
Catalog Operation Tests
==============================================================================

Tests for create, sell, bulk price update and query operations.

==============================================================================
"""

import json
import threading
from datetime import datetime

import pytest

from app.catalog.catalog import ProductCatalog
from app.catalog.categories import ALLOWED_CATEGORIES
from app.catalog.store import CatalogStore
from app.core.exceptions import AppException


FOOD, DRINKS, HOUSEHOLD, CLOTHING = ALLOWED_CATEGORIES


class TestCatalogStore:
    """Tests for the in-memory store."""
    
    def test_ids_start_at_one_and_increase(self):
        """Test id sequence."""
        store = CatalogStore()
        assert [store.next_id() for _ in range(3)] == [1, 2, 3]
    
    def test_all_returns_copy(self, catalog: ProductCatalog, rice):
        """Test callers cannot mutate the collection through all()."""
        products = catalog.store.all()
        products.clear()
        assert catalog.store.count() == 1
    
    def test_lookups_wait_for_lock_holder(self, catalog: ProductCatalog, rice):
        """Test find_by_id and count block while another thread holds the lock."""
        store = catalog.store
        held = threading.Event()
        release = threading.Event()
        answers = []
        
        def holder():
            with store.lock:
                held.set()
                release.wait(5)
        
        def reader():
            answers.append((store.find_by_id(rice.id), store.count()))
        
        holder_thread = threading.Thread(target=holder)
        holder_thread.start()
        held.wait(5)
        
        reader_thread = threading.Thread(target=reader)
        reader_thread.start()
        reader_thread.join(0.2)
        assert answers == []
        
        release.set()
        reader_thread.join(5)
        holder_thread.join(5)
        assert answers == [(rice, 1)]


class TestCreate:
    """Tests for product creation."""
    
    def test_create_trims_and_stamps(self, catalog: ProductCatalog, product_data):
        """Test stored record fields."""
        product = catalog.create(product_data(name="  Rice  ", sku=" RICE-1 ", category=f" {FOOD} "))
        
        assert product.id == 1
        assert product.name == "Rice"
        assert product.sku == "RICE-1"
        assert product.category == FOOD
        
        created_at = product.model_dump(by_alias=True, mode="json")["createdAt"]
        assert created_at.endswith("Z")
        parsed = datetime.fromisoformat(created_at.replace("Z", "+00:00"))
        assert abs((parsed - product.created_at).total_seconds()) < 0.001
    
    def test_ids_strictly_increase(self, catalog: ProductCatalog, product_data):
        """Test every new product gets a larger id."""
        ids = [catalog.create(product_data(sku=f"SKU-{n}")).id for n in range(5)]
        assert ids == sorted(ids)
        assert len(set(ids)) == 5
    
    def test_duplicate_sku_rejected(self, catalog: ProductCatalog, rice, product_data):
        """Test second product with the same sku."""
        with pytest.raises(AppException) as exc_info:
            catalog.create(product_data(name="Other Rice"))
        
        assert exc_info.value.code == "VALIDATION_ERROR"
        assert exc_info.value.errors == ["SKU already exists"]
        assert catalog.store.count() == 1
    
    def test_sku_uniqueness_is_case_sensitive(self, catalog: ProductCatalog, rice, product_data):
        """Test sku differing only in case is accepted."""
        product = catalog.create(product_data(sku="rice-005"))
        assert product.id == 2
    
    def test_rejected_create_does_not_consume_id(self, catalog: ProductCatalog, product_data):
        """Test failed validation leaves the store untouched."""
        with pytest.raises(AppException):
            catalog.create(product_data(sku="ab"))
        
        assert catalog.store.count() == 0
        assert catalog.create(product_data()).id == 1
    
    def test_integer_price_stays_integer(self, catalog: ProductCatalog, product_data):
        """Test numbers keep their JSON type."""
        data = catalog.create(product_data(price=10, stock=2.5)).model_dump(by_alias=True, mode="json")
        assert data["price"] == 10 and isinstance(data["price"], int)
        assert data["stock"] == 2.5
    
    def test_concurrent_creates_with_same_sku(self, catalog: ProductCatalog, product_data):
        """Test sku check and insert are atomic across threads."""
        workers = 8
        barrier = threading.Barrier(workers)
        created = []
        rejected = []
        
        def worker(n):
            barrier.wait()
            try:
                created.append(catalog.create(product_data(name=f"Rice {n}")))
            except AppException as e:
                rejected.append((e.code, e.errors))
        
        threads = [threading.Thread(target=worker, args=(n,)) for n in range(workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        
        assert len(created) == 1
        assert rejected == [("VALIDATION_ERROR", ["SKU already exists"])] * (workers - 1)
        assert catalog.store.count() == 1


class TestSell:
    """Tests for the sale operation."""
    
    def test_insufficient_stock_leaves_stock(self, catalog: ProductCatalog, cola):
        """Test selling more than available."""
        with pytest.raises(AppException) as exc_info:
            catalog.sell({"productId": cola.id, "quantity": 5})
        
        assert exc_info.value.code == "INSUFFICIENT_STOCK"
        assert "3" in exc_info.value.message
        assert exc_info.value.details == {"available": 3}
        assert cola.stock == 3
    
    def test_sell_entire_stock(self, catalog: ProductCatalog, cola):
        """Test selling exactly the available stock."""
        result = catalog.sell({"productId": cola.id, "quantity": 3})
        
        assert cola.stock == 0
        assert result["product"]["remainingStock"] == 0
        assert result["soldQuantity"] == 3
        assert result["product"]["sku"] == "COLA-330"
    
    def test_quantity_checked_before_product_id(self, catalog: ProductCatalog):
        """Test first failing check wins."""
        with pytest.raises(AppException) as exc_info:
            catalog.sell({"quantity": 0})
        assert exc_info.value.code == "INVALID_QUANTITY"
    
    def test_missing_product_id(self, catalog: ProductCatalog):
        """Test absent productId."""
        with pytest.raises(AppException) as exc_info:
            catalog.sell({"quantity": 1, "productId": None})
        assert exc_info.value.code == "MISSING_FIELD"
    
    @pytest.mark.parametrize("product_id", [999, "1", True, 1.5])
    def test_unknown_product(self, catalog: ProductCatalog, rice, product_id):
        """Test ids that match no product, including text and bool ids."""
        with pytest.raises(AppException) as exc_info:
            catalog.sell({"productId": product_id, "quantity": 1})
        assert exc_info.value.status_code == 404
        assert rice.stock == 20
    
    def test_fractional_sale(self, catalog: ProductCatalog, product_data):
        """Test fractional quantities."""
        product = catalog.create(product_data(stock=2.5))
        result = catalog.sell({"productId": product.id, "quantity": 0.5})
        assert result["product"]["remainingStock"] == 2.0
    
    def test_concurrent_sales_never_oversell(self, catalog: ProductCatalog, product_data):
        """Test stock check and decrement are atomic."""
        product = catalog.create(product_data(stock=50))
        failures = []
        
        def worker():
            for _ in range(10):
                try:
                    catalog.sell({"productId": product.id, "quantity": 1})
                except AppException as e:
                    failures.append(e.code)
        
        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        
        assert product.stock == 0
        assert len(failures) == 30
        assert set(failures) == {"INSUFFICIENT_STOCK"}


class TestBulkPriceUpdate:
    """Tests for bulk price updates."""
    
    def test_same_product_twice_applies_in_order(self, catalog: ProductCatalog, rice):
        """Test later entries see earlier changes."""
        result = catalog.bulk_price_update({"updates": [
            {"productId": rice.id, "newPrice": 10},
            {"productId": rice.id, "newPrice": 20},
        ]})
        
        assert rice.price == 20
        success = result["results"]["success"]
        assert [s["index"] for s in success] == [0, 1]
        assert success[0]["oldPrice"] == 189
        assert success[1]["oldPrice"] == 10
        assert success[1]["newPrice"] == 20
    
    def test_partial_success(self, catalog: ProductCatalog, rice):
        """Test one valid and one unknown entry."""
        result = catalog.bulk_price_update({"updates": [
            {"productId": rice.id, "newPrice": 199},
            {"productId": 404, "newPrice": 50},
        ]})
        
        assert result["summary"] == {"total": 2, "successCount": 1, "failedCount": 1}
        assert result["results"]["failed"] == [{"index": 1, "productId": 404, "reason": "not found"}]
        assert rice.price == 199
    
    def test_entry_failure_reasons(self, catalog: ProductCatalog, rice):
        """Test each per-entry failure kind, in input order."""
        result = catalog.bulk_price_update({"updates": [
            {"newPrice": 10},
            {"productId": rice.id, "newPrice": 0},
            {"productId": rice.id, "newPrice": "12"},
            "not-an-object",
            {"productId": 77, "newPrice": 5},
        ]})
        
        failed = result["results"]["failed"]
        assert [(f["index"], f["reason"]) for f in failed] == [
            (0, "missing productId"),
            (1, "invalid newPrice"),
            (2, "invalid newPrice"),
            (3, "missing productId"),
            (4, "not found"),
        ]
        assert result["summary"]["successCount"] == 0
        assert rice.price == 189
    
    @pytest.mark.parametrize("payload, message", [
        ({}, "updates must be an array"),
        ({"updates": {"productId": 1}}, "updates must be an array"),
        ({"updates": []}, "updates must contain at least one entry"),
        (None, "updates must be an array"),
    ])
    def test_invalid_envelope(self, catalog: ProductCatalog, payload, message):
        """Test whole-batch rejections."""
        with pytest.raises(AppException) as exc_info:
            catalog.bulk_price_update(payload)
        assert exc_info.value.code == "INVALID_UPDATES_PAYLOAD"
        assert exc_info.value.message == message
    
    def test_concurrent_batches_on_one_product(self, catalog: ProductCatalog, rice):
        """Test each batch applies as a unit and old prices chain across batches."""
        workers = 6
        barrier = threading.Barrier(workers)
        results = []
        
        def worker(n):
            updates = [{"productId": rice.id, "newPrice": n * 100 + step} for step in (1, 2, 3)]
            barrier.wait()
            results.append(catalog.bulk_price_update({"updates": updates}))
        
        threads = [threading.Thread(target=worker, args=(n,)) for n in range(1, workers + 1)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        
        assert len(results) == workers
        first_old_prices = []
        last_new_prices = []
        for result in results:
            success = result["results"]["success"]
            assert result["summary"]["successCount"] == 3
            for previous, current in zip(success, success[1:]):
                assert current["oldPrice"] == previous["newPrice"]
            first_old_prices.append(success[0]["oldPrice"])
            last_new_prices.append(success[-1]["newPrice"])
        
        assert rice.price in last_new_prices
        written_before = {189} | set(last_new_prices)
        written_before.discard(rice.price)
        assert sorted(first_old_prices) == sorted(written_before)


class TestQueries:
    """Tests for list, search and lookup."""
    
    def test_list_all_and_by_category(self, catalog: ProductCatalog, rice, cola):
        """Test category filter."""
        assert [p.id for p in catalog.list_products()] == [rice.id, cola.id]
        assert catalog.list_products("") == catalog.list_products()
        assert [p.id for p in catalog.list_products(DRINKS)] == [cola.id]
        assert catalog.list_products(CLOTHING) == []
    
    def test_unknown_category_filter_rejected(self, catalog: ProductCatalog, rice):
        """Test strict filter policy."""
        with pytest.raises(AppException) as exc_info:
            catalog.list_products("toys")
        assert exc_info.value.code == "INVALID_CATEGORY_FILTER"
        assert HOUSEHOLD in exc_info.value.message
    
    def test_search_matches_sku_only(self, catalog: ProductCatalog, rice, cola):
        """Test keyword found in sku but not name, case-insensitive."""
        assert [p.id for p in catalog.search("cola-3")] == [cola.id]
        assert [p.id for p in catalog.search("JASMINE")] == [rice.id]
    
    @pytest.mark.parametrize("keyword", [None, "", "   "])
    def test_search_requires_keyword(self, catalog: ProductCatalog, keyword):
        """Test blank keyword."""
        with pytest.raises(AppException) as exc_info:
            catalog.search(keyword)
        assert exc_info.value.code == "MISSING_KEYWORD"
    
    def test_get_by_id(self, catalog: ProductCatalog, rice):
        """Test lookup from path text."""
        assert catalog.get_by_id(str(rice.id)) is rice
    
    @pytest.mark.parametrize("raw_id", ["abc", "999", "", "1x"])
    def test_get_by_id_not_found(self, catalog: ProductCatalog, rice, raw_id):
        """Test unknown and non-numeric ids."""
        with pytest.raises(AppException) as exc_info:
            catalog.get_by_id(raw_id)
        assert exc_info.value.code == "PRODUCT_NOT_FOUND"
    
    def test_stats(self, catalog: ProductCatalog, rice, cola):
        """Test statistics."""
        stats = catalog.get_stats()
        assert stats["total_products"] == 2
        assert stats["total_stock"] == 23
        assert stats["categories"][FOOD] == 1
        assert stats["categories"][CLOTHING] == 0


class TestSeed:
    """Tests for seeding from a JSON file."""
    
    def test_load_seed_skips_invalid(self, tmp_path, product_data):
        """Test valid entries created and invalid ones skipped."""
        seed = tmp_path / "products.json"
        seed.write_text(json.dumps([
            product_data(),
            product_data(),
            product_data(sku="TEA-01", name="Green Tea", category=DRINKS),
            {"name": "broken"},
        ]), encoding="utf-8")
        
        catalog = ProductCatalog()
        
        assert catalog.load_seed(seed) == 2
        assert [p.sku for p in catalog.list_products()] == ["RICE-005", "TEA-01"]
    
    def test_load_seed_requires_array(self, tmp_path):
        """Test non-array seed content."""
        seed = tmp_path / "products.json"
        seed.write_text('{"name": "x"}', encoding="utf-8")
        assert ProductCatalog().load_seed(seed) == 0
