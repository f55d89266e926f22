"""
Service catalog loading and service resolution.
"""
from decimal import Decimal

import pytest

from clearview_pricing.engine import CatalogError, ServiceCatalog, ServiceEntry, UnknownService, resolve_service
from clearview_pricing.engine.catalog import normalize_service_id


@pytest.fixture
def catalog():
    return ServiceCatalog([
        ServiceEntry(id=1, name="Window Cleaning", price_per_unit=Decimal("7"), unit="window"),
        ServiceEntry(id=2, name="Gutter Cleaning", price_per_unit=Decimal("150"), unit="job"),
        ServiceEntry(id="roof-moss", name="Roof Moss Removal", price_per_unit=Decimal("0.85"), unit="sq_ft"),
    ])


@pytest.mark.parametrize("service_id, expected", [
    (1, "Window Cleaning"),
    ("1", "Window Cleaning"),
    (" 2 ", "Gutter Cleaning"),
    (2.0, "Gutter Cleaning"),
    ("roof-moss", "Roof Moss Removal"),
    ("2.0", "Gutter Cleaning"),
    ("1e0", "Window Cleaning"),
    (" 2.00 ", "Gutter Cleaning"),
])
def test_resolve_service(catalog, service_id, expected):
    assert resolve_service(catalog, service_id).name == expected


@pytest.mark.parametrize("service_id", [None, "", "   ", 0, 3, 99, -1, 2.5, "2.5", "1e30", "NaN", True, "Roof-Moss", "window"])
def test_resolve_unknown_service(catalog, service_id):
    with pytest.raises(UnknownService):
        resolve_service(catalog, service_id)


def test_normalize_service_id():
    assert normalize_service_id("007") == "7"
    assert normalize_service_id(7) == "7"
    assert normalize_service_id(False) is None
    assert normalize_service_id(float("nan")) is None


def test_catalog_is_ordered_and_read_only(catalog):
    assert [e.id for e in catalog] == [1, 2, "roof-moss"]
    assert isinstance(catalog.entries, tuple)
    with pytest.raises(AttributeError):
        catalog.entries[0].price_per_unit = Decimal("1")


def test_duplicate_ids_rejected():
    with pytest.raises(CatalogError):
        ServiceCatalog([
            ServiceEntry(id=1, name="A", price_per_unit=Decimal("1")),
            ServiceEntry(id="1", name="B", price_per_unit=Decimal("2")),
        ])


@pytest.mark.parametrize("price", ["NaN", "Infinity", "-Infinity"])
def test_non_finite_price_rejected(price):
    with pytest.raises(CatalogError):
        ServiceCatalog([ServiceEntry(id=1, name="A", price_per_unit=Decimal(price))])


def test_from_csv_nan_price(tmp_path):
    path = tmp_path / "services.csv"
    path.write_text("id,name,price_per_unit\n1,Window Cleaning,NaN\n", encoding="utf-8")

    with pytest.raises(CatalogError, match="Non-finite"):
        ServiceCatalog.from_csv(path)


def test_negative_price_rejected():
    with pytest.raises(CatalogError):
        ServiceCatalog([ServiceEntry(id=1, name="A", price_per_unit=Decimal("-1"))])


def test_from_csv(tmp_path):
    path = tmp_path / "services.csv"
    path.write_text(
        "id,name,price_per_unit,unit,category\n"
        "1,Window Cleaning,7,window,window\n"
        "skylights,Skylight Cleaning,12.50,skylight,\n",
        encoding="utf-8",
    )

    catalog = ServiceCatalog.from_csv(path)

    assert len(catalog) == 2
    windows = catalog.get(1)
    assert windows.price_per_unit == Decimal("7")
    assert windows.category == "window"
    skylights = catalog.get("skylights")
    assert skylights.price_per_unit == Decimal("12.50")
    assert skylights.category is None


def test_from_csv_missing_columns(tmp_path):
    path = tmp_path / "services.csv"
    path.write_text("id,name\n1,Window Cleaning\n", encoding="utf-8")

    with pytest.raises(CatalogError, match="price_per_unit"):
        ServiceCatalog.from_csv(path)


def test_from_csv_bad_price(tmp_path):
    path = tmp_path / "services.csv"
    path.write_text("id,name,price_per_unit\n1,Window Cleaning,seven\n", encoding="utf-8")

    with pytest.raises(CatalogError):
        ServiceCatalog.from_csv(path)


def test_from_csv_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ServiceCatalog.from_csv(tmp_path / "nope.csv")


def test_to_records(catalog):
    records = catalog.to_records()

    assert records[0] == {
        "id": 1,
        "name": "Window Cleaning",
        "pricePerUnit": 7.0,
        "unitLabel": "window",
        "category": None,
    }
