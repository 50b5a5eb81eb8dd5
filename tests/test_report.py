"""
tests/test_report.py

Result aggregator and the report/property contracts.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from pipeline.errors import InvalidListingUrlError, ListingFetchError
from pipeline.report import aggregate
from scrapers.models import Property, ScrapingReport


def _prop(i: int) -> Property:
    return Property(
        id=str(i),
        title=f"Imóvel {i}",
        price="R$ 1.000,00",
        price_value=1000.0,
        image="/placeholder.svg",
        link=f"https://www.dfimoveis.com.br/imovel/{i}",
        latitude=-15.8,
        longitude=-47.9,
    )


class TestAggregate:
    def test_success_with_properties(self) -> None:
        report = aggregate([_prop(1), _prop(2)], ["x: no valid coordinates"])
        assert report.success is True
        assert report.total == 2 == len(report.properties)
        assert report.errors == ["x: no valid coordinates"]

    def test_failure_without_properties(self) -> None:
        report = aggregate([], ["no listings found"])
        assert report.to_dict() == {
            "success": False,
            "properties": [],
            "total": 0,
            "errors": ["no listings found"],
        }

    @pytest.mark.parametrize("n_errors", [0, 9, 10, 11, 250])
    def test_errors_capped_to_first_ten(self, n_errors: int) -> None:
        errors = [f"url-{i}: HTTP 500" for i in range(n_errors)]
        report = aggregate([_prop(1)], errors)
        assert len(report.errors) == min(n_errors, 10)
        assert report.errors == errors[:10]

    def test_input_lists_not_shared(self) -> None:
        props, errors = [_prop(1)], ["e"]
        report = aggregate(props, errors)
        props.append(_prop(2))
        errors.append("f")
        assert report.total == 1
        assert report.errors == ["e"]


class TestContracts:
    def test_total_must_match(self) -> None:
        with pytest.raises(ValidationError):
            ScrapingReport(success=True, properties=[_prop(1)], total=2, errors=[])

    def test_too_many_errors_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ScrapingReport(success=False, properties=[], total=0, errors=["e"] * 11)

    def test_property_rejects_zero_coordinate(self) -> None:
        with pytest.raises(ValidationError):
            Property(id="1", title="t", price="inquire", image="i", link="l", latitude=0, longitude=-47.9)

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_property_rejects_non_finite_coordinate(self, value: float) -> None:
        with pytest.raises(ValidationError):
            Property(id="1", title="t", price="inquire", image="i", link="l", latitude=value, longitude=-47.9)

    def test_property_is_frozen(self) -> None:
        prop = _prop(1)
        with pytest.raises(ValidationError):
            prop.latitude = -10.0  # type: ignore[misc]

    def test_property_serializes_camel_case(self) -> None:
        data = _prop(7).to_dict()
        assert data["priceValue"] == 1000.0
        assert "price_value" not in data

    def test_fatal_errors_to_report(self) -> None:
        for exc in (InvalidListingUrlError("invalid url"), ListingFetchError("failed to fetch listing page: boom")):
            report = exc.to_report()
            assert report.success is False
            assert report.total == 0
            assert report.errors == [str(exc)]
