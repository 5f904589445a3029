"""Tests for location schemas and coordinate keys."""

import pytest
from pydantic import TypeAdapter, ValidationError

from cableindex.models import LocationTemplate, coords_key
from cableindex.schemas import DatacentreLocationCreate, DomesticLocationCreate, LocationCreate

adapter = TypeAdapter(LocationCreate)


class TestLocationCreate:
    """Tests for the template-tagged location union."""

    def test_missing_template_is_datacentre(self):
        """Older clients that omit template_type get a datacentre location."""
        location = adapter.validate_python({"floor": "1", "suite": "A", "row": "2", "rack": "3"})
        assert isinstance(location, DatacentreLocationCreate)
        assert location.template_type == "DATACENTRE"

    def test_datacentre_requires_rack(self):
        with pytest.raises(ValidationError):
            adapter.validate_python({"template_type": "DATACENTRE", "floor": "1", "suite": "A"})

    def test_datacentre_rejects_area(self):
        with pytest.raises(ValidationError):
            adapter.validate_python(
                {"floor": "1", "suite": "A", "row": "2", "rack": "3", "area": "Loft"}
            )

    def test_datacentre_blank_area_allowed(self):
        location = adapter.validate_python(
            {"floor": "1", "suite": "A", "row": "2", "rack": "3", "area": "  "}
        )
        assert location.area is None

    def test_domestic(self):
        location = adapter.validate_python(
            {"template_type": "DOMESTIC", "floor": "Ground", "area": " Kitchen "}
        )
        assert isinstance(location, DomesticLocationCreate)
        assert location.area == "Kitchen"
        assert location.rack is None

    def test_domestic_rejects_rack(self):
        with pytest.raises(ValidationError):
            adapter.validate_python(
                {"template_type": "DOMESTIC", "floor": "1", "area": "Loft", "rack": "3"}
            )

    def test_unknown_template(self):
        with pytest.raises(ValidationError):
            adapter.validate_python({"template_type": "OFFICE", "floor": "1"})

    def test_blank_label_is_none(self):
        location = adapter.validate_python(
            {"floor": "1", "suite": "A", "row": "2", "rack": "3", "label": "   "}
        )
        assert location.label is None


class TestCoordsKey:
    """Tests for the positional uniqueness key."""

    def test_datacentre_key_ignores_area(self):
        key = coords_key(LocationTemplate.DATACENTRE, "1", "A", "02", "R3", area="x")
        assert key == "DATACENTRE|1|A|02|R3"

    def test_domestic_key(self):
        assert coords_key(LocationTemplate.DOMESTIC, "Ground", area="Loft") == "DOMESTIC|Ground|Loft"

    def test_whitespace_is_trimmed(self):
        assert coords_key(LocationTemplate.DOMESTIC, " 1 ", area=" Loft ") == "DOMESTIC|1|Loft"
