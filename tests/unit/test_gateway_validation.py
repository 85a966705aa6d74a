"""Unit tests for gateway payload validation."""

from sokolink.gateway.validation import validate_records
from sokolink.models.schemas import BusinessDraft, CommunityItemDraft, ItemCondition


class TestValidateRecords:
    """Test per-record validation of model output."""

    def test_valid_list(self):
        result = validate_records(
            [{"name": "Kiosk", "address": "Main St", "category": "Shop"}],
            BusinessDraft,
        )

        assert result.ok is True
        assert result.rejected == []
        assert result.records[0].category.value == "shop"

    def test_non_list_payload_fails(self):
        result = validate_records("just text", BusinessDraft)

        assert result.ok is False
        assert result.records == []
        assert "str" in result.error

    def test_invalid_records_are_rejected_individually(self):
        payload = [
            {"title": "TV", "price": "KES 1,000", "condition": "New"},
            {"title": "Broken", "price": "KES 10", "condition": "Destroyed"},
            {"description": "no title"},
        ]

        result = validate_records(payload, CommunityItemDraft)

        assert result.ok is True
        assert len(result.records) == 1
        assert result.records[0].condition == ItemCondition.NEW
        assert [r.index for r in result.rejected] == [1, 2]
        assert result.rejected[0].errors

    def test_single_list_wrapper_is_unwrapped(self):
        result = validate_records(
            {"businesses": [{"name": "Kiosk", "address": "Main St"}]},
            BusinessDraft,
        )

        assert result.ok is True
        assert len(result.records) == 1

    def test_dict_without_single_list_fails(self):
        result = validate_records({"a": [], "b": []}, BusinessDraft)

        assert result.ok is False

    def test_camel_case_keys_and_numeric_price(self):
        result = validate_records(
            [{
                "title": "Fridge",
                "price": 8000,
                "condition": "Used - Good",
                "sellerName": "Otieno",
                "category": "Appliances",
            }],
            CommunityItemDraft,
        )

        item = result.records[0]
        assert item.price == "8000"
        assert item.seller_name == "Otieno"

    def test_null_optional_business_fields(self):
        result = validate_records(
            [{
                "name": "Salon X",
                "address": "Moi Ave",
                "phone": None,
                "socialMedia": {"instagram": None, "whatsapp": "+254700000000"},
            }],
            BusinessDraft,
        )

        business = result.records[0]
        assert business.phone == ""
        assert business.social_media.whatsapp == "+254700000000"
