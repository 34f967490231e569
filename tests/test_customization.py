import pytest
from pydantic import ValidationError

from storefront.models.customization import Customization, CustomPart, DesignPosition
from storefront.pricing import get_applied_positions, get_custom_fee


def test_applied_is_derived_from_content():
    assert CustomPart(image_url="https://cdn.test/a.png").applied is True
    assert CustomPart(text="NOMOR 10").applied is True
    assert CustomPart(text="   ").applied is False
    assert CustomPart().applied is False


def test_client_supplied_applied_flag_is_ignored():
    part = CustomPart.model_validate({"applied": True, "text": "", "image_url": None})

    assert part.applied is False


def test_blank_image_url_does_not_count_as_image():
    part = CustomPart(image_url="  ")

    assert part.image_url is None
    assert part.has_image is False


def test_toggled_position_without_content_adds_no_fee():
    customization = Customization.model_validate({
        "parts": {
            "front": {"image_url": "https://cdn.test/logo.png"},
            "back": {"applied": True, "text": ""},
        }
    })

    assert get_applied_positions(customization) == frozenset({DesignPosition.FRONT})
    assert get_custom_fee(customization) == 25_000


def test_every_position_applied():
    customization = Customization(parts={
        position: CustomPart(text=position.value) for position in DesignPosition
    })

    assert get_custom_fee(customization) == 4 * 25_000


def test_no_customization_has_no_fee():
    assert get_applied_positions(None) == frozenset()
    assert get_custom_fee(None) == 0
    assert get_custom_fee(Customization()) == 0


@pytest.mark.parametrize("scale, expected", [(0.1, 0.5), (1.25, 1.25), (9.0, 2.0)])
def test_scale_is_clamped(scale, expected):
    assert CustomPart(text="A", scale=scale).scale == expected


def test_unknown_position_is_rejected():
    with pytest.raises(ValidationError):
        Customization.model_validate({"parts": {"collar": {"text": "X"}}})


def test_unknown_part_field_is_rejected():
    with pytest.raises(ValidationError):
        CustomPart.model_validate({"text": "X", "font": "Comic Sans"})


def test_missing_part_is_blank():
    customization = Customization(parts={"front": {"text": "EUY"}})

    assert customization.part(DesignPosition.BACK).applied is False
    assert customization.part(DesignPosition.FRONT).text == "EUY"
