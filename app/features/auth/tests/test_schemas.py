"""Tests for auth schemas."""

import pytest
from pydantic import ValidationError

from app.features.auth.schemas import (
    RegisterRequest,
    UpdatePictureRequest,
    UserProfile,
)


def test_register_lowercases_email():
    data = RegisterRequest(name="Nok", email="  Nok@Shop.TEST ", password="longenough")

    assert data.email == "nok@shop.test"


@pytest.mark.parametrize("email", ["nok", "nok@", "nok@shop", "a b@shop.test"])
def test_register_rejects_bad_email(email: str):
    with pytest.raises(ValidationError):
        RegisterRequest(name="Nok", email=email, password="longenough")


def test_register_requires_eight_character_password():
    with pytest.raises(ValidationError):
        RegisterRequest(name="Nok", email="nok@shop.test", password="short")


def test_profile_serializes_picture_as_camel_case(customer):
    customer.profile_picture_url = "https://cdn.shop.test/nok.png"

    dumped = UserProfile.model_validate(customer).model_dump(by_alias=True)

    assert dumped["profilePicture"] == "https://cdn.shop.test/nok.png"
    assert "profile_picture_url" not in dumped


def test_profile_revalidates_from_its_own_dump(customer):
    """Response models are re-validated from their by-alias dump."""
    customer.profile_picture_url = "https://cdn.shop.test/nok.png"
    dumped = UserProfile.model_validate(customer).model_dump(by_alias=True)

    assert UserProfile.model_validate(dumped).profile_picture == "https://cdn.shop.test/nok.png"


def test_update_picture_accepts_camel_case():
    request = UpdatePictureRequest.model_validate({"profilePicture": "p.png"})

    assert request.profile_picture == "p.png"
