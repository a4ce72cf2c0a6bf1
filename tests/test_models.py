from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from pydantic import ValidationError

from spotfeed.models.api.joints import CreateJointRequest, NearbyJointsQuery
from spotfeed.models.api.messages import PostMessageRequest
from spotfeed.models.api.otp_codes import OtpCodeResponse, VerifyOtpRequest
from spotfeed.models.api.users import RegisterUserRequest, UpdateProfileRequest


class TestCreateJointRequest:
    """Validation rules for new joints."""

    def test_defaults(self) -> None:
        request = CreateJointRequest(name="Coffee", latitude=40.7, longitude=-74.0)
        assert request.radius == 500
        assert request.ttl == timedelta(hours=6)
        assert request.joint_type == "public"
        assert request.visibility == "visible"

    @pytest.mark.parametrize(
        "latitude,longitude", [(91.0, 0.0), (-90.5, 0.0), (0.0, 181.0), (0.0, -180.1)]
    )
    def test_rejects_out_of_range_coordinates(
        self, latitude: float, longitude: float
    ) -> None:
        with pytest.raises(ValidationError):
            CreateJointRequest(name="Coffee", latitude=latitude, longitude=longitude)

    def test_accepts_coordinate_bounds(self) -> None:
        request = CreateJointRequest(name="Pole", latitude=90.0, longitude=-180.0)
        assert request.latitude == 90.0

    @pytest.mark.parametrize("ttl", [timedelta(0), timedelta(minutes=-5)])
    def test_rejects_non_positive_ttl(self, ttl: timedelta) -> None:
        with pytest.raises(ValidationError):
            CreateJointRequest(name="Coffee", latitude=0.0, longitude=0.0, ttl=ttl)

    def test_rejects_non_positive_radius(self) -> None:
        with pytest.raises(ValidationError):
            CreateJointRequest(name="Coffee", latitude=0.0, longitude=0.0, radius=0)

    def test_rejects_short_name_and_unknown_type(self) -> None:
        with pytest.raises(ValidationError):
            CreateJointRequest(name="ab", latitude=0.0, longitude=0.0)
        with pytest.raises(ValidationError):
            CreateJointRequest(
                name="Coffee", latitude=0.0, longitude=0.0, joint_type="secret"
            )


class TestNearbyJointsQuery:
    def test_max_distance_bounds(self) -> None:
        assert NearbyJointsQuery(latitude=0, longitude=0, max_distance=10000)
        with pytest.raises(ValidationError):
            NearbyJointsQuery(latitude=0, longitude=0, max_distance=0)
        with pytest.raises(ValidationError):
            NearbyJointsQuery(latitude=0, longitude=0, max_distance=10001)


class TestPostMessageRequest:
    """Validation rules for chat messages."""

    def test_text_message(self) -> None:
        request = PostMessageRequest(content="Hello!")
        assert request.message_type == "text"
        assert request.media_url is None

    def test_empty_content_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PostMessageRequest(content="")

    def test_media_message_requires_media_url(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            PostMessageRequest(content="look", message_type="image")
        assert "media_url is required" in str(exc_info.value)

    def test_media_message_with_url(self) -> None:
        request = PostMessageRequest(
            content="look",
            message_type="image",
            media_url="https://cdn.example.com/a.jpg",
        )
        assert request.media_url == "https://cdn.example.com/a.jpg"

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PostMessageRequest(content="hi", message_type="sticker")


class TestUserRequests:
    def test_email_is_normalized(self) -> None:
        request = RegisterUserRequest(
            username="JohnDoe",
            email="  John@Example.COM ",
            password_hash="$2b$12$hash",
            is_18_plus=True,
        )
        assert request.email == "john@example.com"
        assert request.username == "JohnDoe"

    def test_must_be_adult(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            RegisterUserRequest(
                username="johndoe",
                email="john@example.com",
                password_hash="$2b$12$hash",
                is_18_plus=False,
            )
        assert "18 or older" in str(exc_info.value)

    def test_invalid_email_and_long_phone(self) -> None:
        with pytest.raises(ValidationError):
            RegisterUserRequest(
                username="johndoe",
                email="not-an-email",
                password_hash="x",
                is_18_plus=True,
            )
        with pytest.raises(ValidationError):
            UpdateProfileRequest(phone_number="1" * 21)


class TestOtpModels:
    @pytest.mark.parametrize("code", ["12345", "1234567", "12a456", ""])
    def test_code_must_be_six_digits(self, code: str) -> None:
        with pytest.raises(ValidationError):
            VerifyOtpRequest(email="john@example.com", code=code)

    def test_is_valid(self) -> None:
        now = datetime(2025, 10, 19, 12, 0, tzinfo=timezone.utc)
        otp = OtpCodeResponse(
            id=uuid4(),
            user_id=uuid4(),
            code="012345",
            expires_at=now + timedelta(minutes=10),
            is_used=False,
            created_at=now,
        )
        assert otp.is_valid(now)
        assert not otp.is_valid(now + timedelta(minutes=10))
        assert not otp.model_copy(update={"is_used": True}).is_valid(now)
