from datetime import datetime, timedelta
from typing import Any, Callable
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from spotfeed.errors import ExpiredError, ForbiddenError, NotFoundError, ValidationError
from spotfeed.models.api.joints import JointResponse
from spotfeed.models.api.messages import MessageResponse, PostMessageRequest
from spotfeed.services.message_service import MessageService


class TestMessageService:
    """Unit tests for MessageService."""

    @pytest.fixture
    def service(self, mock_db: AsyncMock) -> MessageService:
        """MessageService instance."""
        return MessageService(mock_db)

    def _message(self, joint_id: Any, user_id: Any, now: datetime) -> MessageResponse:
        return MessageResponse(
            id=uuid4(),
            joint_id=joint_id,
            user_id=user_id,
            content="Hello everyone!",
            message_type="text",
            media_url=None,
            created_at=now,
        )

    @pytest.mark.asyncio
    async def test_post_message_success(
        self,
        service: MessageService,
        make_joint: Callable[..., JointResponse],
        make_member: Callable[..., Any],
        now: datetime,
    ) -> None:
        """Test posting a text message as a member of a live joint."""
        joint = make_joint()
        user_id = uuid4()
        message = self._message(joint.id, user_id, now)

        with patch.object(
            service.joint_repo, "get_by_id", AsyncMock(return_value=joint)
        ), patch.object(
            service.member_repo,
            "get_membership",
            AsyncMock(return_value=make_member(joint_id=joint.id, user_id=user_id)),
        ), patch.object(
            service.message_repo, "create_message", AsyncMock(return_value=message)
        ) as mock_create:
            result = await service.post_message(
                joint.id, user_id, "Hello everyone!", now=now
            )

        assert result is message
        args = mock_create.call_args.args
        assert args[:2] == (joint.id, user_id)
        assert isinstance(args[2], PostMessageRequest)
        assert args[2].content == "Hello everyone!"

    @pytest.mark.asyncio
    async def test_post_message_validation_runs_first(
        self, service: MessageService
    ) -> None:
        """Invalid content is rejected before the joint is looked up."""
        with patch.object(service.joint_repo, "get_by_id", AsyncMock()) as mock_get:
            with pytest.raises(ValidationError):
                await service.post_message(uuid4(), uuid4(), "")
            with pytest.raises(ValidationError):
                await service.post_message(uuid4(), uuid4(), "pic", message_type="image")

        mock_get.assert_not_called()

    @pytest.mark.asyncio
    async def test_post_message_joint_not_found(self, service: MessageService) -> None:
        with patch.object(service.joint_repo, "get_by_id", AsyncMock(return_value=None)):
            with pytest.raises(NotFoundError):
                await service.post_message(uuid4(), uuid4(), "hello")

    @pytest.mark.asyncio
    async def test_post_message_expired_joint(
        self,
        service: MessageService,
        make_joint: Callable[..., JointResponse],
        now: datetime,
    ) -> None:
        joint = make_joint(expires_at=now - timedelta(minutes=1))
        with patch.object(
            service.joint_repo, "get_by_id", AsyncMock(return_value=joint)
        ), patch.object(
            service.message_repo, "create_message", AsyncMock()
        ) as mock_create:
            with pytest.raises(ExpiredError):
                await service.post_message(joint.id, uuid4(), "hello", now=now)

        mock_create.assert_not_called()

    @pytest.mark.asyncio
    async def test_post_message_non_member(
        self,
        service: MessageService,
        make_joint: Callable[..., JointResponse],
        now: datetime,
    ) -> None:
        joint = make_joint()
        with patch.object(
            service.joint_repo, "get_by_id", AsyncMock(return_value=joint)
        ), patch.object(
            service.member_repo, "get_membership", AsyncMock(return_value=None)
        ):
            with pytest.raises(ForbiddenError):
                await service.post_message(joint.id, uuid4(), "hello", now=now)

    @pytest.mark.asyncio
    async def test_post_message_joint_deleted_concurrently(
        self,
        service: MessageService,
        mock_db: AsyncMock,
        make_joint: Callable[..., JointResponse],
        make_member: Callable[..., Any],
        integrity_error: Callable[..., Any],
        now: datetime,
    ) -> None:
        joint = make_joint()
        with patch.object(
            service.joint_repo, "get_by_id", AsyncMock(return_value=joint)
        ), patch.object(
            service.member_repo,
            "get_membership",
            AsyncMock(return_value=make_member(joint_id=joint.id)),
        ), patch.object(
            service.message_repo,
            "create_message",
            AsyncMock(side_effect=integrity_error("fk violation", "23503")),
        ):
            with pytest.raises(NotFoundError):
                await service.post_message(joint.id, uuid4(), "hello", now=now)

        mock_db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_list_messages(
        self,
        service: MessageService,
        make_joint: Callable[..., JointResponse],
        now: datetime,
    ) -> None:
        joint = make_joint()
        messages = [self._message(joint.id, uuid4(), now)]
        with patch.object(
            service.joint_repo, "get_by_id", AsyncMock(return_value=joint)
        ), patch.object(
            service.message_repo, "get_by_joint", AsyncMock(return_value=messages)
        ) as mock_get:
            result = await service.list_messages(joint.id, limit=20, before=now)

        assert result == messages
        mock_get.assert_awaited_once_with(joint.id, limit=20, before=now)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [0, -1, 1001])
    async def test_list_messages_invalid_limit(
        self, service: MessageService, limit: int
    ) -> None:
        with pytest.raises(ValidationError):
            await service.list_messages(uuid4(), limit=limit)

    @pytest.mark.asyncio
    async def test_get_message_not_found(self, service: MessageService) -> None:
        with patch.object(
            service.message_repo, "get_by_id", AsyncMock(return_value=None)
        ):
            with pytest.raises(NotFoundError):
                await service.get_message(uuid4())
