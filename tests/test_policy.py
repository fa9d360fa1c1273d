"""
Ticketeer - Authorization Policy Tests
======================================

Tests for can_perform(), independent of Discord and the database.
"""

import pytest

from ticketeer.core.database import TICKET_STATUS_OPEN
from ticketeer.core.errors import (
    CannotRemoveOwnerError,
    ForbiddenError,
    NotATicketChannelError,
    NotConfiguredError,
)
from ticketeer.services.tickets import ActionKind, Actor, can_perform, is_staff

from conftest import GUILD_ID, OWNER_ID, SUPPORT_ROLE_ID, GUEST_ID


CONFIG = {
    "guild_id": GUILD_ID,
    "support_role_id": SUPPORT_ROLE_ID,
    "closed_category_id": None,
    "log_channel_id": None,
    "panel_color": "#FFC0CB",
}

TICKET = {
    "channel_id": "300",
    "guild_id": GUILD_ID,
    "owner_id": OWNER_ID,
    "panel_name": "support",
    "status": TICKET_STATUS_OPEN,
    "created_at": 1700000000,
    "closed_at": None,
}

OWNER = Actor(user_id=OWNER_ID, handle="alice")
STAFF = Actor(user_id="2", handle="staffer", role_ids=frozenset({SUPPORT_ROLE_ID}))
ADMIN = Actor(user_id="3", handle="boss", is_admin=True)
OTHER = Actor(user_id="4", handle="nobody", role_ids=frozenset({"999"}))


class TestPolicyAdminActions:
    """setup and panel require administrator."""

    @pytest.mark.parametrize("kind", [ActionKind.SETUP, ActionKind.PANEL])
    def test_admin_allowed(self, kind):
        """Administrators can run setup and panel even before setup exists."""
        assert can_perform(kind, ADMIN, None).allowed

    @pytest.mark.parametrize("kind", [ActionKind.SETUP, ActionKind.PANEL])
    def test_staff_denied(self, kind):
        """The support role alone does not allow admin commands."""
        decision = can_perform(kind, STAFF, CONFIG)
        assert not decision.allowed
        assert decision.reason == "You need administrator permissions!"
        assert decision.error is ForbiddenError


class TestPolicyCreate:
    """create requires a configured support role."""

    def test_unconfigured_denied(self):
        """No config means NotConfigured."""
        decision = can_perform(ActionKind.CREATE, OWNER, None)
        assert not decision.allowed
        assert decision.error is NotConfiguredError
        assert decision.reason == "Ticket system not set up!"

    def test_missing_support_role_denied(self):
        """A config row without a support role counts as unconfigured."""
        decision = can_perform(ActionKind.CREATE, OWNER, {**CONFIG, "support_role_id": None})
        assert decision.error is NotConfiguredError

    def test_configured_allowed(self):
        """Anyone may create once configured."""
        assert can_perform(ActionKind.CREATE, OTHER, CONFIG).allowed


class TestPolicyOwnerOrStaff:
    """add, remove, close and transcript allow the owner or staff."""

    @pytest.mark.parametrize("kind", [
        ActionKind.ADD_MEMBER,
        ActionKind.REMOVE_MEMBER,
        ActionKind.CLOSE,
        ActionKind.TRANSCRIPT,
    ])
    def test_owner_and_staff_allowed(self, kind):
        """Both the owner and staff pass."""
        assert can_perform(kind, OWNER, CONFIG, TICKET, target_id=GUEST_ID).allowed
        assert can_perform(kind, STAFF, CONFIG, TICKET, target_id=GUEST_ID).allowed

    @pytest.mark.parametrize("kind,reason", [
        (ActionKind.ADD_MEMBER, "Only ticket owners or staff can add users!"),
        (ActionKind.REMOVE_MEMBER, "Only ticket owners or staff can remove users!"),
        (ActionKind.CLOSE, "Only ticket owners or staff can close tickets!"),
        (ActionKind.TRANSCRIPT, "Only ticket owners or staff can generate transcripts!"),
    ])
    def test_others_denied_with_reason(self, kind, reason):
        """Everyone else gets a readable reason."""
        decision = can_perform(kind, OTHER, CONFIG, TICKET, target_id=GUEST_ID)
        assert not decision.allowed
        assert decision.reason == reason
        assert decision.error is ForbiddenError

    def test_remove_owner_denied_for_staff(self):
        """Even staff cannot remove the owner."""
        decision = can_perform(ActionKind.REMOVE_MEMBER, STAFF, CONFIG, TICKET, target_id=OWNER_ID)
        assert decision.error is CannotRemoveOwnerError
        assert decision.reason == "Cannot remove the ticket owner!"

    def test_non_member_remove_owner_is_forbidden_first(self):
        """An unauthorized caller is told they are forbidden, not about the owner."""
        decision = can_perform(ActionKind.REMOVE_MEMBER, OTHER, CONFIG, TICKET, target_id=OWNER_ID)
        assert decision.error is ForbiddenError

    def test_not_a_ticket(self):
        """Ticket actions outside a ticket channel are rejected."""
        decision = can_perform(ActionKind.CLOSE, STAFF, CONFIG, None)
        assert decision.error is NotATicketChannelError
        assert decision.reason == "This is not a ticket channel!"


class TestPolicyStaffOnly:
    """reopen and delete are staff only."""

    @pytest.mark.parametrize("kind,reason", [
        (ActionKind.REOPEN, "Only staff can reopen tickets!"),
        (ActionKind.DELETE, "Only staff can delete tickets!"),
    ])
    def test_owner_denied(self, kind, reason):
        """Ownership is not enough."""
        decision = can_perform(kind, OWNER, CONFIG, TICKET)
        assert not decision.allowed
        assert decision.reason == reason

    @pytest.mark.parametrize("kind", [ActionKind.REOPEN, ActionKind.DELETE])
    def test_staff_allowed(self, kind):
        assert can_perform(kind, STAFF, CONFIG, TICKET).allowed

    @pytest.mark.parametrize("kind", [ActionKind.REOPEN, ActionKind.DELETE])
    def test_admin_without_role_denied(self, kind):
        """Administrator does not imply staff by default."""
        assert not can_perform(kind, ADMIN, CONFIG, TICKET).allowed


class TestAdminsAreStaff:
    """The opt-in that treats administrators as staff."""

    def test_is_staff_default(self):
        assert not is_staff(ADMIN, CONFIG)
        assert is_staff(STAFF, CONFIG)

    def test_is_staff_opt_in(self):
        assert is_staff(ADMIN, CONFIG, admins_are_staff=True)

    def test_admin_can_delete_with_opt_in(self):
        """With the opt-in, administrators pass staff-only checks."""
        assert can_perform(ActionKind.DELETE, ADMIN, CONFIG, TICKET, admins_are_staff=True).allowed

    def test_no_config_means_no_staff(self):
        """Without config nobody holds the support role."""
        assert not is_staff(STAFF, None)


class TestDecision:
    """Decision helpers."""

    def test_raise_if_denied(self):
        """Denials raise their error type with the reason as message."""
        decision = can_perform(ActionKind.DELETE, OWNER, CONFIG, TICKET)
        with pytest.raises(ForbiddenError) as exc_info:
            decision.raise_if_denied()
        assert exc_info.value.message == "Only staff can delete tickets!"

    def test_allow_is_truthy(self):
        assert can_perform(ActionKind.CLOSE, OWNER, CONFIG, TICKET)
