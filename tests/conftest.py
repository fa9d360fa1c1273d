"""
Ticketeer - Test Fixtures
=========================

Shared fixtures for all tests.
"""

import os
import tempfile
from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple

import pytest
import pytest_asyncio

# Keep log files out of the working tree; must happen before ticketeer imports
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="ticketeer-test-logs-"))

from ticketeer.core.database import DatabaseManager
from ticketeer.core.errors import ExportError, GatewayError
from ticketeer.services.tickets import (
    Actor,
    Overwrite,
    PanelRegistry,
    TicketService,
    TranscriptArchive,
)


# =============================================================================
# IDs
# =============================================================================

GUILD_ID = "900000000000000001"
SUPPORT_ROLE_ID = "500000000000000001"
CLOSED_CATEGORY_ID = "600000000000000001"
LOG_CHANNEL_ID = "700000000000000001"
PANEL_CHANNEL_ID = "800000000000000001"

OWNER_ID = "100000000000000001"
STAFF_ID = "100000000000000002"
ADMIN_ID = "100000000000000003"
GUEST_ID = "100000000000000004"
OUTSIDER_ID = "100000000000000005"


# =============================================================================
# Fake Gateway
# =============================================================================

@dataclass
class SentMessage:
    channel_id: str
    content: Optional[str]
    embed: object = None
    view: object = None
    archive: Optional[TranscriptArchive] = None


class FakeGateway:
    """
    In-memory ChannelGateway that records every call.

    Use fail(operation, target) to make a call raise GatewayError. The
    target is the user ID for grant/revoke and the channel ID otherwise;
    target=None fails every call of that operation.
    """

    def __init__(self) -> None:
        self.channels: Dict[str, dict] = {}
        self.messages: List[SentMessage] = []
        self.calls: List[Tuple[str, ...]] = []
        self._failures: Dict[str, Set[Optional[str]]] = {}
        self._next_id = 300000000000000001

    # -------------------------------------------------------------------------
    # Test Controls
    # -------------------------------------------------------------------------

    def fail(self, operation: str, target: Optional[str] = None) -> None:
        self._failures.setdefault(operation, set()).add(target)

    def add_existing_channel(self, guild_id: str, name: str) -> str:
        channel_id = self._allocate_id()
        self.channels[channel_id] = {
            "guild_id": guild_id,
            "name": name,
            "parent": None,
            "overwrites": {},
        }
        return channel_id

    def overwrite(self, channel_id: str, principal_id: str) -> Optional[Tuple[Optional[bool], Optional[bool]]]:
        return self.channels[channel_id]["overwrites"].get(principal_id)

    def can_view(self, channel_id: str, user_id: str) -> bool:
        ow = self.overwrite(channel_id, user_id)
        return ow is not None and ow[0] is True

    def calls_for(self, operation: str) -> List[Tuple[str, ...]]:
        return [call for call in self.calls if call[0] == operation]

    def messages_to(self, channel_id: str) -> List[SentMessage]:
        return [m for m in self.messages if m.channel_id == channel_id]

    def _allocate_id(self) -> str:
        channel_id = str(self._next_id)
        self._next_id += 1
        return channel_id

    def _check(self, operation: str, target: Optional[str]) -> None:
        targets = self._failures.get(operation)
        if targets and (None in targets or target in targets):
            raise GatewayError(operation, RuntimeError("simulated failure"))

    def _require(self, operation: str, channel_id: str) -> dict:
        if channel_id not in self.channels:
            raise GatewayError(operation, RuntimeError("Unknown Channel"))
        return self.channels[channel_id]

    # -------------------------------------------------------------------------
    # ChannelGateway
    # -------------------------------------------------------------------------

    async def find_text_channel(self, guild_id: str, name: str) -> Optional[str]:
        self.calls.append(("find_text_channel", guild_id, name))
        for channel_id, channel in self.channels.items():
            if channel["guild_id"] == guild_id and channel["name"].lower() == name.lower():
                return channel_id
        return None

    async def create_channel(self, guild_id: str, name: str, overwrites: List[Overwrite]) -> str:
        self.calls.append(("create_channel", guild_id, name))
        self._check("create_channel", guild_id)
        channel_id = self.add_existing_channel(guild_id, name)
        self.channels[channel_id]["overwrites"] = {
            ow.principal_id: (ow.view, ow.send) for ow in overwrites
        }
        self.channels[channel_id]["overwrite_kinds"] = {
            ow.principal_id: ow.kind for ow in overwrites
        }
        return channel_id

    async def set_channel_parent(self, channel_id: str, category_id: str) -> None:
        self.calls.append(("set_channel_parent", channel_id, category_id))
        self._check("set_channel_parent", channel_id)
        self._require("set_channel_parent", channel_id)["parent"] = category_id

    async def delete_channel(self, channel_id: str, reason: str) -> None:
        self.calls.append(("delete_channel", channel_id, reason))
        self._check("delete_channel", channel_id)
        self.channels.pop(channel_id, None)

    async def grant_access(
        self, channel_id: str, user_id: str, view: bool = True, send: bool = True
    ) -> None:
        self.calls.append(("grant_access", channel_id, user_id))
        self._check("grant_access", user_id)
        self._require("grant_access", channel_id)["overwrites"][user_id] = (view, send)

    async def revoke_access(self, channel_id: str, user_id: str) -> None:
        self.calls.append(("revoke_access", channel_id, user_id))
        self._check("revoke_access", user_id)
        self._require("revoke_access", channel_id)["overwrites"].pop(user_id, None)

    async def send_message(
        self,
        channel_id: str,
        content: Optional[str] = None,
        *,
        embed=None,
        view=None,
        archive: Optional[TranscriptArchive] = None,
    ) -> None:
        self.calls.append(("send_message", channel_id))
        self._check("send_message", channel_id)
        self.messages.append(SentMessage(channel_id, content, embed, view, archive))

    async def channel_name(self, channel_id: str) -> str:
        return self._require("channel_name", channel_id)["name"]


# =============================================================================
# Fake Exporter
# =============================================================================

class FakeExporter:
    """TranscriptExporter that returns a tiny archive, or fails on demand."""

    def __init__(self) -> None:
        self.exported: List[str] = []
        self.should_fail = False

    async def export(self, channel_id: str) -> TranscriptArchive:
        if self.should_fail:
            raise ExportError(RuntimeError("history unavailable"))
        self.exported.append(channel_id)
        return TranscriptArchive(
            data=f"<html>{channel_id}</html>".encode("utf-8"),
            filename=f"{channel_id}-transcript.html",
        )


# =============================================================================
# Core Fixtures
# =============================================================================

@pytest.fixture
def temp_db_path(tmp_path):
    """Create a temporary database path for testing."""
    return tmp_path / "test_tickets.db"


@pytest.fixture
def test_db(temp_db_path):
    """Create a fresh test database instance."""
    db = DatabaseManager(temp_db_path)
    yield db
    db.close()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def exporter():
    return FakeExporter()


@pytest.fixture
def panels(test_db, gateway):
    return PanelRegistry(test_db, gateway)


@pytest.fixture
def make_service(test_db, gateway, exporter, panels):
    """Factory for services with non-default policies."""
    def _make(**kwargs) -> TicketService:
        return TicketService(test_db, gateway, exporter, panels, **kwargs)
    return _make


@pytest.fixture
def service(make_service):
    return make_service()


@pytest.fixture
def configured(test_db):
    """Guild with support role, closed category and log channel set up."""
    return test_db.upsert_community_config(
        guild_id=GUILD_ID,
        support_role_id=SUPPORT_ROLE_ID,
        closed_category_id=CLOSED_CATEGORY_ID,
        log_channel_id=LOG_CHANNEL_ID,
        panel_color="#FFC0CB",
    )


# =============================================================================
# Actors
# =============================================================================

@pytest.fixture
def owner():
    return Actor(user_id=OWNER_ID, handle="Alice")


@pytest.fixture
def staff():
    return Actor(user_id=STAFF_ID, handle="staffer", role_ids=frozenset({SUPPORT_ROLE_ID}))


@pytest.fixture
def admin():
    """Administrator without the support role."""
    return Actor(user_id=ADMIN_ID, handle="boss", is_admin=True)


@pytest.fixture
def guest():
    return Actor(user_id=GUEST_ID, handle="guest")


@pytest.fixture
def outsider():
    return Actor(user_id=OUTSIDER_ID, handle="outsider")


@pytest_asyncio.fixture
async def open_ticket(service, configured, owner):
    """An open ticket owned by `owner`, created through the service."""
    result = await service.create_ticket(GUILD_ID, owner, "support")
    return result.ticket
