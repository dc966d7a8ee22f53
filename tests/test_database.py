"""Tests for DatabaseService and RecipientResolver against a mocked Supabase client"""
import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, Mock

from errors import FetchError
from models.recipient import Recipient
from services.database import DatabaseService
from services.recipient_resolver import RecipientResolver
from tests.fixtures.reminder_fixtures import sample_event_rows

START = datetime(2025, 3, 10, 9, 0, tzinfo=timezone.utc)
END = START + timedelta(hours=72)


@pytest.fixture
def client():
    return MagicMock()


def events_query(client):
    return client.table.return_value.select.return_value.gte.return_value.lte.return_value


def profile_query(client):
    return client.table.return_value.select.return_value.eq.return_value.limit.return_value


class TestGetUpcomingEvents:

    def test_returns_events_in_store_order(self, client):
        """Test rows are parsed into Events, order kept"""
        events_query(client).execute.return_value = Mock(data=sample_event_rows())
        db = DatabaseService(client=client)

        events = db.get_upcoming_events(START, END)

        assert [e.id for e in events] == ["evt-hearing", "evt-filing"]
        assert events[0].agenda == "Hearing"
        assert events[0].date == datetime(2025, 3, 10, 19, 0, tzinfo=timezone.utc)
        assert events[1].agenda is None

    def test_query_shape(self, client):
        """Test events table is filtered to [start, end]"""
        events_query(client).execute.return_value = Mock(data=[])
        DatabaseService(client=client).get_upcoming_events(START, END)

        client.table.assert_called_with("events")
        client.table.return_value.select.assert_called_with("id, date, agenda, profile")
        client.table.return_value.select.return_value.gte.assert_called_with("date", START.isoformat())
        client.table.return_value.select.return_value.gte.return_value.lte.assert_called_with(
            "date", END.isoformat()
        )

    def test_empty(self, client):
        """Test no rows gives an empty list"""
        events_query(client).execute.return_value = Mock(data=None)
        assert DatabaseService(client=client).get_upcoming_events(START, END) == []

    def test_query_failure_raises_fetch_error(self, client):
        """Test store errors surface as FetchError"""
        events_query(client).execute.side_effect = Exception("connection refused")
        with pytest.raises(FetchError, match="connection refused"):
            DatabaseService(client=client).get_upcoming_events(START, END)

    def test_malformed_row_raises_fetch_error(self, client):
        """Test a row missing required columns is a FetchError"""
        events_query(client).execute.return_value = Mock(data=[{"id": "evt-1", "agenda": "x"}])
        with pytest.raises(FetchError):
            DatabaseService(client=client).get_upcoming_events(START, END)


class TestGetRecipient:

    def test_found(self, client):
        """Test a profile row becomes a Recipient"""
        profile_query(client).execute.return_value = Mock(data=[{"fcm_token": "device-token"}])
        recipient = DatabaseService(client=client).get_recipient("profile-1")

        assert recipient == Recipient(id="profile-1", fcm_token="device-token")
        client.table.assert_called_with("profile")
        client.table.return_value.select.return_value.eq.assert_called_with("id", "profile-1")

    def test_not_found(self, client):
        """Test a missing profile is None, not an error"""
        profile_query(client).execute.return_value = Mock(data=[])
        assert DatabaseService(client=client).get_recipient("ghost") is None

    def test_query_failure_raises_fetch_error(self, client):
        """Test store errors surface as FetchError"""
        profile_query(client).execute.side_effect = Exception("timeout")
        with pytest.raises(FetchError):
            DatabaseService(client=client).get_recipient("profile-1")


class TestRecipientResolver:

    def test_returns_token(self):
        db = Mock()
        db.get_recipient.return_value = Recipient(id="profile-1", fcm_token="device-token")
        assert RecipientResolver(db).resolve_token("profile-1") == "device-token"
        db.get_recipient.assert_called_once_with("profile-1")

    def test_missing_profile(self):
        """Test missing profile resolves to None"""
        db = Mock()
        db.get_recipient.return_value = None
        assert RecipientResolver(db).resolve_token("ghost") is None

    @pytest.mark.parametrize("token", [None, "", "   "])
    def test_profile_without_token(self, token):
        """Test a profile with no usable token resolves to None"""
        db = Mock()
        db.get_recipient.return_value = Recipient(id="profile-1", fcm_token=token)
        assert RecipientResolver(db).resolve_token("profile-1") is None

    def test_store_failure_propagates(self):
        """Test FetchError is not swallowed by the resolver"""
        db = Mock()
        db.get_recipient.side_effect = FetchError("down")
        with pytest.raises(FetchError):
            RecipientResolver(db).resolve_token("profile-1")
