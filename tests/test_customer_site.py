"""
Tests for sign-in, profiles, feedback and confirmation emails
"""
import smtplib
from datetime import date, datetime

import pytest

from app import notifications
from app.auth import SESSION_KEY, SessionUser, current_user, sign_in, sign_out, sign_up
from app.config import EmailConfig
from app.feedback import average_feedback_rating, completed_bookings, submit_feedback
from app.profiles import fetch_user_profile, full_name, is_admin, update_profile
from app.validators import ValidationError, parse_date_str, to_amount, validate_phone
from conftest import FakeSupabase
from db.store import DataStore, DataStoreError


@pytest.mark.unit
class TestAuth:
    """Tests for Supabase Auth sign-in"""

    def test_sign_in_stores_user(self, fake_client):
        """Test a successful sign-in lands in the session"""
        state = {}
        user = sign_in(fake_client, state, "jane@example.com", "secret1")
        assert user == SessionUser(id="user-1", email="jane@example.com")
        assert current_user(state) == user
        assert fake_client.auth.calls[0][1] == {"email": "jane@example.com", "password": "secret1"}

    def test_sign_in_failure(self, fake_client):
        """Test auth errors are reported as store errors"""
        fake_client.auth.error = RuntimeError("Invalid login credentials")
        state = {}
        with pytest.raises(DataStoreError):
            sign_in(fake_client, state, "jane@example.com", "wrong")
        assert SESSION_KEY not in state

    def test_sign_in_validates_first(self, fake_client):
        """Test bad input never reaches Supabase"""
        with pytest.raises(ValidationError):
            sign_in(fake_client, {}, "jane", "secret1")
        assert fake_client.auth.calls == []

    def test_sign_up_password_length(self, fake_client):
        """Test short passwords are rejected"""
        with pytest.raises(ValidationError):
            sign_up(fake_client, "jane@example.com", "123")

    def test_sign_up_sends_names(self, fake_client):
        """Test profile names go in the user metadata"""
        sign_up(fake_client, "jane@example.com", "secret1", " Jane ", "Doe")
        payload = fake_client.auth.calls[0][1]
        assert payload["options"]["data"] == {"first_name": "Jane", "last_name": "Doe"}

    def test_sign_out_clears_views(self, fake_client):
        """Test sign-out drops the user and cached views"""
        state = {SESSION_KEY: SessionUser("u1", "a@x.com"), "view:my_bookings": [1], "other": 2}
        sign_out(fake_client, state)
        assert state == {"other": 2}

    def test_sign_out_remote_failure(self, fake_client):
        """Test the local session ends even if Supabase fails"""
        fake_client.auth.error = RuntimeError("offline")
        state = {SESSION_KEY: SessionUser("u1", "a@x.com")}
        sign_out(fake_client, state)
        assert current_user(state) is None


@pytest.mark.unit
class TestProfiles:
    """Tests for user profiles"""

    def test_fetch_profile(self):
        """Test a profile is found by user id"""
        store = DataStore(FakeSupabase({"user_profiles": [{"id": "u1", "role": "admin"}]}))
        assert fetch_user_profile(store, "u1")["role"] == "admin"
        assert fetch_user_profile(store, "u2") is None
        assert fetch_user_profile(store, None) is None

    def test_is_admin(self):
        """Test only the admin role opens the panel"""
        assert is_admin({"role": " Admin "})
        assert not is_admin({"role": "customer"})
        assert not is_admin(None)

    def test_full_name(self):
        """Test names are joined without stray spaces"""
        assert full_name({"first_name": "Jane", "last_name": None}) == "Jane"
        assert full_name(None) == ""

    NOW = datetime(2024, 5, 1, 9, 30)

    def test_update_profile_whitelist(self):
        """Test only contact fields can be changed"""
        client = FakeSupabase({"user_profiles": [{"id": "u1", "role": "customer"}]})
        update_profile(DataStore(client), "u1", {"first_name": " J ", "role": "admin"}, now=self.NOW)
        assert client.tables["user_profiles"][0] == {
            "id": "u1", "role": "customer", "first_name": "J", "updated_at": "2024-05-01T09:30:00",
        }

    def test_update_profile_nothing_allowed(self, store, fake_client):
        """Test an update with no editable fields writes nothing"""
        assert update_profile(store, "u1", {"role": "admin"}) == []
        assert fake_client.calls == []

    @pytest.mark.parametrize("updates,field", [
        ({"first_name": "  ", "last_name": "Doe"}, "first_name"),
        ({"first_name": "Jane", "last_name": None}, "last_name"),
        ({"first_name": "Jane", "last_name": "Doe", "phone_number": "12345"}, "phone_number"),
    ])
    def test_update_profile_validation(self, store, fake_client, updates, field):
        """Test names are required and phones need ten digits"""
        with pytest.raises(ValidationError) as exc:
            update_profile(store, "u1", updates)
        assert exc.value.field == field
        assert fake_client.calls == []

    def test_update_profile_blank_phone_allowed(self):
        """Test clearing the phone number is accepted"""
        client = FakeSupabase({"user_profiles": [{"id": "u1", "phone_number": "9876543210"}]})
        update_profile(DataStore(client), "u1", {"first_name": "Jane", "last_name": "Doe", "phone_number": ""})
        assert client.tables["user_profiles"][0]["phone_number"] == ""


@pytest.mark.unit
class TestFeedback:
    """Tests for customer feedback"""

    DONE = {"id": "b1", "status": "Completed", "customer_name": "Jane", "customer_email": "jane@example.com",
            "service_name": "Deep Cleaning"}

    def test_submit(self, store, fake_client):
        """Test feedback is stored with a trimmed comment"""
        submit_feedback(store, self.DONE, 5, "  Great job ")
        row = fake_client.tables["feedback"][0]
        assert row["booking_id"] == "b1"
        assert row["rating"] == 5
        assert row["comment"] == "Great job"

    def test_blank_comment_is_null(self, store, fake_client):
        """Test an empty comment is stored as null"""
        submit_feedback(store, self.DONE, 4, "   ")
        assert fake_client.tables["feedback"][0]["comment"] is None

    def test_only_completed(self, store):
        """Test pending bookings cannot be rated"""
        with pytest.raises(ValidationError):
            submit_feedback(store, dict(self.DONE, status="Pending"), 5)

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_range(self, store, rating):
        """Test ratings must be 1 to 5"""
        with pytest.raises(ValidationError):
            submit_feedback(store, self.DONE, rating)

    @pytest.mark.parametrize("rating", ["abc", "4.5", object()])
    def test_rating_not_a_number(self, store, fake_client, rating):
        """Test a non-numeric rating is a validation error"""
        with pytest.raises(ValidationError) as exc:
            submit_feedback(store, self.DONE, rating)
        assert exc.value.field == "rating"
        assert fake_client.tables.get("feedback", []) == []

    def test_numeric_string_rating(self, store, fake_client):
        """Test a rating given as text is stored as a number"""
        submit_feedback(store, self.DONE, "3")
        assert fake_client.tables["feedback"][0]["rating"] == 3

    def test_helpers(self, sample_bookings):
        """Test completed filter and average rating"""
        assert [b["id"] for b in completed_bookings(sample_bookings)] == ["b1"]
        assert average_feedback_rating([{"rating": 5}, {"rating": 4}, {"rating": 4}]) == 4.3
        assert average_feedback_rating([]) == 0.0


@pytest.mark.unit
class TestNotifications:
    """Tests for booking confirmation email"""

    BOOKING = {"service_name": "Deep Cleaning", "booking_date": "2024-05-03", "booking_time": "10:00",
               "address": "12 Park Street", "total_amount": 2500, "customer_email": "jane@example.com"}

    CFG = EmailConfig(smtp_host="smtp.example.com", smtp_port=587, smtp_user="u", smtp_password="p",
                      from_email="bookings@example.com", from_name="Sparkle")

    def test_text(self):
        """Test the confirmation lists the booking"""
        text = notifications.booking_confirmation_text(self.BOOKING, "Sparkle")
        assert "Deep Cleaning" in text
        assert "2024-05-03" in text
        assert "Status: Pending" in text

    def test_skipped_without_smtp(self):
        """Test missing SMTP config skips sending"""
        result = notifications.send_booking_confirmation(None, self.BOOKING, "Sparkle")
        assert result == {"success": True, "skipped": True, "error": None}

    def test_smtp_failure(self, monkeypatch):
        """Test SMTP errors are reported, not raised"""
        def refuse(*args, **kwargs):
            raise smtplib.SMTPConnectError(421, "busy")

        monkeypatch.setattr(notifications.smtplib, "SMTP", refuse)
        result = notifications.send_booking_confirmation(self.CFG, self.BOOKING, "Sparkle")
        assert result["success"] is False
        assert "busy" in result["error"]

    def test_sends(self, monkeypatch):
        """Test a message is sent through SMTP"""
        sent = []

        class FakeSMTP:
            def __init__(self, host, port):
                self.host = host

            def __enter__(self):
                return self

            def __exit__(self, *exc):
                return False

            def starttls(self):
                pass

            def login(self, user, password):
                pass

            def send_message(self, msg):
                sent.append(msg)

        monkeypatch.setattr(notifications.smtplib, "SMTP", FakeSMTP)
        result = notifications.send_booking_confirmation(self.CFG, self.BOOKING, "Sparkle")
        assert result["success"] is True
        assert sent[0]["To"] == "jane@example.com"
        assert sent[0]["Subject"] == "Sparkle: Booking received"


@pytest.mark.unit
class TestValidators:
    """Tests for input helpers"""

    @pytest.mark.parametrize("value,expected", [(None, 0.0), (True, 0.0), ("12.5", 12.5), ("x", 0.0),
                                                (float("nan"), 0.0), (7, 7.0)])
    def test_to_amount(self, value, expected):
        """Test garbage amounts count as zero"""
        assert to_amount(value) == expected

    def test_parse_date(self):
        """Test dates, timestamps and junk"""
        assert parse_date_str("2024-03-01T10:00:00+00:00") == date(2024, 3, 1)
        assert parse_date_str(date(2024, 3, 1)) == date(2024, 3, 1)
        assert parse_date_str("03/01/2024") is None
        assert parse_date_str("") is None

    def test_phone(self):
        """Test phone digit count"""
        assert validate_phone("+91 98765 43210")
        assert not validate_phone("12345")
