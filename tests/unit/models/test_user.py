"""
Unit tests for the user profile model.
"""

from lens.models.user import UserProfile


class TestUserProfile:
    def test_create_new_lowercases_username(self):
        profile = UserProfile.create_new(uid="u1", username="Olivia", full_name="Olivia O", email="o@example.com")

        assert profile.username == "olivia"
        assert profile.created_at is not None

    def test_display_name_falls_back_to_username(self):
        assert UserProfile(uid="u1", username="olivia", full_name="Olivia O").display_name == "Olivia O"
        assert UserProfile(uid="u1", username="olivia").display_name == "olivia"

    def test_dict_round_trip(self):
        profile = UserProfile.create_new(uid="u1", username="olivia", full_name="Olivia O", email="o@example.com")

        assert UserProfile.from_dict(profile.to_dict()) == profile
