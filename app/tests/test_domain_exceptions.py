# app/tests/test_domain_exceptions.py

from exceptions import (
    DomainException,
    BadRequestException,
    ConflictException,
    ValidationException,
)
from config.settings import Settings


class TestDomainExceptions:
    """Tests for the domain exception hierarchy"""

    def test_error_codes(self):
        """Test each exception carries its code"""
        assert BadRequestException("x").error_code == "bad_request"
        assert ConflictException("x").error_code == "conflict"
        assert ValidationException("x").error_code == "validation_error"

    def test_all_are_domain_exceptions(self):
        """Test the common base class"""
        for exc_class in (BadRequestException, ConflictException, ValidationException):
            assert issubclass(exc_class, DomainException)

    def test_to_dict(self):
        """Test the error payload"""
        exc = BadRequestException("Unknown game mode: online", details={"allowed": ["player", "ai"]})

        assert str(exc) == "Unknown game mode: online"
        assert exc.to_dict() == {
            "error": "BadRequestException",
            "code": "bad_request",
            "message": "Unknown game mode: online",
            "details": {"allowed": ["player", "ai"]},
        }


class TestSettings:
    """Tests for Settings defaults"""

    def test_defaults(self):
        """Test the default field and AI configuration"""
        config = Settings(_env_file=None)

        assert config.DEFAULT_FIELD_SIZE == (9, 13)
        assert config.FIELD_SIZE_PRESETS == [(7, 11), (9, 13), (11, 15), (13, 17)]
        assert config.AI_DIFFICULTY == "medium"
        assert config.AI_PLAYER_ID == 2

    def test_environment_override(self, monkeypatch):
        """Test values can come from the environment"""
        monkeypatch.setenv("AI_DIFFICULTY", "easy")
        monkeypatch.setenv("FIELD_SIZE_PRESETS", "[[5, 7], [9, 13]]")

        config = Settings(_env_file=None)

        assert config.AI_DIFFICULTY == "easy"
        assert config.FIELD_SIZE_PRESETS == [(5, 7), (9, 13)]
