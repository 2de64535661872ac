"""Unit tests for environment settings."""

import pytest

from fluentforms.config import FormSettings


class TestFromEnv:
    def test_defaults(self):
        settings = FormSettings.from_env({})
        assert settings == FormSettings()
        assert not settings.is_production
        assert settings.submit_delay == 3

    def test_reads_all_variables(self):
        settings = FormSettings.from_env({
            "APP_NAME": "Acme",
            "APP_ENV": "Production",
            "APP_DEBUG": "1",
            "MAIL_TO": "owner@acme.test",
            "MAIL_TO_NAME": "Owner",
            "MAIL_FROM": "noreply@acme.test",
            "MAILERSEND_API_KEY": "key",
            "FORM_SUBMIT_DELAY": "5.5",
        })
        assert settings.app_name == "Acme"
        assert settings.is_production
        assert settings.debug is True
        assert settings.mail_to == "owner@acme.test"
        assert settings.mail_to_name == "Owner"
        assert settings.mail_from == "noreply@acme.test"
        assert settings.mailersend_api_key == "key"
        assert settings.submit_delay == 5.5

    @pytest.mark.parametrize("raw", ["0", "false", "", "no"])
    def test_debug_off(self, raw):
        assert FormSettings.from_env({"APP_DEBUG": raw}).debug is False

    def test_blank_values_are_unset(self):
        settings = FormSettings.from_env({"MAIL_TO": "  ", "APP_NAME": ""})
        assert settings.mail_to is None
        assert settings.app_name == "Contact Form"

    def test_bad_delay(self):
        with pytest.raises(ValueError):
            FormSettings.from_env({"FORM_SUBMIT_DELAY": "soon"})

    def test_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv("APP_NAME", "FromEnv")
        assert FormSettings.from_env().app_name == "FromEnv"

    def test_frozen(self):
        settings = FormSettings()
        with pytest.raises(AttributeError):
            settings.debug = True
