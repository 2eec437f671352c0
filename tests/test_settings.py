"""
Unit tests for application settings.
"""

import pytest
from pydantic import ValidationError

from dealbell.config.settings import Settings
from dealbell.usecases.closed_won_pipeline import PipelineConfig


class TestSettings:

    def test_missing_token_fails(self, monkeypatch):
        monkeypatch.delenv("SLACK_TOKEN", raising=False)

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_blank_token_fails(self):
        with pytest.raises(ValidationError):
            Settings(slack_token="   ", _env_file=None)

    def test_defaults(self, monkeypatch):
        for name in ("ENVIRONMENT", "RUN_ON_STARTUP", "POLL_INTERVAL_SECONDS"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(slack_token="xoxb-1", _env_file=None)

        assert settings.is_dev
        assert settings.should_run_on_startup
        assert settings.closed_won_channel_name == "closed-won"
        assert settings.processed_messages_channel_name == "bot-processed"
        assert settings.source_message_limit == 10
        assert settings.ledger_scan_limit == 100
        assert settings.poll_interval_seconds == 0

    def test_production_mode(self):
        settings = Settings(slack_token="xoxb-1", environment="production", run_on_startup=None, _env_file=None)

        assert not settings.is_dev
        assert not settings.should_run_on_startup

    def test_pipeline_config_from_settings(self):
        settings = Settings(
            slack_token="xoxb-1",
            environment="production",
            crm_bot_username="HubSpot Bot",
            source_message_limit=25,
            _env_file=None,
        )

        config = PipelineConfig.from_settings(settings)

        assert config.is_dev is False
        assert config.crm_bot_username == "HubSpot Bot"
        assert config.source_message_limit == 25


class TestBuildPipeline:

    def test_wires_settings_into_pipeline(self):
        from dealbell.infrastructure.device_notifier import DeviceNotifier
        from dealbell.infrastructure.slack_gateway import SlackGateway
        from dealbell.usecases.closed_won_pipeline import build_pipeline

        settings = Settings(slack_token="xoxb-1", ledger_scan_limit=50, _env_file=None)

        pipeline = build_pipeline(settings)

        assert isinstance(pipeline.gateway, SlackGateway)
        assert isinstance(pipeline.notifier, DeviceNotifier)
        assert pipeline.ledger.scan_limit == 50
        assert pipeline.resolver.gateway is pipeline.gateway


class TestDeviceNotifier:

    @pytest.mark.asyncio
    async def test_notify_succeeds(self):
        from dealbell.infrastructure.device_notifier import DeviceNotifier

        assert await DeviceNotifier().notify("Bob:WidgetCo:500") is True
