import pytest

from fcclient import config


class TestEnvironmentHelpers:
    @pytest.mark.parametrize("value,expected", [("1", True), ("true", True), ("0", False), ("", False)])
    def test_is_env_true(self, monkeypatch, value, expected):
        monkeypatch.setenv("TEST_FLAG", value)
        assert config.is_env_true("TEST_FLAG") is expected

    @pytest.mark.parametrize("value,expected", [("", True), ("1", True), ("false", False), ("0", False)])
    def test_is_env_not_false(self, monkeypatch, value, expected):
        monkeypatch.setenv("TEST_FLAG", value)
        assert config.is_env_not_false("TEST_FLAG") is expected

    @pytest.mark.parametrize(
        "value,expected", [("True", True), ("false", False), ("", None), ("maybe", None)]
    )
    def test_parse_boolean_env(self, monkeypatch, value, expected):
        monkeypatch.setenv("TEST_FLAG", value)
        assert config.parse_boolean_env("TEST_FLAG") is expected

    @pytest.mark.parametrize(
        "value,expected", [("trace", "trace"), (" DEBUG ", "debug"), ("verbose", False), ("", False)]
    )
    def test_eval_log_type(self, monkeypatch, value, expected):
        monkeypatch.setenv("TEST_LOG", value)
        assert config.eval_log_type("TEST_LOG") == expected

    @pytest.mark.parametrize(
        "value,expected",
        [("30", 30.0), (" 2.5 ", 2.5), ("", 60), ("ten", 60), ("0", 60), ("-1", 60), ("nan", 60), ("inf", 60)],
    )
    def test_parse_float_env(self, monkeypatch, value, expected):
        monkeypatch.setenv("TEST_TIMEOUT", value)
        assert config.parse_float_env("TEST_TIMEOUT", 60) == expected


class TestProfiles:
    def test_load_environment(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config, "CONFIG_DIR", str(tmp_path))
        (tmp_path / "default.env").write_text("ENDPOINT=http://localhost:9000\nREGION=cn-hangzhou\n")
        env = {"REGION": "cn-shanghai"}

        profiles = config.load_environment(env=env)

        assert profiles == ["default"]
        assert env["ENDPOINT"] == "http://localhost:9000"
        # existing variables are never overridden
        assert env["REGION"] == "cn-shanghai"

    def test_load_multiple_profiles(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config, "CONFIG_DIR", str(tmp_path))
        (tmp_path / "first.env").write_text("ACCESS_KEY_ID=first\nACCOUNT_ID=123\n")
        (tmp_path / "second.env").write_text("ACCESS_KEY_ID=second\n")
        env = {}

        profiles = config.load_environment("first, second, missing", env=env)

        assert profiles == ["first", "second", "missing"]
        assert env == {"ACCESS_KEY_ID": "second", "ACCOUNT_ID": "123"}


class TestCredentials:
    def test_has_live_credentials(self, monkeypatch):
        monkeypatch.setattr(config, "ENDPOINT", "https://123.cn-shanghai.fc.aliyuncs.com")
        monkeypatch.setattr(config, "ACCESS_KEY_ID", "key")
        monkeypatch.setattr(config, "ACCESS_KEY_SECRET", "secret")
        assert config.has_live_credentials()

        monkeypatch.setattr(config, "ACCESS_KEY_SECRET", "")
        assert not config.has_live_credentials()

    def test_trace_logging(self, monkeypatch):
        monkeypatch.setattr(config, "FC_LOG", "trace")
        assert config.is_trace_logging_enabled()
        monkeypatch.setattr(config, "FC_LOG", "debug")
        assert not config.is_trace_logging_enabled()
        monkeypatch.setattr(config, "FC_LOG", False)
        assert not config.is_trace_logging_enabled()
