"""Tests for from_config, from_env and AuthMethodFactory."""

from pathlib import Path

import pytest
import yaml

from openstack_auth import (
    AuthMethodFactory,
    ConfigError,
    Identity,
    MissingEnv,
    NoAuth,
    PasswordAuth,
    from_config,
    from_env,
)
from openstack_auth.auth.methods import FederatedMethod, TokenMethod
from openstack_auth.core.schema import CloudConfig
from openstack_auth.core.transport import RequestsTransport

from conftest import AUTH_URL, FakeTransport, token_response


PASSWORD_CLOUD = {
    "auth_type": "password",
    "auth": {
        "auth_url": AUTH_URL,
        "username": "a",
        "password": "b",
        "project_name": "p",
        "user_domain_name": "Default",
        "project_domain_name": "Default",
    },
    "region_name": "RegionOne",
    "interface": "internal",
}

PASSWORD_ENV = {
    "OS_AUTH_URL": AUTH_URL,
    "OS_USERNAME": "a",
    "OS_PASSWORD": "b",
    "OS_PROJECT_NAME": "p",
}


def write_clouds(path: Path, clouds: dict) -> Path:
    path.write_text(yaml.safe_dump({"clouds": clouds}), encoding="utf-8")
    return path


# === from_config with mappings ===


class TestFromConfigMapping:
    """Tests for from_config with in-memory cloud entries."""

    def test_password(self):
        auth = from_config(PASSWORD_CLOUD, transport=FakeTransport())

        assert type(auth) is PasswordAuth
        assert auth.username == "a"
        assert auth.region == "RegionOne"
        assert auth.interface == "internal"

    def test_password_exchange(self):
        transport = FakeTransport(token_response("T1"))
        auth = from_config(PASSWORD_CLOUD, transport=transport)

        assert auth.acquire_token().value == "T1"
        assert transport.calls[0]["json"]["auth"]["scope"] == {
            "project": {"name": "p", "domain": {"name": "Default"}}
        }

    @pytest.mark.parametrize("auth_type", ["none", "noauth"])
    def test_noauth(self, auth_type):
        auth = from_config({"auth_type": auth_type, "auth": {"endpoint": "http://ironic:6385"}})

        assert type(auth) is NoAuth
        assert auth.default_endpoint("baremetal") == "http://ironic:6385"

    def test_token(self):
        auth = from_config({
            "auth_type": "v3token",
            "auth": {"auth_url": AUTH_URL, "token": "T0", "project_id": "pid-1"},
        })

        assert type(auth) is Identity
        assert auth.method == TokenMethod(token="T0")
        assert auth.scope.project_id == "pid-1"

    def test_oidc_access_token(self):
        auth = from_config({
            "auth_type": "v3oidcaccesstoken",
            "auth": {
                "auth_url": AUTH_URL,
                "identity_provider": "myidp",
                "protocol": "openid",
                "access_token": "oidc-access",
                "project_name": "p",
            },
        })

        assert type(auth) is Identity
        assert isinstance(auth.method, FederatedMethod)
        assert auth.scope.project_name == "p"

    def test_infers_password(self):
        entry = {"auth": dict(PASSWORD_CLOUD["auth"])}
        assert type(from_config(entry)) is PasswordAuth

    def test_infers_token(self):
        auth = from_config({"auth": {"auth_url": AUTH_URL, "token": "T0"}})
        assert isinstance(auth.method, TokenMethod)

    def test_infers_noauth_from_endpoint(self):
        assert type(from_config({"auth": {"endpoint": "http://ironic:6385"}})) is NoAuth

    def test_accepts_cloud_config(self):
        config = CloudConfig.model_validate(PASSWORD_CLOUD)
        assert type(from_config(config)) is PasswordAuth

    def test_builds_requests_transport_with_cacert(self):
        entry = dict(PASSWORD_CLOUD, cacert="/etc/ssl/cloud-ca.pem")
        auth = from_config(entry)

        assert isinstance(auth.transport, RequestsTransport)
        assert auth.transport.verify == "/etc/ssl/cloud-ca.pem"

    def test_builds_requests_transport_without_verify(self):
        auth = from_config(dict(PASSWORD_CLOUD, verify=False))
        assert auth.transport.verify is False


class TestFromConfigErrors:
    """Tests for ConfigError on missing or contradictory settings."""

    def test_missing_password(self):
        entry = {"auth_type": "password", "auth": {"auth_url": AUTH_URL, "username": "a", "project_name": "p"}}
        with pytest.raises(ConfigError, match="password"):
            from_config(entry)

    def test_missing_auth_url_and_user(self):
        entry = {"auth_type": "password", "auth": {"password": "b", "project_name": "p"}}
        with pytest.raises(ConfigError, match="auth_url") as exc_info:
            from_config(entry)
        assert "username|user_id" in exc_info.value.message

    def test_password_without_scope(self):
        entry = {"auth_type": "password", "auth": {"auth_url": AUTH_URL, "username": "a", "password": "b"}}
        with pytest.raises(ConfigError, match="scope"):
            from_config(entry)

    def test_missing_token(self):
        with pytest.raises(ConfigError, match="token"):
            from_config({"auth_type": "token", "auth": {"auth_url": AUTH_URL}})

    def test_missing_federation_fields(self):
        entry = {"auth_type": "v3oidcaccesstoken", "auth": {"auth_url": AUTH_URL, "access_token": "x"}}
        with pytest.raises(ConfigError, match="identity_provider"):
            from_config(entry)

    def test_contradictory_scope(self):
        entry = {
            "auth_type": "token",
            "auth": {"auth_url": AUTH_URL, "token": "T0", "project_id": "p", "domain_id": "d"},
        }
        with pytest.raises(ConfigError, match="Contradictory scope"):
            from_config(entry)

    def test_contradictory_credentials(self):
        entry = {"auth": {"auth_url": AUTH_URL, "token": "T0", "username": "a", "password": "b"}}
        with pytest.raises(ConfigError, match="Contradictory credentials"):
            from_config(entry)

    def test_no_credentials(self):
        with pytest.raises(ConfigError, match="Cannot determine auth_type"):
            from_config({"auth": {"auth_url": AUTH_URL}})

    def test_unsupported_auth_type(self):
        with pytest.raises(ConfigError, match="Unsupported auth_type"):
            from_config({"auth_type": "v3applicationcredential", "auth": {}})

    def test_admin_token_rejected(self):
        entry = {"auth_type": "admin_token", "auth": {"token": "T0", "endpoint": "https://nova.example.com"}}
        with pytest.raises(ConfigError, match="Unsupported auth_type 'admin_token'"):
            from_config(entry)

    def test_invalid_auth_url(self):
        entry = {"auth_type": "token", "auth": {"auth_url": "keystone:5000", "token": "T0"}}
        with pytest.raises(ConfigError, match="http"):
            from_config(entry)

    def test_unsupported_source(self):
        with pytest.raises(ConfigError, match="Unsupported configuration source"):
            from_config(42)


# === from_config with files ===


class TestFromConfigFiles:
    """Tests for from_config with clouds.yaml files."""

    def test_cloud_name_with_explicit_path(self, tmp_path):
        path = write_clouds(tmp_path / "clouds.yaml", {
            "devstack": PASSWORD_CLOUD,
            "ironic": {"auth_type": "none", "auth": {"endpoint": "http://ironic:6385"}},
        })

        assert type(from_config("devstack", config_path=path)) is PasswordAuth
        assert type(from_config("ironic", config_path=path)) is NoAuth

    def test_cloud_name_via_client_config_file(self, tmp_path):
        path = write_clouds(tmp_path / "custom.yaml", {"devstack": PASSWORD_CLOUD})
        auth = from_config("devstack", environ={"OS_CLIENT_CONFIG_FILE": str(path)})
        assert type(auth) is PasswordAuth

    def test_unknown_cloud_lists_available(self, tmp_path):
        path = write_clouds(tmp_path / "clouds.yaml", {"devstack": PASSWORD_CLOUD})
        with pytest.raises(ConfigError, match="Available clouds: \\['devstack'\\]"):
            from_config("production", config_path=path)

    def test_single_entry_file(self, tmp_path):
        path = tmp_path / "cloud.yaml"
        path.write_text(yaml.safe_dump(PASSWORD_CLOUD), encoding="utf-8")

        assert type(from_config(path)) is PasswordAuth
        assert type(from_config(str(path))) is PasswordAuth

    def test_clouds_file_with_one_cloud(self, tmp_path):
        path = write_clouds(tmp_path / "clouds.yaml", {"devstack": PASSWORD_CLOUD})
        assert type(from_config(path)) is PasswordAuth

    def test_clouds_file_with_many_clouds_is_ambiguous(self, tmp_path):
        path = write_clouds(tmp_path / "clouds.yaml", {"a": PASSWORD_CLOUD, "b": PASSWORD_CLOUD})
        with pytest.raises(ConfigError, match="defines 2 clouds"):
            from_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="File not found"):
            from_config(tmp_path / "missing.yaml")


# === from_env ===


class TestFromEnv:
    """Tests for from_env."""

    def test_password(self):
        transport = FakeTransport(token_response("T1"))
        auth = from_env(dict(PASSWORD_ENV, OS_REGION_NAME="RegionOne"), transport=transport)

        assert type(auth) is PasswordAuth
        assert auth.region == "RegionOne"
        assert auth.acquire_token().value == "T1"

        user = transport.calls[0]["json"]["auth"]["identity"]["password"]["user"]
        assert user["domain"] == {"name": "Default"}

    def test_password_with_domains(self):
        env = dict(PASSWORD_ENV, OS_USER_DOMAIN_NAME="corp", OS_PROJECT_DOMAIN_ID="dom-2")
        transport = FakeTransport(token_response("T1"))
        from_env(env, transport=transport).acquire_token()

        body = transport.calls[0]["json"]["auth"]
        assert body["identity"]["password"]["user"]["domain"] == {"name": "corp"}
        assert body["scope"]["project"]["domain"] == {"id": "dom-2"}

    def test_reads_os_environ(self, monkeypatch):
        for name, value in PASSWORD_ENV.items():
            monkeypatch.setenv(name, value)
        monkeypatch.delenv("OS_CLOUD", raising=False)
        monkeypatch.delenv("OS_AUTH_TYPE", raising=False)
        monkeypatch.delenv("OS_TOKEN", raising=False)
        monkeypatch.delenv("OS_ACCESS_TOKEN", raising=False)

        assert type(from_env()) is PasswordAuth

    def test_token(self):
        auth = from_env({"OS_AUTH_URL": AUTH_URL, "OS_TOKEN": "T0"})
        assert type(auth) is Identity
        assert auth.method == TokenMethod(token="T0")

    def test_oidc(self):
        auth = from_env({
            "OS_AUTH_URL": AUTH_URL,
            "OS_IDENTITY_PROVIDER": "myidp",
            "OS_PROTOCOL": "openid",
            "OS_ACCESS_TOKEN": "oidc-access",
        })
        assert isinstance(auth.method, FederatedMethod)

    def test_noauth_from_endpoint(self):
        auth = from_env({"OS_ENDPOINT": "http://ironic:6385"})
        assert type(auth) is NoAuth
        assert auth.default_endpoint("baremetal") == "http://ironic:6385"

    def test_explicit_auth_type(self):
        assert type(from_env({"OS_AUTH_TYPE": "none"})) is NoAuth

    def test_invalid_auth_type(self):
        with pytest.raises(ConfigError, match="Invalid OS_AUTH_TYPE"):
            from_env({"OS_AUTH_TYPE": "kerberos"})

    def test_admin_token_auth_type_rejected(self):
        with pytest.raises(ConfigError, match="Invalid OS_AUTH_TYPE"):
            from_env({"OS_AUTH_TYPE": "admin_token", "OS_TOKEN": "T0", "OS_ENDPOINT": "https://nova.example.com"})

    def test_missing_password(self):
        env = {k: v for k, v in PASSWORD_ENV.items() if k != "OS_PASSWORD"}
        with pytest.raises(MissingEnv, match="OS_PASSWORD") as exc_info:
            from_env(env)
        assert exc_info.value.missing == ("OS_PASSWORD",)

    def test_missing_reports_every_variable(self):
        with pytest.raises(MissingEnv) as exc_info:
            from_env({})
        assert exc_info.value.missing == (
            "OS_AUTH_URL",
            "OS_USERNAME|OS_USER_ID",
            "OS_PASSWORD",
            "OS_PROJECT_NAME|OS_PROJECT_ID|OS_DOMAIN_NAME|OS_DOMAIN_ID",
        )

    def test_empty_values_count_as_missing(self):
        env = dict(PASSWORD_ENV, OS_PASSWORD="  ")
        with pytest.raises(MissingEnv, match="OS_PASSWORD"):
            from_env(env)

    def test_missing_token_auth_url(self):
        with pytest.raises(MissingEnv, match="OS_AUTH_URL"):
            from_env({"OS_TOKEN": "T0"})

    def test_os_cloud_delegates_to_clouds_yaml(self, tmp_path):
        path = write_clouds(tmp_path / "clouds.yaml", {"devstack": PASSWORD_CLOUD})
        auth = from_env({"OS_CLOUD": "devstack", "OS_CLIENT_CONFIG_FILE": str(path)})

        assert type(auth) is PasswordAuth
        assert auth.interface == "internal"

    def test_os_cloud_unknown(self, tmp_path):
        path = write_clouds(tmp_path / "clouds.yaml", {"devstack": PASSWORD_CLOUD})
        with pytest.raises(ConfigError, match="production"):
            from_env({"OS_CLOUD": "production", "OS_CLIENT_CONFIG_FILE": str(path)})


class TestResolveAuthType:
    """Tests for AuthMethodFactory.resolve_auth_type."""

    def test_explicit_alias_normalized(self):
        config = CloudConfig.model_validate({"auth_type": "V3Password"})
        assert AuthMethodFactory.resolve_auth_type(config).value == "password"

    def test_inferred_oidc(self):
        config = CloudConfig.model_validate({"auth": {"access_token": "x"}})
        assert AuthMethodFactory.resolve_auth_type(config).value == "v3oidcaccesstoken"
