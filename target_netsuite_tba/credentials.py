"""Credential views derived from the target config."""

from dataclasses import dataclass, field, replace

from target_netsuite_tba.exceptions import MissingCredentialError
from target_netsuite_tba.oauth import normalize_realm

CREDENTIAL_KEYS = {
    "account_id": "ns_account",
    "consumer_key": "ns_consumer_key",
    "consumer_secret": "ns_consumer_secret",
    "token_id": "ns_token_key",
    "token_secret": "ns_token_secret",
}

DEPLOYMENT_KEYS = {
    "script_id": "ns_script_id",
    "deploy_id": "ns_deploy_id",
}


def _read_keys(config: dict, keys: dict) -> dict:
    missing = [config_key for config_key in keys.values() if not config.get(config_key)]
    if missing:
        raise MissingCredentialError(missing)
    return {attr: str(config[config_key]) for attr, config_key in keys.items()}


@dataclass(frozen=True)
class NetSuiteCredential:
    """OAuth1 identity shared by every NetSuite call."""

    account_id: str
    realm: str
    consumer_key: str
    consumer_secret: str = field(repr=False)
    token_id: str
    token_secret: str = field(repr=False)

    @classmethod
    def from_config(cls, config: dict) -> "NetSuiteCredential":
        values = _read_keys(config, CREDENTIAL_KEYS)
        # Older configs only carry the account id, which doubles as the realm.
        realm = config.get("ns_realm") or values["account_id"]
        return cls(realm=str(realm), **values)

    def normalized(self) -> "NetSuiteCredential":
        return replace(self, realm=normalize_realm(self.realm))

    @property
    def account_host(self) -> str:
        """Account id as it appears in NetSuite hostnames (``1234567-sb1``)."""
        return self.account_id.lower().replace("_", "-")


@dataclass(frozen=True)
class RestletDeployment:
    """Script and deployment a RESTlet call is addressed to."""

    script_id: str
    deploy_id: str

    @classmethod
    def from_config(cls, config: dict) -> "RestletDeployment":
        return cls(**_read_keys(config, DEPLOYMENT_KEYS))
