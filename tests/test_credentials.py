import pytest

from target_netsuite_tba.credentials import NetSuiteCredential, RestletDeployment
from target_netsuite_tba.exceptions import MissingCredentialError


def test_from_config(config):
    credential = NetSuiteCredential.from_config(config)

    assert credential.account_id == "1234567_SB1"
    assert credential.realm == "1234567-SB1"
    assert credential.consumer_key == "test_consumer_key"
    assert credential.token_id == "test_token_id"


def test_normalized_only_touches_realm(credential):
    normalized = credential.normalized()

    assert normalized.realm == "1234567_SB1"
    assert normalized.account_id == credential.account_id
    assert normalized.consumer_secret == credential.consumer_secret
    assert normalized.normalized() == normalized


def test_realm_falls_back_to_account(config):
    del config["ns_realm"]
    assert NetSuiteCredential.from_config(config).realm == "1234567_SB1"


def test_account_host(credential):
    assert credential.account_host == "1234567-sb1"


def test_missing_keys_are_listed_without_values(config):
    del config["ns_consumer_secret"]
    config["ns_token_key"] = ""

    with pytest.raises(MissingCredentialError) as excinfo:
        NetSuiteCredential.from_config(config)

    assert excinfo.value.missing == ["ns_consumer_secret", "ns_token_key"]
    assert "test_token_secret" not in str(excinfo.value)


def test_repr_hides_secrets(credential):
    text = repr(credential)
    assert "test_consumer_key" in text
    assert "test_consumer_secret" not in text
    assert "test_token_secret" not in text


def test_deployment_is_only_required_when_asked(config):
    del config["ns_script_id"]
    NetSuiteCredential.from_config(config)

    with pytest.raises(MissingCredentialError, match="ns_script_id"):
        RestletDeployment.from_config(config)


def test_deployment_from_config(deployment):
    assert deployment == RestletDeployment(script_id="customscript_my_restlet", deploy_id="customdeploy_my_restlet")
