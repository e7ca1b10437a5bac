import json

import pytest
import requests

from target_netsuite_tba.client import NetSuiteTBAClient
from target_netsuite_tba.credentials import NetSuiteCredential, RestletDeployment

CONFIG = {
    "ns_account": "1234567_SB1",
    "ns_realm": "1234567-SB1",
    "ns_consumer_key": "test_consumer_key",
    "ns_consumer_secret": "test_consumer_secret",
    "ns_token_key": "test_token_id",
    "ns_token_secret": "test_token_secret",
    "ns_script_id": "customscript_my_restlet",
    "ns_deploy_id": "customdeploy_my_restlet",
}


def make_response(status_code=200, body=None, headers=None, url="https://1234567-sb1.suitetalk.api.netsuite.com/"):
    response = requests.Response()
    response.status_code = status_code
    if body is None:
        response._content = b""
    elif isinstance(body, str):
        response._content = body.encode("utf-8")
    else:
        response._content = json.dumps(body).encode("utf-8")
    response.headers.update(headers or {})
    response.url = url
    response.encoding = "utf-8"
    return response


@pytest.fixture
def config():
    return dict(CONFIG)


@pytest.fixture
def credential(config):
    return NetSuiteCredential.from_config(config)


@pytest.fixture
def deployment(config):
    return RestletDeployment.from_config(config)


@pytest.fixture
def session():
    return requests.Session()


@pytest.fixture
def client(credential, deployment, session):
    return NetSuiteTBAClient(credential, deployment=deployment, session=session)


@pytest.fixture(name="make_response")
def make_response_fixture():
    return make_response
