from __future__ import annotations

import json
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import boto3
import botocore
import pytest
import requests
from jsonschema import Draft202012Validator

from scripts.deploy import deploy_function

LOCALSTACK_ENDPOINT = os.getenv("AWS_ENDPOINT", "http://localhost:4566")
DEFAULT_REGION = os.getenv("REGION", "us-east-1")
FUNCTION_NAME = os.getenv("FUNCTION_NAME", "http_example")
AWS_FAKE_CREDS = {
    "AWS_ACCESS_KEY_ID": "test",
    "AWS_SECRET_ACCESS_KEY": "test",
    "AWS_SESSION_TOKEN": "test",
}


@pytest.fixture(scope="session", autouse=True)
def aws_credentials() -> Dict[str, str]:
    """Ensure AWS creds exist for boto3 even when running offline."""
    for key, value in AWS_FAKE_CREDS.items():
        os.environ.setdefault(key, value)
    os.environ.setdefault("AWS_DEFAULT_REGION", DEFAULT_REGION)
    return AWS_FAKE_CREDS


@pytest.fixture(scope="session")
def localstack() -> str:
    """Skip LocalStack-backed tests when no LocalStack answers on the endpoint."""
    try:
        response = requests.get(f"{LOCALSTACK_ENDPOINT}/_localstack/health", timeout=2)
    except requests.RequestException as e:
        pytest.skip(f"LocalStack not reachable at {LOCALSTACK_ENDPOINT}: {e}")
    if not response.ok:
        pytest.skip(f"LocalStack health check returned {response.status_code}")
    services = response.json().get("services", {})
    if services.get("lambda") not in ("available", "running"):
        pytest.skip("LocalStack lambda service not available")
    return LOCALSTACK_ENDPOINT


@pytest.fixture(scope="session")
def boto3_session(aws_credentials) -> boto3.session.Session:
    return boto3.session.Session(region_name=os.environ["AWS_DEFAULT_REGION"])


@pytest.fixture
def boto3_client(boto3_session: boto3.session.Session, localstack: str):
    """Factory fixture returning configured boto3 clients for LocalStack."""
    created = []

    def _factory(service: str, **overrides: Any):
        client = boto3_session.client(
            service,
            endpoint_url=overrides.pop("endpoint_url", localstack),
            use_ssl=False,
            verify=False,
            config=botocore.config.Config(retries={"max_attempts": 3}),
            **overrides,
        )
        created.append(client)
        return client

    yield _factory

    for client in created:
        client.close()


@pytest.fixture(scope="session")
def deployed_function(pytestconfig: pytest.Config, boto3_session, localstack: str) -> Dict[str, str]:
    """Deploy the function once per session unless --skip-deploy is given."""
    client = boto3_session.client("lambda", endpoint_url=localstack)
    if pytestconfig.getoption("--skip-deploy"):
        url = client.get_function_url_config(FunctionName=FUNCTION_NAME)["FunctionUrl"]
        return {"function_name": FUNCTION_NAME, "function_url": url}
    return deploy_function(FUNCTION_NAME, client=client)


@pytest.fixture(scope="session")
def contract_schema(pytestconfig: pytest.Config) -> Dict[str, Any]:
    contracts_dir = Path(pytestconfig.getoption("--contracts-dir"))
    schema_path = contracts_dir / "contract.schema.json"
    with schema_path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


@pytest.fixture(scope="session")
def contract_validator(contract_schema: Dict[str, Any]) -> Draft202012Validator:
    return Draft202012Validator(contract_schema)


@pytest.fixture(scope="session")
def contracts(pytestconfig: pytest.Config) -> Iterable[Path]:
    contracts_dir = Path(pytestconfig.getoption("--contracts-dir"))
    return sorted(contracts_dir.glob("*.yaml"))


@pytest.fixture
def contract_context(deployed_function: Dict[str, str], boto3_client):
    return ContractContext(deployed_function, boto3_client)


@dataclass
class ContractContext:
    deployment: Dict[str, str]
    boto3_client_factory: Any

    def __post_init__(self) -> None:
        self.log_client = self.boto3_client_factory("logs")
        self.lambda_client = self.boto3_client_factory("lambda")

    @property
    def function_url(self) -> str:
        return self.deployment["function_url"]

    def lambda_physical_name(self, logical_name: str) -> str:
        if logical_name == "http_example":
            return self.deployment["function_name"]
        return logical_name

    def invoke_lambda(self, function_name: str, payload: Any) -> Dict[str, Any]:
        raw_payload = (
            payload
            if isinstance(payload, (bytes, bytearray))
            else json.dumps(payload).encode("utf-8")
        )
        response = self.lambda_client.invoke(
            FunctionName=function_name,
            Payload=raw_payload,
            InvocationType="RequestResponse",
        )
        payload_bytes = response["Payload"].read()
        body = payload_bytes.decode("utf-8")
        try:
            body_json = json.loads(body)
        except json.JSONDecodeError:
            body_json = body
        # proxy responses carry their JSON as a string; expose it parsed too
        if isinstance(body_json, dict) and isinstance(body_json.get("body"), str):
            try:
                body_json["json_body"] = json.loads(body_json["body"])
            except json.JSONDecodeError:
                pass
        return {
            "status_code": response.get("StatusCode"),
            "function_error": response.get("FunctionError"),
            "payload": body_json,
            "raw_payload": payload_bytes,
        }

    def wait_for_assertion(
        self,
        func,
        timeout: int = 20,
        interval: float = 1.0,
    ) -> Any:
        deadline = time.time() + timeout
        last_exc: Optional[AssertionError] = None
        while time.time() <= deadline:
            try:
                return func()
            except AssertionError as exc:
                last_exc = exc
                time.sleep(interval)
        raise AssertionError(str(last_exc) if last_exc else "timeout waiting for assertion")
