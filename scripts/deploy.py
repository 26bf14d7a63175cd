#!/usr/bin/env python3
"""
Package lambdas/http_example and deploy it to LocalStack with a function URL.
"""
import argparse
import importlib
import io
import os
import zipfile
from pathlib import Path
from typing import Dict, Optional

import boto3
from botocore.exceptions import ClientError

ROOT = Path(__file__).resolve().parents[1]
LAMBDA_DIR = ROOT / "lambdas" / "http_example"
HANDLER = "http_example.handler.handler"
RUNTIME = "python3.12"
ROLE_ARN = "arn:aws:iam::000000000000:role/lambda-role"

EXCLUDED_NAMES = {"__pycache__", "test_config.yaml"}
VENDORED_PACKAGES = ("tzdata",)


def lambda_client():
    return boto3.client(
        "lambda",
        endpoint_url=os.environ.get("AWS_ENDPOINT", "http://localhost:4566"),
        region_name=os.environ.get("REGION", "us-east-1"),
        aws_access_key_id="test",
        aws_secret_access_key="test",
    )


def _write_tree(archive: zipfile.ZipFile, source_dir: Path) -> None:
    for path in sorted(source_dir.rglob("*")):
        relative = path.relative_to(source_dir)
        if path.is_dir() or EXCLUDED_NAMES.intersection(relative.parts):
            continue
        if path.suffix == ".pyc":
            continue
        archive.write(path, str(Path(source_dir.name) / relative))


def build_zip(source_dir: Path = LAMBDA_DIR) -> bytes:
    """Zip the package so the archive root holds ``http_example/``.

    Runtime dependencies in VENDORED_PACKAGES are copied in next to it from
    the local install, so ``TIMEZONE`` resolves without a system zoneinfo.
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        _write_tree(archive, source_dir)
        for package in VENDORED_PACKAGES:
            module = importlib.import_module(package)
            _write_tree(archive, Path(module.__file__).parent)
    return buffer.getvalue()


def _ensure_function_url(client, function_name: str) -> str:
    try:
        return client.get_function_url_config(FunctionName=function_name)["FunctionUrl"]
    except client.exceptions.ResourceNotFoundException:
        pass
    config = client.create_function_url_config(FunctionName=function_name, AuthType="NONE")
    return config["FunctionUrl"]


def deploy_function(
    function_name: str = "http_example",
    client=None,
    environment: Optional[Dict[str, str]] = None,
) -> Dict[str, str]:
    """Create or update the function and return its name and URL."""
    client = client or lambda_client()
    code = build_zip()
    env = {"Variables": {"LOG_LEVEL": "INFO", **(environment or {})}}
    try:
        client.create_function(
            FunctionName=function_name,
            Runtime=RUNTIME,
            Role=ROLE_ARN,
            Handler=HANDLER,
            Code={"ZipFile": code},
            Environment=env,
            Timeout=10,
        )
        print(f"Created function {function_name}")
    except ClientError as e:
        if e.response["Error"]["Code"] != "ResourceConflictException":
            raise
        client.update_function_code(FunctionName=function_name, ZipFile=code)
        client.get_waiter("function_updated_v2").wait(FunctionName=function_name)
        client.update_function_configuration(FunctionName=function_name, Environment=env)
        print(f"Updated function {function_name}")

    client.get_waiter("function_active_v2").wait(FunctionName=function_name)
    client.get_waiter("function_updated_v2").wait(FunctionName=function_name)
    url = _ensure_function_url(client, function_name)
    return {"function_name": function_name, "function_url": url}


def main():
    p = argparse.ArgumentParser(description="Deploy the http_example function to LocalStack.")
    p.add_argument("--function", default=os.environ.get("FUNCTION_NAME", "http_example"))
    args = p.parse_args()
    result = deploy_function(args.function)
    print(f"Function URL: {result['function_url']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
