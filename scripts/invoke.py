import argparse
import json
import os

import boto3


def parse(argv=None):
    p = argparse.ArgumentParser(description="Invoke the function through the Lambda API.")
    p.add_argument("--function", default=os.environ.get("FUNCTION_NAME", "http_example"))
    p.add_argument("--payload", help="Raw JSON event; overrides --name/--body/--header")
    p.add_argument("--name", help="Sent as ?name= on an API Gateway event")
    p.add_argument("--body", help="Raw request body")
    p.add_argument("--method", default=None, help="Defaults to POST with a body, GET otherwise")
    p.add_argument("--header", action="append", default=[], metavar="KEY:VALUE")
    return p.parse_args(argv)


def build_event(args) -> dict:
    if args.payload:
        return json.loads(args.payload)
    headers = {}
    for item in args.header:
        key, sep, value = item.partition(":")
        if not sep:
            raise SystemExit(f"Invalid header {item!r}, expected KEY:VALUE")
        headers[key.strip()] = value.strip()
    method = args.method or ("POST" if args.body is not None else "GET")
    return {
        "resource": "/api/HttpExample",
        "path": "/api/HttpExample",
        "httpMethod": method,
        "headers": headers,
        "queryStringParameters": {"name": args.name} if args.name is not None else None,
        "body": args.body,
        "isBase64Encoded": False,
    }


def main(argv=None):
    a = parse(argv)
    client = boto3.client(
        "lambda",
        endpoint_url=os.environ.get("AWS_ENDPOINT", "http://localhost:4566"),
        region_name=os.environ.get("REGION", "us-east-1"),
        aws_access_key_id="test",
        aws_secret_access_key="test",
    )
    resp = client.invoke(FunctionName=a.function, Payload=json.dumps(build_event(a)).encode())
    print(resp["StatusCode"], resp.get("FunctionError"))
    raw = resp["Payload"].read().decode()
    print(raw)
    if resp.get("FunctionError"):
        return 1
    try:
        result = json.loads(raw)
    except json.JSONDecodeError:
        return 0
    # proxy responses carry their own HTTP status
    if isinstance(result, dict) and isinstance(result.get("statusCode"), int):
        return 1 if result["statusCode"] >= 400 else 0
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
