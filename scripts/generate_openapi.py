#!/usr/bin/env python3
"""
Gateway routing template generator.

Writes the OpenAPI 3.0 document describing one POST route per gateway
function, for the provisioning layer to hand to API Gateway.
"""

import argparse
import json
import sys
from pathlib import Path

import yaml

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from deploy.gateway import build_gateway_spec, validate_gateway_spec  # noqa: E402
from deploy.settings import DeploySettings  # noqa: E402


def parse_invoke_arns(values):
    """Parse ``name=arn`` pairs."""
    arns = {}
    for value in values:
        name, sep, arn = value.partition("=")
        if not sep or not name or not arn:
            raise argparse.ArgumentTypeError(f"Expected NAME=ARN, got {value!r}")
        arns[name] = arn
    return arns


def main():
    """Main function for the gateway template generator."""
    project_root = Path(__file__).parent.parent

    parser = argparse.ArgumentParser(
        description="Generate the gateway routing template for the gateway functions"
    )
    parser.add_argument(
        "--format",
        choices=["json", "yaml"],
        default="yaml",
        help="Output format (default: yaml)"
    )
    parser.add_argument(
        "--out-destination",
        default=".",
        help="Output directory (default: current directory)"
    )
    parser.add_argument(
        "--out-filename",
        help="Output filename (default: openapi.{format})"
    )
    parser.add_argument(
        "--region",
        help="Target region (default: $AWS_REGION or us-east-1)"
    )
    parser.add_argument(
        "--invoke-arn",
        action="append",
        default=[],
        metavar="NAME=ARN",
        help="Invoke ARN of a handler; placeholders are emitted for the rest"
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate the generated specification"
    )

    args = parser.parse_args()

    settings = DeploySettings.from_project(project_root, region=args.region)
    try:
        invoke_arns = parse_invoke_arns(args.invoke_arn)
        spec = build_gateway_spec(settings, invoke_arns)
    except (argparse.ArgumentTypeError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(2)

    if args.validate and not validate_gateway_spec(spec):
        sys.exit(1)

    filename = args.out_filename or f"openapi.{args.format}"
    output_dir = Path(args.out_destination)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / filename

    with open(output_path, "w", encoding="utf-8") as f:
        if args.format == "json":
            json.dump(spec, f, indent=2, ensure_ascii=False)
        else:
            yaml.safe_dump(spec, f, default_flow_style=False, allow_unicode=True, sort_keys=False)

    print(f"Gateway template written to: {output_path}")
    print(f"Routes: {', '.join(spec['paths'])}")


if __name__ == "__main__":
    main()
