#!/usr/bin/env python3
"""
Build script for the gateway function artifacts
"""
import argparse
import sys
from pathlib import Path

# Make the deploy and service packages importable from a plain checkout
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from deploy.artifact import build_all, write_manifest  # noqa: E402
from deploy.exceptions import BuildError  # noqa: E402
from deploy.settings import DeploySettings  # noqa: E402


def main():
    """Main build function"""
    project_root = Path(__file__).parent.parent

    parser = argparse.ArgumentParser(description="Package gateway functions into zip artifacts")
    parser.add_argument(
        "handlers",
        nargs="*",
        help="Handler names to build (default: every src/<name>/index.py)"
    )
    parser.add_argument(
        "--dist",
        default=str(project_root / "dist"),
        help="Output directory (default: dist)"
    )
    parser.add_argument(
        "--region",
        help="Target region recorded in the manifest (default: $AWS_REGION or us-east-1)"
    )
    parser.add_argument(
        "--jobs",
        type=int,
        default=None,
        help="Parallel builds (default: one per CPU)"
    )
    parser.add_argument(
        "--platform",
        help="pip platform tag for bundled dependencies, e.g. manylinux2014_x86_64 (default: this machine)"
    )
    args = parser.parse_args()

    settings = DeploySettings.from_project(
        project_root,
        handlers=args.handlers or None,
        region=args.region,
        dist_dir=Path(args.dist),
        platform=args.platform,
    )

    print(f"Building Lambda functions: {settings.handlers}")

    try:
        results = build_all(settings, max_workers=args.jobs)
    except BuildError as e:
        print(f"Build failed for {e.handler}: {e.message}")
        sys.exit(1)

    for result in results:
        print(f"{result.artifact.name} created ({result.size_bytes} bytes, sha256 {result.sha256})")

    manifest = write_manifest(results, settings)
    print(f"Manifest written to {manifest}")
    print("Build complete!")


if __name__ == "__main__":
    main()
