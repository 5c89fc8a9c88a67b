"""
Create, update, re-apply and delete a small test stack.

Creates an IAM role, so the credentials used need IAM permissions.

Usage:
    python examples/deploy_test_stack.py --region eu-west-1 --profile dev
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from cfn_stack import CfnStackError, Stack

TEMPLATE_PATH = Path(__file__).parent / "cloudformation.yaml"


async def main(region: str, profile: str | None) -> None:
    template = TEMPLATE_PATH.read_text()

    async with Stack("cfn-stack-test", region=region, profile=profile) as stack:
        # Create stack and log events
        await stack.create_or_update(template, {"Env": "test1"})
        print("Outputs: " + json.dumps(await stack.get_outputs()))
        await asyncio.sleep(0.5)

        # Update stack and log events
        await stack.create_or_update(template, {"Env": "test2"})
        print(json.dumps(await stack.get_outputs()))
        await asyncio.sleep(0.5)

        # Update unchanged stack
        await stack.create_or_update(template, {"Env": "test2"})
        print(json.dumps(await stack.get_outputs()))

        await stack.delete()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--region", default="eu-west-1")
    parser.add_argument("--profile")
    args = parser.parse_args()

    try:
        asyncio.run(main(args.region, args.profile))
    except CfnStackError as e:
        print(e, file=sys.stderr)
        sys.exit(1)
