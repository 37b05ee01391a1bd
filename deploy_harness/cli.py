"""
Deploy Harness command line

Deploys artifact files against a node. Without --rpc-url (or
DEPLOY_HARNESS_RPC_URL) an in-process eth-tester chain is used, which is
discarded on exit; that mode is useful for checking that artifacts deploy.
"""

import argparse
import asyncio
import json
import sys
from typing import Any, List, Optional

from .check_setup import main as check_setup_main
from .config import HarnessConfig
from .deployer import deploy_proxy_contract, deploy_test_contract
from .harness_env import HarnessEnvironment


def _build_config(args: argparse.Namespace) -> HarnessConfig:
    overrides = {}
    if args.rpc_url:
        overrides["rpc_url"] = args.rpc_url
    if getattr(args, "gas_limit", None) is not None:
        overrides["deploy_gas_limit"] = args.gas_limit
        overrides["proxy_gas_limit"] = args.gas_limit
    return HarnessConfig.from_env(**overrides)


def _parse_init_values(raw: Optional[str]) -> List[Any]:
    if not raw:
        return []
    values = json.loads(raw)
    if not isinstance(values, list):
        raise ValueError("--init-values must be a JSON array")
    return values


async def run_deploy(args: argparse.Namespace) -> int:
    async with HarnessEnvironment(_build_config(args)) as env:
        result = await deploy_test_contract(env, args.artifact)

    if not result.ok:
        return 1
    # Result JSON is the last line of output
    print(json.dumps({"artifact": result.artifact_name, "address": result.address}))
    return 0


async def run_deploy_proxy(args: argparse.Namespace) -> int:
    init_values = _parse_init_values(args.init_values)

    async with HarnessEnvironment(_build_config(args)) as env:
        result = await deploy_proxy_contract(
            env,
            env.identities.wallet,
            args.proxy,
            args.logic,
            args.init_types,
            init_values,
        )

    if not result.ok:
        print(f"❌ Failed at stage: {result.stage}")
        return 1
    print(json.dumps({"proxy": result.binding.address, "logic": result.binding.logic_address}))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deploy-harness",
        description="Deploy contract artifacts against a test node",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Check dependencies and node connectivity
  deploy-harness check

  # Deploy one artifact to a local Anvil node
  deploy-harness deploy build/Token.json --rpc-url http://127.0.0.1:8545

  # Deploy and initialize a proxy + logic pair
  deploy-harness deploy-proxy build/Proxy.json build/Governance.json \\
      --init-types address uint256 --init-values '["0x...", 42]'
        """,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    deploy = subparsers.add_parser("deploy", help="Deploy a single artifact")
    deploy.add_argument("artifact", help="Path to artifact JSON")
    deploy.add_argument("--rpc-url", type=str, default=None, help="Node RPC URL (default: eth-tester)")
    deploy.add_argument("--gas-limit", type=int, default=None, help="Deployment gas limit")

    proxy = subparsers.add_parser("deploy-proxy", help="Deploy and initialize a proxy + logic pair")
    proxy.add_argument("proxy", help="Path to proxy artifact JSON")
    proxy.add_argument("logic", help="Path to logic artifact JSON")
    proxy.add_argument("--init-types", nargs="*", default=[], help="ABI types of initialization args")
    proxy.add_argument("--init-values", type=str, default=None, help="Initialization args as a JSON array")
    proxy.add_argument("--rpc-url", type=str, default=None, help="Node RPC URL (default: eth-tester)")
    proxy.add_argument("--gas-limit", type=int, default=None, help="Gas limit for each deployment")

    check = subparsers.add_parser("check", help="Check dependencies and node connectivity")
    check.add_argument("--rpc-url", type=str, default=None, help="Node RPC URL (default: eth-tester)")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "check":
        return check_setup_main(_build_config(args))

    try:
        if args.command == "deploy":
            return asyncio.run(run_deploy(args))
        return asyncio.run(run_deploy_proxy(args))
    except (ConnectionError, ValueError) as e:
        print(f"❌ {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
