#!/usr/bin/env python3
"""
Deploy Harness Setup Checker

Verifies that dependencies are importable, a Solidity compiler is available
and the configured node answers.
"""

import asyncio
import importlib
import sys
from typing import Optional

from .config import HarnessConfig

REQUIRED_MODULES = [
    ("web3", "web3.py"),
    ("eth_account", "eth-account"),
    ("eth_abi", "eth-abi"),
    ("eth_utils", "eth-utils"),
    ("eth_tester", "eth-tester"),
    ("solcx", "py-solc-x"),
]


def check_module_importable(module_name: str, description: str) -> bool:
    """Check if a module can be imported"""
    try:
        importlib.import_module(module_name)
    except ImportError as e:
        print(f"❌ {description}: {e}")
        return False
    print(f"✅ {description}: {module_name}")
    return True


def check_solc_installed() -> bool:
    """Check if py-solc-x has at least one compiler installed"""
    try:
        import solcx

        versions = solcx.get_installed_solc_versions()
    except Exception as e:
        print(f"❌ solc: {e}")
        return False

    if not versions:
        print("⚠️  solc: no compiler installed (compile_artifact installs on first use)")
        return False

    print(f"✅ solc: {', '.join(str(v) for v in versions)}")
    return True


async def check_node(config: HarnessConfig) -> bool:
    """Check that the node answers and exposes enough identities"""
    from .harness_env import HarnessEnvironment

    env = HarnessEnvironment(config)
    try:
        info = await env.start()
    except Exception as e:
        print(f"❌ Node {env.node_label}: {e}")
        return False
    finally:
        await env.stop()

    print(f"✅ Node {info['node']}: chain {info['chain_id']}, block {info['block_number']}")
    return True


def main(config: Optional[HarnessConfig] = None) -> int:
    print("=" * 80)
    print("🔍 Deploy Harness Setup Checker")
    print("=" * 80)
    print()

    config = config if config is not None else HarnessConfig.from_env()
    all_checks_passed = True

    print("📚 Dependencies:")
    for module_name, description in REQUIRED_MODULES:
        all_checks_passed &= check_module_importable(module_name, description)
    print()

    # A missing compiler is not fatal; prebuilt artifacts still deploy
    print("🔧 Solidity Compiler:")
    check_solc_installed()
    print()

    print("🌐 Node:")
    all_checks_passed &= asyncio.run(check_node(config))
    print()

    print("=" * 80)
    if all_checks_passed:
        print("✅ ALL CHECKS PASSED - Harness is ready to use!")
    else:
        print("❌ SOME CHECKS FAILED - Please review errors above")
    print("=" * 80)

    return 0 if all_checks_passed else 1


if __name__ == "__main__":
    sys.exit(main())
