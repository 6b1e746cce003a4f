#!/usr/bin/env python3
"""Validation script to check if all imports work correctly."""

import sys

def validate_imports():
    """Test that all modules can be imported."""
    print("Validating imports...")

    errors = []

    # Test config
    try:
        from github_pr_mcp import config
        print("✓ Config module")
    except Exception as e:
        errors.append(f"✗ Config: {e}")

    # Test GitHub modules
    try:
        from github_pr_mcp.github import client, models
        print("✓ GitHub modules")
    except Exception as e:
        errors.append(f"✗ GitHub modules: {e}")

    # Test PR modules
    try:
        from github_pr_mcp.pr import api, report
        print("✓ PR modules")
    except Exception as e:
        errors.append(f"✗ PR modules: {e}")

    # Test utilities
    try:
        from github_pr_mcp.utils import errors as error_utils, redact, logging_config
        print("✓ Utility modules")
    except Exception as e:
        errors.append(f"✗ Utilities: {e}")

    # Test launcher
    try:
        from github_pr_mcp import launcher
        print("✓ Launcher module")
    except Exception as e:
        errors.append(f"✗ Launcher: {e}")

    # Test MCP server
    try:
        from github_pr_mcp.server import mcp
        print(f"✓ MCP server instance ({mcp.name})")
    except Exception as e:
        errors.append(f"✗ MCP server: {e}")

    if errors:
        print("\n❌ Validation failed with errors:")
        for error in errors:
            print(f"  {error}")
        return False
    else:
        print("\n✅ All validations passed!")
        return True


def check_dependencies():
    """Check if required dependencies are installed."""
    print("\nChecking dependencies...")

    required = [
        "mcp",
        "httpx",
        "pydantic"
    ]

    missing = []

    for package in required:
        try:
            __import__(package)
            print(f"✓ {package}")
        except ImportError:
            missing.append(package)
            print(f"✗ {package} - NOT INSTALLED")

    if missing:
        print(f"\n❌ Missing packages: {', '.join(missing)}")
        print("Install with: pip install -e .")
        return False
    else:
        print("\n✅ All dependencies installed!")
        return True


def main():
    """Run all validations."""
    print("=" * 60)
    print("GitHub PR Analysis MCP - Validation Script")
    print("=" * 60)

    deps_ok = check_dependencies()
    print()

    if not deps_ok:
        return 1

    if not validate_imports():
        return 1

    print("\n" + "=" * 60)
    print("🎉 Ready to use!")
    print("=" * 60)
    print("\nNext steps:")
    print("  1. Serve over HTTP: python -m github_pr_mcp.server")
    print("  2. Or analyze one PR: PR_OWNER=... PR_REPO=... PR_NUMBER=... GITHUB_TOKEN=... python -m github_pr_mcp.launcher")
    return 0


if __name__ == "__main__":
    sys.exit(main())
