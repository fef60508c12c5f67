#!/usr/bin/env python3
"""
Setup Verification Script

Validates configuration, static data and the Claude connection before
running the application.
Run this after setting up your .env file to ensure everything is configured correctly.

Usage:
    python scripts/verify_setup.py
"""

import asyncio
import os
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Load environment variables
from dotenv import load_dotenv
load_dotenv()


def print_header(title: str) -> None:
    """Print section header."""
    print(f"\n{'='*60}")
    print(f" {title}")
    print(f"{'='*60}")


def print_result(name: str, success: bool, message: str = "") -> None:
    """Print check result."""
    status = "[PASS]" if success else "[FAIL]"
    color = "\033[92m" if success else "\033[91m"
    reset = "\033[0m"
    msg = f" - {message}" if message else ""
    print(f"  {color}{status}{reset} {name}{msg}")


def check_env_file() -> bool:
    """Check if .env file exists."""
    env_path = project_root / ".env"
    exists = env_path.exists()
    if not exists:
        print_result(".env file", False, "File not found. Settings fall back to environment and defaults")
    else:
        print_result(".env file", True, "Found")
    return exists


def check_api_key() -> bool:
    """Check the Anthropic API key."""
    value = os.getenv("ANTHROPIC_API_KEY", "")

    if not value:
        print_result("ANTHROPIC_API_KEY", False, "Not set - chat will only return fallback messages")
        return False
    if value == "your-api-key-here":
        print_result("ANTHROPIC_API_KEY", False, "Still using placeholder value")
        return False

    masked = f"{value[:8]}...{value[-4:]}" if len(value) > 12 else "***"
    print_result("ANTHROPIC_API_KEY", True, f"Set ({masked})")
    return True


def check_optional_vars() -> None:
    """Check optional environment variables."""
    optional = [
        ("APP_ENV", "development"),
        ("DEBUG", "false"),
        ("PORT", "3000"),
        ("CORS_ORIGINS", "*"),
        ("CLAUDE_CHAT_MODEL", "claude-sonnet-4-20250514"),
        ("DATA_DIR", "app/data"),
    ]

    for var, default in optional:
        value = os.getenv(var, default)
        print_result(var, True, f"{value}")


def check_catalog() -> bool:
    """Load the resource, tip and language tables."""
    try:
        from app.core.resources.catalog import get_catalog

        catalog = get_catalog()
        print_result(
            "Static data",
            True,
            f"{len(catalog.resource_categories)} resource categories, "
            f"{len(catalog.tip_categories)} tip categories, "
            f"{len(catalog.language_names)} languages",
        )
        return True

    except Exception as e:
        print_result("Static data", False, str(e)[:80])
        return False


async def check_anthropic() -> bool:
    """Verify the Claude chat model answers."""
    try:
        from app.core.triage.types import CompletionParams
        from app.infra.claude import ClaudeClient

        client = ClaudeClient(fallback_model="")

        # Make a minimal API call to verify the key and model
        await client.complete(
            [{"role": "user", "content": "Hi"}],
            CompletionParams(temperature=0.0, max_tokens=10),
        )
        await client.close()

        print_result("Anthropic API", True, "Chat model answered")
        return True

    except Exception as e:
        error_msg = str(e)
        if "authentication" in error_msg.lower() or "api_key" in error_msg.lower():
            print_result("Anthropic API", False, "Invalid API key")
        elif "rate" in error_msg.lower():
            print_result("Anthropic API", True, "Key valid (rate limited)")
            return True
        else:
            print_result("Anthropic API", False, error_msg[:50])
        return False


async def check_running_server() -> bool:
    """Check if the API is already running locally."""
    url = f"http://localhost:{os.getenv('PORT', '3000')}"

    try:
        import httpx

        async with httpx.AsyncClient(timeout=5.0) as client:
            response = await client.get(f"{url}/health")

            if response.status_code == 200:
                print_result("Crisis API", True, f"Running at {url}")
                return True
            else:
                print_result("Crisis API", False, f"Responded with {response.status_code}")
                return False

    except Exception:
        print_result("Crisis API", False, f"Not running at {url} (start it with python -m app.main)")
        return False


def check_dependencies() -> bool:
    """Check if required Python packages are installed."""
    required_packages = [
        "fastapi",
        "uvicorn",
        "pydantic",
        "pydantic_settings",
        "httpx",
        "anthropic",
    ]

    missing = []
    for package in required_packages:
        try:
            __import__(package.replace("-", "_"))
        except ImportError:
            missing.append(package)

    if missing:
        print_result("Python packages", False, f"Missing: {', '.join(missing)}")
        return False
    else:
        print_result("Python packages", True, "All required packages installed")
        return True


async def main():
    """Run all verification checks."""
    print("\n" + "="*60)
    print(" BoweryConnect Crisis API - Setup Verification")
    print("="*60)

    all_passed = True
    critical_failed = False

    print_header("Environment File")
    if not check_env_file():
        all_passed = False

    print_header("Python Dependencies")
    if not check_dependencies():
        all_passed = False
        critical_failed = True

    print_header("Static Data")
    if not check_catalog():
        all_passed = False
        critical_failed = True

    print_header("Environment Variables")
    has_key = check_api_key()
    check_optional_vars()

    print_header("Service Connections")
    if has_key:
        if not await check_anthropic():
            all_passed = False
    else:
        all_passed = False
        print_result("Anthropic API", False, "Skipped - ANTHROPIC_API_KEY not set")

    await check_running_server()  # Non-critical

    # Summary
    print_header("Summary")

    if critical_failed:
        print("\n  \033[91mCRITICAL: The application cannot start.\033[0m")
        print("  Please fix the issues above before running the application.")
        print()
        return 1
    elif not all_passed:
        print("\n  \033[93mWARNING: Some checks failed.\033[0m")
        print("  The API will start, but chat replies will use the fallback message.")
        if not has_key:
            print("  Get an API key from https://console.anthropic.com/")
            print("  Add to .env: ANTHROPIC_API_KEY=sk-ant-...")
        print()
        return 0
    else:
        print("\n  \033[92mAll checks passed!\033[0m")
        print("  You can start the application with:")
        print("    uvicorn app.main:app --reload --port 3000")
        print()
        return 0


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
