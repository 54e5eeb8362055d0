#!/usr/bin/env python3
"""Deterministic smoke test script for a running directory API."""

import argparse
import sys
from datetime import datetime

import requests


def _headers(user_id: str) -> dict:
    return {"X-User-Id": user_id}


def create_tool(api_base_url: str, user_id: str, title: str) -> str | None:
    """Create a private tool and return its ID."""
    url = f"{api_base_url}/api/tools"
    payload = {
        "title": title,
        "description": f"Smoke test tool created at {datetime.now().isoformat()}",
        "category": "Smoke Tests",
        "tags": ["smoke"],
        "visibility": "private",
        "pricing": "Free",
    }

    print(f"  Creating tool '{title}'...")
    try:
        response = requests.post(url, json=payload, headers=_headers(user_id), timeout=30)
        if response.status_code == 201:
            tool_id = response.json()["id"]
            print(f"    Created {tool_id}")
            return tool_id
        print(f"    Failed: HTTP {response.status_code} - {response.text}")
        return None
    except requests.exceptions.RequestException as e:
        print(f"    Failed: {e}")
        return None


def list_contains(api_base_url: str, user_id: str | None, tool_id: str) -> bool:
    """Whether the tool shows up in the caller's filtered listing."""
    url = f"{api_base_url}/api/tools"
    params = {"category": "Smoke Tests", "search": "smoke", "limit": 100}
    headers = _headers(user_id) if user_id else {}
    response = requests.get(url, params=params, headers=headers, timeout=30)
    response.raise_for_status()
    return any(record["id"] == tool_id for record in response.json()["records"])


def check_visibility(api_base_url: str, owner_id: str, tool_id: str) -> bool:
    """The owner sees the private tool; an anonymous caller does not."""
    print("  Checking listing visibility...")
    try:
        owner_sees = list_contains(api_base_url, owner_id, tool_id)
        anonymous_sees = list_contains(api_base_url, None, tool_id)
    except requests.exceptions.RequestException as e:
        print(f"    Failed: {e}")
        return False
    print(f"    Owner sees it: {owner_sees}; anonymous sees it: {anonymous_sees}")
    return owner_sees and not anonymous_sees


def rate_tool(api_base_url: str, user_id: str, tool_id: str) -> bool:
    """Rate twice as the same user; the second rating replaces the first."""
    url = f"{api_base_url}/api/tools/{tool_id}/rate"

    print("  Rating tool twice...")
    try:
        for rating in (2, 5):
            response = requests.post(url, json={"rating": rating}, headers=_headers(user_id), timeout=30)
            if response.status_code != 200:
                print(f"    Failed: HTTP {response.status_code} - {response.text}")
                return False
        data = response.json()
    except requests.exceptions.RequestException as e:
        print(f"    Failed: {e}")
        return False

    print(f"    averageRating={data['averageRating']} ratingCount={data['ratingCount']}")
    return data["ratingCount"] == 1 and data["averageRating"] == 5


def delete_tool(api_base_url: str, user_id: str, tool_id: str) -> bool:
    """Delete the tool."""
    url = f"{api_base_url}/api/tools/{tool_id}"

    print(f"  Deleting tool '{tool_id}'...")
    try:
        response = requests.delete(url, headers=_headers(user_id), timeout=30)
        if response.status_code == 200:
            print(f"    {response.json()['message']}")
            return True
        print(f"    Failed: HTTP {response.status_code} - {response.text}")
        return False
    except requests.exceptions.RequestException as e:
        print(f"    Failed: {e}")
        return False


def run_smoke_test(api_base_url: str, user_id: str) -> dict:
    """Run the complete smoke test flow."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    title = f"smoke-{timestamp}"

    results = {
        "title": title,
        "steps": {},
        "passed": False,
    }

    print(f"\n{'=' * 60}")
    print("Directory API Smoke Test")
    print(f"Tool: {title}")
    print(f"{'=' * 60}\n")

    print("Step 1: Create Tool")
    tool_id = create_tool(api_base_url, user_id, title)
    results["steps"]["create_tool"] = tool_id is not None
    print()

    if tool_id is None:
        print("FAILED: Could not create tool\n")
        return results

    print("Step 2: Check Visibility")
    results["steps"]["check_visibility"] = check_visibility(api_base_url, user_id, tool_id)
    print()

    print("Step 3: Rate Tool")
    results["steps"]["rate_tool"] = rate_tool(api_base_url, user_id, tool_id)
    print()

    print("Step 4: Delete Tool")
    results["steps"]["delete_tool"] = delete_tool(api_base_url, user_id, tool_id)
    print()

    results["passed"] = all(results["steps"].values())
    return results


def print_summary(results: dict):
    """Print test summary."""
    print(f"{'=' * 60}")
    print("SMOKE TEST SUMMARY")
    print(f"{'=' * 60}")
    print(f"Tool: {results['title']}")
    print()

    for step_name, passed in results["steps"].items():
        status = "PASS" if passed else "FAIL"
        symbol = "✓" if passed else "✗"
        print(f"  {symbol} {step_name}: {status}")

    print()
    if results["passed"]:
        print("OVERALL: PASSED ✓")
    else:
        print("OVERALL: FAILED ✗")
    print(f"{'=' * 60}\n")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Deterministic smoke test for the directory API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                  # Run against localhost
  %(prog)s --api-base-url http://host:8000  # Use different API endpoint
        """
    )
    parser.add_argument(
        "--api-base-url",
        default="http://localhost:8000",
        help="Base URL for backend API (default: http://localhost:8000)",
    )
    parser.add_argument(
        "--user-id",
        default="smoke-user",
        help="Requester identity sent in X-User-Id (default: smoke-user)",
    )

    args = parser.parse_args()

    results = run_smoke_test(api_base_url=args.api_base_url.rstrip("/"), user_id=args.user_id)
    print_summary(results)
    sys.exit(0 if results["passed"] else 1)


if __name__ == "__main__":
    main()
