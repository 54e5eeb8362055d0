#!/usr/bin/env python3
"""Create the Cosmos database and record container with the listing indexes."""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from azure.cosmos import CosmosClient, PartitionKey  # noqa: E402
from azure.cosmos.exceptions import CosmosHttpResponseError  # noqa: E402

from app.config import settings  # noqa: E402
from app.services.query_builder import indexing_policy  # noqa: E402


def create_container(throughput: int):
    """Create (or update the indexing policy of) the configured container."""
    client = CosmosClient(settings.cosmos_endpoint, credential=settings.cosmos_key)
    database = client.create_database_if_not_exists(id=settings.cosmos_database)
    policy = indexing_policy()
    container = database.create_container_if_not_exists(
        id=settings.cosmos_container,
        partition_key=PartitionKey(path="/id"),
        indexing_policy=policy,
        offer_throughput=throughput,
    )
    # An existing container keeps its old policy unless it is replaced.
    database.replace_container(container, partition_key=PartitionKey(path="/id"), indexing_policy=policy)
    return policy


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Create the Cosmos container used by the directory API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                    # Uses COSMOS_* settings from the environment
  %(prog)s --throughput 1000  # Provision more RU/s on creation
        """
    )
    parser.add_argument(
        "--throughput",
        type=int,
        default=400,
        help="RU/s provisioned when the container is created (default: 400)",
    )
    args = parser.parse_args()

    print(f"Creating container '{settings.cosmos_container}' in database '{settings.cosmos_database}'...")
    try:
        policy = create_container(args.throughput)
    except CosmosHttpResponseError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"Container ready with {len(policy['compositeIndexes'])} composite indexes")


if __name__ == "__main__":
    main()
