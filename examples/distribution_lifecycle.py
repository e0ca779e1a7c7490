"""
Distribution lifecycle example using cloudfront_core.

This example creates a distribution, lists the account's distributions,
disables the new one and deletes it once the change has deployed.
Credentials are read from AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY.
"""

import logging
import sys
import time

from cloudfront_core import (
    ApiError,
    ClientConfig,
    CloudFrontError,
    Credentials,
    DistributionClient,
    DistributionConfig,
)

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def new_client(config: ClientConfig, credentials: Credentials) -> DistributionClient:
    """Create a client; each one signs with the date it was created at."""
    return DistributionClient(credentials, config=config)


def wait_until_deployed(config, credentials, distribution_id, interval=60.0):
    """Poll until the distribution reports Deployed."""
    while True:
        distribution = new_client(config, credentials).get_distribution(distribution_id)
        logger.info(f"Distribution {distribution_id} is {distribution.status}")
        if distribution.deployed:
            return distribution
        time.sleep(interval)


def main(origin: str) -> None:
    credentials = Credentials.from_env()
    config = ClientConfig.from_env()

    client = new_client(config, credentials)
    distribution = client.create_distribution(
        DistributionConfig(origin=origin, comment="Created by cloudfront_core", enabled=True)
    )
    logger.info(f"Created {distribution.id} at {distribution.domain_name}")

    for summary in client.iter_distributions(max_items=10):
        logger.info(f"  {summary.id} {summary.status} {summary.config.origin}")

    distribution.config.enabled = False
    new_client(config, credentials).update_distribution(distribution)
    logger.info(f"Disabled {distribution.id}, new etag {distribution.etag}")

    distribution = wait_until_deployed(config, credentials, distribution.id)
    new_client(config, credentials).delete_distribution(distribution)
    logger.info(f"Deleted {distribution.id}")


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(f"usage: {sys.argv[0]} ORIGIN", file=sys.stderr)
        sys.exit(2)

    try:
        main(sys.argv[1])
    except ApiError as e:
        logger.error(f"Server rejected the request: {e} (request id {e.request_id})")
        sys.exit(1)
    except CloudFrontError as e:
        logger.error(f"Example failed: {e}")
        sys.exit(1)
