"""
Example: Network Delay Experiment

This script demonstrates how to use the Docker Chaos SDK to inject
network latency into running containers, optionally only toward one
upstream address.
"""

import logging
import time

from docker_chaos import (
    ChaosController,
    ChaosManager,
    ContainerSelector,
    NetemDelayParams,
)


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


def main():
    """
    Run a network delay chaos experiment.

    This example demonstrates:
    - User-friendly parameter syntax (e.g., latency='100ms')
    - Scoping the delay to traffic toward a single IP
    - A helper image so target containers need no `tc` binary
    - Automatic cleanup
    """

    print("=" * 60)
    print("Network Delay Chaos Experiment Example")
    print("=" * 60)

    manager = ChaosManager(tc_image="gaiadocker/iproute2")

    # Target containers whose name starts with "web"
    selector = ContainerSelector.from_pattern("^web")
    targets = manager.list_containers(selector)
    if not targets:
        print(f"\nNo running containers match {selector}")
        return

    delay = NetemDelayParams(latency="100ms", jitter="10ms", correlation="50")

    print("\nNetwork delay chaos:")
    print("  - Latency: 100ms +/- 10ms")
    print("  - Correlation: 50%")
    print("  - Only toward: 10.0.0.5")
    print(f"  - Targets: {', '.join(str(t) for t in targets)}")

    # Use context manager for automatic cleanup
    with ChaosController(manager) as controller:
        print("\n[1/3] Injecting network delay chaos...")
        for container in targets:
            controller.netem(container, delay, target_ip="10.0.0.5")

        print("\n[2/3] Network delay active!")
        print("      Test your application's latency tolerance here.")
        print("      Waiting 15 seconds to simulate test execution...")
        time.sleep(15)

        print("\n[3/3] Test complete. Removing chaos...")

    print("\nCleanup complete! Network should be back to normal.")
    print("\nVerify cleanup with: docker exec <container> tc qdisc show")


if __name__ == "__main__":
    main()
