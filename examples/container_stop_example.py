"""
Example: Container Stop Experiment

This script demonstrates how to use the Docker Chaos SDK to stop
containers with the two-phase stop sequence, rehearsing first with a
dry run.
"""

import logging

from docker_chaos import (
    ChaosManager,
    ContainerSelector,
    ContainerStopTimeoutError,
)


# Configure logging to see SDK activity
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


def main():
    """
    Run a container stop chaos experiment.

    This example:
    1. Selects containers labelled app=web-server
    2. Rehearses the stop with a dry run (logged with a "DRY: " prefix)
    3. Stops the containers for real, sending SIGKILL after the timeout
    4. Recreates one of them from its snapshot
    """

    print("=" * 60)
    print("Container Stop Chaos Experiment Example")
    print("=" * 60)

    manager = ChaosManager()
    selector = ContainerSelector(labels={"app": "web-server"})
    targets = manager.list_containers(selector)

    print(f"\nTarget selector: {selector}")
    print(f"Matched {len(targets)} running containers")

    print("\n[1/3] Dry run...")
    for container in targets:
        manager.stop(container, timeout=5, dry_run=True)

    print("\n[2/3] Stopping containers...")
    stopped = []
    for container in targets:
        try:
            sequence = manager.stop(container, timeout=5)
            print(f"      {container}: {sequence.state.value} "
                  f"(graceful wait: {sequence.graceful_wait.value})")
            stopped.append(container)
        except ContainerStopTimeoutError as e:
            print(f"      {e}")

    if stopped:
        print("\n[3/3] Removing and recreating the first stopped container...")
        manager.remove_container(stopped[0], volumes=False)
        new_id = manager.start(stopped[0])
        print(f"      Recreated {stopped[0].name} as {new_id}")


if __name__ == "__main__":
    main()
