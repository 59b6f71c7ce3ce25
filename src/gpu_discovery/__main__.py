"""Run the GPU discovery REST service: ``python -m gpu_discovery``."""

from gpu_discovery.adapters.inbound.rest_api import run_server
from gpu_discovery.infrastructure.container import get_container


def main() -> None:
    container = get_container()
    server = container.config.server
    run_server(container.coordinator, container.metrics, host=server.host, port=server.port)


if __name__ == "__main__":
    main()
