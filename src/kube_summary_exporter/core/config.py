# src/kube_summary_exporter/core/config.py

import logging
import os
from typing import Tuple

from dotenv import load_dotenv

# Load environment variables from a .env file located in the project root
dotenv_path = os.path.join(os.path.dirname(__file__), "..", "..", "..", ".env")
load_dotenv(dotenv_path=dotenv_path)

DEFAULT_LISTEN_ADDRESS = ":9779"


class Config:
    """
    Handles the exporter's configuration by loading values from environment variables.
    Command-line flags of the `serve` command override these values.
    """

    # --- Logging variables ---
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # --- HTTP server variables ---
    LISTEN_ADDRESS = os.getenv("LISTEN_ADDRESS", DEFAULT_LISTEN_ADDRESS)

    # --- Kubernetes variables ---
    # Empty means: in-cluster service account first, then $KUBECONFIG / ~/.kube/config.
    KUBECONFIG_PATH = os.getenv("KUBECONFIG_PATH", "")

    # --- Scrape variables ---
    # Upper bound on concurrent /stats/summary calls within one scrape request.
    MAX_CONCURRENT_FETCHES = int(os.getenv("MAX_CONCURRENT_FETCHES", "10"))
    # Seconds between checks for a scraper that went away mid-request.
    DISCONNECT_POLL_INTERVAL = float(os.getenv("DISCONNECT_POLL_INTERVAL", "0.5"))

    @property
    def LISTEN_HOST(self) -> str:
        return self.parse_listen_address(self.LISTEN_ADDRESS)[0]

    @property
    def LISTEN_PORT(self) -> int:
        return self.parse_listen_address(self.LISTEN_ADDRESS)[1]

    @staticmethod
    def parse_listen_address(address: str) -> Tuple[str, int]:
        """
        Splits a 'host:port' listen address. An empty host (':9779') binds all interfaces.

        Raises:
            ValueError: If the address has no port or the port is not a valid TCP port.
        """
        host, sep, port = address.rpartition(":")
        if not sep or not port:
            raise ValueError(f"Invalid listen address '{address}'. Use 'host:port' or ':port'.")
        try:
            port_number = int(port)
        except ValueError:
            raise ValueError(f"Invalid port in listen address '{address}'.") from None
        if not 0 < port_number < 65536:
            raise ValueError(f"Port {port_number} in listen address '{address}' is out of range.")
        # Bracketed IPv6 literals, e.g. '[::1]:9779'
        host = host.strip("[]")
        return host or "0.0.0.0", port_number

    def validate_instance(self):
        if self.LOG_LEVEL.upper() not in logging.getLevelNamesMapping():
            raise ValueError(f"LOG_LEVEL '{self.LOG_LEVEL}' is not a valid logging level.")
        self.parse_listen_address(self.LISTEN_ADDRESS)
        if self.MAX_CONCURRENT_FETCHES < 1:
            raise ValueError("MAX_CONCURRENT_FETCHES must be at least 1.")
        if self.DISCONNECT_POLL_INTERVAL <= 0:
            raise ValueError("DISCONNECT_POLL_INTERVAL must be greater than 0.")


# Instantiate the config to be imported by other modules
config = Config()
config.validate_instance()
