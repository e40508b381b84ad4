import asyncio
import logging
from typing import Optional

from kubernetes_asyncio import client, config

from .exceptions import KubeClientError

logger = logging.getLogger(__name__)

# Global lock to prevent race conditions during config loading
_CONFIG_LOCK = asyncio.Lock()
_CONFIG_LOADED = False


async def ensure_k8s_config(kubeconfig_path: Optional[str] = None) -> bool:
    """
    Ensures that the Kubernetes configuration is loaded exactly once.

    An explicit kubeconfig path is the only source tried when given. Otherwise the
    in-cluster service account is tried first, then the default kubeconfig
    ($KUBECONFIG or ~/.kube/config).

    Returns:
        bool: True if config was loaded successfully (or was already loaded), False otherwise.
    """
    global _CONFIG_LOADED

    if _CONFIG_LOADED:
        return True

    async with _CONFIG_LOCK:
        # Double-check locking pattern
        if _CONFIG_LOADED:
            return True

        if kubeconfig_path:
            try:
                logger.debug(f"Loading kubeconfig from {kubeconfig_path}...")
                await config.load_kube_config(config_file=kubeconfig_path)
                logger.info(f"Loaded Kubernetes configuration from {kubeconfig_path}.")
                _CONFIG_LOADED = True
                return True
            except (config.ConfigException, OSError) as e:
                logger.error(f"Could not load kubeconfig {kubeconfig_path}: {e}")
                return False

        # Try in-cluster config first
        try:
            logger.debug("Attempting to load in-cluster Kubernetes config...")
            config.load_incluster_config()
            logger.info("Loaded in-cluster Kubernetes configuration.")
            _CONFIG_LOADED = True
            return True
        except config.ConfigException:
            logger.debug("In-cluster config not found.")

        # Try local kubeconfig
        try:
            logger.debug("Attempting to load local kubeconfig...")
            await config.load_kube_config()
            logger.info("Loaded Kubernetes configuration from kubeconfig file.")
            _CONFIG_LOADED = True
            return True
        except (config.ConfigException, OSError) as e:
            logger.warning(f"Could not load kubeconfig file: {e}")

    logger.warning("Failed to load any Kubernetes configuration.")
    return False


async def get_core_v1_api(kubeconfig_path: Optional[str] = None) -> client.CoreV1Api:
    """
    Returns a configured CoreV1Api instance.
    The instance is safe to share between concurrent scrape requests.

    Raises:
        KubeClientError: If no Kubernetes configuration could be loaded.
    """
    if not await ensure_k8s_config(kubeconfig_path):
        raise KubeClientError("Cannot create kube client: no usable Kubernetes configuration found")
    return client.CoreV1Api()
